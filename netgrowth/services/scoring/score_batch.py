"""Relationship scoring batch.

Scores every non-deleted contact, writes changed scores back, records a
ScoreHistory row for the day and runs the promotion and demotion checks.
One contact failure does not stop the run. A JobRun records each run.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from netgrowth.models import Contact, Interaction, JobRun, ScoreHistory
from netgrowth.services.dates import as_utc, utc_now
from netgrowth.services.scoring.config_loader import ScoringConfig, load_scoring_config
from netgrowth.services.scoring.relationship_engine import compute_relationship_score
from netgrowth.services.status_transitions import check_demotion, check_status_transition
from netgrowth.taxonomy import SCORE_TYPE_RELATIONSHIP

logger = logging.getLogger(__name__)

BATCH_SIZE: int = 100


def upsert_score_history(
    db: Session, contact_id: int, score_type: str, value: float, recorded_at
) -> ScoreHistory:
    """Insert or update the (contact, score_type, date) history row. Caller commits."""
    row = (
        db.query(ScoreHistory)
        .filter(
            ScoreHistory.contact_id == contact_id,
            ScoreHistory.score_type == score_type,
            ScoreHistory.recorded_at == recorded_at,
        )
        .first()
    )
    if row is None:
        row = ScoreHistory(
            contact_id=contact_id,
            score_type=score_type,
            score_value=value,
            recorded_at=recorded_at,
        )
        db.add(row)
    else:
        row.score_value = value
    return row


def score_contact(
    db: Session, contact: Contact, config: ScoringConfig, now: datetime
) -> tuple[bool, int]:
    """Score one contact and run its transition checks.

    Returns (score_changed, transitions_applied).
    """
    interactions = db.query(Interaction).filter(Interaction.contact_id == contact.id).all()
    score = compute_relationship_score(interactions, config, now)
    changed = contact.relationship_score != score
    if changed:
        contact.relationship_score = score
    upsert_score_history(db, contact.id, SCORE_TYPE_RELATIONSHIP, score, now.date())
    db.commit()

    transitions = 0
    if check_status_transition(db, contact.id, config=config, now=now) is not None:
        transitions += 1
    if check_demotion(db, contact.id, config=config, now=now) is not None:
        transitions += 1
    return changed, transitions


def _contact_ids(db: Session) -> list[int]:
    rows = (
        db.query(Contact.id)
        .filter(Contact.deleted_at.is_(None))
        .order_by(Contact.created_at, Contact.id)
        .all()
    )
    return [row[0] for row in rows]


def run_scoring_batch(
    db: Session,
    now: datetime | None = None,
    idempotency_key: str | None = None,
) -> dict:
    """Recalculate relationship scores for all non-deleted contacts.

    Config is loaded once per run. Contacts are processed in batches of
    BATCH_SIZE ordered by creation.

    Returns:
        dict with status, job_run_id, processed, updated, transitions, failed, error
    """
    now = as_utc(now) if now is not None else utc_now()

    job = JobRun(job_type="score", status="running", idempotency_key=idempotency_key)
    db.add(job)
    db.commit()
    db.refresh(job)

    try:
        logger.info("Starting scoring batch, now=%s", now.isoformat())
        config = load_scoring_config(db)
        contact_ids = _contact_ids(db)

        processed = 0
        updated = 0
        transitions = 0
        errors: list[str] = []

        for start in range(0, len(contact_ids), BATCH_SIZE):
            chunk = contact_ids[start : start + BATCH_SIZE]
            contacts = (
                db.query(Contact)
                .filter(Contact.id.in_(chunk))
                .order_by(Contact.created_at, Contact.id)
                .all()
            )
            for contact in contacts:
                contact_id = contact.id
                try:
                    changed, applied = score_contact(db, contact, config, now)
                    processed += 1
                    if changed:
                        updated += 1
                    transitions += applied
                except Exception as exc:
                    db.rollback()
                    logger.exception("Score failed for contact %s", contact_id)
                    errors.append(f"Contact {contact_id}: {exc}")

        job.finished_at = utc_now()
        job.status = "completed"
        job.contacts_processed = processed
        job.contacts_updated = updated
        job.transitions = transitions
        job.error_message = "; ".join(errors[:10]) if errors else None
        db.commit()

        logger.info(
            "Scoring batch completed: processed=%d, updated=%d, transitions=%d, failed=%d",
            processed,
            updated,
            transitions,
            len(errors),
        )
        return {
            "status": "completed",
            "job_run_id": job.id,
            "processed": processed,
            "updated": updated,
            "transitions": transitions,
            "failed": len(errors),
            "error": "; ".join(errors) if errors else None,
        }

    except Exception as exc:
        logger.exception("Scoring batch failed")
        db.rollback()
        job.finished_at = utc_now()
        job.status = "failed"
        job.error_message = str(exc)
        db.commit()
        return {
            "status": "failed",
            "job_run_id": job.id,
            "processed": 0,
            "updated": 0,
            "transitions": 0,
            "failed": 0,
            "error": str(exc),
        }
