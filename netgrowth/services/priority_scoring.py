"""Priority scoring for outreach targets.

Ranks contacts who are not yet connected by relevance (category weight x
seniority), accessibility (network proximity) and timing. Only target and
requested contacts get a priority; the batch updates targets.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass

from sqlalchemy.orm import Session

from netgrowth.models import Contact, JobRun
from netgrowth.services.dates import utc_now
from netgrowth.services.scoring.config_loader import ScoringConfig, load_scoring_config
from netgrowth.taxonomy import PRE_CONNECTION_STATUSES

logger = logging.getLogger(__name__)

BATCH_SIZE: int = 100
# Highest category weight (10) x highest seniority multiplier (1.5)
MAX_RELEVANCE_RAW: float = 15
DIMENSION_MAX: float = 10
DEFAULT_CATEGORY_WEIGHT: int = 1
# Minimum change before priority_score is rewritten
PRIORITY_UPDATE_EPSILON: float = 0.01


@dataclass
class PriorityBreakdown:
    relevance: float
    accessibility: float
    timing: float
    total: float

    def to_dict(self) -> dict:
        return asdict(self)


def _round_half_up(value: float, digits: int) -> float:
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def calculate_relevance(contact: Contact, config: ScoringConfig) -> float:
    """Highest category weight x seniority multiplier, normalized to 0-10."""
    weights = [c.relevance_weight for c in contact.categories if c.relevance_weight]
    category_weight = max(weights) if weights else DEFAULT_CATEGORY_WEIGHT
    multiplier = config.seniority_multipliers.get(
        contact.seniority or "", config.default_seniority_multiplier
    )
    raw = category_weight * multiplier
    return min(_round_half_up(raw / MAX_RELEVANCE_RAW * DIMENSION_MAX, 1), DIMENSION_MAX)


def calculate_accessibility(contact: Contact) -> float:
    """Network proximity, 0-10.

    +4 for 5+ mutual connections, +2 for 2-4; +2 when active on LinkedIn or
    open to connect; +3 when an introduction source is recorded.
    """
    score = 0
    mutual = contact.mutual_connections_count or 0
    if mutual >= 5:
        score += 4
    elif mutual >= 2:
        score += 2
    if contact.is_active_on_linkedin or contact.has_open_to_connect:
        score += 2
    if contact.introduction_source:
        score += 3
    return min(score, DIMENSION_MAX)


def calculate_timing(contact: Contact) -> float:
    # No timing signal sources are connected yet
    return 0.0


def compute_priority(contact: Contact, config: ScoringConfig) -> PriorityBreakdown:
    """Weighted priority breakdown for one contact. Pure over contact + config."""
    relevance = calculate_relevance(contact, config)
    accessibility = calculate_accessibility(contact)
    timing = calculate_timing(contact)
    weights = config.priority_weights
    total = (
        relevance * weights.get("relevance", 0)
        + accessibility * weights.get("accessibility", 0)
        + timing * weights.get("timing", 0)
    )
    return PriorityBreakdown(
        relevance=relevance,
        accessibility=accessibility,
        timing=timing,
        total=_round_half_up(total, 2),
    )


def calculate_contact_priority(
    db: Session, contact_id: int, config: ScoringConfig | None = None
) -> PriorityBreakdown | None:
    """Priority breakdown for a target/requested contact; None otherwise or if missing."""
    contact = (
        db.query(Contact)
        .filter(Contact.id == contact_id, Contact.deleted_at.is_(None))
        .first()
    )
    if contact is None or contact.status not in PRE_CONNECTION_STATUSES:
        return None
    return compute_priority(contact, config or load_scoring_config(db))


def run_priority_batch(db: Session, idempotency_key: str | None = None) -> dict:
    """Recompute priority_score for every non-deleted target contact.

    Writes only when the score moved by more than PRIORITY_UPDATE_EPSILON (or
    was never set). One contact failure does not stop the run.

    Returns:
        dict with status, job_run_id, processed, updated, failed, error
    """
    job = JobRun(job_type="priority", status="running", idempotency_key=idempotency_key)
    db.add(job)
    db.commit()
    db.refresh(job)

    try:
        logger.info("Starting priority batch")
        config = load_scoring_config(db)
        contact_ids = [
            row[0]
            for row in db.query(Contact.id)
            .filter(Contact.status == "target", Contact.deleted_at.is_(None))
            .order_by(Contact.created_at, Contact.id)
            .all()
        ]

        processed = 0
        updated = 0
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
                    result = compute_priority(contact, config)
                    processed += 1
                    current = contact.priority_score
                    if (
                        current is None
                        or abs(result.total - float(current)) > PRIORITY_UPDATE_EPSILON
                    ):
                        contact.priority_score = result.total
                        db.commit()
                        updated += 1
                except Exception as exc:
                    db.rollback()
                    logger.exception("Priority failed for contact %s", contact_id)
                    errors.append(f"Contact {contact_id}: {exc}")

        job.finished_at = utc_now()
        job.status = "completed"
        job.contacts_processed = processed
        job.contacts_updated = updated
        job.error_message = "; ".join(errors[:10]) if errors else None
        db.commit()

        logger.info("Priority batch completed: processed=%d, updated=%d", processed, updated)
        return {
            "status": "completed",
            "job_run_id": job.id,
            "processed": processed,
            "updated": updated,
            "failed": len(errors),
            "error": "; ".join(errors) if errors else None,
        }

    except Exception as exc:
        logger.exception("Priority batch failed")
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
            "failed": 0,
            "error": str(exc),
        }
