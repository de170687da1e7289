"""Contact lifecycle state machine.

target -> requested -> connected -> engaged -> relationship, with demotion
edges relationship -> engaged and engaged -> connected. Automated checks move
at most one step per call; manual transitions bypass all guards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from netgrowth.models import Contact, Interaction, ScoreHistory, StatusHistory
from netgrowth.services.dates import as_utc, utc_now
from netgrowth.services.scoring.config_loader import ScoringConfig, load_scoring_config
from netgrowth.taxonomy import (
    RECIPROCAL_INTERACTION_TYPES,
    SCORE_TYPE_RELATIONSHIP,
    TRIGGER_DEMOTION,
    TRIGGER_MANUAL,
    TRIGGER_PROMOTION,
    is_valid_status,
)

logger = logging.getLogger(__name__)


@dataclass
class TransitionResult:
    """An applied status change."""

    contact_id: int
    from_status: str
    to_status: str
    trigger: str
    reason: str


def _fmt(value: float) -> str:
    return f"{value:g}"


def _get_active_contact(db: Session, contact_id: int) -> Contact | None:
    return (
        db.query(Contact)
        .filter(Contact.id == contact_id, Contact.deleted_at.is_(None))
        .first()
    )


def _apply_transition(
    db: Session,
    contact: Contact,
    to_status: str,
    trigger: str,
    reason: str,
    now: datetime,
) -> TransitionResult:
    """Update contact.status and append StatusHistory in one commit."""
    from_status = contact.status
    try:
        contact.status = to_status
        db.add(
            StatusHistory(
                contact_id=contact.id,
                from_status=from_status,
                to_status=to_status,
                trigger=trigger,
                trigger_reason=reason,
                created_at=now,
            )
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(
        "Contact %s status %s -> %s (%s)", contact.id, from_status, to_status, trigger
    )
    return TransitionResult(
        contact_id=contact.id,
        from_status=from_status,
        to_status=to_status,
        trigger=trigger,
        reason=reason,
    )


def check_status_transition(
    db: Session,
    contact_id: int,
    config: ScoringConfig | None = None,
    now: datetime | None = None,
) -> TransitionResult | None:
    """Apply an automated promotion if the contact's guard is met.

    connected -> engaged: score >= connected_to_engaged_score and at least
    connected_to_engaged_interactions interactions in total.
    engaged -> relationship: score >= engaged_to_relationship_score and at least
    engaged_to_relationship_reciprocal reciprocal interactions ever.
    """
    contact = _get_active_contact(db, contact_id)
    if contact is None:
        return None
    config = config or load_scoring_config(db)
    now = as_utc(now) if now is not None else utc_now()
    score = contact.relationship_score or 0

    if contact.status == "connected":
        min_score = config.threshold("connected_to_engaged_score")
        min_interactions = config.threshold("connected_to_engaged_interactions")
        if score < min_score:
            return None
        count = db.query(Interaction).filter(Interaction.contact_id == contact.id).count()
        if count < min_interactions:
            return None
        reason = (
            f"Score {score} >= {_fmt(min_score)} and "
            f"{count} interactions >= {_fmt(min_interactions)}"
        )
        return _apply_transition(db, contact, "engaged", TRIGGER_PROMOTION, reason, now)

    if contact.status == "engaged":
        min_score = config.threshold("engaged_to_relationship_score")
        min_reciprocal = config.threshold("engaged_to_relationship_reciprocal")
        if score < min_score:
            return None
        reciprocal = (
            db.query(Interaction)
            .filter(
                Interaction.contact_id == contact.id,
                Interaction.type.in_(RECIPROCAL_INTERACTION_TYPES),
            )
            .count()
        )
        if reciprocal < min_reciprocal:
            return None
        reason = (
            f"Score {score} >= {_fmt(min_score)} with "
            f"{reciprocal} reciprocal interactions"
        )
        return _apply_transition(db, contact, "relationship", TRIGGER_PROMOTION, reason, now)

    return None


def _had_score_at_or_above(
    db: Session, contact_id: int, threshold: float, now: datetime, window_days: int
) -> bool:
    """True if any relationship ScoreHistory row within the window is >= threshold."""
    window_start = now.date() - timedelta(days=window_days)
    row = (
        db.query(ScoreHistory.id)
        .filter(
            ScoreHistory.contact_id == contact_id,
            ScoreHistory.score_type == SCORE_TYPE_RELATIONSHIP,
            ScoreHistory.recorded_at >= window_start,
            ScoreHistory.recorded_at <= now.date(),
            ScoreHistory.score_value >= threshold,
        )
        .first()
    )
    return row is not None


def check_demotion(
    db: Session,
    contact_id: int,
    config: ScoringConfig | None = None,
    now: datetime | None = None,
) -> TransitionResult | None:
    """Apply an automated demotion when the score stayed below threshold for the window.

    relationship -> engaged below engaged_to_relationship_score, engaged ->
    connected below connected_to_engaged_score. Any history row at or above the
    threshold inside the trailing window blocks the demotion.
    """
    contact = _get_active_contact(db, contact_id)
    if contact is None:
        return None
    config = config or load_scoring_config(db)
    now = as_utc(now) if now is not None else utc_now()
    score = contact.relationship_score or 0
    window_days = int(config.threshold("demotion_window_days"))

    if contact.status == "relationship":
        threshold = config.threshold("engaged_to_relationship_score")
        to_status = "engaged"
    elif contact.status == "engaged":
        threshold = config.threshold("connected_to_engaged_score")
        to_status = "connected"
    else:
        return None

    if score >= threshold:
        return None
    if _had_score_at_or_above(db, contact.id, threshold, now, window_days):
        return None
    reason = f"Score {score} below {_fmt(threshold)} for {window_days}+ days"
    return _apply_transition(db, contact, to_status, TRIGGER_DEMOTION, reason, now)


def manual_status_transition(
    db: Session,
    contact_id: int,
    new_status: str,
    reason: str | None = None,
    now: datetime | None = None,
) -> TransitionResult | None:
    """Set a contact's status directly, bypassing guards.

    Raises ValueError for an unknown status. Returns None when the contact is
    missing or already has new_status.
    """
    if not is_valid_status(new_status):
        raise ValueError(f"Invalid status: {new_status}")
    contact = _get_active_contact(db, contact_id)
    if contact is None or contact.status == new_status:
        return None
    now = as_utc(now) if now is not None else utc_now()
    return _apply_transition(
        db,
        contact,
        new_status,
        TRIGGER_MANUAL,
        reason or f"Manual status change to {new_status}",
        now,
    )
