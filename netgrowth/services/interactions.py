"""Interaction logging."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from netgrowth.models import Contact, Interaction
from netgrowth.services.dates import as_utc, utc_now
from netgrowth.services.scoring.config_loader import ScoringConfig, load_scoring_config
from netgrowth.taxonomy import INTERACTION_SOURCES, is_valid_interaction_type

logger = logging.getLogger(__name__)


def log_interaction(
    db: Session,
    contact_id: int,
    interaction_type: str,
    occurred_at: datetime | None = None,
    source: str = "manual",
    metadata: dict | None = None,
    config: ScoringConfig | None = None,
) -> Interaction | None:
    """Append an interaction for a contact and commit.

    points_value is stamped from the current relationship weight for the type.
    last_interaction_at moves forward when this interaction is newer.
    Raises ValueError for an unknown type or source; returns None when the
    contact does not exist or is soft-deleted.
    """
    if not is_valid_interaction_type(interaction_type):
        raise ValueError(f"Invalid interaction type: {interaction_type}")
    if source not in INTERACTION_SOURCES:
        raise ValueError(f"Invalid interaction source: {source}")

    contact = (
        db.query(Contact)
        .filter(Contact.id == contact_id, Contact.deleted_at.is_(None))
        .first()
    )
    if contact is None:
        return None

    config = config or load_scoring_config(db)
    occurred_at = as_utc(occurred_at) if occurred_at is not None else utc_now()

    interaction = Interaction(
        contact_id=contact.id,
        type=interaction_type,
        source=source,
        occurred_at=occurred_at,
        meta=metadata,
        points_value=round(config.weight_for(interaction_type)),
    )
    db.add(interaction)
    if contact.last_interaction_at is None or as_utc(contact.last_interaction_at) < occurred_at:
        contact.last_interaction_at = occurred_at
    db.commit()
    db.refresh(interaction)
    logger.info(
        "Logged interaction: contact_id=%s type=%s points=%d",
        contact.id,
        interaction_type,
        interaction.points_value,
    )
    return interaction


def list_interactions(db: Session, contact_id: int) -> list[Interaction]:
    """Interactions for a contact, newest first."""
    return (
        db.query(Interaction)
        .filter(Interaction.contact_id == contact_id)
        .order_by(Interaction.occurred_at.desc(), Interaction.id.desc())
        .all()
    )
