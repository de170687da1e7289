"""Relationship score: decayed interaction points with a reciprocity bonus.

Each interaction contributes weight * 0.5^(days_since / half_life). When the
share of reciprocal interactions reaches the configured threshold, the raw
total is scaled by a multiplier between min and max. The result is normalized
so MAX_EXPECTED_POINTS maps to 100.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import datetime
from typing import Protocol

from sqlalchemy.orm import Session

from netgrowth.models import Contact, Interaction
from netgrowth.services.dates import as_utc, utc_now
from netgrowth.services.scoring.config_loader import ScoringConfig, load_scoring_config
from netgrowth.services.scoring.scoring_constants import (
    MAX_EXPECTED_POINTS,
    SCORE_MAX,
    SCORE_MIN,
    decay,
)
from netgrowth.taxonomy import RECIPROCAL_INTERACTION_TYPES

SECONDS_PER_DAY: float = 86400.0


class _InteractionLike(Protocol):
    """Minimal interface for interaction-like objects."""

    type: str
    occurred_at: datetime


def compute_reciprocity_multiplier(
    reciprocal_count: int, total_count: int, config: ScoringConfig
) -> float:
    """Return the reciprocity multiplier for a reciprocal/total interaction split.

    Below the threshold percentage: 1.0. At the threshold: multiplier_min,
    rising linearly to multiplier_max at 100%.
    """
    if total_count <= 0:
        return 1.0
    pct = reciprocal_count / total_count * 100
    threshold = config.reciprocity_threshold_pct
    if pct < threshold:
        return 1.0
    low = config.reciprocity_multiplier_min
    high = config.reciprocity_multiplier_max
    if threshold >= 100:
        return high
    progress = min((pct - threshold) / (100 - threshold), 1.0)
    return low + (high - low) * progress


def compute_raw_points(
    interactions: Iterable[_InteractionLike], config: ScoringConfig, now: datetime
) -> float:
    """Sum of decayed weights times the reciprocity multiplier, before normalization."""
    raw = 0.0
    total = 0
    reciprocal = 0
    for interaction in interactions:
        total += 1
        if interaction.type in RECIPROCAL_INTERACTION_TYPES:
            reciprocal += 1
        days_since = max(
            0.0, (now - as_utc(interaction.occurred_at)).total_seconds() / SECONDS_PER_DAY
        )
        raw += config.weight_for(interaction.type) * decay(days_since, config.half_life_days)
    if total == 0:
        return 0.0
    return raw * compute_reciprocity_multiplier(reciprocal, total, config)


def compute_relationship_score(
    interactions: Iterable[_InteractionLike], config: ScoringConfig, now: datetime
) -> int:
    """Return the relationship score 0-100 for a contact's interaction history.

    Pure: depends only on the interactions, the config snapshot and now.
    """
    raw = compute_raw_points(interactions, config, as_utc(now))
    normalized = raw / MAX_EXPECTED_POINTS * 100
    # half-up rounding
    score = math.floor(normalized + 0.5)
    return max(SCORE_MIN, min(SCORE_MAX, score))


def calculate_contact_score(
    db: Session,
    contact_id: int,
    config: ScoringConfig | None = None,
    now: datetime | None = None,
) -> int | None:
    """Compute (without persisting) the score for one contact. None if not found."""
    contact = (
        db.query(Contact)
        .filter(Contact.id == contact_id, Contact.deleted_at.is_(None))
        .first()
    )
    if contact is None:
        return None
    config = config or load_scoring_config(db)
    interactions = db.query(Interaction).filter(Interaction.contact_id == contact_id).all()
    return compute_relationship_score(interactions, config, now or utc_now())


def recalculate_contact_score(
    db: Session, contact_id: int, now: datetime | None = None
) -> int | None:
    """Compute and persist the score for one contact. Returns the new score or None."""
    score = calculate_contact_score(db, contact_id, now=now)
    if score is None:
        return None
    contact = db.get(Contact, contact_id)
    if contact.relationship_score != score:
        contact.relationship_score = score
        db.commit()
    return score
