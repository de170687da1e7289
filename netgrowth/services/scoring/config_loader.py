"""Scoring config loader: scoring_config rows into an immutable snapshot.

Each batch run loads a fresh ScoringConfig so operator edits apply on the
next run. Missing keys fall back to scoring_constants defaults; unknown
interaction types simply have no weight (scored as 0).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from netgrowth.models.category import Category
from netgrowth.models.scoring_config import ScoringConfigEntry
from netgrowth.services.scoring.scoring_constants import (
    CONFIG_GENERAL,
    CONFIG_PRIORITY_WEIGHT,
    CONFIG_RELATIONSHIP_WEIGHT,
    CONFIG_STATUS_THRESHOLD,
    CONFIG_TIMING_TRIGGER,
    CONFIG_TYPES,
    DEFAULT_HALF_LIFE_DAYS,
    DEFAULT_PRIORITY_WEIGHTS,
    DEFAULT_RECIPROCITY_MULTIPLIER_MAX,
    DEFAULT_RECIPROCITY_MULTIPLIER_MIN,
    DEFAULT_RECIPROCITY_THRESHOLD_PCT,
    DEFAULT_RELATIONSHIP_WEIGHTS,
    DEFAULT_SENIORITY_MULTIPLIER,
    DEFAULT_SENIORITY_MULTIPLIERS,
    DEFAULT_STATUS_THRESHOLDS,
    DEFAULT_TIMING_TRIGGERS,
)

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES: dict[str, int] = {
    "Crypto Client": 10,
    "Regulator / Policy Official": 9,
    "Potential Employer / Hiring Manager": 9,
    "Chief of Staff / Operator": 7,
    "MBA Network": 6,
    "Mexico City Fintech / Expat": 6,
    "General Industry Contact": 3,
}


@dataclass(frozen=True)
class ScoringConfig:
    """Immutable snapshot of all scoring tunables for one batch run."""

    weights: dict[str, float] = field(default_factory=dict)
    half_life_days: float = DEFAULT_HALF_LIFE_DAYS
    reciprocity_threshold_pct: float = DEFAULT_RECIPROCITY_THRESHOLD_PCT
    reciprocity_multiplier_min: float = DEFAULT_RECIPROCITY_MULTIPLIER_MIN
    reciprocity_multiplier_max: float = DEFAULT_RECIPROCITY_MULTIPLIER_MAX
    status_thresholds: dict[str, float] = field(
        default_factory=lambda: dict(DEFAULT_STATUS_THRESHOLDS)
    )
    priority_weights: dict[str, float] = field(
        default_factory=lambda: dict(DEFAULT_PRIORITY_WEIGHTS)
    )
    seniority_multipliers: dict[str, float] = field(
        default_factory=lambda: dict(DEFAULT_SENIORITY_MULTIPLIERS)
    )
    default_seniority_multiplier: float = DEFAULT_SENIORITY_MULTIPLIER

    def weight_for(self, interaction_type: str) -> float:
        """Base points for an interaction type; 0 when not configured."""
        return self.weights.get(interaction_type, 0.0)

    def threshold(self, key: str) -> float:
        """Status threshold by key, falling back to the built-in default."""
        if key in self.status_thresholds:
            return self.status_thresholds[key]
        return DEFAULT_STATUS_THRESHOLDS[key]


def _positive(value: float | None, default: float) -> float:
    """Return value when it is a positive number, else default."""
    if value is None or value <= 0:
        return default
    return float(value)


def build_scoring_config(entries: Iterable[tuple[str, str, float]]) -> ScoringConfig:
    """Build a ScoringConfig from (config_type, key, value) triples.

    Relationship weights come only from config rows (an empty table scores
    everything as 0). General tunables, status thresholds, priority weights and
    seniority multipliers fall back to defaults per key.
    """
    by_type: dict[str, dict[str, float]] = {t: {} for t in CONFIG_TYPES}
    for config_type, key, value in entries:
        if config_type not in by_type or value is None:
            continue
        by_type[config_type][key] = float(value)

    general = by_type[CONFIG_GENERAL]

    seniority = dict(DEFAULT_SENIORITY_MULTIPLIERS)
    for level in DEFAULT_SENIORITY_MULTIPLIERS:
        key = f"seniority_multiplier_{level}"
        if key in general:
            seniority[level] = general[key]

    priority_weights = dict(DEFAULT_PRIORITY_WEIGHTS)
    priority_weights.update(by_type[CONFIG_PRIORITY_WEIGHT])

    thresholds = dict(DEFAULT_STATUS_THRESHOLDS)
    thresholds.update(by_type[CONFIG_STATUS_THRESHOLD])

    threshold_pct = general.get("reciprocity_threshold_pct", DEFAULT_RECIPROCITY_THRESHOLD_PCT)
    threshold_pct = max(0.0, min(100.0, threshold_pct))

    return ScoringConfig(
        weights=dict(by_type[CONFIG_RELATIONSHIP_WEIGHT]),
        half_life_days=_positive(general.get("recency_half_life_days"), DEFAULT_HALF_LIFE_DAYS),
        reciprocity_threshold_pct=threshold_pct,
        reciprocity_multiplier_min=general.get(
            "reciprocity_multiplier_min", DEFAULT_RECIPROCITY_MULTIPLIER_MIN
        ),
        reciprocity_multiplier_max=general.get(
            "reciprocity_multiplier_max", DEFAULT_RECIPROCITY_MULTIPLIER_MAX
        ),
        status_thresholds=thresholds,
        priority_weights=priority_weights,
        seniority_multipliers=seniority,
        default_seniority_multiplier=general.get(
            "seniority_multiplier_default", DEFAULT_SENIORITY_MULTIPLIER
        ),
    )


def load_scoring_config(db: Session) -> ScoringConfig:
    """Load all scoring_config rows and return a fresh ScoringConfig snapshot."""
    rows = db.query(
        ScoringConfigEntry.config_type,
        ScoringConfigEntry.key,
        ScoringConfigEntry.value,
    ).all()
    return build_scoring_config((r[0], r[1], r[2]) for r in rows)


def list_scoring_config(db: Session) -> list[ScoringConfigEntry]:
    """Return all scoring_config rows ordered by type and key."""
    return (
        db.query(ScoringConfigEntry)
        .order_by(ScoringConfigEntry.config_type, ScoringConfigEntry.key)
        .all()
    )


def update_scoring_config(db: Session, entries: list[dict]) -> list[ScoringConfigEntry]:
    """Upsert config rows. Each entry is {config_type, key, value}.

    Raises ValueError for an unknown config_type; nothing is written in that case.
    """
    for entry in entries:
        if entry.get("config_type") not in CONFIG_TYPES:
            raise ValueError(f"Unknown config_type: {entry.get('config_type')}")

    for entry in entries:
        row = (
            db.query(ScoringConfigEntry)
            .filter(
                ScoringConfigEntry.config_type == entry["config_type"],
                ScoringConfigEntry.key == entry["key"],
            )
            .first()
        )
        if row is None:
            db.add(
                ScoringConfigEntry(
                    config_type=entry["config_type"],
                    key=entry["key"],
                    value=float(entry["value"]),
                )
            )
        else:
            row.value = float(entry["value"])
    db.commit()
    return list_scoring_config(db)


def _default_entries() -> list[tuple[str, str, float]]:
    entries: list[tuple[str, str, float]] = []
    entries += [(CONFIG_RELATIONSHIP_WEIGHT, k, v) for k, v in DEFAULT_RELATIONSHIP_WEIGHTS.items()]
    entries += [(CONFIG_PRIORITY_WEIGHT, k, v) for k, v in DEFAULT_PRIORITY_WEIGHTS.items()]
    entries += [(CONFIG_TIMING_TRIGGER, k, v) for k, v in DEFAULT_TIMING_TRIGGERS.items()]
    entries += [(CONFIG_STATUS_THRESHOLD, k, v) for k, v in DEFAULT_STATUS_THRESHOLDS.items()]
    entries += [
        (CONFIG_GENERAL, "recency_half_life_days", DEFAULT_HALF_LIFE_DAYS),
        (CONFIG_GENERAL, "reciprocity_threshold_pct", DEFAULT_RECIPROCITY_THRESHOLD_PCT),
        (CONFIG_GENERAL, "reciprocity_multiplier_min", DEFAULT_RECIPROCITY_MULTIPLIER_MIN),
        (CONFIG_GENERAL, "reciprocity_multiplier_max", DEFAULT_RECIPROCITY_MULTIPLIER_MAX),
        (CONFIG_GENERAL, "seniority_multiplier_default", DEFAULT_SENIORITY_MULTIPLIER),
    ]
    entries += [
        (CONFIG_GENERAL, f"seniority_multiplier_{level}", value)
        for level, value in DEFAULT_SENIORITY_MULTIPLIERS.items()
    ]
    return entries


def seed_default_scoring_config(db: Session) -> dict:
    """Insert default config rows and categories. Existing rows are left untouched.

    Returns counts of inserted rows: {"config": n, "categories": m}.
    """
    existing = {
        (row[0], row[1])
        for row in db.query(ScoringConfigEntry.config_type, ScoringConfigEntry.key).all()
    }
    inserted_config = 0
    for config_type, key, value in _default_entries():
        if (config_type, key) in existing:
            continue
        db.add(ScoringConfigEntry(config_type=config_type, key=key, value=float(value)))
        inserted_config += 1

    existing_categories = {row[0] for row in db.query(Category.name).all()}
    inserted_categories = 0
    for name, weight in DEFAULT_CATEGORIES.items():
        if name in existing_categories:
            continue
        db.add(Category(name=name, relevance_weight=weight))
        inserted_categories += 1

    db.commit()
    logger.info(
        "Seeded scoring config: config=%d categories=%d", inserted_config, inserted_categories
    )
    return {"config": inserted_config, "categories": inserted_categories}
