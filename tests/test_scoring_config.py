"""Tests for scoring config persistence (load, seed, update)."""

from __future__ import annotations

import pytest

from netgrowth.models import Category, ScoringConfigEntry
from netgrowth.services.scoring.config_loader import (
    DEFAULT_CATEGORIES,
    list_scoring_config,
    load_scoring_config,
    seed_default_scoring_config,
    update_scoring_config,
)
from netgrowth.services.scoring.scoring_constants import (
    DEFAULT_HALF_LIFE_DAYS,
    DEFAULT_RELATIONSHIP_WEIGHTS,
)


def test_empty_table_loads_defaults(db) -> None:
    config = load_scoring_config(db)
    assert config.weights == {}
    assert config.half_life_days == DEFAULT_HALF_LIFE_DAYS
    assert config.threshold("engaged_to_relationship_score") == 60


def test_seed_inserts_defaults(db) -> None:
    counts = seed_default_scoring_config(db)
    assert counts == {"config": 41, "categories": len(DEFAULT_CATEGORIES)}
    assert db.query(ScoringConfigEntry).count() == 41
    assert db.query(Category).count() == 7


def test_seed_is_idempotent(db) -> None:
    seed_default_scoring_config(db)
    counts = seed_default_scoring_config(db)
    assert counts == {"config": 0, "categories": 0}
    assert db.query(ScoringConfigEntry).count() == 41


def test_seed_keeps_operator_edits(db) -> None:
    db.add(ScoringConfigEntry(config_type="relationship_weight", key="email", value=9))
    db.commit()
    counts = seed_default_scoring_config(db)
    assert counts["config"] == 40
    assert load_scoring_config(db).weight_for("email") == 9


def test_seeded_config_matches_defaults(seeded_db) -> None:
    config = load_scoring_config(seeded_db)
    assert config.weights == DEFAULT_RELATIONSHIP_WEIGHTS
    assert config.seniority_multipliers["c_suite"] == 1.5
    assert config.priority_weights["accessibility"] == 0.3


def test_update_upserts_and_next_load_sees_it(seeded_db) -> None:
    rows = update_scoring_config(
        seeded_db,
        [
            {"config_type": "relationship_weight", "key": "email", "value": 6},
            {"config_type": "relationship_weight", "key": "podcast_guest", "value": 12},
        ],
    )
    assert len(rows) == 42
    config = load_scoring_config(seeded_db)
    assert config.weight_for("email") == 6
    assert config.weight_for("podcast_guest") == 12


def test_update_unknown_type_raises_and_writes_nothing(seeded_db) -> None:
    with pytest.raises(ValueError, match="Unknown config_type"):
        update_scoring_config(
            seeded_db,
            [
                {"config_type": "relationship_weight", "key": "email", "value": 1},
                {"config_type": "bogus", "key": "x", "value": 1},
            ],
        )
    assert load_scoring_config(seeded_db).weight_for("email") == 5


def test_half_life_zero_falls_back(seeded_db) -> None:
    update_scoring_config(
        seeded_db, [{"config_type": "general", "key": "recency_half_life_days", "value": 0}]
    )
    assert load_scoring_config(seeded_db).half_life_days == DEFAULT_HALF_LIFE_DAYS


def test_list_is_ordered_by_type_and_key(seeded_db) -> None:
    rows = list_scoring_config(seeded_db)
    keys = [(r.config_type, r.key) for r in rows]
    assert keys == sorted(keys)
