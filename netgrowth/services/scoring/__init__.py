"""Relationship scoring: config snapshot and engine. The batch job lives in score_batch."""

from netgrowth.services.scoring.config_loader import (
    ScoringConfig,
    load_scoring_config,
    seed_default_scoring_config,
    update_scoring_config,
)
from netgrowth.services.scoring.relationship_engine import (
    calculate_contact_score,
    compute_reciprocity_multiplier,
    compute_relationship_score,
    recalculate_contact_score,
)

__all__ = [
    "ScoringConfig",
    "calculate_contact_score",
    "compute_reciprocity_multiplier",
    "compute_relationship_score",
    "load_scoring_config",
    "recalculate_contact_score",
    "seed_default_scoring_config",
    "update_scoring_config",
]
