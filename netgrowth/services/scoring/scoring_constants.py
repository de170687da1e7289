"""Relationship and priority scoring constants and the decay law.

Defaults used when the scoring_config table has no row for a key. The
engines never hardcode these values; they read them through ScoringConfig.
"""

from __future__ import annotations

# ── Config types (scoring_config.config_type) ───────────────────────────

CONFIG_RELATIONSHIP_WEIGHT = "relationship_weight"
CONFIG_PRIORITY_WEIGHT = "priority_weight"
CONFIG_TIMING_TRIGGER = "timing_trigger"
CONFIG_STATUS_THRESHOLD = "status_threshold"
CONFIG_GENERAL = "general"

CONFIG_TYPES: frozenset[str] = frozenset({
    CONFIG_RELATIONSHIP_WEIGHT,
    CONFIG_PRIORITY_WEIGHT,
    CONFIG_TIMING_TRIGGER,
    CONFIG_STATUS_THRESHOLD,
    CONFIG_GENERAL,
})

# ── Base points per interaction type ────────────────────────────────────

DEFAULT_RELATIONSHIP_WEIGHTS: dict[str, float] = {
    "meeting_1on1_inperson": 15,
    "meeting_1on1_virtual": 10,
    "meeting_group": 5,
    "email": 5,
    "linkedin_message": 4,
    "linkedin_comment_given": 3,
    "linkedin_comment_received": 3,
    "linkedin_like_given": 1,
    "linkedin_like_received": 1,
    "linkedin_dm_sent": 2,
    "linkedin_dm_received": 3,
    "introduction_given": 10,
    "introduction_received": 10,
    "manual_note": 8,
    "connection_request_sent": 3,
    "connection_request_accepted": 2,
}

# ── Recency decay and reciprocity (general) ─────────────────────────────

DEFAULT_HALF_LIFE_DAYS: float = 90
DEFAULT_RECIPROCITY_THRESHOLD_PCT: float = 30
DEFAULT_RECIPROCITY_MULTIPLIER_MIN: float = 1.3
DEFAULT_RECIPROCITY_MULTIPLIER_MAX: float = 1.5

# Raw points that normalize to 100 (~10 high-value recent interactions)
MAX_EXPECTED_POINTS: float = 150
SCORE_MIN: int = 0
SCORE_MAX: int = 100

# ── Status thresholds ───────────────────────────────────────────────────

DEFAULT_STATUS_THRESHOLDS: dict[str, float] = {
    "connected_to_engaged_score": 30,
    "connected_to_engaged_interactions": 2,
    "engaged_to_relationship_score": 60,
    "engaged_to_relationship_reciprocal": 1,
    "demotion_window_days": 30,
}

# ── Priority scoring ────────────────────────────────────────────────────

DEFAULT_PRIORITY_WEIGHTS: dict[str, float] = {
    "relevance": 0.5,
    "accessibility": 0.3,
    "timing": 0.2,
}

DEFAULT_SENIORITY_MULTIPLIERS: dict[str, float] = {
    "c_suite": 1.5,
    "vp": 1.5,
    "director": 1.2,
    "manager": 1.0,
    "ic": 0.8,
}
DEFAULT_SENIORITY_MULTIPLIER: float = 1.0

# Timing signals are not wired to any data source yet; seeded for the settings UI only
DEFAULT_TIMING_TRIGGERS: dict[str, float] = {
    "job_change_30d": 3,
    "linkedin_post_7d": 2,
    "company_funding_news": 2,
    "same_upcoming_event": 3,
    "geographic_overlap_30d": 2,
    "profile_view": 1,
    "mutual_connection_activity": 1,
}


def decay(days_since: float, half_life_days: float) -> float:
    """Return exponential recency decay 0.5 ^ (days_since / half_life_days).

    Negative or zero days (future-dated or same instant) return 1.0.
    """
    if days_since <= 0:
        return 1.0
    return 0.5 ** (days_since / half_life_days)
