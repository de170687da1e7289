"""Canonical value sets for contacts, interactions, queue items and history rows.

Columns store these as plain strings; services validate against the sets here.
"""

from __future__ import annotations

# ── Contact lifecycle ────────────────────────────────────────────────────

CONTACT_STATUSES: tuple[str, ...] = (
    "target",
    "requested",
    "connected",
    "engaged",
    "relationship",
)

# Statuses that priority scoring applies to (outbound targeting, pre-connection)
PRE_CONNECTION_STATUSES: frozenset[str] = frozenset({"target", "requested"})

SENIORITY_LEVELS: frozenset[str] = frozenset({"ic", "manager", "director", "vp", "c_suite"})

# ── Interactions ─────────────────────────────────────────────────────────

INTERACTION_TYPES: frozenset[str] = frozenset({
    "linkedin_message",
    "email",
    "meeting_1on1_inperson",
    "meeting_1on1_virtual",
    "meeting_group",
    "linkedin_comment_given",
    "linkedin_comment_received",
    "linkedin_like_given",
    "linkedin_like_received",
    "linkedin_dm_sent",
    "linkedin_dm_received",
    "introduction_given",
    "introduction_received",
    "manual_note",
    "connection_request_sent",
    "connection_request_accepted",
})

# Inbound / reciprocated activity; drives the reciprocity multiplier and the
# engaged -> relationship promotion guard.
RECIPROCAL_INTERACTION_TYPES: frozenset[str] = frozenset({
    "linkedin_dm_received",
    "linkedin_comment_received",
    "linkedin_like_received",
    "introduction_received",
    "connection_request_accepted",
})

# Outbound messages; any of these after a new connection means a follow-up was sent
OUTBOUND_MESSAGE_TYPES: frozenset[str] = frozenset({
    "linkedin_message",
    "email",
    "linkedin_dm_sent",
})

INTERACTION_SOURCES: frozenset[str] = frozenset({"manual", "linkedin", "gmail", "calendar"})

# ── History ──────────────────────────────────────────────────────────────

SCORE_TYPE_RELATIONSHIP = "relationship"
SCORE_TYPE_PRIORITY = "priority"

TRIGGER_MANUAL = "manual"
TRIGGER_PROMOTION = "automated_promotion"
TRIGGER_DEMOTION = "automated_demotion"

# ── Queue ────────────────────────────────────────────────────────────────

ACTION_CONNECTION_REQUEST = "connection_request"
ACTION_FOLLOW_UP = "follow_up"
ACTION_RE_ENGAGEMENT = "re_engagement"

QUEUE_ACTION_TYPES: frozenset[str] = frozenset({
    ACTION_CONNECTION_REQUEST,
    ACTION_FOLLOW_UP,
    ACTION_RE_ENGAGEMENT,
})

QUEUE_STATUSES: tuple[str, ...] = ("pending", "approved", "executed", "skipped", "snoozed")

# Pending/approved items still need the operator; at most one per contact per day
ACTIVE_QUEUE_STATUSES: tuple[str, ...] = ("pending", "approved")


def is_valid_interaction_type(candidate: str) -> bool:
    """Return True if candidate is a known interaction type."""
    return candidate in INTERACTION_TYPES


def is_valid_status(candidate: str) -> bool:
    """Return True if candidate is a known contact status."""
    return candidate in CONTACT_STATUSES
