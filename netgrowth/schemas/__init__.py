"""Pydantic schemas for request/response validation."""

from netgrowth.schemas.contact import (
    ContactStatus,
    InteractionCreate,
    InteractionRead,
    InteractionSource,
    InteractionType,
    PriorityRead,
    StatusUpdateRequest,
    TransitionRead,
    TransitionResponse,
)
from netgrowth.schemas.queue import (
    ApproveRequest,
    ApproveResponse,
    DoneRequest,
    ExecutionResponse,
    QueueActionType,
    QueueGenerationRead,
    QueueItemRead,
    QueueItemStatus,
    QueueListResponse,
    QueueSummary,
    SkipRequest,
    SnoozeRequest,
)
from netgrowth.schemas.scoring import (
    ConfigType,
    ScoringConfigEntryRead,
    ScoringConfigEntryWrite,
    ScoringConfigResponse,
    ScoringConfigUpdate,
)

__all__ = [
    "ApproveRequest",
    "ApproveResponse",
    "ConfigType",
    "ContactStatus",
    "DoneRequest",
    "ExecutionResponse",
    "InteractionCreate",
    "InteractionRead",
    "InteractionSource",
    "InteractionType",
    "PriorityRead",
    "QueueActionType",
    "QueueGenerationRead",
    "QueueItemRead",
    "QueueItemStatus",
    "QueueListResponse",
    "QueueSummary",
    "ScoringConfigEntryRead",
    "ScoringConfigEntryWrite",
    "ScoringConfigResponse",
    "ScoringConfigUpdate",
    "SkipRequest",
    "SnoozeRequest",
    "StatusUpdateRequest",
    "TransitionRead",
    "TransitionResponse",
]
