"""Queue schemas for request/response validation."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from netgrowth.schemas.contact import TransitionRead


class QueueActionType(str, Enum):
    CONNECTION_REQUEST = "connection_request"
    FOLLOW_UP = "follow_up"
    RE_ENGAGEMENT = "re_engagement"


class QueueItemStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    EXECUTED = "executed"
    SKIPPED = "skipped"
    SNOOZED = "snoozed"


class QueueItemRead(BaseModel):
    """A queue item with the contact fields the operator needs to act."""

    id: int
    contact_id: int
    contact_name: str
    company: str | None
    linkedin_url: str | None
    queue_date: date
    action_type: QueueActionType
    status: QueueItemStatus
    template_id: int | None
    personalized_message: str | None
    notes: str | None
    snooze_until: date | None
    carried_from: date | None = None
    executed_at: datetime | None
    result: str | None

    model_config = ConfigDict(from_attributes=True)


class QueueSummary(BaseModel):
    pending: int = 0
    approved: int = 0
    executed: int = 0
    skipped: int = 0
    snoozed: int = 0
    total: int = 0


class QueueListResponse(BaseModel):
    queue_date: date
    items: list[QueueItemRead]
    summary: QueueSummary


class ApproveRequest(BaseModel):
    ids: list[int] = Field(..., min_length=1)


class ApproveResponse(BaseModel):
    approved: int


class DoneRequest(BaseModel):
    notes: str | None = Field(None, max_length=1000)


class SkipRequest(BaseModel):
    reason: str | None = Field(None, max_length=1000)


class SnoozeRequest(BaseModel):
    snooze_until: date


class ExecutionResponse(BaseModel):
    """Executed item plus the side effects of marking it done."""

    item: QueueItemRead
    status_transition: TransitionRead | None
    new_relationship_score: int | None


class QueueGenerationRead(BaseModel):
    connection_requests: int
    follow_ups: int
    re_engagements: int
    carried_over: int
    total: int
    flagged_for_editing: int

    model_config = ConfigDict(from_attributes=True)
