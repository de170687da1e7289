"""Contact status, interaction and priority schemas."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ContactStatus(str, Enum):
    """Relationship lifecycle status."""

    TARGET = "target"
    REQUESTED = "requested"
    CONNECTED = "connected"
    ENGAGED = "engaged"
    RELATIONSHIP = "relationship"


class InteractionType(str, Enum):
    LINKEDIN_MESSAGE = "linkedin_message"
    EMAIL = "email"
    MEETING_1ON1_INPERSON = "meeting_1on1_inperson"
    MEETING_1ON1_VIRTUAL = "meeting_1on1_virtual"
    MEETING_GROUP = "meeting_group"
    LINKEDIN_COMMENT_GIVEN = "linkedin_comment_given"
    LINKEDIN_COMMENT_RECEIVED = "linkedin_comment_received"
    LINKEDIN_LIKE_GIVEN = "linkedin_like_given"
    LINKEDIN_LIKE_RECEIVED = "linkedin_like_received"
    LINKEDIN_DM_SENT = "linkedin_dm_sent"
    LINKEDIN_DM_RECEIVED = "linkedin_dm_received"
    INTRODUCTION_GIVEN = "introduction_given"
    INTRODUCTION_RECEIVED = "introduction_received"
    MANUAL_NOTE = "manual_note"
    CONNECTION_REQUEST_SENT = "connection_request_sent"
    CONNECTION_REQUEST_ACCEPTED = "connection_request_accepted"


class InteractionSource(str, Enum):
    MANUAL = "manual"
    LINKEDIN = "linkedin"
    GMAIL = "gmail"
    CALENDAR = "calendar"


class StatusUpdateRequest(BaseModel):
    """Manual status change."""

    status: ContactStatus
    reason: str | None = Field(None, max_length=500)


class TransitionRead(BaseModel):
    """An applied status transition."""

    contact_id: int
    from_status: str
    to_status: str
    trigger: str
    reason: str

    model_config = ConfigDict(from_attributes=True)


class TransitionResponse(BaseModel):
    """Transition result; transition is null when nothing changed."""

    transition: TransitionRead | None


class InteractionCreate(BaseModel):
    type: InteractionType
    occurred_at: datetime | None = None
    source: InteractionSource = InteractionSource.MANUAL
    metadata: dict | None = None


class InteractionRead(BaseModel):
    id: int
    contact_id: int
    type: str
    source: str
    occurred_at: datetime
    points_value: int
    metadata: dict | None = Field(None, validation_alias=AliasChoices("meta", "metadata"))
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PriorityRead(BaseModel):
    """Priority breakdown for a not-yet-connected contact."""

    relevance: float
    accessibility: float
    timing: float
    total: float

    model_config = ConfigDict(from_attributes=True)
