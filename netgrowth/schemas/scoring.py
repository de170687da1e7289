"""Scoring config schemas."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ConfigType(str, Enum):
    RELATIONSHIP_WEIGHT = "relationship_weight"
    PRIORITY_WEIGHT = "priority_weight"
    TIMING_TRIGGER = "timing_trigger"
    STATUS_THRESHOLD = "status_threshold"
    GENERAL = "general"


class ScoringConfigEntryRead(BaseModel):
    id: int
    config_type: ConfigType
    key: str
    value: float
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ScoringConfigEntryWrite(BaseModel):
    config_type: ConfigType
    key: str = Field(..., min_length=1, max_length=100)
    value: float


class ScoringConfigUpdate(BaseModel):
    entries: list[ScoringConfigEntryWrite] = Field(..., min_length=1)


class ScoringConfigResponse(BaseModel):
    entries: list[ScoringConfigEntryRead]
