"""Scoring config routes: read and update operator-tunable weights."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from netgrowth.api.deps import get_db
from netgrowth.schemas.scoring import (
    ScoringConfigEntryRead,
    ScoringConfigResponse,
    ScoringConfigUpdate,
)
from netgrowth.services.scoring.config_loader import list_scoring_config, update_scoring_config

router = APIRouter()


@router.get("", response_model=ScoringConfigResponse)
def api_get_scoring_config(db: Session = Depends(get_db)) -> ScoringConfigResponse:
    rows = list_scoring_config(db)
    return ScoringConfigResponse(entries=[ScoringConfigEntryRead.model_validate(r) for r in rows])


@router.put("", response_model=ScoringConfigResponse)
def api_update_scoring_config(
    data: ScoringConfigUpdate,
    db: Session = Depends(get_db),
) -> ScoringConfigResponse:
    """Upsert config entries. Changes apply on the next batch run."""
    entries = [
        {"config_type": e.config_type.value, "key": e.key, "value": e.value}
        for e in data.entries
    ]
    try:
        rows = update_scoring_config(db, entries)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from None
    return ScoringConfigResponse(entries=[ScoringConfigEntryRead.model_validate(r) for r in rows])
