"""Queue API routes."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from netgrowth.api.deps import get_db, parse_date_or_422
from netgrowth.models import QueueItem
from netgrowth.schemas.contact import TransitionRead
from netgrowth.schemas.queue import (
    ApproveRequest,
    ApproveResponse,
    DoneRequest,
    ExecutionResponse,
    QueueItemRead,
    QueueListResponse,
    QueueSummary,
    SkipRequest,
    SnoozeRequest,
)
from netgrowth.services.dates import utc_now
from netgrowth.services.queue_actions import (
    approve_items,
    get_queue_for_date,
    get_queue_summary,
    mark_executed,
    skip_item,
    snooze_item,
)

router = APIRouter()


def _item_read(item: QueueItem) -> QueueItemRead:
    contact = item.contact
    return QueueItemRead(
        id=item.id,
        contact_id=item.contact_id,
        contact_name=contact.full_name,
        company=contact.company,
        linkedin_url=contact.linkedin_url,
        queue_date=item.queue_date,
        action_type=item.action_type,
        status=item.status,
        template_id=item.template_id,
        personalized_message=item.personalized_message,
        notes=item.notes,
        snooze_until=item.snooze_until,
        carried_from=item.carried_from,
        executed_at=item.executed_at,
        result=item.result,
    )


def _resolve_date(value: str | None) -> date:
    return parse_date_or_422(value, "date") or utc_now().date()


@router.get("/today", response_model=QueueListResponse)
def api_queue_today(
    queue_date: str | None = Query(None, alias="date"),
    db: Session = Depends(get_db),
) -> QueueListResponse:
    """Queue items for a day (default today) with per-status counts."""
    day = _resolve_date(queue_date)
    items = get_queue_for_date(db, day)
    return QueueListResponse(
        queue_date=day,
        items=[_item_read(item) for item in items],
        summary=QueueSummary(**get_queue_summary(db, day)),
    )


@router.get("/summary", response_model=QueueSummary)
def api_queue_summary(
    queue_date: str | None = Query(None, alias="date"),
    db: Session = Depends(get_db),
) -> QueueSummary:
    return QueueSummary(**get_queue_summary(db, _resolve_date(queue_date)))


@router.post("/approve", response_model=ApproveResponse)
def api_approve(data: ApproveRequest, db: Session = Depends(get_db)) -> ApproveResponse:
    """Approve pending items in bulk."""
    return ApproveResponse(approved=approve_items(db, data.ids))


@router.put("/{item_id}/done", response_model=ExecutionResponse)
def api_mark_done(
    item_id: int,
    data: DoneRequest | None = None,
    db: Session = Depends(get_db),
) -> ExecutionResponse:
    """Mark an item executed; logs the interaction and rescoring follows."""
    try:
        outcome = mark_executed(db, item_id, notes=data.notes if data else None)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from None
    if outcome is None:
        raise HTTPException(status_code=404, detail="Queue item not found")
    return ExecutionResponse(
        item=_item_read(outcome.item),
        status_transition=(
            TransitionRead.model_validate(outcome.status_transition)
            if outcome.status_transition is not None
            else None
        ),
        new_relationship_score=outcome.new_relationship_score,
    )


@router.put("/{item_id}/skip", response_model=QueueItemRead)
def api_skip(
    item_id: int,
    data: SkipRequest | None = None,
    db: Session = Depends(get_db),
) -> QueueItemRead:
    try:
        item = skip_item(db, item_id, reason=data.reason if data else None)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from None
    if item is None:
        raise HTTPException(status_code=404, detail="Queue item not found")
    return _item_read(item)


@router.put("/{item_id}/snooze", response_model=QueueItemRead)
def api_snooze(
    item_id: int,
    data: SnoozeRequest,
    db: Session = Depends(get_db),
) -> QueueItemRead:
    try:
        item = snooze_item(db, item_id, data.snooze_until)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from None
    if item is None:
        raise HTTPException(status_code=404, detail="Queue item not found")
    return _item_read(item)
