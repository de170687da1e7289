"""Operator actions on queue items: approve, done, skip, snooze, and read views."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from netgrowth.models import QueueItem
from netgrowth.services.dates import as_utc, utc_now
from netgrowth.services.interactions import log_interaction
from netgrowth.services.scoring.relationship_engine import recalculate_contact_score
from netgrowth.services.status_transitions import TransitionResult, manual_status_transition
from netgrowth.taxonomy import ACTION_CONNECTION_REQUEST, ACTIVE_QUEUE_STATUSES, QUEUE_STATUSES

logger = logging.getLogger(__name__)

QUEUE_SENT_REASON = "Connection request sent via queue"


@dataclass
class ExecutionOutcome:
    item: QueueItem
    status_transition: TransitionResult | None
    new_relationship_score: int | None


def get_queue_for_date(db: Session, queue_date: date) -> list[QueueItem]:
    """All queue items for a date with their contacts, in action then creation order."""
    return (
        db.query(QueueItem)
        .options(joinedload(QueueItem.contact))
        .filter(QueueItem.queue_date == queue_date)
        .order_by(QueueItem.action_type, QueueItem.created_at, QueueItem.id)
        .all()
    )


def get_queue_summary(db: Session, queue_date: date) -> dict:
    """Counts per status for a date, plus total."""
    rows = (
        db.query(QueueItem.status, func.count(QueueItem.id))
        .filter(QueueItem.queue_date == queue_date)
        .group_by(QueueItem.status)
        .all()
    )
    summary = {status: 0 for status in QUEUE_STATUSES}
    for status, count in rows:
        summary[status] = count
    summary["total"] = sum(summary.values())
    return summary


def approve_items(db: Session, item_ids: list[int]) -> int:
    """Move pending items to approved. Returns the number approved."""
    if not item_ids:
        return 0
    items = (
        db.query(QueueItem)
        .filter(QueueItem.id.in_(item_ids), QueueItem.status == "pending")
        .all()
    )
    for item in items:
        item.status = "approved"
    db.commit()
    return len(items)


def _get_item(db: Session, item_id: int) -> QueueItem | None:
    return db.query(QueueItem).filter(QueueItem.id == item_id).first()


def _require_active(item: QueueItem) -> None:
    if item.status not in ACTIVE_QUEUE_STATUSES:
        raise ValueError(f"Queue item {item.id} is already {item.status}")


def mark_executed(
    db: Session,
    item_id: int,
    notes: str | None = None,
    now: datetime | None = None,
) -> ExecutionOutcome | None:
    """Mark an item executed and apply its side effects.

    Logs connection_request_sent for connection requests (linkedin_message
    otherwise), moves a target contact to requested after a connection
    request, and recalculates the relationship score.
    """
    item = _get_item(db, item_id)
    if item is None:
        return None
    _require_active(item)
    now = as_utc(now) if now is not None else utc_now()

    item.status = "executed"
    item.executed_at = now
    item.result = "success"
    if notes:
        item.notes = notes
    db.commit()

    interaction_type = (
        "connection_request_sent"
        if item.action_type == ACTION_CONNECTION_REQUEST
        else "linkedin_message"
    )
    log_interaction(
        db,
        item.contact_id,
        interaction_type,
        occurred_at=now,
        metadata={"queue_item_id": item.id, "notes": notes},
    )

    transition = None
    if item.action_type == ACTION_CONNECTION_REQUEST and item.contact.status == "target":
        transition = manual_status_transition(
            db, item.contact_id, "requested", reason=QUEUE_SENT_REASON, now=now
        )

    score = recalculate_contact_score(db, item.contact_id, now=now)
    logger.info("Queue item %s executed (%s)", item.id, item.action_type)
    return ExecutionOutcome(item=item, status_transition=transition, new_relationship_score=score)


def skip_item(db: Session, item_id: int, reason: str | None = None) -> QueueItem | None:
    item = _get_item(db, item_id)
    if item is None:
        return None
    _require_active(item)
    item.status = "skipped"
    if reason:
        item.notes = reason
    db.commit()
    return item


def snooze_item(db: Session, item_id: int, until: date) -> QueueItem | None:
    """Snooze an active item; the contact is not re-queued through `until`."""
    item = _get_item(db, item_id)
    if item is None:
        return None
    _require_active(item)
    if until <= item.queue_date:
        raise ValueError("snooze_until must be after the item's queue date")
    item.status = "snoozed"
    item.snooze_until = until
    db.commit()
    return item
