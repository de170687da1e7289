"""Daily queue generation.

Builds the day's action list in five steps: weekly cap check, carry-over of
unfinished items, new connection requests by priority, follow-ups for fresh
connections and re-engagements for cooling relationships. A single
accumulating set of contact ids keeps the steps disjoint, so re-running for
the same day never duplicates an active item.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date, datetime, timedelta

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from netgrowth.config import get_settings
from netgrowth.models import Contact, Interaction, QueueItem, ScoreHistory, StatusHistory, Template
from netgrowth.services.dates import as_utc, resolve_run_clock, start_of_day, week_start
from netgrowth.services.queue.templates import (
    EXCEEDS_LENGTH_NOTE,
    build_token_data,
    exceeds_length,
    render_template,
    select_template,
)
from netgrowth.taxonomy import (
    ACTION_CONNECTION_REQUEST,
    ACTION_FOLLOW_UP,
    ACTION_RE_ENGAGEMENT,
    ACTIVE_QUEUE_STATUSES,
    OUTBOUND_MESSAGE_TYPES,
    SCORE_TYPE_RELATIONSHIP,
)

logger = logging.getLogger(__name__)

FOLLOW_UP_WINDOW_DAYS: int = 7
# keeps a burst of accepted requests from crowding out the rest of the day
FOLLOW_UP_MAX_PER_RUN: int = 10
RE_ENGAGEMENT_WINDOW_DAYS: int = 30
RE_ENGAGEMENT_DROP_THRESHOLD: float = 15


@dataclass
class QueueGenerationResult:
    connection_requests: int = 0
    follow_ups: int = 0
    re_engagements: int = 0
    carried_over: int = 0
    total: int = 0
    flagged_for_editing: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def _fmt(value: float) -> str:
    return f"{float(value):g}"


def count_week_connection_requests(db: Session, queue_date: date) -> int:
    """Connection requests that count against the weekly cap for queue_date's week.

    Executed this week (by executed_at), active items dated this week up to
    queue_date, and pending items from earlier weeks that carry-over will pull
    into this week.
    """
    monday = week_start(queue_date)
    executed = (
        db.query(func.count(QueueItem.id))
        .filter(
            QueueItem.action_type == ACTION_CONNECTION_REQUEST,
            QueueItem.status == "executed",
            QueueItem.executed_at >= start_of_day(monday),
        )
        .scalar()
    ) or 0
    active = (
        db.query(func.count(QueueItem.id))
        .filter(
            QueueItem.action_type == ACTION_CONNECTION_REQUEST,
            or_(
                and_(
                    QueueItem.status.in_(ACTIVE_QUEUE_STATUSES),
                    QueueItem.queue_date >= monday,
                    QueueItem.queue_date <= queue_date,
                ),
                and_(QueueItem.status == "pending", QueueItem.queue_date < monday),
            ),
        )
        .scalar()
    ) or 0
    return executed + active


def _initial_excluded(db: Session, queue_date: date) -> set[int]:
    """Contacts with an active item today or earlier, or snoozed through today."""
    active_rows = (
        db.query(QueueItem.contact_id)
        .filter(
            QueueItem.status.in_(ACTIVE_QUEUE_STATUSES),
            QueueItem.queue_date <= queue_date,
        )
        .distinct()
        .all()
    )
    snoozed_rows = (
        db.query(QueueItem.contact_id)
        .filter(QueueItem.status == "snoozed", QueueItem.snooze_until >= queue_date)
        .distinct()
        .all()
    )
    return {row[0] for row in active_rows} | {row[0] for row in snoozed_rows}


def _carry_over(db: Session, queue_date: date) -> int:
    """Move pending items from earlier days to queue_date, one per contact.

    A stale item whose contact already has an active item today (or a newer
    carried item) is marked skipped instead of duplicated. Carried items keep
    their first queue date in carried_from. Returns the number carried.
    """
    today_contacts = {
        row[0]
        for row in db.query(QueueItem.contact_id)
        .filter(
            QueueItem.status.in_(ACTIVE_QUEUE_STATUSES),
            QueueItem.queue_date == queue_date,
        )
        .all()
    }
    stale = (
        db.query(QueueItem)
        .filter(QueueItem.status == "pending", QueueItem.queue_date < queue_date)
        .order_by(QueueItem.queue_date.desc(), QueueItem.id.desc())
        .all()
    )
    carried = 0
    for item in stale:
        if item.contact_id in today_contacts:
            item.status = "skipped"
            item.notes = "Superseded by a newer queue item"
            continue
        if item.carried_from is None:
            item.carried_from = item.queue_date
        item.queue_date = queue_date
        today_contacts.add(item.contact_id)
        carried += 1
    db.commit()
    return carried


def _budget_used_on(db: Session, queue_date: date) -> tuple[int, int]:
    """(new connection requests, carried items) active on queue_date."""
    rows = (
        db.query(QueueItem.action_type, QueueItem.carried_from)
        .filter(
            QueueItem.status.in_(ACTIVE_QUEUE_STATUSES),
            QueueItem.queue_date == queue_date,
        )
        .all()
    )
    carried = sum(1 for _, carried_from in rows if carried_from is not None)
    requests = sum(
        1
        for action_type, carried_from in rows
        if carried_from is None and action_type == ACTION_CONNECTION_REQUEST
    )
    return requests, carried


def _add_item(db: Session, **fields) -> bool:
    """Insert one queue item in its own transaction. False on failure."""
    try:
        db.add(QueueItem(status="pending", **fields))
        db.commit()
        return True
    except Exception:
        db.rollback()
        logger.exception(
            "Failed to queue %s for contact %s",
            fields.get("action_type"),
            fields.get("contact_id"),
        )
        return False


def _queue_connection_requests(
    db: Session,
    queue_date: date,
    slots: int,
    excluded: set[int],
    result: QueueGenerationResult,
) -> None:
    query = db.query(Contact).filter(Contact.status == "target", Contact.deleted_at.is_(None))
    if excluded:
        query = query.filter(Contact.id.notin_(excluded))
    targets = (
        query.order_by(
            Contact.priority_score.desc().nulls_last(), Contact.created_at, Contact.id
        )
        .limit(slots)
        .all()
    )
    templates = (
        db.query(Template)
        .filter(Template.is_active.is_(True))
        .order_by(Template.times_used, Template.id)
        .all()
    )

    for target in targets:
        contact_id = target.id
        template = select_template(templates, (c.id for c in target.categories))
        message = None
        if template is not None:
            message = render_template(template.body, build_token_data(target))
        flagged = exceeds_length(message)
        created = _add_item(
            db,
            contact_id=contact_id,
            queue_date=queue_date,
            action_type=ACTION_CONNECTION_REQUEST,
            template_id=template.id if template is not None else None,
            personalized_message=message,
            notes=EXCEEDS_LENGTH_NOTE if flagged else None,
        )
        if not created:
            continue
        excluded.add(contact_id)
        result.connection_requests += 1
        if flagged:
            result.flagged_for_editing += 1


def _queue_follow_ups(
    db: Session,
    queue_date: date,
    now: datetime,
    excluded: set[int],
    result: QueueGenerationResult,
) -> None:
    window_start = now - timedelta(days=FOLLOW_UP_WINDOW_DAYS)
    candidates = (
        db.query(Contact)
        .filter(Contact.status == "connected", Contact.deleted_at.is_(None))
        .order_by(Contact.id)
        .all()
    )
    for contact in candidates:
        if result.follow_ups >= FOLLOW_UP_MAX_PER_RUN:
            break
        if contact.id in excluded:
            continue
        transition = (
            db.query(StatusHistory)
            .filter(
                StatusHistory.contact_id == contact.id,
                StatusHistory.to_status == "connected",
            )
            .order_by(StatusHistory.created_at.desc(), StatusHistory.id.desc())
            .first()
        )
        if transition is None:
            continue
        connected_at = as_utc(transition.created_at)
        if connected_at < window_start:
            continue
        messaged = (
            db.query(Interaction.id)
            .filter(
                Interaction.contact_id == contact.id,
                Interaction.type.in_(OUTBOUND_MESSAGE_TYPES),
                Interaction.occurred_at >= connected_at,
            )
            .first()
        )
        if messaged is not None:
            continue
        contact_id = contact.id
        created = _add_item(
            db,
            contact_id=contact_id,
            queue_date=queue_date,
            action_type=ACTION_FOLLOW_UP,
            notes=f"Connected on {connected_at.date().isoformat()}",
        )
        if created:
            excluded.add(contact_id)
            result.follow_ups += 1


def _queue_re_engagements(
    db: Session,
    queue_date: date,
    excluded: set[int],
    result: QueueGenerationResult,
) -> None:
    window_start = queue_date - timedelta(days=RE_ENGAGEMENT_WINDOW_DAYS)
    candidates = (
        db.query(Contact)
        .filter(
            Contact.status.in_(("engaged", "relationship")),
            Contact.deleted_at.is_(None),
        )
        .order_by(Contact.id)
        .all()
    )
    for contact in candidates:
        if contact.id in excluded:
            continue
        oldest = (
            db.query(ScoreHistory)
            .filter(
                ScoreHistory.contact_id == contact.id,
                ScoreHistory.score_type == SCORE_TYPE_RELATIONSHIP,
                ScoreHistory.recorded_at >= window_start,
                ScoreHistory.recorded_at <= queue_date,
            )
            .order_by(ScoreHistory.recorded_at)
            .first()
        )
        if oldest is None:
            continue
        current = contact.relationship_score or 0
        if float(oldest.score_value) - current <= RE_ENGAGEMENT_DROP_THRESHOLD:
            continue
        contact_id = contact.id
        created = _add_item(
            db,
            contact_id=contact_id,
            queue_date=queue_date,
            action_type=ACTION_RE_ENGAGEMENT,
            notes=f"Score dropped from {_fmt(oldest.score_value)} to {current}",
        )
        if created:
            excluded.add(contact_id)
            result.re_engagements += 1


def generate_daily_queue(
    db: Session,
    max_new_requests: int | None = None,
    weekly_limit: int | None = None,
    queue_date: date | None = None,
    now: datetime | None = None,
) -> QueueGenerationResult:
    """Generate (or top up) the action queue for queue_date.

    Defaults come from settings (QUEUE_MAX_NEW_REQUESTS, QUEUE_WEEKLY_LIMIT);
    queue_date defaults to today. Returns an empty result without writing when
    the weekly cap is exhausted.
    """
    settings = get_settings()
    if max_new_requests is None:
        max_new_requests = settings.queue_max_new_requests
    if weekly_limit is None:
        weekly_limit = settings.queue_weekly_limit
    queue_date, now = resolve_run_clock(queue_date, now)

    result = QueueGenerationResult()

    used = count_week_connection_requests(db, queue_date)
    remaining = weekly_limit - used
    if remaining <= 0:
        logger.info(
            "Weekly connection request cap reached: used=%d limit=%d", used, weekly_limit
        )
        return result

    excluded = _initial_excluded(db, queue_date)
    result.carried_over = _carry_over(db, queue_date)

    # every carried item, including ones carried by an earlier run today,
    # takes one unit of the day's new-request budget
    already_today, carried_today = _budget_used_on(db, queue_date)
    slots = min(max_new_requests - already_today, remaining) - carried_today
    if slots > 0:
        _queue_connection_requests(db, queue_date, slots, excluded, result)

    _queue_follow_ups(db, queue_date, now, excluded, result)
    _queue_re_engagements(db, queue_date, excluded, result)

    result.total = (
        result.connection_requests
        + result.follow_ups
        + result.re_engagements
        + result.carried_over
    )
    logger.info(
        "Queue generated for %s: requests=%d follow_ups=%d re_engagements=%d "
        "carried=%d flagged=%d",
        queue_date,
        result.connection_requests,
        result.follow_ups,
        result.re_engagements,
        result.carried_over,
        result.flagged_for_editing,
    )
    return result
