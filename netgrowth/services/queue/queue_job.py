"""Daily queue job: generation wrapped in a JobRun, plus the queue-ready email."""

from __future__ import annotations

import logging
from datetime import date, datetime

from sqlalchemy.orm import Session, joinedload

from netgrowth.config import get_settings
from netgrowth.models import JobRun, QueueItem
from netgrowth.services.dates import resolve_run_clock, utc_now
from netgrowth.services.email_service import send_queue_ready_email
from netgrowth.services.queue.queue_generation import QueueGenerationResult, generate_daily_queue
from netgrowth.taxonomy import ACTIVE_QUEUE_STATUSES

logger = logging.getLogger(__name__)


def notify_queue_ready(
    db: Session, queue_date: date, result: QueueGenerationResult, settings=None
) -> bool:
    """Email the day's active queue when notifications are enabled and the queue is non-empty."""
    settings = settings or get_settings()
    if not getattr(settings, "queue_email_enabled", False) or result.total <= 0:
        return False
    items = (
        db.query(QueueItem)
        .options(joinedload(QueueItem.contact))
        .filter(
            QueueItem.queue_date == queue_date,
            QueueItem.status.in_(ACTIVE_QUEUE_STATUSES),
        )
        .order_by(QueueItem.created_at, QueueItem.id)
        .all()
    )
    return send_queue_ready_email(
        items,
        queue_date,
        getattr(settings, "queue_email_to", ""),
        settings,
        flagged=result.flagged_for_editing,
    )


def run_queue_job(
    db: Session,
    max_new_requests: int | None = None,
    weekly_limit: int | None = None,
    queue_date: date | None = None,
    now: datetime | None = None,
    idempotency_key: str | None = None,
) -> dict:
    """Run generate_daily_queue under a JobRun and send the notification.

    Returns:
        dict with status, job_run_id, the QueueGenerationResult counts, email_sent, error
    """
    queue_date, now = resolve_run_clock(queue_date, now)

    job = JobRun(job_type="queue", status="running", idempotency_key=idempotency_key)
    db.add(job)
    db.commit()
    db.refresh(job)

    try:
        result = generate_daily_queue(
            db,
            max_new_requests=max_new_requests,
            weekly_limit=weekly_limit,
            queue_date=queue_date,
            now=now,
        )
        job.finished_at = utc_now()
        job.status = "completed"
        job.contacts_processed = result.total
        job.contacts_updated = result.total - result.carried_over
        db.commit()

        email_sent = notify_queue_ready(db, queue_date, result)
        return {
            "status": "completed",
            "job_run_id": job.id,
            "queue_date": queue_date.isoformat(),
            **result.to_dict(),
            "email_sent": email_sent,
            "error": None,
        }

    except Exception as exc:
        logger.exception("Queue generation job failed")
        db.rollback()
        job.finished_at = utc_now()
        job.status = "failed"
        job.error_message = str(exc)
        db.commit()
        return {
            "status": "failed",
            "job_run_id": job.id,
            "queue_date": queue_date.isoformat(),
            **QueueGenerationResult().to_dict(),
            "email_sent": False,
            "error": str(exc),
        }
