"""Single-active-run guard for batch jobs."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from netgrowth.config import get_settings
from netgrowth.models.job_run import JobRun
from netgrowth.services.dates import as_utc, utc_now

logger = logging.getLogger(__name__)


def find_active_run(
    db: Session, job_type: str, now: datetime | None = None
) -> JobRun | None:
    """Return a running JobRun of job_type started within the stale window, if any.

    Runs older than JOB_STALE_AFTER_MINUTES are treated as crashed and ignored.
    """
    now = as_utc(now) if now is not None else utc_now()
    stale_after = timedelta(minutes=get_settings().job_stale_after_minutes)
    running = (
        db.query(JobRun)
        .filter(JobRun.job_type == job_type, JobRun.status == "running")
        .order_by(JobRun.started_at.desc())
        .all()
    )
    for job in running:
        if now - as_utc(job.started_at) < stale_after:
            return job
    return None
