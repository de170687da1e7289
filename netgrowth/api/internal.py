"""Internal job endpoints for cron/scripts.

No authentication: deploy behind the private network or a reverse proxy.
Each endpoint runs through the executor, which skips duplicate runs
(X-Idempotency-Key) and refuses to start while the same job is running.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header, Query
from sqlalchemy.orm import Session

from netgrowth.api.deps import get_db, parse_date_or_422

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/internal", include_in_schema=False)


@router.post("/run_score")
async def run_score(
    db: Session = Depends(get_db),
    x_idempotency_key: str | None = Header(None, alias="X-Idempotency-Key"),
):
    """Recalculate relationship scores and apply status transitions.

    Returns job summary with processed, updated, transitions.
    """
    from netgrowth.pipeline.executor import run_stage

    try:
        result = run_stage(db, job_type="score", idempotency_key=x_idempotency_key)
        return {
            "status": result["status"],
            "job_run_id": result.get("job_run_id"),
            "processed": result.get("processed", 0),
            "updated": result.get("updated", 0),
            "transitions": result.get("transitions", 0),
            "error": result.get("error"),
        }
    except Exception as exc:
        logger.exception("Internal score job failed")
        return {"status": "failed", "error": str(exc)}


@router.post("/run_priority")
async def run_priority(
    db: Session = Depends(get_db),
    x_idempotency_key: str | None = Header(None, alias="X-Idempotency-Key"),
):
    """Recompute priority scores for target contacts."""
    from netgrowth.pipeline.executor import run_stage

    try:
        result = run_stage(db, job_type="priority", idempotency_key=x_idempotency_key)
        return {
            "status": result["status"],
            "job_run_id": result.get("job_run_id"),
            "processed": result.get("processed", 0),
            "updated": result.get("updated", 0),
            "error": result.get("error"),
        }
    except Exception as exc:
        logger.exception("Internal priority job failed")
        return {"status": "failed", "error": str(exc)}


@router.post("/generate_queue")
async def generate_queue(
    db: Session = Depends(get_db),
    x_idempotency_key: str | None = Header(None, alias="X-Idempotency-Key"),
    max_new_requests: int | None = Query(None, ge=0, le=500),
    weekly_limit: int | None = Query(None, ge=0, le=1000),
    queue_date: str | None = Query(None, description="ISO date; defaults to today"),
):
    """Generate the daily queue and send the queue-ready email when enabled."""
    from netgrowth.pipeline.executor import run_stage

    parsed_date = parse_date_or_422(queue_date, "queue_date")
    try:
        return run_stage(
            db,
            job_type="queue",
            idempotency_key=x_idempotency_key,
            max_new_requests=max_new_requests,
            weekly_limit=weekly_limit,
            queue_date=parsed_date,
        )
    except Exception as exc:
        logger.exception("Internal queue job failed")
        return {"status": "failed", "error": str(exc)}
