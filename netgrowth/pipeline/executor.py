"""Job executor: idempotency, single active run, stage dispatch."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from netgrowth.models.job_run import JobRun
from netgrowth.pipeline.job_guard import find_active_run

logger = logging.getLogger(__name__)


def run_stage(
    db: Session,
    job_type: str,
    idempotency_key: str | None = None,
    **kwargs: Any,
) -> dict:
    """Run a batch job with idempotency and single-active-run checks.

    Returns the cached result if idempotency_key matches a completed run of
    the same job_type. Returns a "skipped" result while another run of the
    same type is still running. Raises ValueError for an unknown job_type.
    """
    from netgrowth.pipeline.stages import STAGE_REGISTRY

    stage = STAGE_REGISTRY.get(job_type)
    if not stage:
        raise ValueError(f"Unknown job_type: {job_type}")

    if idempotency_key:
        existing = (
            db.query(JobRun)
            .filter(
                JobRun.idempotency_key == idempotency_key,
                JobRun.job_type == job_type,
            )
            .order_by(JobRun.started_at.desc(), JobRun.id.desc())
            .first()
        )
        if existing and existing.status == "completed":
            logger.info(
                "Idempotent skip: job_type=%s idempotency_key=%s job_run_id=%s",
                job_type,
                idempotency_key,
                existing.id,
            )
            return _cached_result(existing, job_type)

    active = find_active_run(db, job_type)
    if active is not None:
        logger.warning(
            "Job already running: job_type=%s job_run_id=%s", job_type, active.id
        )
        return {
            "status": "skipped",
            "job_run_id": active.id,
            "error": f"{job_type} job {active.id} is already running",
        }

    return stage(db, idempotency_key=idempotency_key, **kwargs)


def _cached_result(job: JobRun, job_type: str) -> dict:
    """Build a response dict from a completed JobRun.

    Cached responses are approximate: JobRun keeps totals, not the per-step
    queue breakdown.
    """
    base = {
        "status": job.status,
        "job_run_id": job.id,
        "cached": True,
    }
    if job_type == "score":
        return {
            **base,
            "processed": job.contacts_processed or 0,
            "updated": job.contacts_updated or 0,
            "transitions": job.transitions or 0,
            "error": job.error_message,
        }
    if job_type == "priority":
        return {
            **base,
            "processed": job.contacts_processed or 0,
            "updated": job.contacts_updated or 0,
            "error": job.error_message,
        }
    if job_type == "queue":
        return {
            **base,
            "total": job.contacts_processed or 0,
            "error": job.error_message,
        }
    return base
