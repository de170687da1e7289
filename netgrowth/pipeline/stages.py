"""Batch job stages and registry."""

from __future__ import annotations

from typing import Any, Protocol

from sqlalchemy.orm import Session


class StageResult(dict[str, Any]):
    """Result from a job stage. Plain dict for API responses."""


class PipelineStage(Protocol):
    """Stages receive db, the idempotency key and optional kwargs."""

    def __call__(
        self,
        db: Session,
        idempotency_key: str | None = None,
        **kwargs: Any,
    ) -> StageResult:
        ...


def _score_stage(db: Session, idempotency_key: str | None = None, **kwargs: Any) -> StageResult:
    """Score stage: wraps run_scoring_batch."""
    from netgrowth.services.scoring.score_batch import run_scoring_batch

    return StageResult(
        run_scoring_batch(db, now=kwargs.get("now"), idempotency_key=idempotency_key)
    )


def _priority_stage(
    db: Session, idempotency_key: str | None = None, **kwargs: Any
) -> StageResult:
    """Priority stage: wraps run_priority_batch."""
    from netgrowth.services.priority_scoring import run_priority_batch

    return StageResult(run_priority_batch(db, idempotency_key=idempotency_key))


def _queue_stage(db: Session, idempotency_key: str | None = None, **kwargs: Any) -> StageResult:
    """Queue stage: wraps run_queue_job (generation + notification)."""
    from netgrowth.services.queue.queue_job import run_queue_job

    return StageResult(
        run_queue_job(
            db,
            max_new_requests=kwargs.get("max_new_requests"),
            weekly_limit=kwargs.get("weekly_limit"),
            queue_date=kwargs.get("queue_date"),
            now=kwargs.get("now"),
            idempotency_key=idempotency_key,
        )
    )


# Registry: job_type -> callable (db, idempotency_key, **kwargs) -> dict
STAGE_REGISTRY: dict[str, PipelineStage] = {
    "score": _score_stage,
    "priority": _priority_stage,
    "queue": _queue_stage,
}
