"""Pipeline package: stages, executor, single-run guard."""

from netgrowth.pipeline.executor import run_stage
from netgrowth.pipeline.job_guard import find_active_run
from netgrowth.pipeline.stages import STAGE_REGISTRY

__all__ = ["run_stage", "find_active_run", "STAGE_REGISTRY"]
