#!/usr/bin/env python3
"""Run the relationship scoring batch.

Usage:
    python scripts/run_score_batch.py

Recalculates relationship scores, records score history and applies status
transitions. Exits 0 on success (or when skipped because a run is active),
1 on failure.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from netgrowth.db.session import SessionLocal
from netgrowth.pipeline.executor import run_stage


def main() -> int:
    db = SessionLocal()
    try:
        result = run_stage(db, job_type="score")
        print(
            f"status={result['status']} "
            f"job_run_id={result.get('job_run_id')} "
            f"processed={result.get('processed', 0)} "
            f"updated={result.get('updated', 0)} "
            f"transitions={result.get('transitions', 0)}"
        )
        if result.get("error"):
            print(f"error={result['error']}", file=sys.stderr)
        return 0 if result["status"] in ("completed", "skipped") else 1
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
