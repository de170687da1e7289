#!/usr/bin/env python3
"""Generate the daily outreach queue.

Usage:
    python scripts/generate_daily_queue.py
    python scripts/generate_daily_queue.py --date 2026-03-02 --max-new 10 --weekly-limit 50

Defaults come from QUEUE_MAX_NEW_REQUESTS / QUEUE_WEEKLY_LIMIT. Sends the
queue-ready email when QUEUE_EMAIL_ENABLED=true and the queue is non-empty.
Exits 0 on success (or when skipped because a run is active), 1 on failure.
"""

from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from netgrowth.db.session import SessionLocal
from netgrowth.pipeline.executor import run_stage


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate the daily outreach queue")
    parser.add_argument("--date", default=None, help="Queue date YYYY-MM-DD (default: today)")
    parser.add_argument("--max-new", type=int, default=None, help="Max new connection requests")
    parser.add_argument("--weekly-limit", type=int, default=None, help="Weekly request cap")
    args = parser.parse_args()

    try:
        queue_date = date.fromisoformat(args.date) if args.date else None
    except ValueError:
        print(f"ERROR: invalid --date {args.date!r}, expected YYYY-MM-DD", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        result = run_stage(
            db,
            job_type="queue",
            max_new_requests=args.max_new,
            weekly_limit=args.weekly_limit,
            queue_date=queue_date,
        )
        print(
            f"status={result['status']} "
            f"job_run_id={result.get('job_run_id')} "
            f"connection_requests={result.get('connection_requests', 0)} "
            f"follow_ups={result.get('follow_ups', 0)} "
            f"re_engagements={result.get('re_engagements', 0)} "
            f"carried_over={result.get('carried_over', 0)} "
            f"total={result.get('total', 0)} "
            f"flagged_for_editing={result.get('flagged_for_editing', 0)}"
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
