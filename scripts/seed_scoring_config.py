#!/usr/bin/env python3
"""Seed default scoring config and categories.

Usage:
    python scripts/seed_scoring_config.py

Existing rows are left untouched, so re-running is safe.
Exits 0 on success, 1 on failure.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from netgrowth.db.session import SessionLocal
from netgrowth.services.scoring.config_loader import seed_default_scoring_config


def main() -> int:
    db = SessionLocal()
    try:
        counts = seed_default_scoring_config(db)
        print(f"config_inserted={counts['config']} categories_inserted={counts['categories']}")
        return 0
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
