"""
Centralized test credentials and fixed test clock.

Test-only credentials are loaded from environment variables when available,
with clearly non-production placeholders as fallbacks.
"""

from __future__ import annotations

import os
from datetime import UTC, date, datetime

# SMTP (email service tests)
TEST_SMTP_PASSWORD = os.environ.get("TEST_SMTP_PASSWORD") or "x"

# Fixed clock: Wednesday, so the Monday-anchored week started two days earlier
TEST_NOW = datetime(2026, 3, 4, 12, 0, tzinfo=UTC)
TEST_TODAY = date(2026, 3, 4)
TEST_WEEK_START = date(2026, 3, 2)
