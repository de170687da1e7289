"""
Application configuration. Loads from environment variables.
Secrets and sensitive config must never be hardcoded.

Scoring weights and thresholds are operator-tunable and live in the
scoring_config table, not here.
"""

import os

from dotenv import load_dotenv

load_dotenv()
from functools import lru_cache


@lru_cache(maxsize=1)
def get_settings() -> "Settings":
    """Return cached settings instance."""
    return Settings()


class Settings:
    """Application settings loaded from environment."""

    # App
    app_name: str = "Network Growth Engine"
    debug: bool = False

    # Database (postgresql+psycopg for psycopg3; sqlite URLs are accepted for local/test runs)
    database_url: str = "postgresql+psycopg://localhost:5432/network_growth_engine"
    db_connect_timeout: int = 10  # seconds

    # Daily queue generation
    queue_max_new_requests: int = 20  # connection requests per day
    queue_weekly_limit: int = 100  # connection requests per Monday-anchored week

    # Job executor: a "running" JobRun older than this is treated as crashed
    job_stale_after_minutes: int = 120

    # Queue-ready notification
    queue_email_enabled: bool = False
    queue_email_to: str = ""

    # SMTP / Email
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_from: str = ""

    def __init__(self) -> None:
        self.app_name = os.getenv("APP_NAME", self.app_name)
        self.debug = os.getenv("DEBUG", "false").lower() == "true"

        default_user = os.getenv("PGUSER") or os.getenv("USER") or "postgres"
        default_url = (
            f"postgresql+psycopg://{default_user}:"
            f"{os.getenv('PGPASSWORD', '')}@"
            f"{os.getenv('PGHOST', 'localhost')}:"
            f"{os.getenv('PGPORT', '5432')}/"
            f"{os.getenv('PGDATABASE', 'network_growth_engine')}"
        )
        raw_url = os.getenv("DATABASE_URL", default_url)
        # Ensure psycopg3 driver if URL uses generic postgresql://
        if raw_url.startswith("postgresql://") and not raw_url.startswith("postgresql+psycopg"):
            raw_url = raw_url.replace("postgresql://", "postgresql+psycopg://", 1)
        self.database_url = raw_url
        self.db_connect_timeout = int(os.getenv("DB_CONNECT_TIMEOUT", str(self.db_connect_timeout)))

        self.queue_max_new_requests = int(
            os.getenv("QUEUE_MAX_NEW_REQUESTS", str(self.queue_max_new_requests))
        )
        self.queue_weekly_limit = int(
            os.getenv("QUEUE_WEEKLY_LIMIT", str(self.queue_weekly_limit))
        )
        self.job_stale_after_minutes = int(
            os.getenv("JOB_STALE_AFTER_MINUTES", str(self.job_stale_after_minutes))
        )

        self.queue_email_enabled = os.getenv("QUEUE_EMAIL_ENABLED", "false").lower() == "true"
        self.queue_email_to = os.getenv("QUEUE_EMAIL_TO", "")

        self.smtp_host = os.getenv("SMTP_HOST", "")
        self.smtp_port = int(os.getenv("SMTP_PORT", "587"))
        self.smtp_user = os.getenv("SMTP_USER", "")
        self.smtp_password = os.getenv("SMTP_PASSWORD", "")
        self.smtp_from = os.getenv("SMTP_FROM", "")

    @property
    def is_sqlite(self) -> bool:
        """True when DATABASE_URL points at SQLite (local runs and tests)."""
        return self.database_url.startswith("sqlite")
