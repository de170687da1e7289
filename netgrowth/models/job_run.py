"""JobRun model."""

from datetime import UTC, datetime

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from netgrowth.db.session import Base


class JobRun(Base):
    """Audit record for batch jobs (score, priority, queue)."""

    __tablename__ = "job_runs"

    __table_args__ = (
        Index("ix_job_runs_idempotency_key_job_type", "idempotency_key", "job_type"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    job_type: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False)
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
    finished_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    contacts_processed: Mapped[int | None] = mapped_column(Integer, nullable=True)
    contacts_updated: Mapped[int | None] = mapped_column(Integer, nullable=True)
    transitions: Mapped[int | None] = mapped_column(Integer, nullable=True)  # score jobs only
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    idempotency_key: Mapped[str | None] = mapped_column(String(255), nullable=True)
