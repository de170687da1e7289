"""ScoringConfigEntry model."""

from datetime import UTC, datetime

from sqlalchemy import DateTime, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from netgrowth.db.session import Base


class ScoringConfigEntry(Base):
    """Keyed numeric tunable (relationship_weight, priority_weight, status_threshold, general)."""

    __tablename__ = "scoring_config"

    __table_args__ = (
        UniqueConstraint("config_type", "key", name="uq_scoring_config_type_key"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    config_type: Mapped[str] = mapped_column(String(32), nullable=False)
    key: Mapped[str] = mapped_column(String(100), nullable=False)
    value: Mapped[float] = mapped_column(Numeric(7, 2, asdecimal=False), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )
