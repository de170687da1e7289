"""ScoreHistory model: daily score snapshots per contact."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Date, ForeignKey, Index, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from netgrowth.db.session import Base

if TYPE_CHECKING:
    from netgrowth.models.contact import Contact


class ScoreHistory(Base):
    """Daily snapshot of a contact score; time series for demotion and re-engagement."""

    __tablename__ = "score_history"

    __table_args__ = (
        UniqueConstraint(
            "contact_id", "score_type", "recorded_at", name="uq_score_history_contact_type_date"
        ),
        Index("ix_score_history_contact_recorded", "contact_id", "recorded_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    contact_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("contacts.id", ondelete="CASCADE"), nullable=False
    )
    score_type: Mapped[str] = mapped_column(String(32), nullable=False)
    score_value: Mapped[float] = mapped_column(Numeric(7, 2, asdecimal=False), nullable=False)
    recorded_at: Mapped[date] = mapped_column(Date, nullable=False)

    contact: Mapped[Contact] = relationship("Contact", back_populates="score_history")
