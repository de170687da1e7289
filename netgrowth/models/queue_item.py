"""QueueItem model: one outreach action for a contact on a given day."""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from netgrowth.db.session import Base

if TYPE_CHECKING:
    from netgrowth.models.contact import Contact
    from netgrowth.models.template import Template


class QueueItem(Base):
    """Daily queue entry (connection_request, follow_up or re_engagement)."""

    __tablename__ = "queue_items"

    __table_args__ = (
        Index("ix_queue_items_date_status", "queue_date", "status"),
        Index("ix_queue_items_contact_status", "contact_id", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    contact_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("contacts.id", ondelete="CASCADE"), nullable=False
    )
    queue_date: Mapped[date] = mapped_column(Date, nullable=False)
    action_type: Mapped[str] = mapped_column(String(32), nullable=False)
    template_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("templates.id", ondelete="SET NULL"), nullable=True
    )
    personalized_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(32), default="pending", nullable=False)
    snooze_until: Mapped[date | None] = mapped_column(Date, nullable=True)
    # original queue_date when moved forward by carry-over
    carried_from: Mapped[date | None] = mapped_column(Date, nullable=True)
    executed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    result: Mapped[str | None] = mapped_column(String(32), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

    contact: Mapped[Contact] = relationship("Contact", back_populates="queue_items")
    template: Mapped[Template | None] = relationship("Template")
