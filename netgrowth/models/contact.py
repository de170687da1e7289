"""Contact model."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from netgrowth.db.session import Base
from netgrowth.models.category import contact_categories

if TYPE_CHECKING:
    from netgrowth.models.category import Category
    from netgrowth.models.interaction import Interaction
    from netgrowth.models.queue_item import QueueItem
    from netgrowth.models.score_history import ScoreHistory
    from netgrowth.models.status_history import StatusHistory


class Contact(Base):
    """Professional contact tracked through the relationship lifecycle."""

    __tablename__ = "contacts"

    __table_args__ = (
        Index("ix_contacts_status_priority_score", "status", "priority_score"),
        Index("ix_contacts_deleted_at", "deleted_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    title: Mapped[str | None] = mapped_column(String(200), nullable=True)
    company: Mapped[str | None] = mapped_column(String(200), nullable=True)
    linkedin_url: Mapped[str | None] = mapped_column(String(500), unique=True, nullable=True)
    email: Mapped[str | None] = mapped_column(String(200), nullable=True)
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    headline: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(32), default="target", nullable=False, index=True)
    seniority: Mapped[str | None] = mapped_column(String(32), nullable=True)
    relationship_score: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    priority_score: Mapped[float | None] = mapped_column(
        Numeric(5, 2, asdecimal=False), nullable=True
    )
    introduction_source: Mapped[str | None] = mapped_column(String(200), nullable=True)
    mutual_connections_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active_on_linkedin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    has_open_to_connect: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    last_interaction_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    categories: Mapped[list[Category]] = relationship(
        "Category", secondary=contact_categories, back_populates="contacts"
    )
    interactions: Mapped[list[Interaction]] = relationship(
        "Interaction", back_populates="contact", cascade="all, delete-orphan"
    )
    score_history: Mapped[list[ScoreHistory]] = relationship(
        "ScoreHistory", back_populates="contact", cascade="all, delete-orphan"
    )
    status_history: Mapped[list[StatusHistory]] = relationship(
        "StatusHistory", back_populates="contact", cascade="all, delete-orphan"
    )
    queue_items: Mapped[list[QueueItem]] = relationship(
        "QueueItem", back_populates="contact", cascade="all, delete-orphan"
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
