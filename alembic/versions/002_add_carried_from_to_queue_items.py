"""add carried_from to queue_items

Revision ID: 002
Revises: 001
Create Date: 2026-03-06

Original queue date of an item moved forward by carry-over. Carried items
keep consuming the day's new-request budget on same-day re-runs.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column(
        "queue_items",
        sa.Column("carried_from", sa.Date(), nullable=True),
    )


def downgrade() -> None:
    op.drop_column("queue_items", "carried_from")
