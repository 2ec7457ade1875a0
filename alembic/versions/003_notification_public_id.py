"""Public identifier for admin notifications.

Revision ID: 003_notification_public_id
Revises: 002_canonical_checkout
Create Date: 2025-07-02

The admin feed addresses notifications by UUID like every other resource.
Existing rows get a random identifier.
"""

from typing import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers
revision: str = "003_notification_public_id"
down_revision: str | None = "002_canonical_checkout"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Add and backfill notifications.public_id."""
    op.add_column("notifications", sa.Column("public_id", sa.Uuid, nullable=True))
    op.execute(sa.text("UPDATE notifications SET public_id = gen_random_uuid()"))
    op.alter_column("notifications", "public_id", nullable=False)
    op.create_index(
        "ix_notifications_public_id", "notifications", ["public_id"], unique=True
    )


def downgrade() -> None:
    """Drop notifications.public_id."""
    op.drop_index("ix_notifications_public_id", table_name="notifications")
    op.drop_column("notifications", "public_id")
