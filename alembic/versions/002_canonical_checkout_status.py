"""Canonical CHECKOUT status.

Revision ID: 002_canonical_checkout
Revises: 001_initial
Create Date: 2025-06-11

Early clients wrote both CHECK_OUT and CHECKOUT. Rewrites stored rows to
CHECKOUT and narrows the status check constraint to the canonical set.
"""

from typing import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers
revision: str = "002_canonical_checkout"
down_revision: str | None = "001_initial"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Rewrite CHECK_OUT rows and tighten the constraint."""
    op.drop_constraint("ck_bookings_status", "bookings", type_="check")
    op.execute(
        sa.text("UPDATE bookings SET status = 'CHECKOUT' WHERE status = 'CHECK_OUT'")
    )
    op.create_check_constraint(
        "ck_bookings_status",
        "bookings",
        "status IN ('PENDING', 'PAID', 'CHECK_IN', 'CHECKOUT', 'CANCELLED')",
    )


def downgrade() -> None:
    """Allow CHECK_OUT again; stored rows keep the canonical spelling."""
    op.drop_constraint("ck_bookings_status", "bookings", type_="check")
    op.create_check_constraint(
        "ck_bookings_status",
        "bookings",
        "status IN ('PENDING', 'PAID', 'CHECK_IN', 'CHECK_OUT', 'CHECKOUT', 'CANCELLED')",
    )
