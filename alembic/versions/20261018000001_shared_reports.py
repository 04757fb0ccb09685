"""Shared report links: public read-only tokens for single scans.

Revision ID: 20261018000001
Revises: 20261018000000
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261018000001"
down_revision: Union[str, None] = "20261018000000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "shared_reports",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("account_id", sa.String(length=255), nullable=False),
        sa.Column("scan_id", sa.Integer(), nullable=False),
        sa.Column("share_token", sa.String(length=64), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("view_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["scan_id"], ["scan_history.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_shared_reports_account_id"),
        "shared_reports",
        ["account_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_shared_reports_share_token"),
        "shared_reports",
        ["share_token"],
        unique=True,
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_shared_reports_share_token"), table_name="shared_reports")
    op.drop_index(op.f("ix_shared_reports_account_id"), table_name="shared_reports")
    op.drop_table("shared_reports")
