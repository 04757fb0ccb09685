"""Initial schema: API keys, usage, policies, suppressions, scan history, baselines.

Revision ID: 20261018000000
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20261018000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "api_keys",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("account_id", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("key_hash", sa.String(length=64), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_used_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_api_keys_account_id"), "api_keys", ["account_id"], unique=False)
    op.create_index(op.f("ix_api_keys_key_hash"), "api_keys", ["key_hash"], unique=True)

    op.create_table(
        "usage_tracking",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("account_id", sa.String(length=255), nullable=False),
        sa.Column("subscription_tier", sa.String(length=32), nullable=False, server_default="free"),
        sa.Column("scans_this_month", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("scans_limit", sa.Integer(), nullable=False, server_default="10"),
        sa.Column(
            "billing_period_start",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("scans_this_month >= 0", name="ck_usage_tracking_scans_nonnegative"),
    )
    op.create_index(
        op.f("ix_usage_tracking_account_id"),
        "usage_tracking",
        ["account_id"],
        unique=True,
    )

    op.create_table(
        "security_policies",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("account_id", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False, server_default="Default Policy"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("max_critical", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("max_high", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("max_medium", sa.Integer(), nullable=False, server_default="5"),
        sa.Column("max_low", sa.Integer(), nullable=True),
        sa.Column(
            "ignore_paths",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_security_policies_account_id"),
        "security_policies",
        ["account_id"],
        unique=False,
    )

    op.create_table(
        "suppression_rules",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("account_id", sa.String(length=255), nullable=False),
        sa.Column("issue_type", sa.String(length=32), nullable=False),
        sa.Column("issue_title", sa.String(length=512), nullable=True),
        sa.Column("scope", sa.String(length=16), nullable=False, server_default="global"),
        sa.Column("file_path", sa.String(length=2048), nullable=True),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_suppression_rules_account_id"),
        "suppression_rules",
        ["account_id"],
        unique=False,
    )

    op.create_table(
        "scan_history",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("account_id", sa.String(length=255), nullable=False),
        sa.Column("code_hash", sa.String(length=64), nullable=False),
        sa.Column("language", sa.String(length=64), nullable=False),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("issues_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("critical_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("high_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("medium_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("low_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "issues",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("static_checks", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("fixed_code", sa.Text(), nullable=True),
        sa.Column(
            "fingerprints",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("previous_scan_id", sa.Integer(), nullable=True),
        sa.Column("new_issues_count", sa.Integer(), nullable=True),
        sa.Column("fixed_issues_count", sa.Integer(), nullable=True),
        sa.Column("policy_id", sa.Integer(), nullable=True),
        sa.Column("policy_passed", sa.Boolean(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(
            ["previous_scan_id"],
            ["scan_history.id"],
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_scan_history_account_id"),
        "scan_history",
        ["account_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_scan_history_created_at"),
        "scan_history",
        ["created_at"],
        unique=False,
    )

    op.create_table(
        "scan_baselines",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("account_id", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False, server_default="Baseline"),
        sa.Column("baseline_scan_id", sa.Integer(), nullable=True),
        sa.Column(
            "fingerprints",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _created_at(),
        sa.ForeignKeyConstraint(
            ["baseline_scan_id"],
            ["scan_history.id"],
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_scan_baselines_account_id"),
        "scan_baselines",
        ["account_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_scan_baselines_account_id"), table_name="scan_baselines")
    op.drop_table("scan_baselines")
    op.drop_index(op.f("ix_scan_history_created_at"), table_name="scan_history")
    op.drop_index(op.f("ix_scan_history_account_id"), table_name="scan_history")
    op.drop_table("scan_history")
    op.drop_index(op.f("ix_suppression_rules_account_id"), table_name="suppression_rules")
    op.drop_table("suppression_rules")
    op.drop_index(op.f("ix_security_policies_account_id"), table_name="security_policies")
    op.drop_table("security_policies")
    op.drop_index(op.f("ix_usage_tracking_account_id"), table_name="usage_tracking")
    op.drop_table("usage_tracking")
    op.drop_index(op.f("ix_api_keys_key_hash"), table_name="api_keys")
    op.drop_index(op.f("ix_api_keys_account_id"), table_name="api_keys")
    op.drop_table("api_keys")
