"""landing_pages, admins, audit_logs

Revision ID: 0001_landing_pages
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_landing_pages"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "landing_pages",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("title", sa.Text(), nullable=False, server_default=""),
        sa.Column("slug", sa.String(length=50), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("meta_title", sa.Text(), nullable=False, server_default=""),
        sa.Column("meta_description", sa.String(length=160), nullable=False, server_default=""),
        sa.Column("canonical_url", sa.Text(), nullable=False, server_default=""),
        sa.Column("og_title", sa.Text(), nullable=False, server_default=""),
        sa.Column("og_description", sa.String(length=500), nullable=False, server_default=""),
        sa.Column("og_image", sa.Text(), nullable=False, server_default=""),
        sa.Column("twitter_card", sa.String(length=32), nullable=False, server_default="summary_large_image"),
        sa.Column("business_name", sa.String(length=500), nullable=False, server_default=""),
        sa.Column("business_category", sa.String(length=500), nullable=False, server_default=""),
        sa.Column("business_phone", sa.String(length=20), nullable=False, server_default=""),
        sa.Column("business_email", sa.Text(), nullable=False, server_default=""),
        sa.Column("business_website", sa.Text(), nullable=False, server_default=""),
        sa.Column("business_location", sa.String(length=500), nullable=False, server_default=""),
        sa.Column("html_content", sa.Text(), nullable=False, server_default=""),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="draft"),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("published_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("created_by", sa.String(length=128), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_by", sa.String(length=128), nullable=False),
        sa.Column("view_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_viewed_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_landing_pages_slug", "landing_pages", ["slug"], unique=True)
    op.create_index("ix_landing_pages_status", "landing_pages", ["status"])
    op.create_index("ix_landing_pages_business_category", "landing_pages", ["business_category"])
    op.create_index("ix_landing_pages_updated_at", "landing_pages", ["updated_at"])
    op.create_index("ix_landing_pages_published_at", "landing_pages", ["published_at"])

    op.create_table(
        "admins",
        sa.Column("id", sa.String(length=128), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("display_name", sa.String(length=255), nullable=True),
        sa.Column("role", sa.String(length=32), nullable=False, server_default="admin"),
        sa.Column("permissions", sa.JSON(), nullable=False),
        sa.Column("last_login_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_admins_email", "admins", ["email"], unique=True)

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("action", sa.String(length=64), nullable=False),
        sa.Column("admin_id", sa.String(length=128), nullable=False),
        sa.Column("target_type", sa.String(length=64), nullable=False),
        sa.Column("target_id", sa.String(length=128), nullable=False),
        sa.Column("changes", sa.JSON(), nullable=True),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        sa.Column("timestamp", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_audit_logs_action", "audit_logs", ["action"])
    op.create_index("ix_audit_logs_admin_id", "audit_logs", ["admin_id"])
    op.create_index("ix_audit_logs_target_id", "audit_logs", ["target_id"])
    op.create_index("ix_audit_logs_timestamp", "audit_logs", ["timestamp"])


def downgrade() -> None:
    op.drop_index("ix_audit_logs_timestamp", table_name="audit_logs")
    op.drop_index("ix_audit_logs_target_id", table_name="audit_logs")
    op.drop_index("ix_audit_logs_admin_id", table_name="audit_logs")
    op.drop_index("ix_audit_logs_action", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_index("ix_admins_email", table_name="admins")
    op.drop_table("admins")
    op.drop_index("ix_landing_pages_published_at", table_name="landing_pages")
    op.drop_index("ix_landing_pages_updated_at", table_name="landing_pages")
    op.drop_index("ix_landing_pages_business_category", table_name="landing_pages")
    op.drop_index("ix_landing_pages_status", table_name="landing_pages")
    op.drop_index("ix_landing_pages_slug", table_name="landing_pages")
    op.drop_table("landing_pages")
