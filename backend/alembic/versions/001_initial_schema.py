"""initial schema: one table per sheet

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def _id() -> sa.Column:
    return sa.Column("id", sa.String(length=36), primary_key=True, nullable=False)


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), nullable=True)


def upgrade() -> None:
    op.create_table(
        "users",
        _id(),
        sa.Column("username", sa.String(length=100), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=50), nullable=False),
        sa.Column("password_salt", sa.String(length=64), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        _created_at(),
        sa.CheckConstraint("role IN ('admin', 'sales_manager', 'employee')", name="chk_user_role"),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])

    op.create_table(
        "sessions",
        _id(),
        sa.Column("token", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        sa.Column("user_agent", sa.String(length=512), nullable=True),
        _created_at(),
    )
    op.create_index("ix_sessions_token", "sessions", ["token"], unique=True)
    op.create_index("ix_sessions_user_id", "sessions", ["user_id"])

    op.create_table(
        "projects",
        _id(),
        sa.Column("created_by_user_id", sa.String(length=36), nullable=False),
        sa.Column("assigned_sales_manager_id", sa.String(length=255), nullable=False),
        sa.Column("project_name", sa.String(length=255), nullable=False),
        sa.Column("employer_name", sa.String(length=255), nullable=False),
        sa.Column("project_type", sa.String(length=100), nullable=False),
        sa.Column("address_text", sa.Text(), nullable=False),
        sa.Column("lat", sa.Float(), nullable=True),
        sa.Column("lng", sa.Float(), nullable=True),
        sa.Column("additional_info", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=30), nullable=False),
        sa.Column("inquiry_status", sa.String(length=30), nullable=False),
        sa.Column("approval_decision_by", sa.String(length=36), nullable=True),
        sa.Column("approval_decision_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("approval_note", sa.Text(), nullable=True),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "status IN ('draft', 'pending_approval', 'approved', 'rejected')",
            name="chk_project_status",
        ),
    )
    op.create_index("ix_projects_created_by_user_id", "projects", ["created_by_user_id"])
    op.create_index("ix_projects_status", "projects", ["status"])

    op.create_table(
        "project_status_history",
        _id(),
        sa.Column("project_id", sa.String(length=36), nullable=False),
        sa.Column("changed_by_user_id", sa.String(length=36), nullable=False),
        sa.Column("from_status", sa.String(length=30), nullable=False),
        sa.Column("to_status", sa.String(length=30), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_index("ix_project_status_history_project_id", "project_status_history", ["project_id"])

    op.create_table(
        "project_comments",
        _id(),
        sa.Column("project_id", sa.String(length=36), nullable=False),
        sa.Column("author_user_id", sa.String(length=36), nullable=False),
        sa.Column("author_role_snapshot", sa.String(length=50), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("parent_comment_id", sa.String(length=36), nullable=False),
        _created_at(),
    )
    op.create_index("ix_project_comments_project_id", "project_comments", ["project_id"])

    op.create_table(
        "categories",
        _id(),
        sa.Column("category_name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "devices",
        _id(),
        sa.Column("category_id", sa.String(length=36), nullable=False),
        sa.Column("model_name", sa.String(length=255), nullable=False),
        sa.Column("factory_pricelist_eur", sa.Float(), nullable=False),
        sa.Column("length_meter", sa.Float(), nullable=False),
        sa.Column("weight_unit", sa.Float(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        _created_at(),
    )
    op.create_index("ix_devices_category_id", "devices", ["category_id"])

    op.create_table(
        "settings",
        _id(),
        sa.Column("discount_multiplier", sa.Float(), nullable=False),
        sa.Column("freight_rate_per_meter_eur", sa.Float(), nullable=False),
        sa.Column("customs_numerator", sa.Float(), nullable=False),
        sa.Column("customs_denominator", sa.Float(), nullable=False),
        sa.Column("warranty_rate", sa.Float(), nullable=False),
        sa.Column("commission_factor", sa.Float(), nullable=False),
        sa.Column("office_factor", sa.Float(), nullable=False),
        sa.Column("profit_factor", sa.Float(), nullable=False),
        sa.Column("rounding_mode", sa.String(length=10), nullable=False),
        sa.Column("rounding_step", sa.Float(), nullable=False),
        sa.Column("exchange_rate_irr_per_eur", sa.Float(), nullable=False),
        sa.Column("created_by_user_id", sa.String(length=36), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
        _created_at(),
        sa.CheckConstraint(
            "rounding_mode IN ('none', 'round', 'ceil', 'floor')",
            name="chk_settings_rounding_mode",
        ),
        sa.UniqueConstraint("version", name="uq_settings_version"),
    )

    op.create_table(
        "project_inquiries",
        _id(),
        sa.Column("project_id", sa.String(length=36), nullable=False),
        sa.Column("requested_by_user_id", sa.String(length=36), nullable=False),
        sa.Column("device_id", sa.String(length=36), nullable=False),
        sa.Column("category_id", sa.String(length=36), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("unit_price_eur", sa.Float(), nullable=False),
        sa.Column("total_price_eur", sa.Float(), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("reviewed_by_user_id", sa.String(length=36), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("query_text_snapshot", sa.String(length=255), nullable=False),
        sa.Column("settings_id_snapshot", sa.String(length=36), nullable=False),
        _created_at(),
        sa.CheckConstraint("status IN ('pending', 'approved', 'rejected')", name="chk_inquiry_status"),
        sa.CheckConstraint("quantity >= 1", name="chk_inquiry_quantity_positive"),
    )
    op.create_index("ix_project_inquiries_project_id", "project_inquiries", ["project_id"])
    op.create_index("ix_project_inquiries_requested_by_user_id", "project_inquiries", ["requested_by_user_id"])
    op.create_index("ix_project_inquiries_status", "project_inquiries", ["status"])

    op.create_table(
        "inquiry_prices_snapshot",
        _id(),
        sa.Column("project_inquiry_id", sa.String(length=36), nullable=False),
        sa.Column("sell_price_eur_snapshot", sa.Float(), nullable=False),
        sa.Column("sell_price_irr_snapshot", sa.Float(), nullable=False),
        _created_at(),
    )
    op.create_index(
        "ix_inquiry_prices_snapshot_project_inquiry_id",
        "inquiry_prices_snapshot",
        ["project_inquiry_id"],
        unique=True,
    )

    op.create_table(
        "audit_logs",
        _id(),
        sa.Column("actor_user_id", sa.String(length=36), nullable=False),
        sa.Column("action_type", sa.String(length=50), nullable=False),
        sa.Column("project_id", sa.String(length=36), nullable=False),
        sa.Column("project_inquiry_id", sa.String(length=36), nullable=False),
        sa.Column("meta", sa.JSON(), nullable=False),
        sa.Column("ip_address", sa.String(length=64), nullable=False),
        sa.Column("user_agent", sa.String(length=512), nullable=False),
        _created_at(),
    )
    op.create_index("ix_audit_logs_actor_user_id", "audit_logs", ["actor_user_id"])
    op.create_index("ix_audit_logs_action_type", "audit_logs", ["action_type"])
    op.create_index("ix_audit_logs_created_at", "audit_logs", ["created_at"])

    op.create_table(
        "notifications",
        _id(),
        sa.Column("type", sa.String(length=40), nullable=False),
        sa.Column("target_user_id", sa.String(length=36), nullable=False),
        sa.Column("related_project_id", sa.String(length=36), nullable=False),
        sa.Column("related_inquiry_id", sa.String(length=36), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        _created_at(),
        sa.CheckConstraint(
            "type IN ('INQUIRY_CREATED', 'INQUIRY_STATUS_CHANGED', 'PROJECT_STATUS_CHANGED')",
            name="chk_notification_type",
        ),
    )
    op.create_index("idx_notifications_target_unread", "notifications", ["target_user_id", "is_read"])


def downgrade() -> None:
    for table in (
        "notifications",
        "audit_logs",
        "inquiry_prices_snapshot",
        "project_inquiries",
        "settings",
        "devices",
        "categories",
        "project_comments",
        "project_status_history",
        "projects",
        "sessions",
        "users",
    ):
        op.drop_table(table)
