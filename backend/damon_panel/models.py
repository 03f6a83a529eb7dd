"""SQLAlchemy models, one table per sheet.

Rows reference each other by plain id columns; lookups happen at read time.
"""
from sqlalchemy import (
    Boolean, Column, String, Integer, Float, DateTime, Text, JSON,
    CheckConstraint, Index,
)
import uuid
from datetime import datetime, timezone
from .database import Base


USER_ROLES = ("admin", "sales_manager", "employee")
PROJECT_STATUSES = ("draft", "pending_approval", "approved", "rejected")
INQUIRY_STATUSES = ("pending", "approved", "rejected")
ROUNDING_MODES = ("none", "round", "ceil", "floor")


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """Staff member."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    username = Column(String(100), unique=True, nullable=False, index=True)
    full_name = Column(String(255), nullable=False, default="")
    role = Column(String(50), nullable=False, default="employee", index=True)
    # Empty for bcrypt hashes; set for rows hashed as sha256(salt + password).
    password_salt = Column(String(64), nullable=False, default="")
    password_hash = Column(String(255), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)

    __table_args__ = (
        CheckConstraint(role.in_(USER_ROLES), name="chk_user_role"),
    )


class AuthSession(Base):
    """Opaque login token."""
    __tablename__ = "sessions"

    id = Column(String(36), primary_key=True, default=new_id)
    token = Column(String(64), unique=True, nullable=False, index=True)
    user_id = Column(String(36), nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(String(512), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)


class Project(Base):
    """Customer project."""
    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=new_id)
    created_by_user_id = Column(String(36), nullable=False, index=True)
    # A user id, or a free-text manager name from older rows.
    assigned_sales_manager_id = Column(String(255), nullable=False, default="")
    project_name = Column(String(255), nullable=False)
    employer_name = Column(String(255), nullable=False, default="")
    project_type = Column(String(100), nullable=False, default="")
    address_text = Column(Text, nullable=False, default="")
    lat = Column(Float, nullable=True)
    lng = Column(Float, nullable=True)
    additional_info = Column(Text, nullable=False, default="")
    status = Column(String(30), nullable=False, default="pending_approval", index=True)
    inquiry_status = Column(String(30), nullable=False, default="")
    approval_decision_by = Column(String(36), nullable=True)
    approval_decision_at = Column(DateTime(timezone=True), nullable=True)
    approval_note = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    __table_args__ = (
        CheckConstraint(status.in_(PROJECT_STATUSES), name="chk_project_status"),
    )


class ProjectStatusHistory(Base):
    """Append-only project status transitions."""
    __tablename__ = "project_status_history"

    id = Column(String(36), primary_key=True, default=new_id)
    project_id = Column(String(36), nullable=False, index=True)
    changed_by_user_id = Column(String(36), nullable=False)
    from_status = Column(String(30), nullable=False)
    to_status = Column(String(30), nullable=False)
    note = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)


class ProjectComment(Base):
    """Comment on a project."""
    __tablename__ = "project_comments"

    id = Column(String(36), primary_key=True, default=new_id)
    project_id = Column(String(36), nullable=False, index=True)
    author_user_id = Column(String(36), nullable=False)
    author_role_snapshot = Column(String(50), nullable=False, default="")
    body = Column(Text, nullable=False)
    parent_comment_id = Column(String(36), nullable=False, default="")
    created_at = Column(DateTime(timezone=True), default=utc_now)


class Category(Base):
    """Equipment category."""
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=new_id)
    category_name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)


class Device(Base):
    """Priced device model."""
    __tablename__ = "devices"

    id = Column(String(36), primary_key=True, default=new_id)
    category_id = Column(String(36), nullable=False, default="", index=True)
    model_name = Column(String(255), nullable=False)
    factory_pricelist_eur = Column(Float, nullable=False, default=0.0)
    length_meter = Column(Float, nullable=False, default=0.0)
    weight_unit = Column(Float, nullable=False, default=0.0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)


class PricingSettings(Base):
    """One version of the pricing coefficients; the newest row is current."""
    __tablename__ = "settings"

    id = Column(String(36), primary_key=True, default=new_id)
    discount_multiplier = Column(Float, nullable=False)
    freight_rate_per_meter_eur = Column(Float, nullable=False)
    customs_numerator = Column(Float, nullable=False)
    customs_denominator = Column(Float, nullable=False)
    warranty_rate = Column(Float, nullable=False)
    commission_factor = Column(Float, nullable=False)
    office_factor = Column(Float, nullable=False)
    profit_factor = Column(Float, nullable=False)
    rounding_mode = Column(String(10), nullable=False, default="none")
    rounding_step = Column(Float, nullable=False, default=0.0)
    exchange_rate_irr_per_eur = Column(Float, nullable=False, default=0.0)
    created_by_user_id = Column(String(36), nullable=True)
    # Monotonic version; "latest" is the highest value.
    version = Column(Integer, nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)

    __table_args__ = (
        CheckConstraint(rounding_mode.in_(ROUNDING_MODES), name="chk_settings_rounding_mode"),
    )


class ProjectInquiry(Base):
    """Device price quote requested on a project."""
    __tablename__ = "project_inquiries"

    id = Column(String(36), primary_key=True, default=new_id)
    project_id = Column(String(36), nullable=False, index=True)
    requested_by_user_id = Column(String(36), nullable=False, index=True)
    device_id = Column(String(36), nullable=False)
    category_id = Column(String(36), nullable=False, default="")
    quantity = Column(Integer, nullable=False, default=1)
    title = Column(String(255), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    unit_price_eur = Column(Float, nullable=False)
    total_price_eur = Column(Float, nullable=False)
    currency = Column(String(3), nullable=False, default="EUR")
    status = Column(String(20), nullable=False, default="pending", index=True)
    reviewed_by_user_id = Column(String(36), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    rejection_reason = Column(Text, nullable=True)
    query_text_snapshot = Column(String(255), nullable=False, default="")
    settings_id_snapshot = Column(String(36), nullable=False, default="")
    created_at = Column(DateTime(timezone=True), default=utc_now)

    __table_args__ = (
        CheckConstraint(status.in_(INQUIRY_STATUSES), name="chk_inquiry_status"),
        CheckConstraint(quantity >= 1, name="chk_inquiry_quantity_positive"),
    )


class InquiryPriceSnapshot(Base):
    """Price captured when the quote was computed. Never updated."""
    __tablename__ = "inquiry_prices_snapshot"

    id = Column(String(36), primary_key=True, default=new_id)
    project_inquiry_id = Column(String(36), nullable=False, unique=True, index=True)
    sell_price_eur_snapshot = Column(Float, nullable=False)
    sell_price_irr_snapshot = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime(timezone=True), default=utc_now)


class AuditLog(Base):
    """Audit trail entry."""
    __tablename__ = "audit_logs"

    id = Column(String(36), primary_key=True, default=new_id)
    actor_user_id = Column(String(36), nullable=False, index=True)
    action_type = Column(String(50), nullable=False, index=True)
    project_id = Column(String(36), nullable=False, default="")
    project_inquiry_id = Column(String(36), nullable=False, default="")
    meta = Column(JSON, nullable=False, default=dict)
    ip_address = Column(String(64), nullable=False, default="0.0.0.0")
    user_agent = Column(String(512), nullable=False, default="")
    created_at = Column(DateTime(timezone=True), default=utc_now, index=True)


class Notification(Base):
    """In-app notification for one user."""
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=new_id)
    type = Column(String(40), nullable=False)
    target_user_id = Column(String(36), nullable=False)
    related_project_id = Column(String(36), nullable=False, default="")
    related_inquiry_id = Column(String(36), nullable=False, default="")
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utc_now)

    __table_args__ = (
        CheckConstraint(
            type.in_(["INQUIRY_CREATED", "INQUIRY_STATUS_CHANGED", "PROJECT_STATUS_CHANGED"]),
            name="chk_notification_type",
        ),
        Index("idx_notifications_target_unread", "target_user_id", "is_read"),
    )
