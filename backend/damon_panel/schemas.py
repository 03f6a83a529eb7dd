"""Pydantic schemas for the gateway parameters and responses."""
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import Any, Optional
from datetime import datetime


class RequestModel(BaseModel):
    """Gateway parameters: strings from the query string, JSON values from POST bodies."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


# Auth schemas
class LoginRequest(RequestModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class AdminTokenRequest(RequestModel):
    key: str = ""


class LogoutRequest(RequestModel):
    token: str = ""


class IdRequest(RequestModel):
    id: str = Field(min_length=1)


# User schemas
class UserCreate(RequestModel):
    username: str = ""
    password: str = ""
    full_name: str = ""
    role: str = Field(default="employee", pattern="^(admin|sales_manager|employee)$")


class UserResponse(BaseModel):
    id: str
    username: str
    full_name: str
    role: str
    is_active: bool
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class StaffMember(BaseModel):
    """Minimal user directory entry (safe to show to all authenticated users)."""

    id: str
    full_name: str
    username: str
    role: str
    model_config = ConfigDict(from_attributes=True)


# Catalog schemas
class CategoryCreate(RequestModel):
    category_name: str = Field(min_length=1)
    description: str = ""


class CategoryUpdate(RequestModel):
    id: str = Field(min_length=1)
    category_name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    is_active: Optional[bool] = None


class CategoryResponse(BaseModel):
    id: str
    category_name: str
    description: str
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class DeviceCreate(RequestModel):
    category_id: str = ""
    model_name: str = Field(min_length=1)
    factory_pricelist_eur: float = Field(0.0, ge=0)
    length_meter: float = Field(0.0, ge=0)
    weight_unit: float = Field(0.0, ge=0)


class DeviceUpdate(RequestModel):
    id: str = Field(min_length=1)
    category_id: Optional[str] = None
    model_name: Optional[str] = Field(None, min_length=1)
    factory_pricelist_eur: Optional[float] = Field(None, ge=0)
    length_meter: Optional[float] = Field(None, ge=0)
    weight_unit: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None


class DeviceResponse(BaseModel):
    id: str
    category_id: str
    model_name: str
    factory_pricelist_eur: float
    length_meter: float
    weight_unit: float
    is_active: bool
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class DeviceSearchRequest(RequestModel):
    query: str = ""
    category_id: str = ""


# Pricing settings schemas
class SettingsUpdate(RequestModel):
    discount_multiplier: Optional[float] = None
    freight_rate_per_meter_eur: Optional[float] = None
    customs_numerator: Optional[float] = None
    customs_denominator: Optional[float] = None
    warranty_rate: Optional[float] = None
    commission_factor: Optional[float] = None
    office_factor: Optional[float] = None
    profit_factor: Optional[float] = None
    rounding_mode: Optional[str] = Field(None, pattern="^(none|round|ceil|floor)$")
    rounding_step: Optional[float] = Field(None, ge=0)
    exchange_rate_irr_per_eur: Optional[float] = Field(None, ge=0)


# Project schemas
class ProjectCreate(RequestModel):
    project_name: str = Field(min_length=1)
    employer_name: str = ""
    project_type: str = ""
    assigned_sales_manager_id: str = ""
    address_text: str = ""
    lat: Optional[float] = Field(None, validation_alias=AliasChoices("lat", "tehran_lat"))
    lng: Optional[float] = Field(None, validation_alias=AliasChoices("lng", "tehran_lng"))
    additional_info: str = ""


class ProjectDecision(RequestModel):
    project_id: str = Field(min_length=1)
    note: str = ""


class ProjectResponse(BaseModel):
    id: str
    created_by_user_id: str
    assigned_sales_manager_id: str
    project_name: str
    employer_name: str
    project_type: str
    address_text: str
    lat: Optional[float] = None
    lng: Optional[float] = None
    additional_info: str
    status: str
    inquiry_status: str
    approval_decision_by: Optional[str] = None
    approval_decision_at: Optional[datetime] = None
    approval_note: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class StatusHistoryResponse(BaseModel):
    id: str
    project_id: str
    changed_by_user_id: str
    from_status: str
    to_status: str
    note: Optional[str] = None
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class CommentCreate(RequestModel):
    project_id: str = Field(min_length=1)
    body: str = Field(min_length=1)
    parent_comment_id: str = ""


class CommentResponse(BaseModel):
    id: str
    project_id: str
    author_user_id: str
    author_role_snapshot: str
    body: str
    parent_comment_id: str
    created_at: Optional[datetime] = None
    author_name: str = "Unknown"
    model_config = ConfigDict(from_attributes=True)


# Inquiry schemas
class InquiryQuoteRequest(RequestModel):
    project_id: str = Field(min_length=1)
    device_id: str = Field(min_length=1)
    # Normalized by the pricing rules (below 1 or unparsable -> 1).
    quantity: Any = 1
    query_text: str = Field("", validation_alias=AliasChoices("query_text", "title"))
    description: str = ""


class InquiryDecision(RequestModel):
    inquiry_id: str = Field(min_length=1)
    reason: str = Field("", validation_alias=AliasChoices("reason", "rejection_reason"))


class InquiryListRequest(RequestModel):
    status_filter: str = ""


class InquiryView(BaseModel):
    """Inquiry joined with its project, requester and device; prices masked per viewer."""

    id: str
    project_id: str
    requested_by_user_id: str
    device_id: str
    category_id: str
    quantity: int
    title: str
    description: str
    currency: str
    status: str
    reviewed_by_user_id: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    query_text_snapshot: str
    settings_id_snapshot: str
    created_at: Optional[datetime] = None
    project_name: str = "Unknown Project"
    employer_name: str = ""
    requested_by_name: str = "Unknown User"
    model_name: str = "Unknown Device"
    unit_price_eur: Optional[float] = None
    total_price_eur: Optional[float] = None
    sell_price_eur_snapshot: Optional[float] = None
    price_visible: bool = False


class InquiryStats(BaseModel):
    total: int
    pending: int
    approved: int
    rejected: int


# Notifications / audit
class NotificationResponse(BaseModel):
    id: str
    type: str
    target_user_id: str
    related_project_id: str
    related_inquiry_id: str
    message: str
    is_read: bool
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class AuditLogResponse(BaseModel):
    id: str
    actor_user_id: str
    actor_name: str = "Unknown"
    action_type: str
    project_id: str
    project_inquiry_id: str
    meta: dict[str, Any] = Field(default_factory=dict)
    ip_address: str
    user_agent: str
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)
