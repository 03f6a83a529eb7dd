"""Security helpers (role checks and row visibility)."""

from __future__ import annotations

from typing import Any

from .auth import check_permission
from .domain_errors import forbidden
from .models import ProjectInquiry, User


def require_permission(user: User, permission: str) -> None:
    """Enforce a role permission server-side."""
    if not check_permission(user, permission):
        raise forbidden(f"Permission denied: {permission} required")


def is_assigned_manager(project: Any, user: User) -> bool:
    """Match the assigned manager by user id, or by name for free-text rows."""
    assigned = str(project.assigned_sales_manager_id or "").strip()
    if not assigned:
        return False
    if assigned == str(user.id):
        return True
    full_name = (user.full_name or "").strip().lower()
    return bool(full_name) and full_name in assigned.lower()


def can_view_project(user: User, project: Any) -> bool:
    """Project visibility: employees see what they created or manage; other roles see all."""
    if check_permission(user, "canViewAllProjects"):
        return True
    if str(project.created_by_user_id) == str(user.id):
        return True
    return is_assigned_manager(project, user)


def can_view_inquiry_price(user: User, inquiry: ProjectInquiry) -> bool:
    """Reviewers always see prices; the requester only after approval."""
    if check_permission(user, "canViewAllPrices"):
        return True
    status = str(inquiry.status or "").strip().lower()
    return status == "approved" and str(inquiry.requested_by_user_id) == str(user.id)
