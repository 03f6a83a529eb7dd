"""Audit trail writes and the admin audit listing."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from ..config import settings
from ..models import AuditLog, User
from ..schemas import AuditLogResponse


@dataclass(frozen=True)
class ClientInfo:
    """Caller details copied onto audit entries and sessions."""

    user_agent: str = ""
    ip_address: str = "0.0.0.0"


def record_audit(
    db: Session,
    *,
    actor: User,
    action: str,
    client: ClientInfo,
    project_id: str = "",
    inquiry_id: str = "",
    meta: dict[str, Any] | None = None,
) -> AuditLog:
    """Stage an audit row inside the caller's write."""
    entry = AuditLog(
        actor_user_id=actor.id,
        action_type=action,
        project_id=project_id or "",
        project_inquiry_id=inquiry_id or "",
        meta=meta or {},
        ip_address=client.ip_address or "0.0.0.0",
        user_agent=client.user_agent or "",
    )
    db.add(entry)
    return entry


def list_audit_logs_use_case(*, db: Session, limit: int | None = None) -> list[AuditLogResponse]:
    """Newest entries first, with the actor's display name."""
    rows = (
        db.query(AuditLog)
        .order_by(AuditLog.created_at.desc())
        .limit(limit or settings.AUDIT_LIST_LIMIT)
        .all()
    )
    actor_ids = {row.actor_user_id for row in rows}
    names: dict[str, str] = {}
    if actor_ids:
        names = {user.id: user.full_name for user in db.query(User).filter(User.id.in_(actor_ids)).all()}

    result = []
    for row in rows:
        view = AuditLogResponse.model_validate(row)
        view.actor_name = names.get(row.actor_user_id) or "Unknown"
        result.append(view)
    return result
