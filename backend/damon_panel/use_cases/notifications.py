"""In-app notifications."""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from ..config import settings
from ..database import locked_write
from ..domain_errors import not_found
from ..models import Notification, User
from ..schemas import NotificationResponse

logger = logging.getLogger(__name__)


def get_super_admin(db: Session) -> User | None:
    """The account that receives new-inquiry notifications."""
    admin = (
        db.query(User)
        .filter(User.role == "admin", User.is_active.is_(True))
        .order_by(User.created_at)
        .first()
    )
    if admin is not None:
        return admin
    return db.query(User).filter(User.username == settings.BOOTSTRAP_ADMIN_USERNAME).first()


def queue_notification(
    db: Session,
    *,
    type: str,
    target_user_id: str,
    message: str,
    project_id: str = "",
    inquiry_id: str = "",
) -> Notification:
    """Stage a notification inside the caller's write."""
    notification = Notification(
        type=type,
        target_user_id=target_user_id,
        related_project_id=project_id or "",
        related_inquiry_id=inquiry_id or "",
        message=message,
        is_read=False,
    )
    db.add(notification)
    logger.info("Notification %s queued for user %s", type, target_user_id)
    return notification


def list_notifications_use_case(*, db: Session, current_user: User) -> list[NotificationResponse]:
    rows = (
        db.query(Notification)
        .filter(Notification.target_user_id == current_user.id)
        .order_by(Notification.created_at.desc())
        .limit(settings.NOTIFICATION_LIST_LIMIT)
        .all()
    )
    return [NotificationResponse.model_validate(row) for row in rows]


def mark_notification_read_use_case(*, db: Session, notification_id: str, current_user: User) -> Notification:
    notification = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.target_user_id == current_user.id,
    ).first()
    if not notification:
        raise not_found("Notification not found")

    # Idempotent.
    if notification.is_read:
        return notification

    with locked_write(db):
        notification.is_read = True
    return notification
