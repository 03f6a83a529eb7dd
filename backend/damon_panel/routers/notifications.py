"""Notification paths (own notifications only)."""
from ..routing import PathRouter, RequestContext
from ..schemas import IdRequest
from ..use_cases.notifications import list_notifications_use_case, mark_notification_read_use_case

router = PathRouter(prefix="/notifications")


@router.path("/list")
def list_notifications(ctx: RequestContext):
    return list_notifications_use_case(db=ctx.db, current_user=ctx.actor)


@router.path("/mark_read")
def mark_read(ctx: RequestContext):
    payload = ctx.parse(IdRequest)
    mark_notification_read_use_case(db=ctx.db, notification_id=payload.id, current_user=ctx.actor)
    return {"updated": True}
