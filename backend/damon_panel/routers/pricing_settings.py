"""Pricing settings paths."""
from ..routing import PathRouter, RequestContext
from ..schemas import SettingsUpdate
from ..use_cases.pricing_settings import get_settings_use_case, settings_view, update_settings_use_case

router = PathRouter(prefix="/admin/settings")


@router.path("/get", permission="canManageSettings")
def get_settings(ctx: RequestContext):
    return get_settings_use_case(db=ctx.db)


@router.path("/update", permission="canManageSettings")
def update_settings(ctx: RequestContext):
    """Append a new settings version."""
    row = update_settings_use_case(
        db=ctx.db, payload=ctx.parse(SettingsUpdate), current_user=ctx.actor, client=ctx.client
    )
    return {"updated": True, "settings": settings_view(row)}
