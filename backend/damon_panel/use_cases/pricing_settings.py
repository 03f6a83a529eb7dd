"""Versioned pricing coefficients. Updates append; the newest version wins."""
from __future__ import annotations

from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..database import locked_write
from ..domain_errors import validation_error
from ..models import PricingSettings, User
from ..schemas import SettingsUpdate
from ..services.pricing import coefficients_from
from .audit import ClientInfo, record_audit


def get_current_settings(db: Session) -> PricingSettings | None:
    return db.query(PricingSettings).order_by(PricingSettings.version.desc()).first()


def settings_view(row: PricingSettings | None) -> dict[str, Any]:
    """Coefficients of a version (defaults when there is none yet)."""
    view: dict[str, Any] = coefficients_from(row).as_dict()
    view.update(
        {
            "id": row.id if row else None,
            "version": row.version if row else 0,
            "created_at": row.created_at if row else None,
            "created_by_user_id": row.created_by_user_id if row else None,
        }
    )
    return view


def get_settings_use_case(*, db: Session) -> dict[str, Any]:
    return settings_view(get_current_settings(db))


def update_settings_use_case(
    *,
    db: Session,
    payload: SettingsUpdate,
    current_user: User,
    client: ClientInfo,
) -> PricingSettings:
    """Append a new version; fields not given carry over from the current one."""
    changes = payload.model_dump(exclude_none=True)
    if not changes:
        raise validation_error("No settings fields provided")

    with locked_write(db):
        current = get_current_settings(db)
        values = coefficients_from(current).as_dict()
        values.update(changes)
        next_version = (db.query(func.max(PricingSettings.version)).scalar() or 0) + 1
        row = PricingSettings(**values, version=next_version, created_by_user_id=current_user.id)
        db.add(row)
        record_audit(
            db,
            actor=current_user,
            action="UPDATE_SETTINGS",
            client=client,
            meta={"version": next_version, "changed": sorted(changes)},
        )
    return row
