"""Equipment categories and devices."""
from __future__ import annotations

from sqlalchemy.orm import Session

from ..database import locked_write
from ..domain_errors import not_found
from ..models import Category, Device, User
from ..schemas import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    DeviceCreate,
    DeviceResponse,
    DeviceSearchRequest,
    DeviceUpdate,
)
from .audit import ClientInfo, record_audit


def _get_category_or_404(db: Session, category_id: str) -> Category:
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise not_found("Category not found")
    return category


def _get_device_or_404(db: Session, device_id: str) -> Device:
    device = db.query(Device).filter(Device.id == device_id).first()
    if not device:
        raise not_found("Device not found")
    return device


def _apply_patch(entity, patch: dict) -> dict:
    changed = {}
    for field, value in patch.items():
        if value is None:
            continue
        if getattr(entity, field) != value:
            setattr(entity, field, value)
            changed[field] = value
    return changed


# Categories

def list_categories_use_case(*, db: Session, active_only: bool = False) -> list[CategoryResponse]:
    query = db.query(Category)
    if active_only:
        query = query.filter(Category.is_active.is_(True))
    return [CategoryResponse.model_validate(c) for c in query.order_by(Category.category_name).all()]


def create_category_use_case(*, db: Session, payload: CategoryCreate, current_user: User, client: ClientInfo) -> Category:
    category = Category(
        category_name=payload.category_name,
        description=payload.description,
        is_active=True,
    )
    with locked_write(db):
        db.add(category)
        record_audit(db, actor=current_user, action="CREATE_CATEGORY", client=client, meta={"name": payload.category_name})
    return category


def update_category_use_case(*, db: Session, payload: CategoryUpdate, current_user: User, client: ClientInfo) -> Category:
    category = _get_category_or_404(db, payload.id)
    patch = payload.model_dump(exclude={"id"})
    with locked_write(db):
        changed = _apply_patch(category, patch)
        record_audit(
            db,
            actor=current_user,
            action="UPDATE_CATEGORY",
            client=client,
            meta={"id": category.id, "changed": sorted(changed)},
        )
    return category


def delete_category_use_case(*, db: Session, category_id: str, current_user: User, client: ClientInfo) -> None:
    category = _get_category_or_404(db, category_id)
    with locked_write(db):
        db.delete(category)
        record_audit(db, actor=current_user, action="DELETE_CATEGORY", client=client, meta={"id": category_id})


# Devices

def list_devices_use_case(*, db: Session) -> list[DeviceResponse]:
    devices = db.query(Device).order_by(Device.model_name).all()
    return [DeviceResponse.model_validate(d) for d in devices]


def search_devices_use_case(*, db: Session, payload: DeviceSearchRequest) -> list[dict]:
    """Active devices, optionally by category and model-name substring."""
    query = db.query(Device).filter(Device.is_active.is_(True))
    if payload.category_id:
        query = query.filter(Device.category_id == payload.category_id)
    devices = query.order_by(Device.model_name).all()

    needle = payload.query.lower()
    if needle:
        devices = [d for d in devices if needle in (d.model_name or "").lower()]

    return [
        {"device_id": d.id, "model_name": d.model_name, "category_id": d.category_id}
        for d in devices
    ]


def create_device_use_case(*, db: Session, payload: DeviceCreate, current_user: User, client: ClientInfo) -> Device:
    if payload.category_id:
        _get_category_or_404(db, payload.category_id)

    device = Device(
        category_id=payload.category_id,
        model_name=payload.model_name,
        factory_pricelist_eur=payload.factory_pricelist_eur,
        length_meter=payload.length_meter,
        weight_unit=payload.weight_unit,
        is_active=True,
    )
    with locked_write(db):
        db.add(device)
        record_audit(db, actor=current_user, action="CREATE_DEVICE", client=client, meta={"model": payload.model_name})
    return device


def update_device_use_case(*, db: Session, payload: DeviceUpdate, current_user: User, client: ClientInfo) -> Device:
    device = _get_device_or_404(db, payload.id)
    if payload.category_id:
        _get_category_or_404(db, payload.category_id)

    patch = payload.model_dump(exclude={"id"})
    with locked_write(db):
        changed = _apply_patch(device, patch)
        record_audit(
            db,
            actor=current_user,
            action="UPDATE_DEVICE",
            client=client,
            meta={"id": device.id, "changed": sorted(changed)},
        )
    return device


def delete_device_use_case(*, db: Session, device_id: str, current_user: User, client: ClientInfo) -> None:
    device = _get_device_or_404(db, device_id)
    with locked_write(db):
        db.delete(device)
        record_audit(db, actor=current_user, action="DELETE_DEVICE", client=client, meta={"id": device_id})
