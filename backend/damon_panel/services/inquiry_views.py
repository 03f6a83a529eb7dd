"""Inquiry serialization with batched lookups and per-viewer price masking."""
from __future__ import annotations

from sqlalchemy.orm import Session

from ..models import Device, InquiryPriceSnapshot, Project, ProjectInquiry, User
from ..schemas import InquiryView
from ..security import can_view_inquiry_price


def build_inquiry_view_context(db: Session, inquiries: list[ProjectInquiry]) -> dict:
    """Preload projects, requesters, devices and price snapshots for a page of inquiries."""
    if not inquiries:
        return {
            "projects_by_id": {},
            "users_by_id": {},
            "devices_by_id": {},
            "snapshots_by_inquiry_id": {},
        }

    inquiry_ids = {inquiry.id for inquiry in inquiries}
    project_ids = {inquiry.project_id for inquiry in inquiries}
    user_ids = {inquiry.requested_by_user_id for inquiry in inquiries}
    device_ids = {inquiry.device_id for inquiry in inquiries}

    projects = db.query(Project).filter(Project.id.in_(project_ids)).all()
    users = db.query(User).filter(User.id.in_(user_ids)).all()
    devices = db.query(Device).filter(Device.id.in_(device_ids)).all()
    snapshots = (
        db.query(InquiryPriceSnapshot)
        .filter(InquiryPriceSnapshot.project_inquiry_id.in_(inquiry_ids))
        .all()
    )

    return {
        "projects_by_id": {project.id: project for project in projects},
        "users_by_id": {user.id: user for user in users},
        "devices_by_id": {device.id: device for device in devices},
        "snapshots_by_inquiry_id": {snap.project_inquiry_id: snap for snap in snapshots},
    }


def inquiry_to_view_from_context(inquiry: ProjectInquiry, viewer: User, context: dict) -> InquiryView:
    project = context["projects_by_id"].get(inquiry.project_id)
    requester = context["users_by_id"].get(inquiry.requested_by_user_id)
    device = context["devices_by_id"].get(inquiry.device_id)
    snapshot = context["snapshots_by_inquiry_id"].get(inquiry.id)

    show_price = can_view_inquiry_price(viewer, inquiry)

    snapshot_price = snapshot.sell_price_eur_snapshot if snapshot else None
    unit_price = inquiry.unit_price_eur if inquiry.unit_price_eur is not None else snapshot_price
    total_price = inquiry.total_price_eur
    if total_price is None and unit_price is not None:
        total_price = unit_price * (inquiry.quantity or 1)

    return InquiryView(
        id=inquiry.id,
        project_id=inquiry.project_id,
        requested_by_user_id=inquiry.requested_by_user_id,
        device_id=inquiry.device_id,
        category_id=inquiry.category_id,
        quantity=inquiry.quantity,
        title=inquiry.title,
        description=inquiry.description,
        currency=inquiry.currency,
        status=inquiry.status,
        reviewed_by_user_id=inquiry.reviewed_by_user_id,
        reviewed_at=inquiry.reviewed_at,
        rejection_reason=inquiry.rejection_reason,
        query_text_snapshot=inquiry.query_text_snapshot,
        settings_id_snapshot=inquiry.settings_id_snapshot,
        created_at=inquiry.created_at,
        project_name=project.project_name if project else "Unknown Project",
        employer_name=project.employer_name if project else "",
        requested_by_name=requester.full_name if requester else "Unknown User",
        model_name=device.model_name if device else "Unknown Device",
        unit_price_eur=unit_price if show_price else None,
        total_price_eur=total_price if show_price else None,
        sell_price_eur_snapshot=snapshot_price if show_price else None,
        price_visible=show_price,
    )


def inquiries_to_views(db: Session, inquiries: list[ProjectInquiry], viewer: User) -> list[InquiryView]:
    context = build_inquiry_view_context(db, inquiries)
    return [inquiry_to_view_from_context(inquiry, viewer, context) for inquiry in inquiries]
