"""Inquiry (device quote) use-cases: price, snapshot, review."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..database import locked_write
from ..domain_errors import invalid_status, not_found
from ..models import Device, InquiryPriceSnapshot, Project, ProjectInquiry, User
from ..schemas import InquiryQuoteRequest, InquiryStats, InquiryView
from ..security import can_view_inquiry_price
from ..services.inquiry_views import inquiries_to_views
from ..services.pricing import quote_for_device
from .audit import ClientInfo, record_audit
from .notifications import get_super_admin, queue_notification
from .pricing_settings import get_current_settings
from .projects import get_visible_project

logger = logging.getLogger(__name__)

INQUIRY_DECISIONS: dict[str, str] = {
    "approve": "approved",
    "reject": "rejected",
}
DEFAULT_REJECTION_REASON = "No reason given"


def _get_inquiry_or_404(db: Session, inquiry_id: str) -> ProjectInquiry:
    inquiry = db.query(ProjectInquiry).filter(ProjectInquiry.id == inquiry_id).first()
    if not inquiry:
        raise not_found("Inquiry not found")
    return inquiry


def quote_inquiry_use_case(
    *,
    db: Session,
    payload: InquiryQuoteRequest,
    current_user: User,
    client: ClientInfo,
) -> dict[str, Any]:
    """Price a device for a project and record the pending inquiry with its snapshot."""
    device = db.query(Device).filter(Device.id == payload.device_id).first()
    if not device:
        raise not_found("Device not found")
    project = get_visible_project(db, payload.project_id, current_user)

    settings_row = get_current_settings(db)
    quote = quote_for_device(device, settings_row, payload.quantity)
    query_text = payload.query_text or device.model_name

    inquiry = ProjectInquiry(
        project_id=project.id,
        requested_by_user_id=current_user.id,
        device_id=device.id,
        category_id=device.category_id,
        quantity=quote.quantity,
        title=query_text,
        description=payload.description,
        unit_price_eur=quote.unit_price,
        total_price_eur=quote.total_price,
        currency="EUR",
        status="pending",
        query_text_snapshot=query_text,
        settings_id_snapshot=settings_row.id if settings_row else "",
    )
    irr_rate = settings_row.exchange_rate_irr_per_eur if settings_row else 0.0

    with locked_write(db):
        db.add(inquiry)
        db.flush()
        db.add(
            InquiryPriceSnapshot(
                project_inquiry_id=inquiry.id,
                sell_price_eur_snapshot=quote.unit_price,
                sell_price_irr_snapshot=quote.unit_price * (irr_rate or 0.0),
            )
        )
        project.inquiry_status = "pending"

        super_admin = get_super_admin(db)
        if super_admin is not None:
            queue_notification(
                db,
                type="INQUIRY_CREATED",
                target_user_id=super_admin.id,
                project_id=project.id,
                inquiry_id=inquiry.id,
                message=f'New inquiry on project "{project.project_name}"',
            )
        else:
            logger.warning("No admin user to notify about inquiry %s", inquiry.id)

        record_audit(
            db,
            actor=current_user,
            action="ADD_INQUIRY",
            client=client,
            project_id=project.id,
            inquiry_id=inquiry.id,
            meta={
                "project_id": project.id,
                "device": device.model_name,
                "price_eur": quote.unit_price,
                "quantity": quote.quantity,
            },
        )

    show_price = can_view_inquiry_price(current_user, inquiry)
    return {
        "inquiry_id": inquiry.id,
        "status": inquiry.status,
        "quantity": quote.quantity,
        "price_visible": show_price,
        "sell_price_eur": quote.unit_price if show_price else None,
        "total_price_eur": quote.total_price if show_price else None,
    }


def list_inquiries_use_case(*, db: Session, current_user: User, status_filter: str = "") -> list[InquiryView]:
    """All inquiries newest first, optionally one status only."""
    query = db.query(ProjectInquiry)
    wanted = status_filter.strip().lower()
    if wanted:
        query = query.filter(func.lower(ProjectInquiry.status) == wanted)
    inquiries = query.order_by(ProjectInquiry.created_at.desc()).all()
    return inquiries_to_views(db, inquiries, current_user)


def list_pending_inquiries_use_case(*, db: Session, current_user: User) -> list[InquiryView]:
    inquiries = (
        db.query(ProjectInquiry)
        .filter(ProjectInquiry.status.notin_(["approved", "rejected"]))
        .order_by(ProjectInquiry.created_at)
        .all()
    )
    return inquiries_to_views(db, inquiries, current_user)


def inquiry_stats_use_case(*, db: Session) -> InquiryStats:
    counts = dict(
        db.query(ProjectInquiry.status, func.count(ProjectInquiry.id))
        .group_by(ProjectInquiry.status)
        .all()
    )
    return InquiryStats(
        total=sum(counts.values()),
        pending=counts.get("pending", 0),
        approved=counts.get("approved", 0),
        rejected=counts.get("rejected", 0),
    )


def decide_inquiry_use_case(
    *,
    db: Session,
    inquiry_id: str,
    decision: str,
    current_user: User,
    client: ClientInfo,
    reason: str = "",
) -> ProjectInquiry:
    """pending -> approved | rejected; the requester is notified."""
    new_status = INQUIRY_DECISIONS.get(decision)
    if new_status is None:
        raise ValueError(f"Unknown inquiry decision: {decision}")

    inquiry = _get_inquiry_or_404(db, inquiry_id)

    with locked_write(db):
        # Another decision may have committed while this call waited for the lock.
        db.refresh(inquiry)
        if inquiry.status != "pending":
            raise invalid_status(
                f"Inquiry is {inquiry.status}, only pending inquiries can be {new_status}",
                status=inquiry.status,
            )

        project = db.query(Project).filter(Project.id == inquiry.project_id).first()
        if project is not None:
            db.refresh(project)
        project_name = project.project_name if project else "Unknown"

        if new_status == "approved":
            message = f'Your inquiry on project "{project_name}" was approved'
            meta: dict[str, Any] = {"inquiry_id": inquiry.id}
        else:
            reason = reason or DEFAULT_REJECTION_REASON
            message = f'Your inquiry on project "{project_name}" was rejected. Reason: {reason}'
            meta = {"inquiry_id": inquiry.id, "reason": reason}

        inquiry.status = new_status
        inquiry.reviewed_by_user_id = current_user.id
        inquiry.reviewed_at = datetime.now(timezone.utc)
        if new_status == "rejected":
            inquiry.rejection_reason = reason
        if project is not None:
            project.inquiry_status = _project_inquiry_status(db, project.id, inquiry)

        queue_notification(
            db,
            type="INQUIRY_STATUS_CHANGED",
            target_user_id=inquiry.requested_by_user_id,
            project_id=inquiry.project_id,
            inquiry_id=inquiry.id,
            message=message,
        )
        record_audit(
            db,
            actor=current_user,
            action="APPROVE_INQUIRY" if new_status == "approved" else "REJECT_INQUIRY",
            client=client,
            project_id=inquiry.project_id,
            inquiry_id=inquiry.id,
            meta=meta,
        )
    return inquiry


def _project_inquiry_status(db: Session, project_id: str, changed: ProjectInquiry) -> str:
    """Project summary: pending while any inquiry is pending, else the latest decision."""
    others_pending = (
        db.query(ProjectInquiry.id)
        .filter(
            ProjectInquiry.project_id == project_id,
            ProjectInquiry.id != changed.id,
            ProjectInquiry.status == "pending",
        )
        .first()
    )
    return "pending" if others_pending else changed.status
