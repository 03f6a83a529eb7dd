"""Inquiry paths."""
from ..routing import PathRouter, RequestContext
from ..schemas import InquiryDecision, InquiryListRequest, InquiryQuoteRequest
from ..use_cases.inquiries import (
    decide_inquiry_use_case,
    inquiry_stats_use_case,
    list_inquiries_use_case,
    list_pending_inquiries_use_case,
    quote_inquiry_use_case,
)

router = PathRouter(prefix="/inquiries")
admin_router = PathRouter(prefix="/admin/inquiries")


@router.path("/quote")
def quote(ctx: RequestContext):
    """Price a device on a project; the price is returned only if the caller may see it."""
    return quote_inquiry_use_case(
        db=ctx.db, payload=ctx.parse(InquiryQuoteRequest), current_user=ctx.actor, client=ctx.client
    )


@admin_router.path("/list", permission="canReviewInquiries")
def list_inquiries(ctx: RequestContext):
    payload = ctx.parse(InquiryListRequest)
    return list_inquiries_use_case(db=ctx.db, current_user=ctx.actor, status_filter=payload.status_filter)


@admin_router.path("/pending", permission="canReviewInquiries")
def list_pending(ctx: RequestContext):
    return list_pending_inquiries_use_case(db=ctx.db, current_user=ctx.actor)


@admin_router.path("/stats", permission="canReviewInquiries")
def stats(ctx: RequestContext):
    return inquiry_stats_use_case(db=ctx.db)


@admin_router.path("/approve", permission="canReviewInquiries")
def approve(ctx: RequestContext):
    payload = ctx.parse(InquiryDecision)
    decide_inquiry_use_case(
        db=ctx.db, inquiry_id=payload.inquiry_id, decision="approve", current_user=ctx.actor, client=ctx.client
    )
    return {"approved": True}


@admin_router.path("/reject", permission="canReviewInquiries")
def reject(ctx: RequestContext):
    payload = ctx.parse(InquiryDecision)
    inquiry = decide_inquiry_use_case(
        db=ctx.db,
        inquiry_id=payload.inquiry_id,
        decision="reject",
        reason=payload.reason,
        current_user=ctx.actor,
        client=ctx.client,
    )
    return {"rejected": True, "reason": inquiry.rejection_reason}
