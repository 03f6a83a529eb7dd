"""Project lifecycle use-cases: create, view, approve/reject, comment."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from ..database import locked_write
from ..domain_errors import forbidden, invalid_status, not_found
from ..models import (
    Project,
    ProjectComment,
    ProjectInquiry,
    ProjectStatusHistory,
    User,
)
from ..schemas import (
    CommentCreate,
    CommentResponse,
    ProjectCreate,
    ProjectResponse,
    StatusHistoryResponse,
)
from ..security import can_view_project
from ..services.inquiry_views import inquiries_to_views
from .audit import ClientInfo, record_audit
from .notifications import queue_notification

PROJECT_DECISIONS: dict[str, str] = {
    "approve": "approved",
    "reject": "rejected",
}


def _get_project_or_404(db: Session, project_id: str) -> Project:
    project = db.query(Project).filter(Project.id == project_id).first()
    if not project:
        raise not_found("Project not found")
    return project


def get_visible_project(db: Session, project_id: str, current_user: User) -> Project:
    project = _get_project_or_404(db, project_id)
    if not can_view_project(current_user, project):
        raise forbidden("Access denied")
    return project


def list_projects_use_case(*, db: Session, current_user: User) -> list[ProjectResponse]:
    projects = db.query(Project).order_by(Project.created_at.desc()).all()
    return [
        ProjectResponse.model_validate(p)
        for p in projects
        if can_view_project(current_user, p)
    ]


def create_project_use_case(*, db: Session, payload: ProjectCreate, current_user: User, client: ClientInfo) -> Project:
    """New projects go straight to pending_approval, with an initial history row."""
    project = Project(
        created_by_user_id=current_user.id,
        assigned_sales_manager_id=payload.assigned_sales_manager_id,
        project_name=payload.project_name,
        employer_name=payload.employer_name,
        project_type=payload.project_type,
        address_text=payload.address_text,
        lat=payload.lat,
        lng=payload.lng,
        additional_info=payload.additional_info,
        status="pending_approval",
        inquiry_status="",
    )
    with locked_write(db):
        db.add(project)
        db.flush()
        db.add(
            ProjectStatusHistory(
                project_id=project.id,
                changed_by_user_id=current_user.id,
                from_status="draft",
                to_status="pending_approval",
                note="Project created",
            )
        )
        record_audit(
            db,
            actor=current_user,
            action="CREATE_PROJECT",
            client=client,
            project_id=project.id,
            meta={"project_id": project.id, "name": payload.project_name},
        )
    return project


def decide_project_use_case(
    *,
    db: Session,
    project_id: str,
    decision: str,
    note: str,
    current_user: User,
    client: ClientInfo,
) -> Project:
    """pending_approval -> approved | rejected, with history, notification and audit."""
    new_status = PROJECT_DECISIONS.get(decision)
    if new_status is None:
        raise ValueError(f"Unknown project decision: {decision}")

    project = _get_project_or_404(db, project_id)

    now = datetime.now(timezone.utc)
    with locked_write(db):
        # Another decision may have committed while this call waited for the lock.
        db.refresh(project)
        if project.status != "pending_approval":
            raise invalid_status(
                f"Project is {project.status}, only pending_approval projects can be {new_status}",
                status=project.status,
            )
        old_status = project.status
        project.status = new_status
        project.approval_decision_by = current_user.id
        project.approval_decision_at = now
        project.approval_note = note
        project.updated_at = now

        db.add(
            ProjectStatusHistory(
                project_id=project.id,
                changed_by_user_id=current_user.id,
                from_status=old_status,
                to_status=new_status,
                note=note,
            )
        )
        if project.created_by_user_id != current_user.id:
            queue_notification(
                db,
                type="PROJECT_STATUS_CHANGED",
                target_user_id=project.created_by_user_id,
                project_id=project.id,
                message=f'Your project "{project.project_name}" was {new_status}',
            )
        record_audit(
            db,
            actor=current_user,
            action="APPROVE_PROJECT" if new_status == "approved" else "REJECT_PROJECT",
            client=client,
            project_id=project.id,
            meta={"project_id": project.id, "oldStatus": old_status, "newStatus": new_status},
        )
    return project


def project_detail_use_case(*, db: Session, project_id: str, current_user: User) -> dict[str, Any]:
    """Project with manager name, history, comments and price-masked inquiries."""
    project = get_visible_project(db, project_id, current_user)

    history = (
        db.query(ProjectStatusHistory)
        .filter(ProjectStatusHistory.project_id == project.id)
        .order_by(ProjectStatusHistory.created_at)
        .all()
    )
    comments = (
        db.query(ProjectComment)
        .filter(ProjectComment.project_id == project.id)
        .order_by(ProjectComment.created_at)
        .all()
    )
    inquiries = (
        db.query(ProjectInquiry)
        .filter(ProjectInquiry.project_id == project.id)
        .order_by(ProjectInquiry.created_at)
        .all()
    )

    user_ids = {c.author_user_id for c in comments}
    if project.assigned_sales_manager_id:
        user_ids.add(project.assigned_sales_manager_id)
    users_by_id: dict[str, User] = {}
    if user_ids:
        users_by_id = {u.id: u for u in db.query(User).filter(User.id.in_(user_ids)).all()}

    manager = users_by_id.get(project.assigned_sales_manager_id)
    project_view = ProjectResponse.model_validate(project).model_dump()
    # Free-text manager values are shown as-is.
    project_view["assigned_sales_manager_name"] = (
        manager.full_name if manager else (project.assigned_sales_manager_id or "Unknown")
    )

    comment_views = []
    for comment in comments:
        view = CommentResponse.model_validate(comment)
        author = users_by_id.get(comment.author_user_id)
        view.author_name = author.full_name if author else "Unknown"
        comment_views.append(view)

    return {
        "project": project_view,
        "status_history": [StatusHistoryResponse.model_validate(h) for h in history],
        "comments": comment_views,
        "inquiries": inquiries_to_views(db, inquiries, current_user),
    }


def add_comment_use_case(*, db: Session, payload: CommentCreate, current_user: User, client: ClientInfo) -> ProjectComment:
    project = get_visible_project(db, payload.project_id, current_user)

    if payload.parent_comment_id:
        parent = db.query(ProjectComment).filter(
            ProjectComment.id == payload.parent_comment_id,
            ProjectComment.project_id == project.id,
        ).first()
        if not parent:
            raise not_found("Parent comment not found")

    comment = ProjectComment(
        project_id=project.id,
        author_user_id=current_user.id,
        author_role_snapshot=current_user.role,
        body=payload.body,
        parent_comment_id=payload.parent_comment_id,
    )
    with locked_write(db):
        db.add(comment)
        record_audit(
            db,
            actor=current_user,
            action="ADD_COMMENT",
            client=client,
            project_id=project.id,
            meta={"project_id": project.id},
        )
    return comment
