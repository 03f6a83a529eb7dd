"""Project and comment paths."""
from ..routing import PathRouter, RequestContext
from ..schemas import CommentCreate, IdRequest, ProjectCreate, ProjectDecision
from ..use_cases.projects import (
    add_comment_use_case,
    create_project_use_case,
    decide_project_use_case,
    list_projects_use_case,
    project_detail_use_case,
)

router = PathRouter(prefix="/projects")
comments_router = PathRouter(prefix="/comments")


@router.path("/list")
def list_projects(ctx: RequestContext):
    """Projects visible to the caller."""
    return list_projects_use_case(db=ctx.db, current_user=ctx.actor)


@router.path("/detail")
def project_detail(ctx: RequestContext):
    payload = ctx.parse(IdRequest)
    return project_detail_use_case(db=ctx.db, project_id=payload.id, current_user=ctx.actor)


@router.path("/create")
def create_project(ctx: RequestContext):
    project = create_project_use_case(
        db=ctx.db, payload=ctx.parse(ProjectCreate), current_user=ctx.actor, client=ctx.client
    )
    return {"id": project.id}


def _decide(ctx: RequestContext, decision: str):
    payload = ctx.parse(ProjectDecision)
    project = decide_project_use_case(
        db=ctx.db,
        project_id=payload.project_id,
        decision=decision,
        note=payload.note,
        current_user=ctx.actor,
        client=ctx.client,
    )
    return {"status": project.status}


@router.path("/approve", permission="canReviewProjects")
def approve_project(ctx: RequestContext):
    return _decide(ctx, "approve")


@router.path("/reject", permission="canReviewProjects")
def reject_project(ctx: RequestContext):
    return _decide(ctx, "reject")


@comments_router.path("/add")
def add_comment(ctx: RequestContext):
    comment = add_comment_use_case(
        db=ctx.db, payload=ctx.parse(CommentCreate), current_user=ctx.actor, client=ctx.client
    )
    return {"added": True, "id": comment.id}
