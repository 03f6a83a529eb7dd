"""User paths."""
from ..routing import PathRouter, RequestContext
from ..schemas import IdRequest, UserCreate
from ..use_cases.users import (
    create_user_use_case,
    delete_user_use_case,
    list_staff_use_case,
    list_users_use_case,
)

router = PathRouter(prefix="/admin/users")
staff_router = PathRouter(prefix="/users")


@router.path("/list", permission="canManageUsers")
def list_users(ctx: RequestContext):
    return list_users_use_case(db=ctx.db)


@router.path("/create", permission="canManageUsers")
def create_user(ctx: RequestContext):
    user = create_user_use_case(
        db=ctx.db,
        payload=ctx.parse(UserCreate),
        current_user=ctx.actor,
        client=ctx.client,
    )
    return {"id": user.id}


@router.path("/delete", permission="canManageUsers")
def delete_user(ctx: RequestContext):
    payload = ctx.parse(IdRequest)
    delete_user_use_case(db=ctx.db, user_id=payload.id, current_user=ctx.actor, client=ctx.client)
    return {"deleted": True}


@staff_router.path("/staff")
def list_staff(ctx: RequestContext):
    """Active staff directory for assignment pickers."""
    return list_staff_use_case(db=ctx.db)
