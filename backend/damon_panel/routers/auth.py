"""Auth paths."""
import logging

from ..auth import get_role_ui_permissions
from ..routing import PathRouter, RequestContext
from ..schemas import AdminTokenRequest, LoginRequest, LogoutRequest, UserResponse
from ..use_cases.sessions import admin_token_use_case, login_use_case, logout_use_case

router = PathRouter(prefix="/auth")
logger = logging.getLogger(__name__)


def _session_payload(session, user) -> dict:
    return {
        "token": session.token,
        "expires_at": session.expires_at,
        "user": UserResponse.model_validate(user),
        "permissions": get_role_ui_permissions(user.role),
    }


@router.path("/login", public=True)
def login(ctx: RequestContext):
    """Exchange username/password for a session token."""
    payload = ctx.parse(LoginRequest)
    session, user = login_use_case(
        db=ctx.db,
        username=payload.username,
        password=payload.password,
        client=ctx.client,
    )
    return _session_payload(session, user)


@router.path("/logout", public=True)
def logout(ctx: RequestContext):
    payload = ctx.parse(LogoutRequest)
    logout_use_case(db=ctx.db, token=payload.token)
    return {"logged_out": True}


@router.path("/admin_token", public=True)
def admin_token(ctx: RequestContext):
    """Shared-key login used by the panel frontend."""
    payload = ctx.parse(AdminTokenRequest)
    session, user = admin_token_use_case(db=ctx.db, key=payload.key, client=ctx.client)
    logger.info("Admin token issued for %s", user.username)
    return _session_payload(session, user)


@router.path("/me")
def me(ctx: RequestContext):
    user = ctx.actor
    return {
        "user": UserResponse.model_validate(user),
        "permissions": get_role_ui_permissions(user.role),
    }
