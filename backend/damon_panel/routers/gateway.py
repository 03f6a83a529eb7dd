"""Single gateway endpoint: ``/exec?path=<path>&token=<token>&...``."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from ..config import settings
from ..database import get_db
from ..domain_errors import DomainError
from ..envelope import error_response, ok_response, server_error, validation_failure
from ..routing import PathRouter, RequestContext
from ..security import require_permission
from ..use_cases.sessions import require_session
from . import audit, auth, catalog, inquiries, notifications, pricing_settings, projects, users

logger = logging.getLogger(__name__)

api = PathRouter()


@api.path("/health", public=True)
def health(ctx: RequestContext):
    """Health check path."""
    return {
        "status": "online",
        "app": settings.APP_NAME,
        "time": datetime.now(timezone.utc).isoformat(),
    }


for path_router in (
    auth.router,
    users.router,
    users.staff_router,
    catalog.admin_categories,
    catalog.admin_devices,
    catalog.router,
    pricing_settings.router,
    projects.router,
    projects.comments_router,
    inquiries.router,
    inquiries.admin_router,
    notifications.router,
    audit.router,
):
    api.include_router(path_router)


def dispatch(
    db: Session,
    params: dict[str, Any],
    *,
    user_agent: str = "Unknown",
    ip_address: str = "0.0.0.0",
) -> JSONResponse:
    """Resolve ``params["path"]``, authenticate, run the handler and wrap the result."""
    path = str(params.get("path") or "").strip()
    if not path:
        return error_response(DomainError(code="NO_PATH", http_status=400, message="Path required"))

    try:
        route = api.resolve(path)
        if route is None:
            raise DomainError(code="NOT_FOUND", http_status=404, message=f"Unknown path: {path}")

        ctx = RequestContext(db=db, params=params, user_agent=user_agent, ip_address=ip_address)
        if not route.public:
            token = params.get("token")
            ctx.user, _session = require_session(db=db, token=str(token) if token else None)
            ctx.token = str(token)
            if route.permission:
                require_permission(ctx.user, route.permission)

        return ok_response(route.handler(ctx))
    except DomainError as exc:
        if exc.http_status >= 500:
            logger.warning("%s on %s: %s", exc.code, path, exc.message)
        return error_response(exc)
    except ValidationError as exc:
        return error_response(validation_failure(exc))
    except Exception as exc:
        logger.exception("Unhandled error on path %s", path)
        db.rollback()
        return error_response(server_error(exc, expose=settings.DEBUG))


async def _read_json_body(request: Request) -> dict[str, Any]:
    raw = await request.body()
    if not raw:
        return {}
    try:
        body = json.loads(raw)
    except ValueError:
        logger.debug("Ignoring non-JSON request body")
        return {}
    return body if isinstance(body, dict) else {}


router = APIRouter(tags=["gateway"])


@router.api_route("/exec", methods=["GET", "POST"])
async def execute(request: Request, db: Session = Depends(get_db)):
    """Gateway endpoint; POST JSON bodies are merged over the query parameters."""
    params: dict[str, Any] = dict(request.query_params)
    if request.method == "POST":
        params.update(await _read_json_body(request))

    user_agent = str(params.get("user_agent") or request.headers.get("user-agent") or "Unknown")
    ip_address = request.client.host if request.client else "0.0.0.0"
    return await run_in_threadpool(
        dispatch,
        db,
        params,
        user_agent=user_agent,
        ip_address=ip_address,
    )
