"""JSON envelope helpers: ``{ok, data}`` or ``{ok: false, error_code, message}``."""
from __future__ import annotations

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .domain_errors import DomainError


def ok_response(data: Any) -> JSONResponse:
    return JSONResponse(status_code=200, content={"ok": True, "data": jsonable_encoder(data)})


def error_response(exc: DomainError) -> JSONResponse:
    """Render DomainError with its stable code; HTTP status mirrors the body."""
    payload: dict[str, Any] = {
        "ok": False,
        "error_code": exc.code,
        "message": exc.message,
        "status": exc.http_status,
    }
    if exc.details is not None:
        payload["details"] = jsonable_encoder(exc.details)
    return JSONResponse(status_code=exc.http_status, content=payload)


def validation_failure(exc: ValidationError) -> DomainError:
    """Map the first pydantic error onto a VALIDATION domain error."""
    errors = exc.errors(include_url=False, include_context=False, include_input=False)
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ())) or "request"
    message = f"{field}: {first.get('msg', 'invalid value')}"
    return DomainError(
        code="VALIDATION",
        http_status=422,
        message=message,
        details={"errors": [{"field": ".".join(str(p) for p in e["loc"]), "message": e["msg"]} for e in errors]},
    )


def server_error(exc: Exception, *, expose: bool = False) -> DomainError:
    """Generic 500; the exception text is only exposed when debugging."""
    message = (str(exc) or exc.__class__.__name__) if expose else "Internal server error"
    return DomainError(code="SERVER_ERROR", http_status=500, message=message)
