"""Domain-level exception primitives with stable machine-readable codes."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(eq=False)
class DomainError(Exception):
    """Use-case level error with stable code and HTTP mapping."""

    code: str
    http_status: int
    message: str
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        return self.message


def not_found(message: str, **details: Any) -> DomainError:
    return DomainError(code="NOT_FOUND", http_status=404, message=message, details=details or None)


def validation_error(message: str, **details: Any) -> DomainError:
    return DomainError(code="VALIDATION", http_status=422, message=message, details=details or None)


def forbidden(message: str = "Permission denied") -> DomainError:
    return DomainError(code="FORBIDDEN", http_status=403, message=message)


def invalid_status(message: str, **details: Any) -> DomainError:
    return DomainError(code="INVALID_STATUS", http_status=409, message=message, details=details or None)
