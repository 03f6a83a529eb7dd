"""Path router for the single gateway endpoint.

Handlers are registered against the ``path`` parameter value, in the same
spirit as FastAPI's ``APIRouter`` but dispatched by string lookup.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, TypeVar

from pydantic import BaseModel
from sqlalchemy.orm import Session

from .models import User
from .use_cases.audit import ClientInfo

M = TypeVar("M", bound=BaseModel)


@dataclass
class RequestContext:
    """Everything a path handler needs for one call."""

    db: Session
    params: dict[str, Any]
    user_agent: str = "Unknown"
    ip_address: str = "0.0.0.0"
    user: Optional[User] = None
    token: Optional[str] = None

    @property
    def actor(self) -> User:
        if self.user is None:
            raise RuntimeError("Handler requires an authenticated user")
        return self.user

    @property
    def client(self) -> ClientInfo:
        return ClientInfo(user_agent=self.user_agent, ip_address=self.ip_address)

    def parse(self, model: type[M]) -> M:
        """Validate the call parameters against a request schema."""
        return model.model_validate(self.params)


Handler = Callable[[RequestContext], Any]


@dataclass(frozen=True)
class PathRoute:
    path: str
    handler: Handler
    public: bool = False
    permission: Optional[str] = None


@dataclass
class PathRouter:
    prefix: str = ""
    routes: dict[str, PathRoute] = field(default_factory=dict)

    def path(self, path: str, *, public: bool = False, permission: str | None = None):
        """Register a handler for ``prefix + path``."""
        full_path = f"{self.prefix}{path}"

        def decorator(func: Handler) -> Handler:
            if full_path in self.routes:
                raise ValueError(f"Duplicate path registration: {full_path}")
            self.routes[full_path] = PathRoute(
                path=full_path,
                handler=func,
                public=public,
                permission=permission,
            )
            return func

        return decorator

    def include_router(self, other: "PathRouter") -> None:
        for full_path, route in other.routes.items():
            if full_path in self.routes:
                raise ValueError(f"Duplicate path registration: {full_path}")
            self.routes[full_path] = route

    def resolve(self, path: str) -> PathRoute | None:
        return self.routes.get(path)
