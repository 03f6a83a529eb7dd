"""HTTP client for the panel gateway.

Logs in lazily, sends the session token with every call, and on an expired
or unknown session logs in again and retries the call once.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

RETRYABLE_SESSION_ERRORS = frozenset({"SESSION_EXPIRED", "INVALID_SESSION"})


class PanelAPIError(Exception):
    """A ``{ok: false}`` envelope (or an unreadable response)."""

    def __init__(self, error_code: str, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.error_code = error_code
        self.message = message
        self.status = status

    def __str__(self) -> str:
        return f"{self.error_code}: {self.message}"


class PanelClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        *,
        username: Optional[str] = None,
        password: Optional[str] = None,
        admin_key: Optional[str] = None,
        http: Optional[httpx.Client] = None,
        timeout: float = 30.0,
        endpoint: str = "/exec",
    ):
        self.username = username
        self.password = password
        self.admin_key = admin_key
        self.endpoint = endpoint
        self.token: Optional[str] = None
        self.user: Optional[dict] = None
        self._owns_http = http is None
        self._http = http or httpx.Client(base_url=base_url, timeout=timeout)

    def __enter__(self) -> "PanelClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def _send(self, path: str, params: dict[str, Any]) -> dict:
        query = {key: value for key, value in params.items() if value is not None}
        query["path"] = path
        try:
            response = self._http.get(self.endpoint, params=query)
        except httpx.HTTPError as exc:
            raise PanelAPIError("NETWORK", f"Gateway unreachable: {exc}") from exc
        try:
            payload = response.json()
        except ValueError as exc:
            raise PanelAPIError("BAD_RESPONSE", "Gateway returned non-JSON", response.status_code) from exc
        if not isinstance(payload, dict):
            raise PanelAPIError("BAD_RESPONSE", "Gateway returned an unexpected payload", response.status_code)
        return payload

    @staticmethod
    def _unwrap(payload: dict) -> Any:
        if payload.get("ok"):
            return payload.get("data")
        raise PanelAPIError(
            payload.get("error_code") or "ERROR",
            payload.get("message") or "Request failed",
            payload.get("status"),
        )

    def login(self) -> dict:
        """Open a session with the configured credentials."""
        if self.username and self.password:
            payload = self._send("/auth/login", {"username": self.username, "password": self.password})
        elif self.admin_key:
            payload = self._send("/auth/admin_token", {"key": self.admin_key})
        else:
            raise PanelAPIError("AUTH", "No credentials configured")

        data = self._unwrap(payload)
        self.token = data["token"]
        self.user = data.get("user")
        return data

    def logout(self) -> None:
        if self.token:
            self._unwrap(self._send("/auth/logout", {"token": self.token}))
        self.token = None
        self.user = None

    def call(self, path: str, **params: Any) -> Any:
        """Call a protected path; re-authenticates and retries once on session expiry."""
        if self.token is None:
            self.login()

        payload = self._send(path, {**params, "token": self.token})
        if not payload.get("ok") and payload.get("error_code") in RETRYABLE_SESSION_ERRORS:
            logger.info("Session rejected (%s), logging in again", payload.get("error_code"))
            self.token = None
            self.login()
            payload = self._send(path, {**params, "token": self.token})
        return self._unwrap(payload)

    def public(self, path: str, **params: Any) -> Any:
        return self._unwrap(self._send(path, params))
