"""Login, logout and session-token validation."""
from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from ..auth import generate_session_token, hash_password, verify_password
from ..config import settings
from ..database import locked_write
from ..domain_errors import DomainError
from ..models import AuthSession, User
from .audit import ClientInfo, record_audit

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(dt: datetime | None) -> datetime | None:
    if dt is None:
        return None
    if dt.tzinfo is None or dt.tzinfo.utcoffset(dt) is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _auth_error(message: str, code: str = "AUTH") -> DomainError:
    return DomainError(code=code, http_status=401, message=message)


def _new_session(user: User, client: ClientInfo) -> AuthSession:
    return AuthSession(
        token=generate_session_token(),
        user_id=user.id,
        is_active=True,
        expires_at=_utc_now() + timedelta(hours=settings.SESSION_TTL_HOURS),
        ip_address=client.ip_address,
        user_agent=client.user_agent,
    )


def login_use_case(*, db: Session, username: str, password: str, client: ClientInfo) -> tuple[AuthSession, User]:
    """Check credentials of an active user and open a session."""
    user = db.query(User).filter(
        User.username == username,
        User.is_active.is_(True),
    ).first()
    if user is None or not verify_password(password, user):
        logger.warning("Failed login for username=%r", username)
        raise _auth_error("Invalid credentials")

    session = _new_session(user, client)
    with locked_write(db):
        db.add(session)
        record_audit(db, actor=user, action="LOGIN", client=client, meta={"success": True})
    logger.info("User %s logged in", user.username)
    return session, user


def logout_use_case(*, db: Session, token: str) -> bool:
    """Deactivate the session; unknown tokens are not an error."""
    if not token:
        return False
    session = db.query(AuthSession).filter(AuthSession.token == token).first()
    if session is None or not session.is_active:
        return False
    with locked_write(db):
        session.is_active = False
    return True


def _ensure_bootstrap_admin(db: Session) -> User:
    """Find or stage the bootstrap admin account (caller holds the write lock)."""
    admin = db.query(User).filter(User.username == settings.BOOTSTRAP_ADMIN_USERNAME).first()
    if admin is not None:
        return admin

    password = settings.BOOTSTRAP_ADMIN_PASSWORD or secrets.token_urlsafe(24)
    admin = User(
        username=settings.BOOTSTRAP_ADMIN_USERNAME,
        full_name=settings.BOOTSTRAP_ADMIN_FULL_NAME,
        role="admin",
        password_hash=hash_password(password),
        is_active=True,
    )
    db.add(admin)
    db.flush()
    logger.info("Bootstrap admin %s created", admin.username)
    return admin


def admin_token_use_case(*, db: Session, key: str, client: ClientInfo) -> tuple[AuthSession, User]:
    """Shared-key login for the panel frontend; creates the admin user on first use."""
    expected = settings.ADMIN_TOKEN_KEY
    if not expected or not key or not secrets.compare_digest(key, expected):
        raise DomainError(code="AUTH", http_status=403, message="Invalid Key")

    with locked_write(db):
        admin = _ensure_bootstrap_admin(db)
        if not admin.is_active:
            raise _auth_error("User not found or inactive")
        session = _new_session(admin, client)
        db.add(session)
    return session, admin


def require_session(*, db: Session, token: str | None) -> tuple[User, AuthSession]:
    """Resolve a token to its active session and user."""
    if not token:
        raise _auth_error("Token missing")

    session = db.query(AuthSession).filter(
        AuthSession.token == token,
        AuthSession.is_active.is_(True),
    ).first()
    if session is None:
        raise _auth_error("Session invalid or expired", code="INVALID_SESSION")

    expires_at = _as_utc(session.expires_at)
    if expires_at is not None and expires_at < _utc_now():
        raise _auth_error("Session expired", code="SESSION_EXPIRED")

    user = db.query(User).filter(User.id == session.user_id).first()
    if user is None or not user.is_active:
        raise _auth_error("User not found or inactive")
    return user, session
