from __future__ import annotations

import hashlib
from datetime import datetime, timedelta, timezone

import pytest

from damon_panel.domain_errors import DomainError
from damon_panel.models import AuditLog, AuthSession, User
from damon_panel.use_cases.sessions import (
    admin_token_use_case,
    login_use_case,
    logout_use_case,
    require_session,
)


def test_login_opens_session_and_audits(db, make_user, client_info) -> None:
    user = make_user("employee", username="karimi")

    session, logged_in = login_use_case(db=db, username="karimi", password="secret123", client=client_info)

    assert logged_in.id == user.id
    assert session.token
    assert session.is_active is True
    assert session.ip_address == "127.0.0.1"
    audit = db.query(AuditLog).filter(AuditLog.action_type == "LOGIN").one()
    assert audit.actor_user_id == user.id
    assert audit.meta == {"success": True}


@pytest.mark.parametrize(("username", "password"), [("karimi", "wrong-pass"), ("nobody", "secret123")])
def test_login_rejects_bad_credentials(db, make_user, client_info, username, password) -> None:
    make_user("employee", username="karimi")

    with pytest.raises(DomainError) as exc_info:
        login_use_case(db=db, username=username, password=password, client=client_info)

    assert exc_info.value.code == "AUTH"
    assert exc_info.value.http_status == 401
    assert exc_info.value.message == "Invalid credentials"
    assert db.query(AuthSession).count() == 0


def test_login_rejects_inactive_user(db, make_user, client_info) -> None:
    make_user("employee", username="karimi", is_active=False)

    with pytest.raises(DomainError) as exc_info:
        login_use_case(db=db, username="karimi", password="secret123", client=client_info)

    assert exc_info.value.code == "AUTH"


def test_login_accepts_legacy_salted_hash(db, client_info) -> None:
    salt = "f00dfeed"
    db.add(
        User(
            username="legacy",
            full_name="Legacy User",
            role="employee",
            password_salt=salt,
            password_hash=hashlib.sha256((salt + "old-password").encode("utf-8")).hexdigest(),
        )
    )
    db.commit()

    _session, user = login_use_case(db=db, username="legacy", password="old-password", client=client_info)

    assert user.username == "legacy"


def test_require_session_resolves_user(db, make_user, client_info) -> None:
    make_user("sales_manager", username="rahimi")
    session, _user = login_use_case(db=db, username="rahimi", password="secret123", client=client_info)

    user, resolved = require_session(db=db, token=session.token)

    assert user.username == "rahimi"
    assert resolved.id == session.id


def test_require_session_without_token(db) -> None:
    with pytest.raises(DomainError) as exc_info:
        require_session(db=db, token=None)

    assert exc_info.value.code == "AUTH"
    assert exc_info.value.message == "Token missing"


def test_require_session_unknown_token(db) -> None:
    with pytest.raises(DomainError) as exc_info:
        require_session(db=db, token="no-such-token")

    assert exc_info.value.code == "INVALID_SESSION"
    assert exc_info.value.http_status == 401


def test_require_session_expired(db, make_user, client_info) -> None:
    make_user("employee", username="karimi")
    session, _user = login_use_case(db=db, username="karimi", password="secret123", client=client_info)
    session.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
    db.commit()

    with pytest.raises(DomainError) as exc_info:
        require_session(db=db, token=session.token)

    assert exc_info.value.code == "SESSION_EXPIRED"


def test_require_session_for_deactivated_user(db, make_user, client_info) -> None:
    user = make_user("employee", username="karimi")
    session, _user = login_use_case(db=db, username="karimi", password="secret123", client=client_info)
    user.is_active = False
    db.commit()

    with pytest.raises(DomainError) as exc_info:
        require_session(db=db, token=session.token)

    assert exc_info.value.code == "AUTH"


def test_logout_deactivates_session(db, make_user, client_info) -> None:
    make_user("employee", username="karimi")
    session, _user = login_use_case(db=db, username="karimi", password="secret123", client=client_info)

    assert logout_use_case(db=db, token=session.token) is True
    assert logout_use_case(db=db, token=session.token) is False
    assert logout_use_case(db=db, token="") is False

    with pytest.raises(DomainError) as exc_info:
        require_session(db=db, token=session.token)
    assert exc_info.value.code == "INVALID_SESSION"


def test_admin_token_creates_bootstrap_admin_once(db, client_info) -> None:
    first_session, admin = admin_token_use_case(db=db, key="test-admin-key", client=client_info)
    second_session, same_admin = admin_token_use_case(db=db, key="test-admin-key", client=client_info)

    assert admin.username == "admin"
    assert admin.role == "admin"
    assert same_admin.id == admin.id
    assert first_session.token != second_session.token
    assert db.query(User).filter(User.username == "admin").count() == 1


def test_admin_token_rejects_wrong_key(db, client_info) -> None:
    with pytest.raises(DomainError) as exc_info:
        admin_token_use_case(db=db, key="guess", client=client_info)

    assert exc_info.value.code == "AUTH"
    assert exc_info.value.http_status == 403
    assert exc_info.value.message == "Invalid Key"
    assert db.query(User).count() == 0
