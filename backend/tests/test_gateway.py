from __future__ import annotations

import pytest

from damon_panel.models import PricingSettings
from damon_panel.routers import gateway
from damon_panel.services.pricing import DEFAULT_COEFFICIENTS


def test_missing_path_is_no_path(client) -> None:
    response = client.get("/exec")

    assert response.status_code == 400
    assert response.json() == {"ok": False, "error_code": "NO_PATH", "message": "Path required", "status": 400}


def test_unknown_path_is_not_found_before_auth(call) -> None:
    status, body = call("/no/such/path")

    assert status == 404
    assert body["error_code"] == "NOT_FOUND"


def test_health_is_public(call) -> None:
    status, body = call("/health")

    assert status == 200
    assert body["ok"] is True
    assert body["data"]["status"] == "online"


def test_protected_path_without_token(call) -> None:
    status, body = call("/projects/list")

    assert status == 401
    assert body["error_code"] == "AUTH"


def test_protected_path_with_unknown_token(call) -> None:
    status, body = call("/projects/list", token="stale")

    assert status == 401
    assert body["error_code"] == "INVALID_SESSION"


def test_login_returns_token_user_and_permissions(call, make_user) -> None:
    make_user("employee", username="karimi")

    status, body = call("/auth/login", username="karimi", password="secret123")

    assert status == 200
    data = body["data"]
    assert data["token"]
    assert data["user"]["username"] == "karimi"
    assert "password_hash" not in data["user"]
    assert data["permissions"]["canReviewInquiries"] is False


def test_login_with_wrong_password(call, make_user) -> None:
    make_user("employee", username="karimi")

    status, body = call("/auth/login", username="karimi", password="nope-nope")

    assert status == 401
    assert body["error_code"] == "AUTH"
    assert body["message"] == "Invalid credentials"


def test_login_missing_password_is_validation(call) -> None:
    status, body = call("/auth/login", username="karimi")

    assert status == 422
    assert body["error_code"] == "VALIDATION"
    assert body["message"].startswith("password:")


def test_admin_token_with_bad_key_is_forbidden(call) -> None:
    status, body = call("/auth/admin_token", key="guess")

    assert status == 403
    assert body["error_code"] == "AUTH"
    assert body["message"] == "Invalid Key"


def test_admin_token_then_me(call) -> None:
    _status, body = call("/auth/admin_token", key="test-admin-key")
    token = body["data"]["token"]

    status, me = call("/auth/me", token=token)

    assert status == 200
    assert me["data"]["user"]["role"] == "admin"
    assert me["data"]["permissions"]["canManageSettings"] is True


def test_logout_invalidates_token(call, make_user, login) -> None:
    token = login(make_user("employee"))

    status, body = call("/auth/logout", token=token)
    assert status == 200
    assert body["data"] == {"logged_out": True}

    status, body = call("/projects/list", token=token)
    assert status == 401
    assert body["error_code"] == "INVALID_SESSION"


@pytest.mark.parametrize(
    "path",
    [
        "/admin/users/list",
        "/admin/settings/get",
        "/admin/inquiries/pending",
        "/admin/audit/list",
        "/admin/categories/list",
        "/projects/approve",
    ],
)
def test_employee_is_forbidden_on_reviewer_paths(call, make_user, login, path) -> None:
    token = login(make_user("employee"))

    status, body = call(path, token=token)

    assert status == 403
    assert body["error_code"] == "FORBIDDEN"


def test_employee_can_read_own_notifications(call, make_user, login) -> None:
    token = login(make_user("employee"))

    status, body = call("/notifications/list", token=token)

    assert status == 200
    assert body["data"] == []


def test_post_body_is_merged_over_query(client, make_user) -> None:
    make_user("employee", username="karimi")

    response = client.post(
        "/exec",
        params={"path": "/auth/login", "username": "karimi", "password": "wrong"},
        json={"password": "secret123"},
    )

    assert response.status_code == 200
    assert response.json()["ok"] is True


def test_invalid_settings_value_is_validation(call, make_user, login) -> None:
    token = login(make_user("admin"))

    status, body = call("/admin/settings/update", token=token, rounding_mode="sideways")

    assert status == 422
    assert body["error_code"] == "VALIDATION"


def test_unhandled_error_is_server_error(call, make_user, login, monkeypatch) -> None:
    token = login(make_user("admin"))

    def _boom(**_kwargs):
        raise RuntimeError("stats exploded")

    monkeypatch.setattr("damon_panel.routers.inquiries.inquiry_stats_use_case", _boom)
    monkeypatch.setattr(gateway.settings, "DEBUG", False)

    status, body = call("/admin/inquiries/stats", token=token)

    assert status == 500
    assert body["error_code"] == "SERVER_ERROR"
    assert body["message"] == "Internal server error"


def test_project_and_inquiry_workflow(call, db, make_user, make_device, login) -> None:
    admin = make_user("admin", full_name="Site Admin")
    employee = make_user("employee", full_name="Ali Karimi")
    device = make_device()
    db.add(PricingSettings(version=1, **{**DEFAULT_COEFFICIENTS.as_dict(), "rounding_mode": "ceil", "rounding_step": 1000.0}))
    db.commit()
    admin_token = login(admin)
    employee_token = login(employee)

    _status, body = call(
        "/projects/create",
        token=employee_token,
        project_name="Milad Hospital",
        tehran_lat="35.74",
        tehran_lng="51.37",
    )
    project_id = body["data"]["id"]

    status, body = call("/projects/approve", token=admin_token, project_id=project_id, note="ok")
    assert status == 200
    assert body["data"] == {"status": "approved"}

    status, body = call("/projects/approve", token=admin_token, project_id=project_id)
    assert status == 409
    assert body["error_code"] == "INVALID_STATUS"

    _status, body = call(
        "/inquiries/quote", token=employee_token, project_id=project_id, device_id=device.id, quantity="2"
    )
    quote = body["data"]
    assert quote["price_visible"] is False
    assert quote["sell_price_eur"] is None

    _status, body = call("/admin/inquiries/stats", token=admin_token)
    assert body["data"] == {"total": 1, "pending": 1, "approved": 0, "rejected": 0}

    _status, body = call("/admin/inquiries/pending", token=admin_token)
    assert body["data"][0]["unit_price_eur"] == 5000.0
    assert body["data"][0]["requested_by_name"] == "Ali Karimi"

    status, body = call("/admin/inquiries/approve", token=admin_token, inquiry_id=quote["inquiry_id"])
    assert status == 200

    _status, body = call("/projects/detail", token=employee_token, id=project_id)
    inquiry_view = body["data"]["inquiries"][0]
    assert inquiry_view["price_visible"] is True
    assert inquiry_view["total_price_eur"] == 10000.0
    assert [h["to_status"] for h in body["data"]["status_history"]] == ["pending_approval", "approved"]

    _status, body = call("/notifications/list", token=employee_token)
    assert {n["type"] for n in body["data"]} == {"PROJECT_STATUS_CHANGED", "INQUIRY_STATUS_CHANGED"}

    _status, body = call("/admin/audit/list", token=admin_token)
    actions = {entry["action_type"] for entry in body["data"]}
    assert {"LOGIN", "CREATE_PROJECT", "APPROVE_PROJECT", "ADD_INQUIRY", "APPROVE_INQUIRY"} <= actions
