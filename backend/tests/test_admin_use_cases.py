from __future__ import annotations

import pytest

from damon_panel.domain_errors import DomainError
from damon_panel.models import AuditLog, Category, Device, Notification, PricingSettings, User
from damon_panel.schemas import (
    CategoryCreate,
    CategoryUpdate,
    DeviceCreate,
    DeviceSearchRequest,
    DeviceUpdate,
    SettingsUpdate,
    UserCreate,
)
from damon_panel.use_cases.audit import list_audit_logs_use_case, record_audit
from damon_panel.use_cases.catalog import (
    create_category_use_case,
    create_device_use_case,
    delete_device_use_case,
    list_categories_use_case,
    search_devices_use_case,
    update_category_use_case,
    update_device_use_case,
)
from damon_panel.use_cases.notifications import (
    get_super_admin,
    list_notifications_use_case,
    mark_notification_read_use_case,
    queue_notification,
)
from damon_panel.use_cases.pricing_settings import get_settings_use_case, update_settings_use_case
from damon_panel.use_cases.users import create_user_use_case, delete_user_use_case, list_staff_use_case


# Pricing settings

def test_settings_default_to_version_zero(db) -> None:
    view = get_settings_use_case(db=db)

    assert view["version"] == 0
    assert view["id"] is None
    assert view["discount_multiplier"] == 0.38


def test_settings_update_appends_versions_and_carries_fields(db, make_user, client_info) -> None:
    admin = make_user("admin")

    first = update_settings_use_case(
        db=db, payload=SettingsUpdate(rounding_mode="ceil", rounding_step=100), current_user=admin, client=client_info
    )
    second = update_settings_use_case(
        db=db, payload=SettingsUpdate(profit_factor=0.7), current_user=admin, client=client_info
    )

    assert (first.version, second.version) == (1, 2)
    assert second.rounding_mode == "ceil"
    assert second.rounding_step == 100.0
    assert second.profit_factor == 0.7
    assert db.query(PricingSettings).count() == 2

    view = get_settings_use_case(db=db)
    assert view["version"] == 2
    assert view["created_by_user_id"] == admin.id
    assert db.query(AuditLog).filter(AuditLog.action_type == "UPDATE_SETTINGS").count() == 2


def test_settings_update_without_fields_is_rejected(db, make_user, client_info) -> None:
    with pytest.raises(DomainError) as exc_info:
        update_settings_use_case(db=db, payload=SettingsUpdate(), current_user=make_user("admin"), client=client_info)

    assert exc_info.value.code == "VALIDATION"
    assert db.query(PricingSettings).count() == 0


# Users

def test_create_user_defaults_full_name_and_audits(db, make_user, client_info) -> None:
    admin = make_user("admin")

    user = create_user_use_case(
        db=db,
        payload=UserCreate(username="karimi", password="karimi-pass", role="employee"),
        current_user=admin,
        client=client_info,
    )

    assert user.full_name == "karimi"
    assert user.password_hash != "karimi-pass"
    audit = db.query(AuditLog).filter(AuditLog.action_type == "CREATE_USER").one()
    assert audit.meta == {"target_user": "karimi", "role": "employee"}


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({"username": "", "password": "whatever"}, "Username/Password required"),
        ({"username": "karimi", "password": "abc"}, "Password must be at least 6 characters"),
        ({"username": "taken", "password": "long-enough"}, "Username already exists"),
    ],
)
def test_create_user_validation(db, make_user, client_info, payload, message) -> None:
    admin = make_user("admin", username="taken")

    with pytest.raises(DomainError) as exc_info:
        create_user_use_case(db=db, payload=UserCreate(**payload), current_user=admin, client=client_info)

    assert exc_info.value.code == "VALIDATION"
    assert exc_info.value.message == message


def test_delete_user_rules(db, make_user, client_info) -> None:
    admin = make_user("admin")
    employee = make_user("employee")

    with pytest.raises(DomainError) as exc_info:
        delete_user_use_case(db=db, user_id=admin.id, current_user=admin, client=client_info)
    assert exc_info.value.code == "VALIDATION"

    delete_user_use_case(db=db, user_id=employee.id, current_user=admin, client=client_info)
    assert db.query(User).filter(User.id == employee.id).first() is None

    with pytest.raises(DomainError) as exc_info:
        delete_user_use_case(db=db, user_id=employee.id, current_user=admin, client=client_info)
    assert exc_info.value.code == "NOT_FOUND"


def test_staff_lists_active_users_only(db, make_user) -> None:
    active = make_user("employee")
    make_user("employee", is_active=False)

    assert [member.id for member in list_staff_use_case(db=db)] == [active.id]


# Catalog

def test_category_lifecycle(db, make_user, client_info) -> None:
    admin = make_user("admin")
    category = create_category_use_case(
        db=db, payload=CategoryCreate(category_name="Chillers"), current_user=admin, client=client_info
    )

    update_category_use_case(
        db=db, payload=CategoryUpdate(id=category.id, is_active=False), current_user=admin, client=client_info
    )

    assert [c.id for c in list_categories_use_case(db=db)] == [category.id]
    assert list_categories_use_case(db=db, active_only=True) == []
    audit = db.query(AuditLog).filter(AuditLog.action_type == "UPDATE_CATEGORY").one()
    assert audit.meta["changed"] == ["is_active"]


def test_device_requires_existing_category(db, make_user, client_info) -> None:
    with pytest.raises(DomainError) as exc_info:
        create_device_use_case(
            db=db,
            payload=DeviceCreate(category_id="missing", model_name="X-1"),
            current_user=make_user("admin"),
            client=client_info,
        )

    assert exc_info.value.code == "NOT_FOUND"
    assert db.query(Device).count() == 0


def test_device_search_update_and_delete(db, make_user, client_info) -> None:
    admin = make_user("admin")
    pumps = Category(category_name="Pumps")
    db.add(pumps)
    db.commit()
    inline = create_device_use_case(
        db=db,
        payload=DeviceCreate(category_id=pumps.id, model_name="P-50 Inline", factory_pricelist_eur=1000),
        current_user=admin,
        client=client_info,
    )
    booster = create_device_use_case(
        db=db,
        payload=DeviceCreate(category_id=pumps.id, model_name="B-20 Booster"),
        current_user=admin,
        client=client_info,
    )

    found = search_devices_use_case(db=db, payload=DeviceSearchRequest(query="inline", category_id=pumps.id))
    assert found == [{"device_id": inline.id, "model_name": "P-50 Inline", "category_id": pumps.id}]

    update_device_use_case(
        db=db, payload=DeviceUpdate(id=booster.id, is_active=False), current_user=admin, client=client_info
    )
    assert [d["device_id"] for d in search_devices_use_case(db=db, payload=DeviceSearchRequest())] == [inline.id]

    delete_device_use_case(db=db, device_id=inline.id, current_user=admin, client=client_info)
    assert db.query(Device).filter(Device.id == inline.id).first() is None
    assert db.query(AuditLog).filter(AuditLog.action_type == "DELETE_DEVICE").count() == 1


# Notifications and audit

def test_super_admin_is_first_active_admin(db, make_user) -> None:
    first = make_user("admin")
    make_user("admin")
    make_user("sales_manager")

    assert get_super_admin(db).id == first.id


def test_notifications_are_private_and_mark_read_is_idempotent(db, make_user) -> None:
    owner = make_user("employee")
    stranger = make_user("employee")
    notification = queue_notification(
        db, type="PROJECT_STATUS_CHANGED", target_user_id=owner.id, message="Your project was approved"
    )
    db.commit()

    assert [n.id for n in list_notifications_use_case(db=db, current_user=owner)] == [notification.id]
    assert list_notifications_use_case(db=db, current_user=stranger) == []

    with pytest.raises(DomainError) as exc_info:
        mark_notification_read_use_case(db=db, notification_id=notification.id, current_user=stranger)
    assert exc_info.value.code == "NOT_FOUND"

    mark_notification_read_use_case(db=db, notification_id=notification.id, current_user=owner)
    mark_notification_read_use_case(db=db, notification_id=notification.id, current_user=owner)
    assert db.query(Notification).one().is_read is True


def test_audit_list_resolves_actor_names(db, make_user, client_info) -> None:
    actor = make_user("admin", full_name="Site Admin")
    record_audit(db, actor=actor, action="LOGIN", client=client_info, meta={"success": True})
    db.commit()

    entries = list_audit_logs_use_case(db=db)

    assert len(entries) == 1
    assert entries[0].actor_name == "Site Admin"
    assert entries[0].ip_address == "127.0.0.1"
    assert entries[0].user_agent == "pytest"
