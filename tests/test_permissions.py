"""Tests for the static role → permission table."""

import pytest

from contracthub.rbac.permissions import (
    ALL_PERMISSIONS,
    ROLE_INFO,
    ROLE_PERMISSIONS,
    STAFF_ROLES,
    Permission,
    Role,
    has_permission,
    is_staff_role,
    permissions_for,
)


def test_every_role_has_an_entry():
    assert set(ROLE_PERMISSIONS) == set(Role)
    assert set(ROLE_INFO) == set(Role)


def test_admin_holds_everything():
    assert permissions_for(Role.ADMIN) == ALL_PERMISSIONS


def test_customer_holds_nothing():
    assert permissions_for(Role.CUSTOMER) == frozenset()
    for permission in Permission:
        assert has_permission(Role.CUSTOMER, permission) is False


def test_support_role_scope():
    support = permissions_for(Role.SUPPORT)
    assert support == {
        Permission.CUSTOMER_READ,
        Permission.CUSTOMER_UPDATE,
        Permission.CONTRACT_READ,
        Permission.CONTRACT_UPDATE,
        Permission.PRODUCT_READ,
        Permission.RESELLER_READ,
        Permission.PO_READ,
        Permission.PO_APPROVE,
        Permission.PO_REJECT,
    }
    assert has_permission(Role.SUPPORT, Permission.PO_APPROVE)
    assert not has_permission(Role.SUPPORT, Permission.CUSTOMER_DELETE)
    assert not has_permission(Role.SUPPORT, Permission.CUSTOMER_APPROVE)


def test_only_admin_deletes_or_manages_users():
    admin_only = {
        Permission.CUSTOMER_DELETE,
        Permission.CONTRACT_DELETE,
        Permission.PRODUCT_DELETE,
        Permission.RESELLER_DELETE,
        Permission.USER_CREATE,
        Permission.USER_UPDATE,
        Permission.USER_DELETE,
        Permission.SETTINGS_UPDATE,
    }
    for role in Role:
        if role is Role.ADMIN:
            continue
        assert not (permissions_for(role) & admin_only), role


def test_manager_cannot_delete_customers():
    assert has_permission(Role.MANAGER, Permission.CUSTOMER_APPROVE)
    assert not has_permission(Role.MANAGER, Permission.CUSTOMER_DELETE)


def test_finance_approves_but_does_not_reject():
    assert has_permission(Role.FINANCE, Permission.PO_APPROVE)
    assert not has_permission(Role.FINANCE, Permission.PO_REJECT)


def test_string_inputs_are_accepted():
    assert has_permission("sales", "customer.create")
    assert not has_permission("viewer", "customer.create")


@pytest.mark.parametrize(
    "role, permission",
    [
        ("superuser", "customer.read"),
        (None, "customer.read"),
        ("admin", "customer.teleport"),
        ("admin", None),
    ],
)
def test_unknown_inputs_fail_closed(role, permission):
    assert has_permission(role, permission) is False


def test_unknown_role_has_no_permissions():
    assert permissions_for("superuser") == frozenset()


def test_staff_roles_exclude_customer():
    assert Role.CUSTOMER not in STAFF_ROLES
    assert is_staff_role("viewer")
    assert not is_staff_role(Role.CUSTOMER)
    assert not is_staff_role("nobody")


def test_table_is_read_only():
    with pytest.raises(TypeError):
        ROLE_PERMISSIONS[Role.USER] = ALL_PERMISSIONS  # type: ignore[index]
