"""Customer status machine: who may move a customer where, and what gets recorded."""

import pytest

from contracthub.core.errors import AuthorizationDenied
from contracthub.models.customer import CustomerStatus
from contracthub.rbac.permissions import Permission, Role
from contracthub.rbac.principal import Principal
from contracthub.services.customer_service import required_permission_for, transition_status
from tests.helpers import auth_headers, make_customer, make_store, make_user


def _principal(user):
    return Principal(user=user, role=user.role)


@pytest.mark.parametrize(
    "current, target, expected",
    [
        (CustomerStatus.PENDING_APPROVAL, CustomerStatus.ACTIVE, Permission.CUSTOMER_APPROVE),
        (CustomerStatus.ACTIVE, CustomerStatus.SUSPENDED, Permission.CUSTOMER_SUSPEND),
        (CustomerStatus.PENDING_APPROVAL, CustomerStatus.SUSPENDED, Permission.CUSTOMER_SUSPEND),
        (CustomerStatus.SUSPENDED, CustomerStatus.ACTIVE, Permission.CUSTOMER_UPDATE),
        (CustomerStatus.ACTIVE, CustomerStatus.INACTIVE, Permission.CUSTOMER_UPDATE),
    ],
)
def test_required_permission(current, target, expected):
    assert required_permission_for(current, target) == expected


def test_approval_records_approver_once():
    store = make_store()
    first = make_user(store, Role.MANAGER)
    second = make_user(store, Role.ADMIN)
    customer = make_customer(store, status=CustomerStatus.PENDING_APPROVAL)

    transition_status(customer, CustomerStatus.ACTIVE, _principal(first))
    approved_at = customer.approved_at
    assert customer.status == CustomerStatus.ACTIVE
    assert customer.approved_by_id == first.id
    assert approved_at is not None

    transition_status(customer, CustomerStatus.SUSPENDED, _principal(second))
    transition_status(customer, CustomerStatus.PENDING_APPROVAL, _principal(second))
    transition_status(customer, CustomerStatus.ACTIVE, _principal(second))

    assert customer.status == CustomerStatus.ACTIVE
    assert customer.approved_by_id == first.id
    assert customer.approved_at == approved_at


def test_suspension_needs_suspend_permission():
    store = make_store()
    sales = make_user(store, Role.SALES)
    customer = make_customer(store, status=CustomerStatus.ACTIVE)

    with pytest.raises(AuthorizationDenied):
        transition_status(customer, CustomerStatus.SUSPENDED, _principal(sales))

    assert customer.status == CustomerStatus.ACTIVE


def test_plain_change_needs_only_update():
    store = make_store()
    support = make_user(store, Role.SUPPORT)
    customer = make_customer(store, status=CustomerStatus.SUSPENDED)

    transition_status(customer, CustomerStatus.ACTIVE, _principal(support))

    assert customer.status == CustomerStatus.ACTIVE
    assert customer.approved_by_id is None


class TestStatusRoute:
    def test_support_cannot_approve(self, client, store):
        support = make_user(store, Role.SUPPORT)
        customer = make_customer(store, status=CustomerStatus.PENDING_APPROVAL)

        res = client.put(
            f"/api/staff/customers/{customer.id}/status",
            json={"status": "active"},
            headers=auth_headers(support),
        )

        assert res.status_code == 403
        assert customer.status == CustomerStatus.PENDING_APPROVAL

    def test_manager_approves(self, client, store):
        manager = make_user(store, Role.MANAGER)
        customer = make_customer(store, status=CustomerStatus.PENDING_APPROVAL)

        res = client.put(
            f"/api/staff/customers/{customer.id}/status",
            json={"status": "active", "notes": "KYC complete"},
            headers=auth_headers(manager),
        )

        assert res.status_code == 200
        data = res.json()["data"]
        assert data["status"] == "active"
        assert data["approvedById"] == manager.id
        assert data["approvedAt"] is not None
        assert data["notes"] == "KYC complete"

    def test_viewer_cannot_change_status(self, client, store):
        viewer = make_user(store, Role.VIEWER)
        customer = make_customer(store, status=CustomerStatus.ACTIVE)

        res = client.put(
            f"/api/staff/customers/{customer.id}/status",
            json={"status": "inactive"},
            headers=auth_headers(viewer),
        )

        assert res.status_code == 403

    def test_unknown_customer(self, client, store):
        manager = make_user(store, Role.MANAGER)

        res = client.put("/api/staff/customers/999/status", json={"status": "active"}, headers=auth_headers(manager))

        assert res.status_code == 404
        assert res.json()["error"] == "Customer not found"

    def test_unknown_status_value(self, client, store):
        manager = make_user(store, Role.MANAGER)
        customer = make_customer(store)

        res = client.put(
            f"/api/staff/customers/{customer.id}/status",
            json={"status": "archived"},
            headers=auth_headers(manager),
        )

        assert res.status_code == 400
        assert res.json()["code"] == "VALIDATION_FAILED"
