"""Staff workflow, contract catalogue and admin user management."""

from datetime import date
from decimal import Decimal

import pytest

from contracthub.models.contract import BillingStatus
from contracthub.models.customer import CustomerStatus
from contracthub.rbac.permissions import Role
from contracthub.services.contract_service import add_years, compute_net_amount
from tests.helpers import (
    auth_headers,
    make_contract,
    make_customer,
    make_portal_customer,
    make_product,
    make_reseller,
    make_user,
)


class TestCustomerWorkflow:
    def test_paged_listing(self, client, store):
        manager = make_user(store, Role.MANAGER)
        for i in range(3):
            make_customer(store, status=CustomerStatus.PENDING_APPROVAL, email=f"p{i}@example.com")
        make_customer(store, status=CustomerStatus.ACTIVE)

        res = client.get(
            "/api/staff/customers?status=pending_approval&page=1&limit=2",
            headers=auth_headers(manager),
        )

        assert res.status_code == 200
        page = res.json()["data"]
        assert page["total"] == 3
        assert page["pages"] == 2
        assert len(page["items"]) == 2

    def test_filter_by_assignee(self, client, store):
        manager = make_user(store, Role.MANAGER)
        mine = make_customer(store)
        mine.assigned_to_id = manager.id
        make_customer(store)

        res = client.get(f"/api/staff/customers?assignedTo={manager.id}", headers=auth_headers(manager))

        assert [c["id"] for c in res.json()["data"]["items"]] == [mine.id]

    def test_assign_to_staff(self, client, store):
        manager = make_user(store, Role.MANAGER)
        sales = make_user(store, Role.SALES)
        customer = make_customer(store)

        res = client.put(
            f"/api/staff/customers/{customer.id}/assign",
            json={"staffId": sales.id},
            headers=auth_headers(manager),
        )

        assert res.status_code == 200
        data = res.json()["data"]
        assert data["assignedToId"] == sales.id
        assert data["assignedTo"]["name"] == sales.name

    def test_assign_to_customer_user_is_rejected(self, client, store):
        manager = make_user(store, Role.MANAGER)
        portal_user = make_user(store, Role.CUSTOMER)
        customer = make_customer(store)

        res = client.put(
            f"/api/staff/customers/{customer.id}/assign",
            json={"staffId": portal_user.id},
            headers=auth_headers(manager),
        )

        assert res.status_code == 400
        assert res.json()["error"] == "Invalid staff member"

    def test_sales_cannot_assign(self, client, store):
        sales = make_user(store, Role.SALES)
        customer = make_customer(store)

        res = client.put(
            f"/api/staff/customers/{customer.id}/assign",
            json={"staffId": sales.id},
            headers=auth_headers(sales),
        )

        assert res.status_code == 403

    def test_notes_are_length_checked(self, client, store):
        support = make_user(store, Role.SUPPORT)
        customer = make_customer(store)

        too_long = client.put(
            f"/api/staff/customers/{customer.id}/notes",
            json={"notes": "x" * 1001},
            headers=auth_headers(support),
        )
        assert too_long.status_code == 400

        ok = client.put(
            f"/api/staff/customers/{customer.id}/notes",
            json={"notes": "Called back"},
            headers=auth_headers(support),
        )
        assert ok.status_code == 200
        assert customer.notes == "Called back"

    def test_stats(self, client, store):
        finance = make_user(store, Role.FINANCE)
        make_customer(store, status=CustomerStatus.ACTIVE)
        make_customer(store, status=CustomerStatus.ACTIVE)
        make_customer(store, status=CustomerStatus.SUSPENDED)
        make_customer(store, status=CustomerStatus.PENDING_APPROVAL)

        res = client.get("/api/staff/stats", headers=auth_headers(finance))

        assert res.json()["data"] == {"total": 4, "active": 2, "pending": 1, "suspended": 1, "inactive": 0}

    def test_staff_directory_lists_active_staff_only(self, client, store):
        manager = make_user(store, Role.MANAGER)
        make_user(store, Role.SALES, is_active=False)
        make_user(store, Role.CUSTOMER)

        res = client.get("/api/staff/staff", headers=auth_headers(manager))

        assert [u["id"] for u in res.json()["data"]] == [manager.id]


class TestContracts:
    def test_add_years_handles_leap_day(self):
        assert add_years(date(2024, 2, 29), 1) == date(2025, 2, 28)
        assert add_years(date(2024, 3, 1), 3) == date(2027, 3, 1)

    def test_net_amount(self):
        assert compute_net_amount(Decimal("1000"), Decimal("12.5")) == Decimal("875.00")
        assert compute_net_amount(Decimal("99.99"), Decimal("0")) == Decimal("99.99")

    def test_create_uses_reseller_margin(self, client, store):
        sales = make_user(store, Role.SALES)
        customer = make_customer(store)
        product = make_product(store)
        reseller = make_reseller(store, margin="20")

        res = client.post(
            "/api/contracts",
            json={
                "customerId": customer.id,
                "productId": product.id,
                "resellerId": reseller.id,
                "contractTerm": 3,
                "startDate": "2024-01-15",
                "amount": "500.00",
            },
            headers=auth_headers(sales),
        )

        assert res.status_code == 201
        data = res.json()["data"]
        assert Decimal(data["resellerMargin"]) == Decimal("20")
        assert Decimal(data["netAmount"]) == Decimal("400.00")
        assert data["endDate"] == "2027-01-15"
        assert data["billingStatus"] == "PENDING"
        assert data["reseller"]["name"] == "Channel Co"

    @pytest.mark.parametrize(
        "override, message",
        [
            ({"customerId": 999}, "Customer not found"),
            ({"productId": 999}, "Product not found"),
            ({"resellerId": 999}, "Reseller not found"),
            ({"endDate": "2023-12-31"}, "End date must not be before start date"),
        ],
    )
    def test_create_rejects_bad_references(self, client, store, override, message):
        sales = make_user(store, Role.SALES)
        customer = make_customer(store)
        product = make_product(store)
        body = {
            "customerId": customer.id,
            "productId": product.id,
            "startDate": "2024-01-01",
            "amount": "100",
            **override,
        }

        res = client.post("/api/contracts", json=body, headers=auth_headers(sales))

        assert res.status_code == 400
        assert res.json()["error"] == message
        assert store.contracts.rows == {}

    def test_list_by_billing_status(self, client, store):
        viewer = make_user(store, Role.VIEWER)
        customer = make_customer(store)
        product = make_product(store)
        late = make_contract(store, customer, product, BillingStatus.LATE)
        make_contract(store, customer, product, BillingStatus.PAID)

        res = client.get("/api/contracts/status/LATE", headers=auth_headers(viewer))

        assert res.status_code == 200
        assert [c["id"] for c in res.json()["data"]] == [late.id]

    def test_viewer_cannot_create(self, client, store):
        viewer = make_user(store, Role.VIEWER)

        res = client.post("/api/contracts", json={}, headers=auth_headers(viewer))

        assert res.status_code == 403
        assert store.contracts.rows == {}


class TestAdminUsers:
    @pytest.fixture
    def admin(self, store):
        return make_user(store, Role.ADMIN)

    def test_create_staff_user(self, client, store, admin):
        res = client.post(
            "/api/admin/users",
            json={"name": "Sally", "email": "sally@example.com", "password": "longenough", "role": "sales"},
            headers=auth_headers(admin),
        )

        assert res.status_code == 201
        assert res.json()["data"]["role"] == "sales"

    def test_customer_accounts_are_not_created_here(self, client, store, admin):
        res = client.post(
            "/api/admin/users",
            json={"name": "C", "email": "c@example.com", "password": "longenough", "role": "customer"},
            headers=auth_headers(admin),
        )

        assert res.status_code == 400

    def test_duplicate_email(self, client, store, admin):
        res = client.post(
            "/api/admin/users",
            json={"name": "Again", "email": admin.email, "password": "longenough"},
            headers=auth_headers(admin),
        )

        assert res.status_code == 409

    def test_admin_cannot_deactivate_self(self, client, store, admin):
        res = client.put(f"/api/admin/users/{admin.id}/status", json={"isActive": False}, headers=auth_headers(admin))

        assert res.status_code == 400
        assert res.json()["error"] == "Cannot deactivate your own account"
        assert admin.is_active is True

    def test_deactivate_other_user(self, client, store, admin):
        sales = make_user(store, Role.SALES)

        res = client.put(f"/api/admin/users/{sales.id}/status", json={"isActive": False}, headers=auth_headers(admin))

        assert res.status_code == 200
        assert res.json()["message"] == "User deactivated successfully"
        assert client.get("/api/customers", headers=auth_headers(sales)).status_code == 401

    def test_role_change_takes_effect_immediately(self, client, store, admin):
        viewer = make_user(store, Role.VIEWER)
        payload = {"firstName": "Ada", "lastName": "Lovelace", "email": "ada@example.com"}
        assert client.post("/api/customers", json=payload, headers=auth_headers(viewer)).status_code == 403

        res = client.put(f"/api/admin/users/{viewer.id}", json={"role": "sales"}, headers=auth_headers(admin))
        assert res.status_code == 200

        assert client.post("/api/customers", json=payload, headers=auth_headers(viewer)).status_code == 201

    def test_admin_cannot_delete_self(self, client, store, admin):
        res = client.delete(f"/api/admin/users/{admin.id}", headers=auth_headers(admin))

        assert res.status_code == 400
        assert res.json()["error"] == "Cannot delete your own account"

    @pytest.mark.parametrize("method, path_suffix, body", [("put", "/status", {"isActive": False}), ("delete", "", None)])
    def test_customer_accounts_go_through_customer_access(self, client, store, admin, method, path_suffix, body):
        user, customer = make_portal_customer(store)
        kwargs = {"headers": auth_headers(admin)}
        if body is not None:
            kwargs["json"] = body

        res = getattr(client, method)(f"/api/admin/users/{user.id}{path_suffix}", **kwargs)

        assert res.status_code == 400
        assert res.json()["error"] == "Customer accounts are managed through customer access"
        assert user.is_active is True
        assert customer.can_login is True
        assert user.id in store.users.rows
