"""Customer portal: scoping to the caller's own profile."""

from datetime import date
from decimal import Decimal

from contracthub.models.contract import BillingStatus
from tests.helpers import (
    auth_headers,
    make_contract,
    make_portal_customer,
    make_product,
    make_purchase_order,
)


def test_dashboard_only_shows_own_data(client, store):
    user, customer = make_portal_customer(store)
    _, other = make_portal_customer(store)
    product = make_product(store)
    make_product(store, name="Retired Plan", is_active=False)
    mine_active = make_contract(store, customer, product, BillingStatus.PAID, amount="100.00")
    mine_pending = make_contract(store, customer, product, BillingStatus.PENDING, amount="50.50")
    make_contract(store, other, product, BillingStatus.PAID, amount="9999.00")
    make_purchase_order(store, mine_active)

    res = client.get("/api/customer-portal/dashboard", headers=auth_headers(user))

    assert res.status_code == 200
    data = res.json()["data"]
    assert data["customer"]["name"] == customer.full_name
    contracts = data["contracts"]
    assert contracts["total"] == 2
    assert Decimal(contracts["totalValue"]) == Decimal("150.50")
    assert [c["id"] for c in contracts["active"]] == [mine_active.id]
    assert [c["id"] for c in contracts["pending"]] == [mine_pending.id]
    assert [p["name"] for p in data["products"]] == ["Lite Plan"]
    assert len(data["purchaseOrders"]) == 1


def test_foreign_contract_looks_missing(client, store):
    user, _ = make_portal_customer(store)
    _, other = make_portal_customer(store)
    foreign = make_contract(store, other, make_product(store))

    foreign_res = client.get(f"/api/customer-portal/contracts/{foreign.id}", headers=auth_headers(user))
    missing_res = client.get("/api/customer-portal/contracts/9999", headers=auth_headers(user))

    assert foreign_res.status_code == missing_res.status_code == 404
    assert foreign_res.json() == missing_res.json()
    assert foreign_res.json()["error"] == "Contract not found"


def test_own_contract_detail(client, store):
    user, customer = make_portal_customer(store)
    contract = make_contract(store, customer, make_product(store))
    make_purchase_order(store, contract)

    res = client.get(f"/api/customer-portal/contracts/{contract.id}", headers=auth_headers(user))

    assert res.status_code == 200
    data = res.json()["data"]
    assert data["contract"]["id"] == contract.id
    assert data["contract"]["product"]["name"] == "Lite Plan"
    assert len(data["purchaseOrders"]) == 1


def test_contract_status_filter(client, store):
    user, customer = make_portal_customer(store)
    product = make_product(store)
    paid = make_contract(store, customer, product, BillingStatus.PAID)
    late = make_contract(store, customer, product, BillingStatus.LATE)

    def ids(query):
        res = client.get(f"/api/customer-portal/contracts{query}", headers=auth_headers(user))
        assert res.status_code == 200
        return sorted(c["id"] for c in res.json()["data"])

    assert ids("") == sorted([paid.id, late.id])
    assert ids("?status=all") == sorted([paid.id, late.id])
    assert ids("?status=active") == [paid.id]
    assert ids("?status=inactive") == [late.id]
    assert ids("?status=late") == [late.id]

    bad = client.get("/api/customer-portal/contracts?status=bogus", headers=auth_headers(user))
    assert bad.status_code == 400


def test_order_contract(client, store):
    user, customer = make_portal_customer(store)
    product = make_product(store, price="1200.00")

    res = client.post(
        "/api/customer-portal/contracts",
        json={"productId": product.id, "contractTerm": 2, "billingCycle": "monthly"},
        headers=auth_headers(user),
    )

    assert res.status_code == 201
    data = res.json()["data"]
    assert data["customerId"] == customer.id
    assert data["billingStatus"] == "PENDING"
    assert Decimal(data["amount"]) == Decimal("1200.00")
    start = date.fromisoformat(data["startDate"])
    end = date.fromisoformat(data["endDate"])
    assert end.year == start.year + 2


def test_order_inactive_product(client, store):
    user, _ = make_portal_customer(store)
    product = make_product(store, is_active=False)

    res = client.post("/api/customer-portal/contracts", json={"productId": product.id}, headers=auth_headers(user))

    assert res.status_code == 400
    assert res.json()["error"] == "Product not found or inactive"
    assert store.contracts.rows == {}


def test_products_lists_active_only(client, store):
    user, _ = make_portal_customer(store)
    make_product(store, name="Pro Plan")
    make_product(store, name="Old Plan", is_active=False)

    res = client.get("/api/customer-portal/products", headers=auth_headers(user))

    assert [p["name"] for p in res.json()["data"]] == ["Pro Plan"]


def test_purchase_orders_are_scoped(client, store):
    user, customer = make_portal_customer(store)
    _, other = make_portal_customer(store)
    product = make_product(store)
    mine = make_purchase_order(store, make_contract(store, customer, product))
    make_purchase_order(store, make_contract(store, other, product))

    res = client.get("/api/customer-portal/purchase-orders", headers=auth_headers(user))

    assert [po["id"] for po in res.json()["data"]] == [mine.id]
