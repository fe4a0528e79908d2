"""In-memory repositories and model factories shared by the test suite."""

import itertools
from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from typing import Any

from contracthub.core.security import create_access_token, hash_password
from contracthub.models import (
    BillingCycle,
    BillingStatus,
    Contract,
    Customer,
    CustomerStatus,
    Product,
    PurchaseOrder,
    PurchaseOrderStatus,
    Reseller,
    User,
)
from contracthub.models.base import utcnow
from contracthub.rbac.permissions import Role

DEFAULT_PASSWORD = "Passw0rd!"


# ── In-memory repositories ───────────────────────────────────────────


class FakeRepository:
    """Same surface as BaseRepository, backed by a dict."""

    def __init__(self) -> None:
        self.rows: dict[int, Any] = {}
        self._ids = itertools.count(1)

    def _stamp(self, obj: Any) -> Any:
        for column in obj.__table__.columns:
            if getattr(obj, column.key, None) is None and column.default is not None and column.default.is_scalar:
                setattr(obj, column.key, column.default.arg)
        if obj.id is None:
            obj.id = next(self._ids)
        now = utcnow()
        if obj.created_at is None:
            obj.created_at = now
        obj.updated_at = now
        return obj

    def seed(self, obj: Any) -> Any:
        self._stamp(obj)
        self.rows[obj.id] = obj
        return obj

    async def get_by_id(self, id: int) -> Any | None:
        return self.rows.get(id)

    async def get_all(self, skip: int = 0, limit: int | None = None) -> list[Any]:
        items = sorted(self.rows.values(), key=lambda o: o.id, reverse=True)[skip:]
        return items[:limit] if limit is not None else items

    async def count(self) -> int:
        return len(self.rows)

    async def create(self, obj: Any) -> Any:
        return self.seed(obj)

    async def update(self, obj: Any) -> Any:
        obj.updated_at = utcnow()
        self.rows[obj.id] = obj
        return obj

    async def delete(self, obj: Any) -> None:
        self.rows.pop(obj.id, None)


class FakeUserRepository(FakeRepository):
    async def get_by_email(self, email: str) -> User | None:
        return next((u for u in self.rows.values() if u.email.lower() == email.lower()), None)

    async def list_staff(self, active_only: bool = False) -> list[User]:
        return [
            u for u in self.rows.values()
            if u.role != Role.CUSTOMER and (u.is_active or not active_only)
        ]


class FakeCustomerRepository(FakeRepository):
    def _matching(self, search=None, status=None, assigned_to_id=None) -> list[Customer]:
        items = list(self.rows.values())
        if search:
            needle = search.lower()
            items = [
                c for c in items
                if needle in c.first_name.lower() or needle in c.last_name.lower() or needle in c.email.lower()
            ]
        if status is not None:
            items = [c for c in items if c.status == status]
        if assigned_to_id is not None:
            items = [c for c in items if c.assigned_to_id == assigned_to_id]
        return items

    async def search(self, *, search=None, status=None, assigned_to_id=None, skip=0, limit=None):
        items = self._matching(search, status, assigned_to_id)[skip:]
        return items[:limit] if limit is not None else items

    async def count_matching(self, *, search=None, status=None, assigned_to_id=None) -> int:
        return len(self._matching(search, status, assigned_to_id))

    async def get_by_user_id(self, user_id: int) -> Customer | None:
        return next((c for c in self.rows.values() if c.user_id == user_id), None)

    async def list_with_portal_access(self) -> list[Customer]:
        return [c for c in self.rows.values() if c.user_id is not None]

    async def list_without_portal_access(self) -> list[Customer]:
        return [c for c in self.rows.values() if c.user_id is None]

    async def count_by_status(self) -> dict[CustomerStatus, int]:
        counts = {status: 0 for status in CustomerStatus}
        for customer in self.rows.values():
            counts[customer.status] += 1
        return counts


class FakeProductRepository(FakeRepository):
    async def list_filtered(self, *, category=None, active=None) -> list[Product]:
        items = list(self.rows.values())
        if category:
            items = [p for p in items if p.category == category]
        if active is not None:
            items = [p for p in items if p.is_active == active]
        return items


class FakeResellerRepository(FakeRepository):
    pass


class FakeContractRepository(FakeRepository):
    async def list_by_status(self, status: BillingStatus) -> list[Contract]:
        return [c for c in self.rows.values() if c.billing_status == status]

    async def list_for_customer(self, customer_id: int, statuses=None) -> list[Contract]:
        items = [c for c in self.rows.values() if c.customer_id == customer_id]
        if statuses is not None:
            wanted = set(statuses)
            items = [c for c in items if c.billing_status in wanted]
        return items


class FakePurchaseOrderRepository(FakeRepository):
    async def list_filtered(self, status=None) -> list[PurchaseOrder]:
        return [po for po in self.rows.values() if status is None or po.status == status]

    async def list_for_customer(self, customer_id: int) -> list[PurchaseOrder]:
        return [po for po in self.rows.values() if po.customer_id == customer_id]

    async def list_for_contract(self, contract_id: int) -> list[PurchaseOrder]:
        return [po for po in self.rows.values() if po.contract_id == contract_id]

    async def reassign_customer(self, contract_id: int, customer_id: int) -> int:
        moved = [po for po in self.rows.values() if po.contract_id == contract_id]
        for po in moved:
            po.customer_id = customer_id
        return len(moved)


def make_store() -> SimpleNamespace:
    return SimpleNamespace(
        users=FakeUserRepository(),
        customers=FakeCustomerRepository(),
        products=FakeProductRepository(),
        resellers=FakeResellerRepository(),
        contracts=FakeContractRepository(),
        purchase_orders=FakePurchaseOrderRepository(),
    )


# ── Factories ────────────────────────────────────────────────────────


def make_user(
    store,
    role: Role = Role.USER,
    email: str | None = None,
    password: str = DEFAULT_PASSWORD,
    is_active: bool = True,
    name: str | None = None,
) -> User:
    index = len(store.users.rows) + 1
    return store.users.seed(
        User(
            email=email or f"{role.value}{index}@example.com",
            name=name or f"{role.value.title()} {index}",
            password_hash=hash_password(password),
            role=role,
            is_active=is_active,
        )
    )


def make_customer(
    store,
    status: CustomerStatus = CustomerStatus.ACTIVE,
    user: User | None = None,
    first_name: str = "Casey",
    last_name: str = "Jones",
    email: str | None = None,
) -> Customer:
    index = len(store.customers.rows) + 1
    customer = Customer(
        first_name=first_name,
        last_name=last_name,
        email=email or f"customer{index}@example.com",
        status=status,
        can_login=user is not None,
    )
    if user is not None:
        customer.user_id = user.id
        customer.user = user
    return store.customers.seed(customer)


def make_portal_customer(store, **kwargs) -> tuple[User, Customer]:
    user = make_user(store, Role.CUSTOMER)
    return user, make_customer(store, user=user, **kwargs)


def make_product(store, name: str = "Lite Plan", price: str = "1200.00", is_active: bool = True) -> Product:
    return store.products.seed(
        Product(
            name=name,
            category="lite",
            base_price=Decimal(price),
            is_active=is_active,
        )
    )


def make_reseller(store, margin: str = "10") -> Reseller:
    return store.resellers.seed(
        Reseller(name="Channel Co", email="channel@example.com", margin_percentage=Decimal(margin))
    )


def make_contract(
    store,
    customer: Customer,
    product: Product,
    billing_status: BillingStatus = BillingStatus.BILLED,
    amount: str = "1000.00",
) -> Contract:
    return store.contracts.seed(
        Contract(
            customer_id=customer.id,
            customer=customer,
            product_id=product.id,
            product=product,
            contract_term=1,
            start_date=date(2024, 1, 1),
            end_date=date(2025, 1, 1),
            billing_cycle=BillingCycle.ANNUAL,
            billing_status=billing_status,
            amount=Decimal(amount),
            reseller_margin=Decimal("0"),
            net_amount=Decimal(amount),
        )
    )


def make_purchase_order(store, contract: Contract, status: PurchaseOrderStatus = PurchaseOrderStatus.PENDING) -> PurchaseOrder:
    return store.purchase_orders.seed(
        PurchaseOrder(
            contract_id=contract.id,
            customer_id=contract.customer_id,
            po_number=f"PO-{contract.id}",
            file_name="po.pdf",
            file_path="/tmp/po.pdf",
            file_size=128,
            mime_type="application/pdf",
            status=status,
        )
    )


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role.value)}"}
