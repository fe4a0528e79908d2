"""
Customer portal service.

Every function here works on behalf of one customer profile and only
ever queries rows owned by it.  Path-addressed lookups go through
`contracthub.rbac.ownership` before reaching this module.
"""

import logging
from datetime import date
from decimal import Decimal

from contracthub.core.errors import ValidationFailed
from contracthub.models.contract import (
    ACTIVE_BILLING_STATUSES,
    INACTIVE_BILLING_STATUSES,
    BillingStatus,
    Contract,
)
from contracthub.models.customer import Customer
from contracthub.models.product import Product
from contracthub.models.purchase_order import PurchaseOrder
from contracthub.repositories.contract_repo import ContractRepository
from contracthub.repositories.product_repo import ProductRepository
from contracthub.repositories.purchase_order_repo import PurchaseOrderRepository
from contracthub.schemas import PortalContractOrder
from contracthub.services.contract_service import add_years

logger = logging.getLogger(__name__)


def statuses_for_filter(status: str | None) -> frozenset[BillingStatus] | None:
    """
    Map the portal's `status` query value to billing statuses.

    `all`/empty → no filter, `active`/`inactive` → their groups, any
    billing status name → just that status.  Unknown values are a 400.
    """
    if not status or status == "all":
        return None
    if status == "active":
        return ACTIVE_BILLING_STATUSES
    if status == "inactive":
        return INACTIVE_BILLING_STATUSES
    try:
        return frozenset({BillingStatus(status.upper())})
    except ValueError:
        raise ValidationFailed(f"Unknown contract status filter: {status}")


async def list_contracts(
    customer: Customer,
    contracts: ContractRepository,
    status: str | None = None,
) -> list[Contract]:
    return await contracts.list_for_customer(customer.id, statuses_for_filter(status))


async def dashboard(
    customer: Customer,
    contracts: ContractRepository,
    products: ProductRepository,
    purchase_orders: PurchaseOrderRepository,
) -> dict:
    all_contracts = await contracts.list_for_customer(customer.id)
    active = [c for c in all_contracts if c.billing_status in ACTIVE_BILLING_STATUSES]
    pending = [c for c in all_contracts if c.billing_status == BillingStatus.PENDING]
    total_value = sum((c.net_amount or Decimal("0") for c in all_contracts), Decimal("0"))

    return {
        "customer": {
            "name": customer.full_name,
            "email": customer.email,
            "type": customer.customer_type,
        },
        "contracts": {
            "all": all_contracts,
            "active": active,
            "pending": pending,
            "total": len(all_contracts),
            "total_value": total_value.quantize(Decimal("0.01")),
        },
        "products": await products.list_filtered(active=True),
        "purchase_orders": await purchase_orders.list_for_customer(customer.id),
    }


async def contract_purchase_orders(
    contract: Contract,
    purchase_orders: PurchaseOrderRepository,
) -> list[PurchaseOrder]:
    return await purchase_orders.list_for_contract(contract.id)


async def available_products(products: ProductRepository) -> list[Product]:
    return await products.list_filtered(active=True)


async def customer_purchase_orders(
    customer: Customer,
    purchase_orders: PurchaseOrderRepository,
) -> list[PurchaseOrder]:
    return await purchase_orders.list_for_customer(customer.id)


async def order_contract(
    customer: Customer,
    body: PortalContractOrder,
    contracts: ContractRepository,
    products: ProductRepository,
) -> Contract:
    """A customer orders a product: a PENDING contract at the product's base price, starting today."""
    product = await products.get_by_id(body.product_id)
    if product is None or not product.is_active:
        raise ValidationFailed("Product not found or inactive")

    start = date.today()
    contract = Contract(
        customer_id=customer.id,
        customer=customer,
        product_id=product.id,
        product=product,
        reseller_id=None,
        reseller=None,
        contract_term=body.contract_term,
        start_date=start,
        end_date=add_years(start, body.contract_term),
        billing_cycle=body.billing_cycle,
        billing_status=BillingStatus.PENDING,
        amount=product.base_price,
        reseller_margin=Decimal("0"),
        net_amount=product.base_price,
        notes=body.notes,
    )
    contract = await contracts.create(contract)
    logger.info("Customer %s ordered product %s (contract %s)", customer.id, product.id, contract.id)
    return contract
