"""
Contract service.

Contracts reference a customer, a product and optionally a reseller;
all three must exist when referenced.  When the caller does not supply
them:
- `end_date` is `start_date` plus `contract_term` years
- `reseller_margin` is the reseller's configured margin (0 without one)
- `net_amount` is `amount` minus the margin share
"""

import logging
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from contracthub.core.errors import ResourceNotFound, ValidationFailed
from contracthub.models.contract import BillingStatus, Contract
from contracthub.models.reseller import Reseller
from contracthub.repositories.contract_repo import ContractRepository
from contracthub.repositories.customer_repo import CustomerRepository
from contracthub.repositories.product_repo import ProductRepository
from contracthub.repositories.purchase_order_repo import PurchaseOrderRepository
from contracthub.repositories.reseller_repo import ResellerRepository
from contracthub.schemas import ContractCreate, ContractUpdate

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def add_years(start: date, years: int) -> date:
    try:
        return start.replace(year=start.year + years)
    except ValueError:
        # 29 Feb → 28 Feb in a non-leap year
        return start.replace(year=start.year + years, day=28)


def compute_net_amount(amount: Decimal, margin_percentage: Decimal) -> Decimal:
    net = amount - (amount * margin_percentage / Decimal(100))
    return net.quantize(CENT, rounding=ROUND_HALF_UP)


async def get_contract(contract_id: int, contracts: ContractRepository) -> Contract:
    contract = await contracts.get_by_id(contract_id)
    if contract is None:
        raise ResourceNotFound("Contract not found")
    return contract


async def list_contracts(
    contracts: ContractRepository,
    status: BillingStatus | None = None,
) -> list[Contract]:
    if status is not None:
        return await contracts.list_by_status(status)
    return await contracts.get_all()


async def _resolve_reseller(reseller_id: int | None, resellers: ResellerRepository) -> Reseller | None:
    if reseller_id is None:
        return None
    reseller = await resellers.get_by_id(reseller_id)
    if reseller is None:
        raise ValidationFailed("Reseller not found")
    return reseller


async def create_contract(
    body: ContractCreate,
    contracts: ContractRepository,
    customers: CustomerRepository,
    products: ProductRepository,
    resellers: ResellerRepository,
) -> Contract:
    customer = await customers.get_by_id(body.customer_id)
    if customer is None:
        raise ValidationFailed("Customer not found")
    product = await products.get_by_id(body.product_id)
    if product is None:
        raise ValidationFailed("Product not found")
    reseller = await _resolve_reseller(body.reseller_id, resellers)

    end_date = body.end_date or add_years(body.start_date, body.contract_term)
    if end_date < body.start_date:
        raise ValidationFailed("End date must not be before start date")

    if body.reseller_margin is not None:
        margin = body.reseller_margin
    else:
        margin = reseller.margin_percentage if reseller is not None else Decimal("0")
    net_amount = body.net_amount if body.net_amount is not None else compute_net_amount(body.amount, margin)

    contract = Contract(
        customer_id=customer.id,
        customer=customer,
        product_id=product.id,
        product=product,
        reseller_id=reseller.id if reseller else None,
        reseller=reseller,
        contract_term=body.contract_term,
        start_date=body.start_date,
        end_date=end_date,
        billing_cycle=body.billing_cycle,
        billing_status=body.billing_status,
        amount=body.amount,
        reseller_margin=margin,
        net_amount=net_amount,
        notes=body.notes,
    )
    contract = await contracts.create(contract)
    logger.info("Created contract %s for customer %s", contract.id, customer.id)
    return contract


async def update_contract(
    contract_id: int,
    body: ContractUpdate,
    contracts: ContractRepository,
    customers: CustomerRepository,
    products: ProductRepository,
    resellers: ResellerRepository,
    purchase_orders: PurchaseOrderRepository,
) -> Contract:
    contract = await get_contract(contract_id, contracts)
    changes = body.model_dump(exclude_unset=True)
    previous_customer_id = contract.customer_id

    if changes.get("customer_id") is not None:
        customer = await customers.get_by_id(changes["customer_id"])
        if customer is None:
            raise ValidationFailed("Customer not found")
        contract.customer_id, contract.customer = customer.id, customer
    if changes.get("product_id") is not None:
        product = await products.get_by_id(changes["product_id"])
        if product is None:
            raise ValidationFailed("Product not found")
        contract.product_id, contract.product = product.id, product
    if "reseller_id" in changes:
        reseller = await _resolve_reseller(changes["reseller_id"], resellers)
        contract.reseller_id, contract.reseller = (reseller.id if reseller else None), reseller

    for field in ("contract_term", "start_date", "end_date", "billing_cycle", "billing_status", "amount", "reseller_margin"):
        if changes.get(field) is not None:
            setattr(contract, field, changes[field])
    if "notes" in changes:
        contract.notes = changes["notes"]

    if changes.get("net_amount") is not None:
        contract.net_amount = changes["net_amount"]
    elif "amount" in changes or "reseller_margin" in changes:
        contract.net_amount = compute_net_amount(contract.amount, contract.reseller_margin)

    if contract.end_date < contract.start_date:
        raise ValidationFailed("End date must not be before start date")

    contract = await contracts.update(contract)
    if contract.customer_id != previous_customer_id:
        moved = await purchase_orders.reassign_customer(contract.id, contract.customer_id)
        logger.info(
            "Moved contract %s from customer %s to %s (%s purchase orders)",
            contract.id,
            previous_customer_id,
            contract.customer_id,
            moved,
        )
    return contract


async def delete_contract(contract_id: int, contracts: ContractRepository) -> None:
    contract = await get_contract(contract_id, contracts)
    await contracts.delete(contract)
    logger.info("Deleted contract %s", contract_id)
