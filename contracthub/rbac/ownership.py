"""
Ownership: data-scope enforcement for portal customers.

A portal customer may only touch rows whose owning customer id equals
their own linked profile id.  Staff never go through here; their
access is decided by permissions alone.

Absent and foreign resources are indistinguishable to the caller: both
raise ResourceNotFound with the same message, so ids belonging to other
customers cannot be probed.

Usage in a route:
    @router.get("/contracts/{contract_id}")
    async def get_contract(contract: Contract = Depends(owned_contract)): ...
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any

from fastapi import Depends

from contracthub.core.errors import ResourceNotFound
from contracthub.models.contract import Contract
from contracthub.models.purchase_order import PurchaseOrder
from contracthub.rbac.dependencies import require_customer
from contracthub.rbac.principal import Principal
from contracthub.repositories.contract_repo import ContractRepository
from contracthub.repositories.dependencies import get_contract_repo, get_purchase_order_repo
from contracthub.repositories.purchase_order_repo import PurchaseOrderRepository

logger = logging.getLogger("rbac")


class ResourceKind(str, enum.Enum):
    CONTRACT = "contract"
    PURCHASE_ORDER = "purchase_order"


@dataclass(frozen=True)
class OwnershipRule:
    owner_attribute: str
    label: str


OWNERSHIP_RULES: dict[ResourceKind, OwnershipRule] = {
    ResourceKind.CONTRACT: OwnershipRule(owner_attribute="customer_id", label="Contract"),
    ResourceKind.PURCHASE_ORDER: OwnershipRule(owner_attribute="customer_id", label="Purchase order"),
}


def is_owned_by(resource: Any, kind: ResourceKind, principal: Principal) -> bool:
    customer_id = principal.customer_id
    if customer_id is None:
        return False
    rule = OWNERSHIP_RULES[kind]
    return getattr(resource, rule.owner_attribute, None) == customer_id


def ensure_owned(resource: Any | None, kind: ResourceKind, principal: Principal) -> Any:
    """Return `resource` if the principal owns it, else raise ResourceNotFound."""
    rule = OWNERSHIP_RULES[kind]
    if resource is None:
        raise ResourceNotFound(f"{rule.label} not found")
    if not is_owned_by(resource, kind, principal):
        logger.warning(
            "Ownership check failed: user %s (customer %s) requested %s %s",
            principal.id,
            principal.customer_id,
            kind.value,
            getattr(resource, "id", None),
        )
        raise ResourceNotFound(f"{rule.label} not found")
    return resource


# ── Path-addressed dependencies ──────────────────────────────────────


async def owned_contract(
    contract_id: int,
    principal: Principal = Depends(require_customer),
    contracts: ContractRepository = Depends(get_contract_repo),
) -> Contract:
    contract = await contracts.get_by_id(contract_id)
    return ensure_owned(contract, ResourceKind.CONTRACT, principal)


async def owned_purchase_order(
    purchase_order_id: int,
    principal: Principal = Depends(require_customer),
    purchase_orders: PurchaseOrderRepository = Depends(get_purchase_order_repo),
) -> PurchaseOrder:
    purchase_order = await purchase_orders.get_by_id(purchase_order_id)
    return ensure_owned(purchase_order, ResourceKind.PURCHASE_ORDER, principal)
