"""
Models package: import every model so SQLAlchemy's Base.metadata
knows about all tables (required for `create_all`).
"""

from contracthub.models.base import Base, IntegerPrimaryKeyMixin, TimestampMixin
from contracthub.models.user import User
from contracthub.models.customer import Customer, CustomerStatus, CustomerType
from contracthub.models.product import Product
from contracthub.models.reseller import Reseller
from contracthub.models.contract import (
    ACTIVE_BILLING_STATUSES,
    INACTIVE_BILLING_STATUSES,
    BillingCycle,
    BillingStatus,
    Contract,
)
from contracthub.models.purchase_order import PurchaseOrder, PurchaseOrderStatus

__all__ = [
    "Base",
    "IntegerPrimaryKeyMixin",
    "TimestampMixin",
    "User",
    "Customer",
    "CustomerStatus",
    "CustomerType",
    "Product",
    "Reseller",
    "Contract",
    "BillingStatus",
    "BillingCycle",
    "ACTIVE_BILLING_STATUSES",
    "INACTIVE_BILLING_STATUSES",
    "PurchaseOrder",
    "PurchaseOrderStatus",
]
