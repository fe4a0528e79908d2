"""FastAPI providers for the repositories.  Tests override these with in-memory fakes."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from contracthub.core.database import get_db
from contracthub.repositories.contract_repo import ContractRepository
from contracthub.repositories.customer_repo import CustomerRepository
from contracthub.repositories.product_repo import ProductRepository
from contracthub.repositories.purchase_order_repo import PurchaseOrderRepository
from contracthub.repositories.reseller_repo import ResellerRepository
from contracthub.repositories.user_repo import UserRepository


def get_user_repo(db: AsyncSession = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_customer_repo(db: AsyncSession = Depends(get_db)) -> CustomerRepository:
    return CustomerRepository(db)


def get_product_repo(db: AsyncSession = Depends(get_db)) -> ProductRepository:
    return ProductRepository(db)


def get_reseller_repo(db: AsyncSession = Depends(get_db)) -> ResellerRepository:
    return ResellerRepository(db)


def get_contract_repo(db: AsyncSession = Depends(get_db)) -> ContractRepository:
    return ContractRepository(db)


def get_purchase_order_repo(db: AsyncSession = Depends(get_db)) -> PurchaseOrderRepository:
    return PurchaseOrderRepository(db)
