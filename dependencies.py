"""FastAPI providers for the per-request repositories and services."""
from typing import Annotated

from fastapi import Depends
from pymongo.database import Database

from database import get_database
from repositories import (
    AccountRepository,
    CartRepository,
    PaymentRepository,
    ProductRepository,
    SaleRepository,
    ShopRepository,
    SubscriptionRepository,
)
from settings import get_settings

DatabaseDep = Annotated[Database, Depends(get_database)]


def get_account_repository(database: DatabaseDep) -> AccountRepository:
    return AccountRepository(database)


def get_shop_repository(database: DatabaseDep) -> ShopRepository:
    return ShopRepository(database)


def get_product_repository(database: DatabaseDep) -> ProductRepository:
    return ProductRepository(database)


def get_cart_repository(database: DatabaseDep) -> CartRepository:
    return CartRepository(database)


def get_sale_repository(database: DatabaseDep) -> SaleRepository:
    return SaleRepository(database)


def get_payment_repository(database: DatabaseDep) -> PaymentRepository:
    return PaymentRepository(database)


def get_subscription_repository(database: DatabaseDep) -> SubscriptionRepository:
    return SubscriptionRepository(database)


Accounts = Annotated[AccountRepository, Depends(get_account_repository)]
Shops = Annotated[ShopRepository, Depends(get_shop_repository)]
Products = Annotated[ProductRepository, Depends(get_product_repository)]
Carts = Annotated[CartRepository, Depends(get_cart_repository)]
Sales = Annotated[SaleRepository, Depends(get_sale_repository)]
Payments = Annotated[PaymentRepository, Depends(get_payment_repository)]
Subscriptions = Annotated[SubscriptionRepository, Depends(get_subscription_repository)]
