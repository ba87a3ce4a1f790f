import pytest
from fastapi.testclient import TestClient

import dependencies
from main import app
from tests.helpers import ADMIN_EMAIL, MANAGER_EMAIL, USER_EMAIL
from tests.fakes import (
    InMemoryAccounts,
    InMemoryCarts,
    InMemoryPayments,
    InMemoryProducts,
    InMemorySales,
    InMemoryShops,
    InMemorySubscriptions,
)


@pytest.fixture
def accounts():
    return InMemoryAccounts()


@pytest.fixture
def shops():
    return InMemoryShops()


@pytest.fixture
def products():
    return InMemoryProducts()


@pytest.fixture
def carts():
    return InMemoryCarts()


@pytest.fixture
def sales():
    return InMemorySales()


@pytest.fixture
def payments():
    return InMemoryPayments()


@pytest.fixture
def subscriptions():
    return InMemorySubscriptions()


@pytest.fixture
def seeded(accounts, shops):
    """An admin, a manager owning a shop with productLimit 3, and a plain user."""
    accounts.insert({"email": ADMIN_EMAIL, "role": "admin"})
    accounts.insert({"email": USER_EMAIL, "role": "user"})
    shop_id = shops.insert({"name": "Corner Shop", "ownerEmail": MANAGER_EMAIL, "productLimit": 3})
    accounts.insert({"email": MANAGER_EMAIL, "role": "manager", "shopId": shop_id, "shopName": "Corner Shop"})
    return {"shop_id": shop_id}


@pytest.fixture
def client(accounts, shops, products, carts, sales, payments, subscriptions):
    overrides = {
        dependencies.get_account_repository: lambda: accounts,
        dependencies.get_shop_repository: lambda: shops,
        dependencies.get_product_repository: lambda: products,
        dependencies.get_cart_repository: lambda: carts,
        dependencies.get_sale_repository: lambda: sales,
        dependencies.get_payment_repository: lambda: payments,
        dependencies.get_subscription_repository: lambda: subscriptions,
    }
    app.dependency_overrides.update(overrides)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

