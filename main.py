import os
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cart import CartReconciler
from database import db
from dependencies import Accounts, Carts, Payments, Products, Sales, Shops, Subscriptions
from errors import Conflict, Forbidden, NotFound, register_error_handlers
from identity import issue_token
from logging_config import configure_logging
from payments import StripeClient, get_payment_client
from quota import QuotaEnforcer
from role_gate import AdminClaims, CurrentClaims, ManagerClaims, RoleGate, SelfClaims, SelfOnly, manager_only, self_only
from schemas import (
    AccountCreate,
    CartItem,
    PaymentCreate,
    PaymentIntentRequest,
    PlatformSummary,
    ProductCreate,
    ProductLimitUpdate,
    ProductUpdate,
    QuotaStatus,
    RoleUpdate,
    SaleCreate,
    SalesSummary,
    ShopCreate,
    SubscriptionCreate,
    TokenRequest,
)
from sales import SalesAggregator, SalesLedger
from settings import get_settings

settings = get_settings()
configure_logging()

app = FastAPI(title="InventiSync Inventory & Sales API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)


@app.get("/")
def root():
    return {"message": "InventiSync API running"}


@app.post("/jwt")
def create_token(payload: TokenRequest):
    return {"token": issue_token(payload.model_dump())}


# Users
@app.get("/users")
def list_users(claims: AdminClaims, accounts: Accounts) -> List[Dict[str, Any]]:
    return accounts.list_all()


@app.get("/users/admin-manager/{email}")
def check_admin_or_manager(email: str, claims: SelfClaims, accounts: Accounts):
    user = accounts.find_by_email(email)
    if not user:
        raise NotFound("user not found")
    if user.get("role") not in ("admin", "manager"):
        raise Forbidden()
    return {"role": user["role"]}


@app.get("/users/individual/{email}")
def get_user(email: str, claims: CurrentClaims, accounts: Accounts):
    user = accounts.find_by_email(email)
    if not user:
        raise NotFound("User not found")
    return user


@app.post("/users")
def create_user(account: AccountCreate, accounts: Accounts):
    if accounts.find_by_email(account.email):
        raise Conflict("User already exists")
    document = account.model_dump(by_alias=True, exclude_none=True)
    document["role"] = "user"
    return {"insertedId": accounts.insert(document)}


@app.patch("/users/{email}/role")
def change_role(email: str, payload: RoleUpdate, claims: AdminClaims, accounts: Accounts):
    if not accounts.update_by_email(email, {"role": payload.role}):
        raise NotFound("User not found")
    return {"email": email, "role": payload.role}


@app.get("/users/can-add-product/{email}", response_model=QuotaStatus)
def can_add_product(email: str, claims: SelfClaims, accounts: Accounts, shops: Shops, products: Products):
    decision = QuotaEnforcer(accounts, shops, products).can_create_product(email)
    return QuotaStatus(
        can_add_product=decision.allowed,
        product_count=decision.product_count,
        product_limit=decision.product_limit,
    )


# Shops
@app.get("/shops")
def list_shops(claims: AdminClaims, shops: Shops) -> List[Dict[str, Any]]:
    return shops.list_all()


@app.post("/shop")
def create_shop(shop: ShopCreate, claims: CurrentClaims, accounts: Accounts, shops: Shops, products: Products):
    RoleGate(accounts).authorize(claims, SelfOnly(shop.owner_email))
    shop_id = QuotaEnforcer(accounts, shops, products).create_shop(shop)
    return {"message": "Shop created successfully", "insertedId": shop_id}


@app.get("/shops/{email}")
def get_shop(email: str, claims: CurrentClaims, shops: Shops):
    shop = shops.find_by_owner(email)
    if not shop:
        raise NotFound("Shop not found")
    return shop


@app.put("/shops/{email}")
def update_product_limit(
    email: str, payload: ProductLimitUpdate, claims: AdminClaims, accounts: Accounts, shops: Shops, products: Products
):
    QuotaEnforcer(accounts, shops, products).update_limit(email, payload.product_limit)
    return {"ownerEmail": email, "productLimit": payload.product_limit}


# Products
@app.get("/products")
def list_products(claims: AdminClaims, products: Products) -> List[Dict[str, Any]]:
    return products.list_by_owner()


@app.get("/products/single/{product_id}")
def get_product(product_id: str, claims: CurrentClaims, products: Products):
    product = products.find_by_id(product_id)
    if not product:
        raise NotFound("Product not found")
    return product


@app.get("/product/specific/email")
def list_tenant_products(claims: CurrentClaims, products: Products, email: Optional[str] = None):
    return products.list_by_owner(email)


@app.post("/products")
def create_product(
    product: ProductCreate, claims: ManagerClaims, accounts: Accounts, shops: Shops, products: Products
):
    product_id = QuotaEnforcer(accounts, shops, products).create_product(claims.email, product)
    return {"insertedId": product_id}


@app.put("/product/single/update/{product_id}")
def update_product(product_id: str, payload: ProductUpdate, claims: ManagerClaims, products: Products):
    fields = payload.model_dump(by_alias=True, exclude_none=True)
    product = products.update_owned(product_id, claims.email, fields)
    if not product:
        raise NotFound("Product not found")
    return product


@app.delete("/products/delete/{product_id}")
def delete_product(product_id: str, claims: ManagerClaims, products: Products):
    if not products.delete_owned(product_id, claims.email):
        raise NotFound("Product not found")
    return {"deletedCount": 1}


# Cart
@app.get("/cart/specific/email")
def list_cart(claims: CurrentClaims, carts: Carts, email: Optional[str] = None):
    if email and email != claims.email:
        raise Forbidden()
    return CartReconciler(carts).list_for(claims.email)


@app.get("/carts/{item_id}")
def get_cart_item(item_id: str, claims: CurrentClaims, carts: Carts):
    return CartReconciler(carts).get(item_id)


@app.post("/carts")
def upsert_cart_item(item: CartItem, claims: CurrentClaims, carts: Carts):
    if item.owner_email is None:
        item.owner_email = claims.email
    RoleGate(accounts=None).authorize(claims, SelfOnly(item.owner_email))
    return CartReconciler(carts).upsert(item)


@app.delete("/cart/delete/{item_id}")
def delete_cart_item(item_id: str, claims: CurrentClaims, carts: Carts):
    CartReconciler(carts).remove(item_id, claims.email)
    return {"deletedCount": 1}


# Sales
@app.post("/sales")
def record_sale(sale: SaleCreate, claims: ManagerClaims, sales: Sales, products: Products):
    return {"insertedId": SalesLedger(sales, products).record(claims.email, sale)}


@app.get(
    "/sales-summary/{email}",
    response_model=SalesSummary,
    dependencies=[Depends(self_only), Depends(manager_only)],
)
def sales_summary(email: str, sales: Sales, payments: Payments):
    return SalesAggregator(sales, payments).summarize(email)


@app.get("/sales-view", response_model=PlatformSummary)
def platform_sales_view(claims: AdminClaims, sales: Sales, payments: Payments):
    return SalesAggregator(sales, payments).platform_summary()


# Subscriptions
@app.get("/subscription/{email}")
def get_subscription(email: str, subscriptions: Subscriptions):
    subscription = subscriptions.find_by_client(email)
    if not subscription:
        raise NotFound("Subscription not found")
    return subscription


@app.post("/subscription")
def create_subscription(subscription: SubscriptionCreate, subscriptions: Subscriptions):
    if subscriptions.find_by_client(subscription.client):
        raise Conflict("Subscription already exists")
    document = subscription.model_dump(by_alias=True, exclude_none=True)
    return {"insertedId": subscriptions.insert(document)}


@app.delete("/subscription/delete/{email}")
def delete_subscription(email: str, claims: SelfClaims, subscriptions: Subscriptions):
    if not subscriptions.delete_by_client(email):
        raise NotFound("Subscription not found")
    return {"deletedCount": 1}


# Payments
@app.post("/create-payment-intent")
def create_payment_intent(
    payload: PaymentIntentRequest, claims: CurrentClaims, stripe: StripeClient = Depends(get_payment_client)
):
    intent = stripe.create_payment_intent(payload.price)
    return {"clientSecret": intent.client_secret}


# Unauthenticated: the platform ledger trusts the caller's confirmation
@app.post("/payments")
def record_payment(payment: PaymentCreate, payments: Payments):
    document = payment.model_dump(by_alias=True, exclude_none=True)
    return {"insertedId": payments.insert(document)}


@app.get("/test")
def database_status():
    response = {
        "backend": "Running",
        "database": "Not Available",
        "database_url": "Set" if os.getenv("DATABASE_URL") else "Not Set",
        "database_name": "Set" if os.getenv("DATABASE_NAME") else "Not Set",
        "connection_status": "Not Connected",
        "collections": [],
    }
    if db is None:
        return response
    try:
        response["collections"] = db.list_collection_names()[:10]
        response["database"] = "Connected & Working"
        response["connection_status"] = "Connected"
    except Exception as e:
        response["database"] = f"Connected but Error: {str(e)[:50]}"
    return response


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
