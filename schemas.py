"""
Database Schemas for InventiSync

Each document model maps to a MongoDB collection whose name is the lowercase
of the entity (Account -> "account", Shop -> "shop", ...). Documents are stored
with camelCase keys, so every model aliases its fields with to_camel and
accepts either spelling on input.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

Role = Literal["user", "manager", "admin"]


class DocumentModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AccountCreate(DocumentModel):
    """
    Self-registered account
    Collection: "account"
    """
    email: EmailStr = Field(..., description="Unique login email")
    name: Optional[str] = Field(None, description="Display name")
    photo: Optional[str] = Field(None, description="Avatar URL")


class RoleUpdate(DocumentModel):
    role: Role


class ShopCreate(DocumentModel):
    """
    Shop owned by a manager
    Collection: "shop"
    """
    name: str = Field(..., min_length=1, description="Unique shop name")
    owner_email: EmailStr = Field(..., description="Email of the owning account")
    owner_name: Optional[str] = None
    logo: Optional[str] = Field(None, description="Logo URL")
    info: Optional[str] = None
    location: Optional[str] = None
    product_limit: Optional[int] = Field(None, ge=1, description="Maximum number of products")


class ProductLimitUpdate(DocumentModel):
    product_limit: int = Field(..., ge=1)


class ProductCreate(DocumentModel):
    """
    Product held by a shop; ownerEmail is set from the caller's identity
    Collection: "product"
    """
    name: str = Field(..., min_length=1)
    image: Optional[str] = None
    location: Optional[str] = None
    info: Optional[str] = None
    quantity: int = Field(0, ge=0, description="Units in stock")
    cost: float = Field(..., ge=0, description="Purchase cost per unit")
    profit: float = Field(0, description="Profit per unit")
    discount: float = Field(0, ge=0)
    selling_price: float = Field(..., ge=0, description="Unit selling price")


class ProductUpdate(DocumentModel):
    name: Optional[str] = None
    logo: Optional[str] = None
    location: Optional[str] = None
    info: Optional[str] = None
    profit: Optional[float] = None
    cost: Optional[float] = Field(None, ge=0)
    discount: Optional[float] = Field(None, ge=0)
    quantity: Optional[int] = Field(None, ge=0)
    selling_price: Optional[float] = Field(None, ge=0)


class CartItem(DocumentModel):
    """
    Copy of product data placed in a user's cart, keyed by its own id
    Collection: "cart"
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str = Field(..., alias="_id", description="Mongo ObjectId as string")
    owner_email: Optional[EmailStr] = Field(None, description="Cart owner; defaults to the caller")
    name: Optional[str] = None
    selling_price: Optional[float] = None
    cost: Optional[float] = None
    profit: Optional[float] = None
    quantity: Optional[int] = None


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class SaleCreate(DocumentModel):
    """
    Sale ledger entry, append-only
    Collection: "sale"
    """
    product_id: Optional[str] = Field(None, description="Sold product _id as string")
    name: Optional[str] = None
    selling_price: float = Field(..., ge=0)
    cost: float = Field(..., ge=0)
    profit: float = 0
    date_str: str = Field(default_factory=_now_iso, description="ISO-8601 sale timestamp")


class PaymentCreate(DocumentModel):
    """
    Platform revenue ledger entry, append-only
    Collection: "payment"
    """
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    service: Optional[str] = Field(None, description="Purchased plan or service")
    price: float = Field(..., ge=0)
    date: str = Field(default_factory=_now_iso)
    transaction_id: Optional[str] = None


class SubscriptionCreate(DocumentModel):
    """
    One active subscription per client email
    Collection: "subscription"
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    client: EmailStr
    service: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)


class PaymentIntentRequest(BaseModel):
    price: float = Field(..., gt=0)


class TokenRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    email: EmailStr


class QuotaStatus(DocumentModel):
    can_add_product: bool
    product_count: int
    product_limit: int


class SalesSummary(DocumentModel):
    sold_count: int = 0
    total_sale: float = 0
    total_invest: float = 0
    total_profit: float = 0
    history: List[Dict[str, Any]] = Field(default_factory=list)


class PlatformSummary(DocumentModel):
    total_income: float = 0
    total_sales: int = 0
    sold_products: List[Dict[str, Any]] = Field(default_factory=list)
