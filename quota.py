"""
Quota Enforcer: per-shop product limits.

The product-count check and the insertion that follows are separate store
calls. Two concurrent creations from one tenant can both pass the check.
"""
import logging
from dataclasses import dataclass

from errors import BadRequest, Conflict, NotFound, QuotaExceeded, ShopNotFound
from schemas import ProductCreate, ShopCreate
from settings import get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuotaDecision:
    allowed: bool
    product_count: int
    product_limit: int


class QuotaEnforcer:
    def __init__(self, accounts, shops, products, default_limit: int = None):
        self.accounts = accounts
        self.shops = shops
        self.products = products
        self.default_limit = default_limit if default_limit is not None else get_settings().DEFAULT_PRODUCT_LIMIT

    def apply_default_limit(self, shop: ShopCreate) -> dict:
        document = shop.model_dump(by_alias=True, exclude_none=True)
        document["productLimit"] = shop.product_limit or self.default_limit
        return document

    def create_shop(self, shop: ShopCreate) -> str:
        """
        Insert a shop and promote its owner to manager.

        Nothing is written when the name is taken, the owner already has a
        shop, or the owner account does not exist.
        """
        if self.shops.find_by_name(shop.name):
            raise Conflict("Shop already exists")
        if self.accounts.find_by_email(shop.owner_email) is None:
            raise NotFound("User not found")
        if self.shops.find_by_owner(shop.owner_email):
            raise Conflict("User already owns a shop")

        shop_id = self.shops.insert(self.apply_default_limit(shop))
        self.accounts.update_by_email(
            shop.owner_email,
            {"shopId": shop_id, "shopName": shop.name, "shopLogo": shop.logo, "role": "manager"},
        )
        logger.info(f"Shop {shop.name!r} created for {shop.owner_email}")
        return shop_id

    def update_limit(self, owner_email: str, product_limit: int) -> None:
        if product_limit < 1:
            raise BadRequest("productLimit must be a positive integer")
        if not self.shops.set_product_limit(owner_email, product_limit):
            raise ShopNotFound()
        logger.info(f"Product limit for {owner_email} set to {product_limit}")

    def can_create_product(self, owner_email: str) -> QuotaDecision:
        account = self.accounts.find_by_email(owner_email)
        if account is None:
            raise NotFound("user not found")

        product_count = self.products.count_by_owner(owner_email)

        # Uses the account's stored shopId, not the shop's ownerEmail
        shop_id = account.get("shopId")
        shop = self.shops.find_by_id(shop_id) if shop_id else None
        if shop is None:
            raise ShopNotFound()

        product_limit = shop.get("productLimit", self.default_limit)
        return QuotaDecision(
            allowed=product_count < product_limit,
            product_count=product_count,
            product_limit=product_limit,
        )

    def create_product(self, owner_email: str, product: ProductCreate) -> str:
        decision = self.can_create_product(owner_email)
        if not decision.allowed:
            logger.info(f"Quota reached for {owner_email}: {decision.product_count}/{decision.product_limit}")
            raise QuotaExceeded()

        document = product.model_dump(by_alias=True, exclude_none=True)
        document.update(ownerEmail=owner_email, salesCount=0)
        return self.products.insert(document)
