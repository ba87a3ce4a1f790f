"""Cart Reconciler: idempotent, last-writer-wins upserts keyed by item id."""
import logging
from typing import List

from pymongo.errors import DuplicateKeyError

from database import to_object_id
from errors import Forbidden, NotFound
from schemas import CartItem

logger = logging.getLogger(__name__)


class CartReconciler:
    def __init__(self, carts):
        self.carts = carts

    def upsert(self, item: CartItem) -> dict:
        """
        Store `item` under its own id, replacing every other field. Writing
        the same item twice leaves one record equal to the second write.
        An id already in another user's cart is Forbidden.
        """
        item_id = str(to_object_id(item.id))
        fields = item.model_dump(by_alias=True, exclude_none=True)
        fields.pop("_id", None)
        try:
            return self.carts.replace_owned(item_id, item.owner_email, fields)
        except DuplicateKeyError:
            logger.info(f"Cart item {item_id} belongs to another owner than {item.owner_email}")
            raise Forbidden()

    def remove(self, item_id: str, owner_email: str) -> None:
        if not self.carts.delete_owned(item_id, owner_email):
            raise NotFound("Cart item not found")
        logger.debug(f"Removed cart item {item_id} for {owner_email}")

    def get(self, item_id: str) -> dict:
        item = self.carts.find_by_id(item_id)
        if item is None:
            raise NotFound("Cart item not found")
        return item

    def list_for(self, owner_email: str) -> List[dict]:
        return self.carts.list_by_owner(owner_email)
