"""
Narrow repositories over the MongoDB collections.

Each repository owns one collection and exposes only the operations the
domain modules need. Documents are returned with `_id` as a string.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING, ReturnDocument
from pymongo.database import Database

from database import create_document, get_documents, serialize, to_object_id


class MongoRepository:
    collection_name: str = None

    def __init__(self, database: Database):
        self.database = database
        self.collection = database[self.collection_name]

    def _insert(self, document: dict) -> str:
        return create_document(self.collection_name, document, database=self.database)

    def _find(self, filter_dict: Dict[str, Any] = None, **options) -> List[dict]:
        return get_documents(self.collection_name, filter_dict, database=self.database, **options)

    def list_all(self) -> List[dict]:
        return self._find()


class AccountRepository(MongoRepository):
    collection_name = "account"

    def find_by_email(self, email: str) -> Optional[dict]:
        return serialize(self.collection.find_one({"email": email}))

    def insert(self, account: dict) -> str:
        return self._insert(account)

    def update_by_email(self, email: str, fields: Dict[str, Any]) -> bool:
        result = self.collection.update_one(
            {"email": email},
            {"$set": {**fields, "updated_at": datetime.now(timezone.utc)}},
        )
        return result.matched_count > 0


class ShopRepository(MongoRepository):
    collection_name = "shop"

    def find_by_id(self, shop_id: str) -> Optional[dict]:
        return serialize(self.collection.find_one({"_id": to_object_id(shop_id)}))

    def find_by_name(self, name: str) -> Optional[dict]:
        return serialize(self.collection.find_one({"name": name}))

    def find_by_owner(self, owner_email: str) -> Optional[dict]:
        return serialize(self.collection.find_one({"ownerEmail": owner_email}))

    def insert(self, shop: dict) -> str:
        return self._insert(shop)

    def set_product_limit(self, owner_email: str, product_limit: int) -> bool:
        result = self.collection.update_one(
            {"ownerEmail": owner_email},
            {"$set": {"productLimit": product_limit, "updated_at": datetime.now(timezone.utc)}},
        )
        return result.matched_count > 0


class ProductRepository(MongoRepository):
    collection_name = "product"

    def find_by_id(self, product_id: str) -> Optional[dict]:
        return serialize(self.collection.find_one({"_id": to_object_id(product_id)}))

    def list_by_owner(self, owner_email: Optional[str] = None) -> List[dict]:
        return self._find({"ownerEmail": owner_email} if owner_email else None)

    def count_by_owner(self, owner_email: str) -> int:
        return self.collection.count_documents({"ownerEmail": owner_email})

    def insert(self, product: dict) -> str:
        return self._insert(product)

    def update_owned(self, product_id: str, owner_email: str, fields: Dict[str, Any]) -> Optional[dict]:
        updated = self.collection.find_one_and_update(
            {"_id": to_object_id(product_id), "ownerEmail": owner_email},
            {"$set": {**fields, "updated_at": datetime.now(timezone.utc)}},
            return_document=ReturnDocument.AFTER,
        )
        return serialize(updated)

    def delete_owned(self, product_id: str, owner_email: str) -> bool:
        result = self.collection.delete_one({"_id": to_object_id(product_id), "ownerEmail": owner_email})
        return result.deleted_count > 0

    def record_sale(self, product_id: str) -> bool:
        result = self.collection.update_one(
            {"_id": to_object_id(product_id)},
            {"$inc": {"salesCount": 1, "quantity": -1}},
        )
        return result.matched_count > 0


class CartRepository(MongoRepository):
    collection_name = "cart"

    def find_by_id(self, item_id: str) -> Optional[dict]:
        return serialize(self.collection.find_one({"_id": to_object_id(item_id)}))

    def list_by_owner(self, owner_email: str) -> List[dict]:
        return self._find({"ownerEmail": owner_email})

    def replace_owned(self, item_id: str, owner_email: str, fields: Dict[str, Any]) -> dict:
        # An id held by another owner makes the upsert collide on _id
        oid = to_object_id(item_id)
        self.collection.replace_one({"_id": oid, "ownerEmail": owner_email}, fields, upsert=True)
        return serialize({"_id": oid, **fields})

    def delete_owned(self, item_id: str, owner_email: str) -> bool:
        result = self.collection.delete_one({"_id": to_object_id(item_id), "ownerEmail": owner_email})
        return result.deleted_count > 0


class SaleRepository(MongoRepository):
    collection_name = "sale"

    def insert(self, sale: dict) -> str:
        return self._insert(sale)

    def count_by_owner(self, owner_email: str) -> int:
        return self.collection.count_documents({"ownerEmail": owner_email})

    def project_field(self, owner_email: str, field: str) -> List[Any]:
        cursor = self.collection.find({"ownerEmail": owner_email}, {"_id": 0, field: 1})
        return [doc.get(field) for doc in cursor]

    def history(self, owner_email: str) -> List[dict]:
        return self._find({"ownerEmail": owner_email}, sort=[("dateStr", DESCENDING)])


class PaymentRepository(MongoRepository):
    collection_name = "payment"

    SUMMARY_FIELDS = {"_id": 1, "name": 1, "email": 1, "service": 1, "price": 1, "date": 1}

    def insert(self, payment: dict) -> str:
        return self._insert(payment)

    def sum_price(self) -> float:
        groups = list(self.collection.aggregate([{"$group": {"_id": None, "total": {"$sum": "$price"}}}]))
        return groups[0]["total"] if groups else 0

    def count(self) -> int:
        return self.collection.count_documents({})

    def list_for_summary(self) -> List[dict]:
        return self._find(projection=self.SUMMARY_FIELDS, sort=[("date", DESCENDING)])


class SubscriptionRepository(MongoRepository):
    collection_name = "subscription"

    def find_by_client(self, client: str) -> Optional[dict]:
        return serialize(self.collection.find_one({"client": client}))

    def insert(self, subscription: dict) -> str:
        return self._insert(subscription)

    def delete_by_client(self, client: str) -> bool:
        result = self.collection.delete_one({"client": client})
        return result.deleted_count > 0
