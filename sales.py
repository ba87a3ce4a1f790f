"""
Sales ledger and revenue aggregation.

Tenant summaries come from Sale Records; the platform summary comes from
Payment Records. A failure while projecting and summing one metric is logged
and that metric reads 0; the rest of the summary is still returned.
"""
import logging
from typing import Callable, Iterable

from pymongo.errors import PyMongoError

from database import to_object_id
from schemas import PlatformSummary, SaleCreate, SalesSummary

logger = logging.getLogger(__name__)


def _sum(values: Iterable) -> float:
    return sum(value for value in values if value is not None)


class SalesAggregator:
    def __init__(self, sales, payments):
        self.sales = sales
        self.payments = payments

    def _degrading_sum(self, metric: str, fetch: Callable[[], Iterable]) -> float:
        try:
            return _sum(fetch())
        except (PyMongoError, TypeError):
            logger.warning(f"Could not compute {metric}; reporting 0", exc_info=True)
            return 0

    def summarize(self, owner_email: str) -> SalesSummary:
        sold_count = self.sales.count_by_owner(owner_email)
        total_sale = self._degrading_sum(
            "totalSale", lambda: self.sales.project_field(owner_email, "sellingPrice")
        )
        total_invest = self._degrading_sum(
            "totalInvest", lambda: self.sales.project_field(owner_email, "cost")
        )
        total_profit = self._degrading_sum(
            "totalProfit", lambda: self.sales.project_field(owner_email, "profit")
        )
        return SalesSummary(
            sold_count=sold_count,
            total_sale=total_sale,
            total_invest=total_invest,
            total_profit=total_profit,
            history=self.sales.history(owner_email),
        )

    def platform_summary(self) -> PlatformSummary:
        return PlatformSummary(
            total_income=self.payments.sum_price(),
            total_sales=self.payments.count(),
            sold_products=self.payments.list_for_summary(),
        )


class SalesLedger:
    """Appends Sale Records and applies their inventory side effects."""

    def __init__(self, sales, products):
        self.sales = sales
        self.products = products

    def record(self, owner_email: str, sale: SaleCreate) -> str:
        if sale.product_id:
            to_object_id(sale.product_id)

        document = sale.model_dump(by_alias=True, exclude_none=True)
        document["ownerEmail"] = owner_email
        sale_id = self.sales.insert(document)

        if sale.product_id and not self.products.record_sale(sale.product_id):
            logger.warning(f"Sale {sale_id} references unknown product {sale.product_id}")
        return sale_id
