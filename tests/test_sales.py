"""Tenant and platform revenue summaries."""
import pytest
from bson import ObjectId

from errors import InvalidIdentifier
from sales import SalesAggregator, SalesLedger
from schemas import SaleCreate
from tests.fakes import InMemorySales
from tests.helpers import ADMIN_EMAIL, MANAGER_EMAIL, USER_EMAIL, auth_headers


def add_sales(sales):
    sales.insert({"ownerEmail": MANAGER_EMAIL, "sellingPrice": 100, "cost": 60, "profit": 40, "dateStr": "2024-01-01"})
    sales.insert({"ownerEmail": MANAGER_EMAIL, "sellingPrice": 50, "cost": 20, "profit": 30, "dateStr": "2024-03-05"})
    sales.insert({"ownerEmail": "other@x.com", "sellingPrice": 999, "cost": 1, "profit": 998, "dateStr": "2024-02-01"})


class TestSummarize:
    def test_empty_tenant(self, sales, payments):
        summary = SalesAggregator(sales, payments).summarize(MANAGER_EMAIL)

        assert summary.model_dump(by_alias=True) == {
            "soldCount": 0,
            "totalSale": 0,
            "totalInvest": 0,
            "totalProfit": 0,
            "history": [],
        }

    def test_sums_and_newest_first_history(self, sales, payments):
        add_sales(sales)

        summary = SalesAggregator(sales, payments).summarize(MANAGER_EMAIL)

        assert (summary.sold_count, summary.total_sale, summary.total_invest, summary.total_profit) == (2, 150, 80, 70)
        assert [s["dateStr"] for s in summary.history] == ["2024-03-05", "2024-01-01"]

    def test_failed_projection_degrades_one_metric(self, payments):
        sales = InMemorySales(failing_fields={"cost"})
        add_sales(sales)

        summary = SalesAggregator(sales, payments).summarize(MANAGER_EMAIL)

        assert summary.total_invest == 0
        assert (summary.total_sale, summary.total_profit) == (150, 70)

    def test_non_numeric_value_degrades_one_metric(self, sales, payments):
        add_sales(sales)
        sales.insert({"ownerEmail": MANAGER_EMAIL, "sellingPrice": "12", "cost": 1, "profit": 1, "dateStr": "2024-04-01"})

        summary = SalesAggregator(sales, payments).summarize(MANAGER_EMAIL)

        assert summary.total_sale == 0
        assert summary.total_invest == 81

    def test_missing_values_count_as_zero(self, sales, payments):
        sales.insert({"ownerEmail": MANAGER_EMAIL, "sellingPrice": 10, "dateStr": "2024-01-01"})

        summary = SalesAggregator(sales, payments).summarize(MANAGER_EMAIL)

        assert (summary.total_sale, summary.total_invest) == (10, 0)


class TestPlatformSummary:
    def test_sums_payment_prices(self, sales, payments):
        for price, date in ((20, "2024-01-01"), (15, "2024-02-01"), (0, "2024-03-01")):
            payments.insert({"email": USER_EMAIL, "price": price, "date": date, "service": "pro", "cardBrand": "visa"})

        summary = SalesAggregator(sales, payments).platform_summary()

        assert summary.total_income == 35
        assert summary.total_sales == 3
        assert [p["date"] for p in summary.sold_products] == ["2024-03-01", "2024-02-01", "2024-01-01"]
        assert all("cardBrand" not in p for p in summary.sold_products)

    def test_no_payments_is_zero(self, sales, payments):
        summary = SalesAggregator(sales, payments).platform_summary()

        assert (summary.total_income, summary.total_sales, summary.sold_products) == (0, 0, [])


class TestSalesLedger:
    def test_record_applies_product_side_effects(self, sales, products):
        product_id = products.insert({"name": "Tea", "ownerEmail": MANAGER_EMAIL, "quantity": 5, "salesCount": 0})
        sale = SaleCreate(product_id=product_id, selling_price=3, cost=2, profit=1, date_str="2024-01-01")

        sale_id = SalesLedger(sales, products).record(MANAGER_EMAIL, sale)

        assert sales.documents[sale_id]["ownerEmail"] == MANAGER_EMAIL
        product = products.find_by_id(product_id)
        assert (product["quantity"], product["salesCount"]) == (4, 1)

    def test_invalid_product_id_writes_nothing(self, sales, products):
        sale = SaleCreate(product_id="bad", selling_price=3, cost=2)

        with pytest.raises(InvalidIdentifier):
            SalesLedger(sales, products).record(MANAGER_EMAIL, sale)
        assert sales.documents == {}

    def test_unknown_product_still_records_sale(self, sales, products):
        sale = SaleCreate(product_id=str(ObjectId()), selling_price=3, cost=2)

        SalesLedger(sales, products).record(MANAGER_EMAIL, sale)

        assert sales.count_by_owner(MANAGER_EMAIL) == 1


class TestSalesRoutes:
    def test_summary_scenario(self, client, seeded, sales):
        add_sales(sales)

        response = client.get(f"/sales-summary/{MANAGER_EMAIL}", headers=auth_headers(MANAGER_EMAIL))

        body = response.json()
        assert response.status_code == 200
        assert {k: body[k] for k in ("soldCount", "totalSale", "totalInvest", "totalProfit")} == {
            "soldCount": 2,
            "totalSale": 150,
            "totalInvest": 80,
            "totalProfit": 70,
        }
        assert body["history"][0]["dateStr"] == "2024-03-05"

    def test_summary_of_another_tenant_is_forbidden(self, client, seeded, accounts):
        accounts.insert({"email": "b@x.com", "role": "manager"})

        response = client.get(f"/sales-summary/{MANAGER_EMAIL}", headers=auth_headers("b@x.com"))

        assert response.status_code == 403

    def test_summary_requires_manager_role(self, client, seeded):
        response = client.get(f"/sales-summary/{ADMIN_EMAIL}", headers=auth_headers(ADMIN_EMAIL))

        assert response.status_code == 403

    def test_record_sale_uses_caller_as_tenant(self, client, seeded, sales):
        payload = {"sellingPrice": 10, "cost": 4, "profit": 6, "dateStr": "2024-05-01", "ownerEmail": "x@x.com"}

        response = client.post("/sales", json=payload, headers=auth_headers(MANAGER_EMAIL))

        assert response.status_code == 200
        assert sales.documents[response.json()["insertedId"]]["ownerEmail"] == MANAGER_EMAIL

    def test_platform_view(self, client, seeded):
        for price in (20, 15, 0):
            client.post("/payments", json={"email": USER_EMAIL, "price": price, "service": "pro"})

        response = client.get("/sales-view", headers=auth_headers(ADMIN_EMAIL))

        assert response.status_code == 200
        assert response.json()["totalIncome"] == 35
        assert response.json()["totalSales"] == 3

    def test_platform_view_is_admin_only(self, client, seeded):
        response = client.get("/sales-view", headers=auth_headers(MANAGER_EMAIL))

        assert response.status_code == 403
