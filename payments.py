"""
Stripe client for creating card payment intents.

Only the intent is created here. Payment completion is reported by the
caller through POST /payments and is not verified against Stripe.
"""
import logging
from dataclasses import dataclass

import httpx

from errors import UpstreamFailure
from settings import get_settings

logger = logging.getLogger(__name__)


@dataclass
class PaymentIntent:
    id: str
    client_secret: str
    amount: int  # minor units
    currency: str


def to_minor_units(price: float) -> int:
    """Truncate a decimal price to integer cents."""
    return int(price * 100)


class StripeClient:
    def __init__(self, secret_key: str = None, base_url: str = None, transport: httpx.BaseTransport = None):
        settings = get_settings()
        self.secret_key = secret_key or settings.STRIPE_SECRET_KEY
        self.base_url = base_url or settings.STRIPE_API_BASE
        self._transport = transport

    def _request(self, method: str, endpoint: str, data: dict = None) -> dict:
        if not self.secret_key:
            raise UpstreamFailure("Payment processor not configured")

        try:
            with httpx.Client(timeout=30.0, transport=self._transport) as client:
                response = client.request(
                    method,
                    f"{self.base_url}{endpoint}",
                    auth=(self.secret_key, ""),
                    data=data,
                )
        except httpx.HTTPError as exc:
            logger.error(f"Stripe request failed: {exc}")
            raise UpstreamFailure("Payment processor unavailable")

        if not response.is_success:
            logger.error(f"Stripe API error: {response.status_code} - {response.text}")
            raise UpstreamFailure("Payment processor rejected the request")
        return response.json()

    def create_payment_intent(self, price: float, currency: str = None) -> PaymentIntent:
        currency = currency or get_settings().PAYMENT_CURRENCY
        amount = to_minor_units(price)
        data = self._request(
            "POST",
            "/payment_intents",
            data={"amount": amount, "currency": currency, "payment_method_types[]": "card"},
        )
        return PaymentIntent(
            id=data["id"],
            client_secret=data["client_secret"],
            amount=amount,
            currency=currency,
        )


def get_payment_client() -> StripeClient:
    return StripeClient()
