import json
from datetime import datetime
from typing import Any, Optional, Union

import httpx
import pytest

from storefront_checkout.models.checkout import CardDetails, DeliveryDetails, PaymentMethod
from storefront_checkout.models.product import Product
from storefront_checkout.services.cart import Cart
from storefront_checkout.services.checkout import CheckoutOrchestrator
from storefront_checkout.services.commerce_client import (
    CatalogClient,
    DeliveryServiceClient,
    OrderServiceClient,
)

BASE_URL = "http://commerce.test"
ORDERS_PATH = "/api/orders/create"
DELIVERIES_PATH = "/api/deliveries/create"

# Fixed "now" so the example schedule of 2024-06-01T10:00 lies in the future
NOW = datetime(2024, 5, 31, 9, 0)


class RecordingService:
    """MockTransport handler that records requests and replies per path"""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.replies: dict[str, Union[tuple[int, dict], Exception]] = {
            ORDERS_PATH: (201, {"json": {"id": "O99"}}),
            DELIVERIES_PATH: (201, {"json": {"id": "D1"}}),
        }

    def reply(
        self,
        path: str,
        status_code: int = 200,
        json: Optional[Any] = None,
        error: Optional[Exception] = None,
        **kwargs,
    ) -> None:
        if error is not None:
            self.replies[path] = error
        else:
            self.replies[path] = (status_code, {"json": json, **kwargs})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        reply = self.replies.get(request.url.path, (404, {}))
        if isinstance(reply, Exception):
            raise reply
        status_code, kwargs = reply
        return httpx.Response(status_code, **kwargs)

    def bodies(self, path: str) -> list[dict]:
        return [json.loads(r.content) for r in self.requests if r.url.path == path]

    def headers(self, path: str) -> list[httpx.Headers]:
        return [r.headers for r in self.requests if r.url.path == path]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def rice():
    return Product(id="p1", name="Organic Red Rice", category="organic-food", price=500)


@pytest.fixture
def treacle():
    return Product(id="p2", name="Kithul Treacle", category="organic-food", price="850.50")


@pytest.fixture
def cart():
    return Cart()


@pytest.fixture
def cash_details():
    return DeliveryDetails(
        customer="A. Silva",
        address="12 Lake Rd",
        scheduled_date="2024-06-01T10:00",
        payment_method=PaymentMethod.CASH,
    )


@pytest.fixture
def card_details():
    return DeliveryDetails(
        customer="A. Silva",
        address="12 Lake Rd",
        scheduled_date="2024-06-01T10:00",
        payment_method=PaymentMethod.CARD,
        card_details=CardDetails(card_number="4111111111111111", expiry_date="12/27", cvv="123"),
    )


@pytest.fixture
def service():
    return RecordingService()


@pytest.fixture
def order_client(service):
    return OrderServiceClient(BASE_URL, transport=service.transport())


@pytest.fixture
def delivery_client(service):
    return DeliveryServiceClient(BASE_URL, transport=service.transport())


@pytest.fixture
def catalog_client(service):
    return CatalogClient(BASE_URL, transport=service.transport())


@pytest.fixture
def orchestrator(cart, order_client, delivery_client):
    return CheckoutOrchestrator(
        cart=cart,
        order_client=order_client,
        delivery_client=delivery_client,
        customer_id="user-1",
        clock=lambda: NOW,
    )
