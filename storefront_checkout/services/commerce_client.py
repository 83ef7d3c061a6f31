"""
Commerce Service Clients

HTTP clients for the order, delivery and catalog services the
storefront checks out against.
"""

import json
import logging
import time
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from ..models.checkout import DeliveryRequest, DeliveryResult, OrderRequest, OrderResult
from ..models.product import Product

logger = logging.getLogger(__name__)


class CommerceClientError(Exception):
    """Base exception for commerce service errors"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class OrderCommitError(CommerceClientError):
    """The order service did not accept the order"""
    pass


class DeliveryCommitError(CommerceClientError):
    """The delivery service did not accept the delivery"""
    pass


class CatalogError(CommerceClientError):
    """The catalog could not be loaded"""
    pass


def synthesize_order_id() -> str:
    """Fallback order number for a response without one"""
    return f"ORD{int(time.time() * 1000)}"


class ServiceClient:
    """
    Base client for one remote service.

    Transport errors, timeouts and non-2xx responses are raised as
    `error_class` so callers only ever handle one exception family.
    """

    service_name = "commerce service"
    error_class: type[CommerceClientError] = CommerceClientError

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize service client.

        Args:
            base_url: Base URL of the service
            timeout: Seconds allowed per request
            transport: Optional httpx transport, used to stub the service
        """
        self.base_url = base_url.rstrip("/")
        self._http_client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    def _generate_headers(self, idempotency_key: Optional[str] = None) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if idempotency_key:
            headers["Idempotency-Key"] = idempotency_key
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[dict] = None,
        idempotency_key: Optional[str] = None,
    ) -> httpx.Response:
        """Make an HTTP request, raising `error_class` on any failure"""
        url = f"{self.base_url}{path}"
        body_str = json.dumps(body) if body is not None else None

        try:
            response = await self._http_client.request(
                method=method,
                url=url,
                headers=self._generate_headers(idempotency_key),
                content=body_str,
            )
        except httpx.TimeoutException as e:
            logger.error(f"{self.service_name} timed out: {method} {url}")
            raise self.error_class(f"{self.service_name} timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"{self.service_name} unreachable: {method} {url} - {e}")
            raise self.error_class(f"{self.service_name} is unreachable") from e

        if not response.is_success:
            logger.error(f"Request failed: {response.status_code} - {response.text}")
            raise self.error_class(
                f"{self.service_name} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        return response


def _json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _first_present(data: dict, *keys: str) -> Optional[str]:
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return str(value)
    return None


class OrderServiceClient(ServiceClient):
    """Client for the order service"""

    service_name = "Order service"
    error_class = OrderCommitError

    async def create_order(
        self,
        request: OrderRequest,
        idempotency_key: Optional[str] = None,
    ) -> OrderResult:
        """
        Create an order.

        The identifier is read from `id`, then `orderNumber`. A 2xx
        response without either still means the order exists, so a local
        fallback number is returned instead of failing.
        """
        response = await self._request(
            "POST",
            "/api/orders/create",
            body=request.to_payload(),
            idempotency_key=idempotency_key,
        )

        data = _json_body(response)
        if not isinstance(data, dict):
            data = {}

        order_id = _first_present(data, "id", "orderNumber")
        if order_id:
            logger.info(f"Order {order_id} created: {request.total_amount} for {len(request.items)} items")
            return OrderResult(order_id=order_id, raw=data)

        fallback = synthesize_order_id()
        logger.warning(
            f"Order service accepted an order without an identifier; using fallback {fallback}. "
            "This number cannot be matched to the backend record and needs reconciliation."
        )
        return OrderResult(order_id=fallback, synthesized=True, raw=data)


class DeliveryServiceClient(ServiceClient):
    """Client for the delivery service"""

    service_name = "Delivery service"
    error_class = DeliveryCommitError

    async def create_delivery(
        self,
        request: DeliveryRequest,
        idempotency_key: Optional[str] = None,
    ) -> DeliveryResult:
        """Schedule the delivery of an existing order"""
        response = await self._request(
            "POST",
            "/api/deliveries/create",
            body=request.to_payload(),
            idempotency_key=idempotency_key,
        )

        data = _json_body(response)
        if not isinstance(data, dict):
            data = {}

        logger.info(f"Delivery scheduled for order {request.order_number} at {request.scheduled_date}")
        return DeliveryResult(
            order_number=request.order_number,
            delivery_id=_first_present(data, "id", "deliveryId"),
            raw=data,
        )


class CatalogClient(ServiceClient):
    """Client for the product catalog"""

    service_name = "Catalog service"
    error_class = CatalogError

    async def fetch_products(self) -> list[Product]:
        """Get all products"""
        response = await self._request("GET", "/api/products")

        data = _json_body(response)
        if isinstance(data, dict):
            data = data.get("products", [])
        if not isinstance(data, list):
            raise CatalogError("Catalog service returned an unexpected payload")

        try:
            return [Product.model_validate(item) for item in data]
        except ValidationError as e:
            raise CatalogError(f"Catalog service returned an invalid product: {e}") from e
