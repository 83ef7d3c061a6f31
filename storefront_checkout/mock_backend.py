"""
Mock Commerce Backend

Stands in for the order, delivery and catalog services during local
development. Orders and deliveries are kept in memory and failures can
be switched on to exercise the partial checkout paths.

    uvicorn storefront_checkout.mock_backend:app --port 8000
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import FastAPI, Header, HTTPException

from .models.product import Product

logger = logging.getLogger(__name__)

SEED_PRODUCTS: list[Product] = [
    Product(
        id="p1",
        name="Organic Red Rice",
        category="organic-food",
        price=500,
        image="/images/red-rice.jpg",
        description="Traditional hill-country red rice, sold per kg.",
        quantity=120,
    ),
    Product(
        id="p2",
        name="Kithul Treacle",
        category="organic-food",
        price=850,
        image="/images/kithul-treacle.jpg",
        description="Pure kithul palm treacle, 750 ml bottle.",
        quantity=40,
    ),
    Product(
        id="p3",
        name="Handwoven Dumbara Mat",
        category="handmade-crafts",
        price=3200,
        image="/images/dumbara-mat.jpg",
        description="Hemp mat woven on a traditional loom.",
        quantity=12,
    ),
    Product(
        id="p4",
        name="Handloom Cotton Sarong",
        category="ethical-clothing",
        price=2400,
        image="/images/handloom-sarong.jpg",
        description="Naturally dyed cotton, fair-wage cooperative.",
        quantity=25,
    ),
]


@dataclass
class BackendStore:
    """In-memory state of the mock services"""
    products: list[Product] = field(default_factory=lambda: list(SEED_PRODUCTS))
    orders: dict[str, dict[str, Any]] = field(default_factory=dict)
    deliveries: dict[str, dict[str, Any]] = field(default_factory=dict)
    idempotency_keys: dict[str, str] = field(default_factory=dict)

    # Failure switches
    fail_orders: bool = False
    fail_deliveries: bool = False
    omit_order_id: bool = False

    def reset(self) -> None:
        self.orders.clear()
        self.deliveries.clear()
        self.idempotency_keys.clear()
        self.fail_orders = self.fail_deliveries = self.omit_order_id = False


def create_mock_backend(store: Optional[BackendStore] = None) -> FastAPI:
    """Build the mock services around a store"""
    store = store or BackendStore()
    backend = FastAPI(
        title="Mock Commerce Backend",
        description="Simulated order, delivery and catalog services",
        version="1.0.0",
    )
    backend.state.store = store

    @backend.get("/api/products")
    async def list_products():
        return [p.model_dump(mode="json", by_alias=True) for p in store.products]

    @backend.post("/api/orders/create", status_code=201)
    async def create_order(
        payload: dict[str, Any],
        idempotency_key: Optional[str] = Header(None),
    ):
        if store.fail_orders:
            raise HTTPException(status_code=503, detail="Order service unavailable")
        if not payload.get("items"):
            raise HTTPException(status_code=400, detail="Order has no items")

        # Same key, same order
        if idempotency_key and idempotency_key in store.idempotency_keys:
            order_id = store.idempotency_keys[idempotency_key]
        else:
            order_id = f"ORD-{uuid.uuid4().hex[:8].upper()}"
            store.orders[order_id] = {
                **payload,
                "id": order_id,
                "status": "pending",
                "createdAt": datetime.now(timezone.utc).isoformat(),
            }
            if idempotency_key:
                store.idempotency_keys[idempotency_key] = order_id
            logger.info(f"Order {order_id} created: {payload.get('totalAmount')}")

        if store.omit_order_id:
            return {"status": "pending"}
        return {"id": order_id, "status": "pending"}

    @backend.post("/api/deliveries/create", status_code=201)
    async def create_delivery(payload: dict[str, Any]):
        if store.fail_deliveries:
            raise HTTPException(status_code=500, detail="Delivery service error")
        order_number = payload.get("orderNumber")
        if not order_number:
            raise HTTPException(status_code=400, detail="orderNumber is required")

        delivery_id = f"DEL-{uuid.uuid4().hex[:8].upper()}"
        store.deliveries[delivery_id] = {**payload, "id": delivery_id, "status": "scheduled"}
        logger.info(f"Delivery {delivery_id} scheduled for order {order_number}")
        return {"id": delivery_id, "orderNumber": order_number, "status": "scheduled"}

    @backend.get("/health")
    async def health_check():
        return {"status": "healthy", "service": "mock-commerce-backend"}

    return backend


app = create_mock_backend()
