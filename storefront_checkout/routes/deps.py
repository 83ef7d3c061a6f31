"""Shared route dependencies: service clients and shopper sessions"""

from typing import Optional

from fastapi import Depends, HTTPException

from ..core.config import settings
from ..core.session import SessionManager, UserSession
from ..services.checkout import CheckoutOrchestrator
from ..services.commerce_client import CatalogClient, DeliveryServiceClient, OrderServiceClient

# Initialized lazily and shared by every session
order_client: Optional[OrderServiceClient] = None
delivery_client: Optional[DeliveryServiceClient] = None
catalog_client: Optional[CatalogClient] = None


def get_order_client() -> OrderServiceClient:
    """Get or create order service client"""
    global order_client
    if order_client is None:
        order_client = OrderServiceClient(settings.order_base_url, timeout=settings.request_timeout)
    return order_client


def get_delivery_client() -> DeliveryServiceClient:
    """Get or create delivery service client"""
    global delivery_client
    if delivery_client is None:
        delivery_client = DeliveryServiceClient(
            settings.delivery_base_url,
            timeout=settings.request_timeout,
        )
    return delivery_client


def get_catalog_client() -> CatalogClient:
    """Get or create catalog client"""
    global catalog_client
    if catalog_client is None:
        catalog_client = CatalogClient(settings.catalog_base_url, timeout=settings.request_timeout)
    return catalog_client


async def close_clients() -> None:
    global order_client, delivery_client, catalog_client
    for client in (order_client, delivery_client, catalog_client):
        if client:
            await client.close()
    order_client = delivery_client = catalog_client = None


def build_orchestrator(session: UserSession) -> CheckoutOrchestrator:
    return CheckoutOrchestrator(
        cart=session.cart,
        order_client=get_order_client(),
        delivery_client=get_delivery_client(),
        customer_id=session.user_id,
        reject_past_schedule=settings.reject_past_schedule,
    )


session_manager = SessionManager(orchestrator_factory=build_orchestrator)


def get_session_manager() -> SessionManager:
    return session_manager


def get_user_session(
    session_id: str,
    manager: SessionManager = Depends(get_session_manager),
) -> UserSession:
    session = manager.get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    session.touch()
    return session


def require_shopper(session: UserSession = Depends(get_user_session)) -> UserSession:
    """Reject sessions whose role may not use the cart"""
    if not session.can_shop:
        raise HTTPException(status_code=403, detail="Only users can use the cart")
    return session


def get_orchestrator(session: UserSession = Depends(require_shopper)) -> CheckoutOrchestrator:
    if session.checkout is None:
        raise HTTPException(status_code=503, detail="Checkout is not available for this session")
    return session.checkout
