"""Checkout API routes"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..models.checkout import DeliveryDetails
from ..services.checkout import (
    CheckoutError,
    CheckoutInProgressError,
    CheckoutOrchestrator,
)
from .deps import get_orchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sessions/{session_id}/checkout", tags=["Checkout"])


class CheckoutStatusResponse(BaseModel):
    """Current workflow state; card fields are never echoed back"""
    state: str
    details: Optional[dict[str, Any]] = None
    pending_order_id: Optional[str] = None
    last_result: Optional[dict[str, Any]] = None


class CheckoutResultResponse(BaseModel):
    """Outcome of one checkout attempt"""
    state: str
    result: dict[str, Any]


def _status(checkout: CheckoutOrchestrator) -> CheckoutStatusResponse:
    details = checkout.details
    return CheckoutStatusResponse(
        state=checkout.state.value,
        details=details.model_dump(mode="json", exclude={"card_details"}) if details else None,
        pending_order_id=checkout.pending_order_id,
        last_result=checkout.last_result.to_dict() if checkout.last_result else None,
    )


def _conflict(e: CheckoutError) -> HTTPException:
    return HTTPException(status_code=409, detail=str(e))


@router.get("", response_model=CheckoutStatusResponse)
async def get_checkout(checkout: CheckoutOrchestrator = Depends(get_orchestrator)):
    """Get checkout state"""
    return _status(checkout)


@router.post("/form", response_model=CheckoutStatusResponse)
async def open_form(checkout: CheckoutOrchestrator = Depends(get_orchestrator)):
    """Open the delivery form"""
    try:
        checkout.open_form()
    except CheckoutError as e:
        raise _conflict(e)
    return _status(checkout)


@router.delete("/form", response_model=CheckoutStatusResponse)
async def close_form(checkout: CheckoutOrchestrator = Depends(get_orchestrator)):
    """Close the delivery form"""
    try:
        checkout.close_form()
    except CheckoutError as e:
        raise _conflict(e)
    return _status(checkout)


@router.put("/details", response_model=CheckoutStatusResponse)
async def update_details(
    details: DeliveryDetails,
    checkout: CheckoutOrchestrator = Depends(get_orchestrator),
):
    """Fill in delivery and payment details"""
    try:
        checkout.update_details(details)
    except CheckoutError as e:
        raise _conflict(e)
    return _status(checkout)


@router.post("", response_model=CheckoutResultResponse)
async def submit_checkout(checkout: CheckoutOrchestrator = Depends(get_orchestrator)):
    """
    Place the order and schedule its delivery.

    Service failures come back as a result with a `kind`; only workflow
    misuse, such as a second submit while one is running, is an HTTP error.
    """
    try:
        result = await checkout.submit()
    except CheckoutInProgressError as e:
        logger.warning("Rejected checkout submit while another attempt is in flight")
        raise _conflict(e)
    except CheckoutError as e:
        raise _conflict(e)

    return CheckoutResultResponse(state=checkout.state.value, result=result.to_dict())


@router.post("/delivery/retry", response_model=CheckoutResultResponse)
async def retry_delivery(checkout: CheckoutOrchestrator = Depends(get_orchestrator)):
    """Schedule delivery again for an order placed by a partial checkout"""
    try:
        result = await checkout.retry_delivery()
    except CheckoutError as e:
        raise _conflict(e)

    return CheckoutResultResponse(state=checkout.state.value, result=result.to_dict())


@router.delete("/pending-order", response_model=CheckoutStatusResponse)
async def discard_pending_order(checkout: CheckoutOrchestrator = Depends(get_orchestrator)):
    """Give up on delivering a placed order"""
    try:
        order_id = checkout.discard_pending_order()
    except CheckoutError as e:
        raise _conflict(e)
    if order_id is None:
        raise HTTPException(status_code=404, detail="No order is waiting for a delivery")
    return _status(checkout)
