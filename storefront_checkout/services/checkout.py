"""
Checkout Orchestrator

Turns a cart into an order on the order service and then a delivery on
the delivery service. The two services know nothing of each other, so a
delivery failure after the order was created is reported on its own and
the order number is kept for a delivery-only retry.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from ..models.cart import CartSnapshot
from ..models.checkout import DeliveryDetails, DeliveryRequest, OrderLine, OrderRequest
from ..models.workflow import (
    CheckoutState,
    CheckoutWorkflowResult,
    DeliveryFailed,
    OrderFailed,
    Success,
    ValidationFailed,
)
from .cart import Cart
from .commerce_client import (
    DeliveryCommitError,
    DeliveryServiceClient,
    OrderCommitError,
    OrderServiceClient,
)
from .validation import local_schedule, validate

logger = logging.getLogger(__name__)


class CheckoutError(Exception):
    """Base exception for checkout workflow misuse"""
    pass


class CheckoutInProgressError(CheckoutError):
    """A checkout attempt is already running for this session"""
    pass


class IllegalTransitionError(CheckoutError):
    """The workflow cannot move to the requested state"""
    pass


TRANSITIONS: dict[CheckoutState, frozenset[CheckoutState]] = {
    CheckoutState.IDLE: frozenset({CheckoutState.FORM_OPEN}),
    CheckoutState.FORM_OPEN: frozenset({CheckoutState.VALIDATING, CheckoutState.IDLE}),
    CheckoutState.VALIDATING: frozenset({
        CheckoutState.SUBMITTING_ORDER,
        # delivery-only retry of an order that already exists
        CheckoutState.SUBMITTING_DELIVERY,
        CheckoutState.ABORTED,
    }),
    CheckoutState.SUBMITTING_ORDER: frozenset({
        CheckoutState.SUBMITTING_DELIVERY,
        CheckoutState.ABORTED,
    }),
    CheckoutState.SUBMITTING_DELIVERY: frozenset({
        CheckoutState.COMPLETED,
        CheckoutState.PARTIALLY_COMPLETED,
    }),
    CheckoutState.COMPLETED: frozenset({CheckoutState.FORM_OPEN, CheckoutState.IDLE}),
    CheckoutState.PARTIALLY_COMPLETED: frozenset({CheckoutState.FORM_OPEN, CheckoutState.IDLE}),
    CheckoutState.ABORTED: frozenset({CheckoutState.FORM_OPEN, CheckoutState.IDLE}),
}


@dataclass(frozen=True)
class PendingOrder:
    """Order that exists on the order service but has no delivery yet"""
    order_id: str
    snapshot: CartSnapshot
    synthesized: bool = False


class CheckoutOrchestrator:
    """
    Drives checkout attempts for one session.

    Only one attempt runs at a time; the busy states reject a second
    submit before any request is made. Each remote call is made at most
    once per attempt. Ordered lines leave the cart only when both the
    order and the delivery were accepted; lines added since stay.
    """

    def __init__(
        self,
        cart: Cart,
        order_client: OrderServiceClient,
        delivery_client: DeliveryServiceClient,
        customer_id: str = "",
        reject_past_schedule: bool = True,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.cart = cart
        self.order_client = order_client
        self.delivery_client = delivery_client
        self.customer_id = customer_id
        self.reject_past_schedule = reject_past_schedule
        self._clock = clock

        self._state = CheckoutState.IDLE
        self._details: Optional[DeliveryDetails] = None
        self._pending: Optional[PendingOrder] = None
        self._last_order_request: Optional[OrderRequest] = None
        self._order_key: Optional[str] = None
        self.last_result: Optional[CheckoutWorkflowResult] = None

    @property
    def state(self) -> CheckoutState:
        return self._state

    @property
    def details(self) -> Optional[DeliveryDetails]:
        return self._details

    @property
    def pending_order_id(self) -> Optional[str]:
        return self._pending.order_id if self._pending else None

    def _transition(self, new_state: CheckoutState) -> None:
        if new_state not in TRANSITIONS[self._state]:
            raise IllegalTransitionError(
                f"Cannot move checkout from {self._state.value} to {new_state.value}"
            )
        logger.debug(f"Checkout state {self._state.value} -> {new_state.value}")
        self._state = new_state

    def _ensure_idle(self) -> None:
        if self._state.is_busy:
            raise CheckoutInProgressError("A checkout is already in progress")

    # ==================== Form ====================

    def open_form(self) -> DeliveryDetails:
        """Open the delivery form, keeping details from a failed attempt"""
        self._ensure_idle()
        if self._state != CheckoutState.FORM_OPEN:
            self._transition(CheckoutState.FORM_OPEN)
        if self._details is None:
            self._details = DeliveryDetails()
        return self._details

    def close_form(self) -> None:
        self._ensure_idle()
        if self._state != CheckoutState.IDLE:
            self._transition(CheckoutState.IDLE)

    def update_details(self, details: DeliveryDetails) -> DeliveryDetails:
        """Replace the details of the current attempt"""
        self.open_form()
        self._details = details
        return details

    # ==================== Submission ====================

    async def submit(self) -> CheckoutWorkflowResult:
        """
        Run one checkout attempt.

        Validates first, then creates the order and the delivery. If an
        earlier attempt left an order without a delivery, only the
        delivery is submitted again.
        """
        self._ensure_idle()
        if self._state.is_terminal:
            self._transition(CheckoutState.FORM_OPEN)
        self._transition(CheckoutState.VALIDATING)

        try:
            return await self._run_attempt()
        finally:
            if self._state.is_busy:
                # Reached only when something other than a service failure escaped
                sink = CheckoutState.PARTIALLY_COMPLETED if self._pending else CheckoutState.ABORTED
                logger.error(f"Checkout attempt interrupted in {self._state.value}, marking {sink.value}")
                self._state = sink

    async def retry_delivery(self) -> CheckoutWorkflowResult:
        """Submit the delivery again for the order left by a partial checkout"""
        if not self._pending:
            raise IllegalTransitionError("No order is waiting for a delivery")
        return await self.submit()

    def discard_pending_order(self) -> Optional[str]:
        """Forget an order that has no delivery; it must be reconciled by hand"""
        self._ensure_idle()
        if not self._pending:
            return None
        order_id = self._pending.order_id
        logger.warning(f"Pending order {order_id} discarded without a delivery; needs manual reconciliation")
        self._pending = None
        return order_id

    async def _run_attempt(self) -> CheckoutWorkflowResult:
        details = self._details or DeliveryDetails()
        now = self._clock() if self.reject_past_schedule else None

        validation = validate(details, now=now)
        if not validation.is_valid:
            return self._finish(
                CheckoutState.ABORTED,
                ValidationFailed(reason=validation.reason, field=validation.field),
            )

        if self._pending:
            logger.info(f"Retrying delivery for existing order {self._pending.order_id}")
            self._transition(CheckoutState.SUBMITTING_DELIVERY)
            return await self._submit_delivery(details, self._pending)

        if self.cart.is_empty:
            return self._finish(
                CheckoutState.ABORTED,
                ValidationFailed(reason="Your cart is empty", field="cart"),
            )

        self._transition(CheckoutState.SUBMITTING_ORDER)
        snapshot = self.cart.snapshot()
        request = self._build_order_request(snapshot, details)

        try:
            order = await self.order_client.create_order(
                request,
                idempotency_key=self._idempotency_key_for(request),
            )
        except OrderCommitError as e:
            logger.info(f"Checkout aborted, order not created: {e}")
            return self._finish(CheckoutState.ABORTED, OrderFailed(cause=str(e)))

        self._pending = PendingOrder(
            order_id=order.order_id,
            snapshot=snapshot,
            synthesized=order.synthesized,
        )
        self._last_order_request = None
        self._order_key = None

        self._transition(CheckoutState.SUBMITTING_DELIVERY)
        return await self._submit_delivery(details, self._pending)

    async def _submit_delivery(
        self,
        details: DeliveryDetails,
        pending: PendingOrder,
    ) -> CheckoutWorkflowResult:
        request = DeliveryRequest(
            order_number=pending.order_id,
            customer=details.customer,
            address=details.address,
            items=pending.snapshot.item_names,
            scheduled_date=local_schedule(details.scheduled_date),
        )

        try:
            await self.delivery_client.create_delivery(
                request,
                idempotency_key=f"{pending.order_id}-delivery",
            )
        except DeliveryCommitError as e:
            logger.warning(f"Order {pending.order_id} was created but its delivery failed: {e}")
            return self._finish(
                CheckoutState.PARTIALLY_COMPLETED,
                DeliveryFailed(order_id=pending.order_id, cause=str(e)),
            )

        self.cart.remove_ordered(pending.snapshot)
        self._details = None
        self._pending = None
        logger.info(f"Checkout completed for order {pending.order_id}")
        return self._finish(CheckoutState.COMPLETED, Success(order_id=pending.order_id))

    def _build_order_request(self, snapshot: CartSnapshot, details: DeliveryDetails) -> OrderRequest:
        return OrderRequest(
            customer_id=self.customer_id,
            items=[
                OrderLine(product_id=line.product_id, quantity=line.quantity, price=line.price)
                for line in snapshot.lines
            ],
            total_amount=snapshot.total,
            payment_details=details.payment_details(),
        )

    def _idempotency_key_for(self, request: OrderRequest) -> str:
        # An unchanged order resubmitted after a failure reuses its key
        if self._order_key is None or request != self._last_order_request:
            self._order_key = uuid.uuid4().hex
            self._last_order_request = request
        return self._order_key

    def _finish(
        self,
        state: CheckoutState,
        result: CheckoutWorkflowResult,
    ) -> CheckoutWorkflowResult:
        self._transition(state)
        self.last_result = result
        return result
