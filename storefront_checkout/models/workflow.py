"""Checkout workflow states and outcomes"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import ClassVar, Optional


class CheckoutState(str, Enum):
    """Current state of the checkout workflow"""
    IDLE = "idle"
    FORM_OPEN = "form_open"
    VALIDATING = "validating"
    SUBMITTING_ORDER = "submitting_order"
    SUBMITTING_DELIVERY = "submitting_delivery"
    COMPLETED = "completed"
    PARTIALLY_COMPLETED = "partially_completed"
    ABORTED = "aborted"

    @property
    def is_busy(self) -> bool:
        return self in BUSY_STATES

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES


BUSY_STATES = frozenset({
    CheckoutState.VALIDATING,
    CheckoutState.SUBMITTING_ORDER,
    CheckoutState.SUBMITTING_DELIVERY,
})

TERMINAL_STATES = frozenset({
    CheckoutState.COMPLETED,
    CheckoutState.PARTIALLY_COMPLETED,
    CheckoutState.ABORTED,
})


class ResultKind(str, Enum):
    SUCCESS = "success"
    VALIDATION_FAILED = "validation_failed"
    ORDER_FAILED = "order_failed"
    DELIVERY_FAILED = "delivery_failed"


@dataclass(frozen=True)
class CheckoutWorkflowResult:
    """
    Outcome of one checkout attempt.

    Every variant renders exactly one message for the storefront.
    DeliveryFailed is kept apart from the other failures because the
    order already exists on the order service.
    """
    kind: ClassVar[ResultKind]

    @property
    def message(self) -> str:
        raise NotImplementedError

    @property
    def succeeded(self) -> bool:
        return self.kind == ResultKind.SUCCESS

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "message": self.message, **asdict(self)}


@dataclass(frozen=True)
class Success(CheckoutWorkflowResult):
    order_id: str
    kind: ClassVar[ResultKind] = ResultKind.SUCCESS

    @property
    def message(self) -> str:
        return "Order placed and delivery scheduled successfully!"


@dataclass(frozen=True)
class ValidationFailed(CheckoutWorkflowResult):
    reason: str
    field: Optional[str] = None
    kind: ClassVar[ResultKind] = ResultKind.VALIDATION_FAILED

    @property
    def message(self) -> str:
        return self.reason


@dataclass(frozen=True)
class OrderFailed(CheckoutWorkflowResult):
    cause: str
    kind: ClassVar[ResultKind] = ResultKind.ORDER_FAILED

    @property
    def message(self) -> str:
        return f"Failed to place order: {self.cause}"


@dataclass(frozen=True)
class DeliveryFailed(CheckoutWorkflowResult):
    order_id: str
    cause: str
    kind: ClassVar[ResultKind] = ResultKind.DELIVERY_FAILED

    @property
    def message(self) -> str:
        return (
            f"Order {self.order_id} was placed but delivery setup failed: {self.cause}. "
            "Your cart has been kept so delivery can be scheduled again."
        )
