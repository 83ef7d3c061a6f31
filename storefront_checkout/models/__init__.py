# Checkout Service Models

from .product import Product, ProductReview
from .cart import CartLineItem, CartSnapshot, CartView, SnapshotLine
from .checkout import (
    CardDetails,
    CardPayment,
    CashPayment,
    DeliveryDetails,
    DeliveryRequest,
    DeliveryResult,
    OrderLine,
    OrderRequest,
    OrderResult,
    PaymentDetails,
    PaymentMethod,
)
from .workflow import (
    CheckoutState,
    CheckoutWorkflowResult,
    DeliveryFailed,
    OrderFailed,
    ResultKind,
    Success,
    ValidationFailed,
)

__all__ = [
    "Product",
    "ProductReview",
    "CartLineItem",
    "CartSnapshot",
    "CartView",
    "SnapshotLine",
    "CardDetails",
    "CardPayment",
    "CashPayment",
    "DeliveryDetails",
    "DeliveryRequest",
    "DeliveryResult",
    "OrderLine",
    "OrderRequest",
    "OrderResult",
    "PaymentDetails",
    "PaymentMethod",
    "CheckoutState",
    "CheckoutWorkflowResult",
    "DeliveryFailed",
    "OrderFailed",
    "ResultKind",
    "Success",
    "ValidationFailed",
]
