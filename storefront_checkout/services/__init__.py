# Service modules

from .cart import Cart, InvalidQuantityError
from .validation import ValidationResult, validate
from .commerce_client import (
    CatalogClient,
    CatalogError,
    CommerceClientError,
    DeliveryCommitError,
    DeliveryServiceClient,
    OrderCommitError,
    OrderServiceClient,
)
from .checkout import (
    CheckoutError,
    CheckoutInProgressError,
    CheckoutOrchestrator,
    IllegalTransitionError,
)

__all__ = [
    "Cart",
    "InvalidQuantityError",
    "ValidationResult",
    "validate",
    "CatalogClient",
    "CatalogError",
    "CommerceClientError",
    "DeliveryCommitError",
    "DeliveryServiceClient",
    "OrderCommitError",
    "OrderServiceClient",
    "CheckoutError",
    "CheckoutInProgressError",
    "CheckoutOrchestrator",
    "IllegalTransitionError",
]
