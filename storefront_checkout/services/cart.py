"""Session-owned shopping cart"""

import logging
from decimal import Decimal
from typing import Optional

from ..models.cart import CartLineItem, CartSnapshot, CartView, SnapshotLine
from ..models.product import Product

logger = logging.getLogger(__name__)


class InvalidQuantityError(ValueError):
    """Caller passed a quantity the cart cannot hold"""
    pass


class Cart:
    """
    In-memory cart aggregate.

    Lines are keyed by product id and keep insertion order for display.
    The total is derived from the lines on every call. There is no
    locking; one session owns and writes the cart.
    """

    def __init__(self):
        self._lines: dict[str, CartLineItem] = {}

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, product_id: str) -> bool:
        return product_id in self._lines

    @property
    def lines(self) -> tuple[CartLineItem, ...]:
        return tuple(self._lines.values())

    @property
    def item_count(self) -> int:
        """Number of distinct products in the cart"""
        return len(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def get(self, product_id: str) -> Optional[CartLineItem]:
        return self._lines.get(product_id)

    def add_item(self, product: Product, quantity: int = 1) -> CartLineItem:
        """Add a product, incrementing the existing line if there is one"""
        _check_quantity(quantity)

        existing = self._lines.get(product.id)
        if existing:
            existing.cart_quantity += quantity
            return existing

        line = CartLineItem(
            product_id=product.id,
            name=product.name,
            price=product.price,
            image=product.image,
            cart_quantity=quantity,
        )
        self._lines[product.id] = line
        return line

    def remove_item(self, product_id: str) -> None:
        """Remove a line; unknown ids are ignored"""
        self._lines.pop(product_id, None)

    def update_quantity(self, product_id: str, new_quantity: int) -> Optional[CartLineItem]:
        """
        Set the quantity of a line.

        Zero or negative removes the line, which is how the stepper
        controls delete an item. Unknown ids are ignored.
        """
        if new_quantity <= 0:
            self.remove_item(product_id)
            return None
        _check_quantity(new_quantity)

        line = self._lines.get(product_id)
        if not line:
            return None

        line.cart_quantity = new_quantity
        return line

    def total(self) -> Decimal:
        return sum((line.line_total for line in self._lines.values()), Decimal("0"))

    def clear_cart(self) -> None:
        self._lines.clear()

    def remove_ordered(self, snapshot: CartSnapshot) -> None:
        """
        Take the quantities of a placed order out of the cart.

        Lines added or topped up after the snapshot was taken keep the
        remainder; fully ordered lines are removed.
        """
        for ordered in snapshot.lines:
            line = self._lines.get(ordered.product_id)
            if line:
                self.update_quantity(ordered.product_id, line.cart_quantity - ordered.quantity)

    def snapshot(self) -> CartSnapshot:
        """Freeze the current lines and total for a remote submission"""
        lines = tuple(
            SnapshotLine(
                product_id=line.product_id,
                name=line.name,
                price=line.price,
                quantity=line.cart_quantity,
            )
            for line in self._lines.values()
        )
        return CartSnapshot(
            lines=lines,
            total=sum((l.price * l.quantity for l in lines), Decimal("0")),
        )

    def to_view(self) -> CartView:
        return CartView(items=list(self.lines), item_count=self.item_count, total=self.total())


def _check_quantity(quantity: int) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantityError(f"Quantity must be an integer, got {quantity!r}")
    if quantity < 1:
        raise InvalidQuantityError(f"Quantity must be at least 1, got {quantity}")
