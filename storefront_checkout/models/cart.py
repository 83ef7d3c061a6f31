"""Cart models"""

from dataclasses import dataclass
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .types import Money


class CartLineItem(BaseModel):
    """One product entry in the cart with its quantity"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    product_id: str
    name: str
    price: Money
    image: str = ""
    cart_quantity: int = Field(ge=1)

    @property
    def line_total(self) -> Decimal:
        return self.price * self.cart_quantity


@dataclass(frozen=True)
class SnapshotLine:
    """Immutable copy of a cart line taken at submission time"""
    product_id: str
    name: str
    price: Decimal
    quantity: int


@dataclass(frozen=True)
class CartSnapshot:
    """Cart contents frozen for one remote submission"""
    lines: tuple[SnapshotLine, ...]
    total: Decimal

    @property
    def item_names(self) -> str:
        """Human readable item summary sent with the delivery"""
        return ", ".join(line.name for line in self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines


class CartView(BaseModel):
    """Cart as rendered for the storefront"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    items: list[CartLineItem]
    item_count: int
    total: Money
