"""Checkout models: delivery form, payment details and the two remote payloads"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .types import Money


class PaymentMethod(str, Enum):
    CARD = "card"
    CASH = "cash"


class CardDetails(BaseModel):
    """Card fields as typed into the form; forwarded opaquely, never checked"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    card_number: str = Field(default="", repr=False)
    expiry_date: str = Field(default="", repr=False)
    cvv: str = Field(default="", repr=False)


class DeliveryDetails(BaseModel):
    """Fulfillment and payment details for one checkout attempt"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    customer: str = ""
    address: str = ""
    scheduled_date: str = ""
    payment_method: PaymentMethod = PaymentMethod.CARD
    card_details: CardDetails = Field(default_factory=CardDetails)

    def payment_details(self) -> "PaymentDetails":
        """Build the payment variant matching the chosen method"""
        if self.payment_method == PaymentMethod.CARD:
            return CardPayment(
                card_number=self.card_details.card_number,
                expiry_date=self.card_details.expiry_date,
                cvv=self.card_details.cvv,
            )
        return CashPayment()


class CardPayment(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    method: Literal["Credit Card"] = "Credit Card"
    card_number: str = Field(repr=False)
    expiry_date: str = Field(repr=False)
    cvv: str = Field(repr=False)


class CashPayment(BaseModel):
    method: Literal["Cash on Delivery"] = "Cash on Delivery"


PaymentDetails = Annotated[Union[CardPayment, CashPayment], Field(discriminator="method")]


class OrderLine(BaseModel):
    """Item in an order request"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    product_id: str
    quantity: int = Field(ge=1)
    price: Money


class OrderRequest(BaseModel):
    """Body of POST /api/orders/create"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    customer_id: str = ""
    items: list[OrderLine]
    total_amount: Money
    payment_details: PaymentDetails

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class DeliveryRequest(BaseModel):
    """Body of POST /api/deliveries/create"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    order_number: str
    customer: str
    address: str
    items: str
    scheduled_date: str

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


@dataclass
class OrderResult:
    """Order accepted by the order service"""
    order_id: str
    # True when the service omitted an identifier and one was made up locally
    synthesized: bool = False
    raw: dict = field(default_factory=dict)


@dataclass
class DeliveryResult:
    """Delivery accepted by the delivery service"""
    order_number: str
    delivery_id: Optional[str] = None
    raw: dict = field(default_factory=dict)
