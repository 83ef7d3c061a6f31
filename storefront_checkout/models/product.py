"""Catalog product models"""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .types import Money


class ProductReview(BaseModel):
    """Customer review attached to a product"""
    model_config = ConfigDict(extra="allow")

    rating: Optional[float] = None
    comment: Optional[str] = None


class Product(BaseModel):
    """Product as served by the catalog service"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    category: str = ""
    price: Money
    image: str = ""
    description: str = ""
    quantity: int = 0
    reviews: Optional[list[ProductReview]] = None
    average_rating: Optional[float] = None
