"""Shared field types"""

from decimal import Decimal
from typing import Annotated

from pydantic import Field, PlainSerializer

# Amounts are exact in memory and plain JSON numbers on the wire
Money = Annotated[
    Decimal,
    Field(ge=0),
    PlainSerializer(float, return_type=float, when_used="json"),
]
