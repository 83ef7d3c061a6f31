"""Delivery form validation, run before any remote call"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..models.checkout import DeliveryDetails, PaymentMethod


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating a delivery form"""
    is_valid: bool
    field: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def valid(cls) -> "ValidationResult":
        return cls(is_valid=True)

    @classmethod
    def invalid(cls, field: str, reason: str) -> "ValidationResult":
        return cls(is_valid=False, field=field, reason=reason)


DELIVERY_FIELDS = (
    ("customer", "full name"),
    ("address", "delivery address"),
    ("scheduled_date", "delivery date and time"),
)

CARD_FIELDS = (
    ("card_number", "card number"),
    ("expiry_date", "expiry date"),
    ("cvv", "CVV"),
)


def parse_scheduled_date(value: str) -> Optional[datetime]:
    """Parse an ISO-8601 local date-time such as 2024-06-01T10:00"""
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        return None


def local_schedule(value: str) -> str:
    """
    Normalise a validated scheduled date to a local ISO-8601 date-time.

    Values with an offset are converted to local wall-clock time.
    """
    scheduled = parse_scheduled_date(value)
    if scheduled is None:
        raise ValueError(f"Invalid scheduled date: {value!r}")
    if scheduled.tzinfo is not None:
        scheduled = scheduled.astimezone().replace(tzinfo=None)
    timespec = "minutes" if not scheduled.second and not scheduled.microsecond else "seconds"
    return scheduled.isoformat(timespec=timespec)


def validate(details: DeliveryDetails, now: Optional[datetime] = None) -> ValidationResult:
    """
    Check a delivery form. The first failing rule wins.

    Delivery fields are checked before card fields, and card fields only
    when paying by card. The scheduled date must parse; when `now` is
    given it must also not lie in the past.
    """
    for name, label in DELIVERY_FIELDS:
        if not getattr(details, name).strip():
            return ValidationResult.invalid(
                name, f"Please fill in all delivery details ({label} is missing)"
            )

    scheduled = parse_scheduled_date(details.scheduled_date)
    if scheduled is None:
        return ValidationResult.invalid(
            "scheduled_date",
            f"Delivery date '{details.scheduled_date}' is not a valid date and time",
        )

    if now is not None and scheduled < _align(now, scheduled):
        return ValidationResult.invalid(
            "scheduled_date", "Delivery date and time cannot be in the past"
        )

    if details.payment_method == PaymentMethod.CARD:
        for name, label in CARD_FIELDS:
            if not getattr(details.card_details, name).strip():
                return ValidationResult.invalid(
                    name, f"Please fill in all card details ({label} is missing)"
                )

    return ValidationResult.valid()


def _align(now: datetime, scheduled: datetime) -> datetime:
    # Form dates are local wall-clock times without an offset
    if scheduled.tzinfo is None and now.tzinfo is not None:
        return now.astimezone().replace(tzinfo=None)
    if scheduled.tzinfo is not None and now.tzinfo is None:
        return now.astimezone()
    return now
