from __future__ import annotations
import math
from typing import Any, Iterable

TRANSACTION_TYPES = ("credit", "debit")
INVOICE_TYPES = ("sale", "purchase")
CASHFLOW_KINDS = ("income", "expense")


class ValidationError(ValueError):
    """Invalid user input, rejected before any record list is touched."""
    pass


def ensure_choice(value: Any, choices: Iterable[str], field_name: str) -> str:
    """Return value if it is one of choices, else raise ValidationError."""
    choices = tuple(choices)
    if value not in choices:
        raise ValidationError(f"{field_name} must be one of {', '.join(choices)} (got {value!r})")
    return value


def ensure_present(value: Any, message: str) -> Any:
    """Raise ValidationError if value is None or a blank string."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(message)
    return value


def ensure_positive(value: Any, field_name: str) -> float:
    """
    Raises ValidationError unless value is a number greater than zero.
    Numeric strings are accepted, as they arrive from form fields.
    """
    number = _as_number(value, field_name)
    if number <= 0:
        raise ValidationError(f"{field_name} must be greater than zero (got {value!r})")
    return number


def ensure_non_negative(value: Any, field_name: str) -> float:
    """Raises ValidationError unless value is a number >= 0."""
    number = _as_number(value, field_name)
    if number < 0:
        raise ValidationError(f"{field_name} cannot be negative (got {value!r})")
    return number


def _as_number(value: Any, field_name: str) -> float:
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field_name} must be a number (got {value!r})")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{field_name} must be a number (got {value!r})") from e
    if not math.isfinite(number):
        raise ValidationError(f"{field_name} must be a number (got {value!r})")
    return number
