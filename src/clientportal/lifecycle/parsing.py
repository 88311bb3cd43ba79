"""Lenient parsing of amounts and dates coming from admin forms.

Amounts arrive as numbers or as display strings such as ``"$1,250.00"``.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from clientportal.errors import ValidationError

_CURRENCY_CHARACTERS = "$€£,"


def parse_amount(value: Any) -> Decimal | None:
    """Parse a money amount, ignoring currency symbols and thousands separators.

    Args:
        value: Number or string such as ``"$250.00"`` or ``"1,250"``.

    Returns:
        The amount as a Decimal, or None when the value is empty or not numeric.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str):
        return None

    cleaned = value.strip()
    for character in _CURRENCY_CHARACTERS:
        cleaned = cleaned.replace(character, "")
    cleaned = cleaned.strip()
    if not cleaned:
        return None

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        return None
    return amount if amount.is_finite() else None


def parse_deadline(value: Any) -> date | None:
    """Parse an ISO date (or datetime) deadline.

    Raises:
        ValidationError: If the value is present but not a valid date.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        text = str(value).strip()
        if "T" in text or " " in text:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        return date.fromisoformat(text)
    except ValueError as exc:
        raise ValidationError(f"Invalid deadline: {value}") from exc
