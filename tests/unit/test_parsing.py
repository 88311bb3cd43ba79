"""Unit tests for amount and deadline parsing."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from clientportal.errors import ValidationError
from clientportal.lifecycle.parsing import parse_amount, parse_deadline


class TestParseAmount:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("$250.00", Decimal("250.00")),
            ("1,250", Decimal("1250")),
            ("$1,250,000.50", Decimal("1250000.50")),
            ("€99", Decimal("99")),
            ("  £12.5 ", Decimal("12.5")),
            (250, Decimal("250")),
            (19.99, Decimal("19.99")),
            (Decimal("42.10"), Decimal("42.10")),
        ],
    )
    def test_valid_amounts(self, value: object, expected: Decimal) -> None:
        assert parse_amount(value) == expected

    @pytest.mark.parametrize("value", [None, "", "   ", "$", "abc", "12abc", True, [], "NaN", "Infinity"])
    def test_invalid_amounts_return_none(self, value: object) -> None:
        assert parse_amount(value) is None

    def test_negative_amount_is_parsed(self) -> None:
        assert parse_amount("-5") == Decimal("-5")


class TestParseDeadline:
    def test_iso_date(self) -> None:
        assert parse_deadline("2025-03-31") == date(2025, 3, 31)

    def test_iso_datetime_with_zulu(self) -> None:
        assert parse_deadline("2025-03-31T10:00:00Z") == date(2025, 3, 31)

    def test_date_and_datetime_objects(self) -> None:
        assert parse_deadline(date(2025, 1, 2)) == date(2025, 1, 2)
        assert parse_deadline(datetime(2025, 1, 2, 8, tzinfo=timezone.utc)) == date(2025, 1, 2)

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_deadline(self, value: object) -> None:
        assert parse_deadline(value) is None

    def test_invalid_deadline_raises(self) -> None:
        with pytest.raises(ValidationError, match="Invalid deadline"):
            parse_deadline("next tuesday")
