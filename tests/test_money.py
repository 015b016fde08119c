from decimal import Decimal

import pytest

from bajeti.errors import ValidationError
from bajeti.services.money import format_money, minor_units, normalize_currency, quantize, to_decimal


def test_normalize_currency_upper_cases_code():
    assert normalize_currency(" tzs ") == "TZS"


@pytest.mark.parametrize("bad", ["", "TZ", "TZSS", "12A", None])
def test_normalize_currency_rejects_malformed_codes(bad):
    with pytest.raises(ValidationError) as exc:
        normalize_currency(bad)
    assert exc.value.field == "currency"


def test_minor_units_follow_currency():
    assert minor_units("TZS") == 2
    assert minor_units("JPY") == 0
    assert minor_units("KWD") == 3


def test_quantize_rounds_half_up_to_minor_unit():
    assert quantize(Decimal("10.005"), "TZS") == Decimal("10.01")
    assert quantize(Decimal("10.5"), "JPY") == Decimal("11")


def test_to_decimal_keeps_printed_float_value():
    assert to_decimal(0.1) == Decimal("0.1")


def test_to_decimal_rejects_garbage_and_infinity():
    with pytest.raises(ValidationError):
        to_decimal("ten")
    with pytest.raises(ValidationError):
        to_decimal(Decimal("Infinity"))


def test_format_money():
    assert format_money(Decimal("1234.5"), "tzs") == "TZS 1,234.50"
    assert format_money(Decimal("-150"), "TZS") == "-TZS 150.00"
    assert format_money(1500, "JPY") == "JPY 1,500"
