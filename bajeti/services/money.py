"""
Money helpers.

Amounts are ``Decimal`` quantized to the minor unit of an explicitly supplied
currency. There is no default currency: every caller passes one.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

from bajeti.errors import ValidationError


# ISO 4217 exponents that differ from the usual two decimal places
_MINOR_UNIT_EXCEPTIONS = {
    "BIF": 0, "CLP": 0, "DJF": 0, "GNF": 0, "ISK": 0, "JPY": 0, "KMF": 0,
    "KRW": 0, "PYG": 0, "RWF": 0, "UGX": 0, "VND": 0, "VUV": 0, "XAF": 0,
    "XOF": 0, "XPF": 0,
    "BHD": 3, "IQD": 3, "JOD": 3, "KWD": 3, "LYD": 3, "OMR": 3, "TND": 3,
}

Number = Union[Decimal, int, str, float]


def normalize_currency(currency: str) -> str:
    if not isinstance(currency, str):
        raise ValidationError("currency is required", field="currency", constraint="required")
    code = currency.strip().upper()
    if len(code) != 3 or not code.isalpha():
        raise ValidationError(f"'{currency}' is not a 3-letter currency code", field="currency", constraint="format")
    return code


def minor_units(currency: str) -> int:
    return _MINOR_UNIT_EXCEPTIONS.get(normalize_currency(currency), 2)


def to_decimal(value: Number, field: str = "amount") -> Decimal:
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            # str() first so floats keep their printed value, not their binary one
            result = Decimal(str(value))
        except (InvalidOperation, ValueError):
            raise ValidationError(f"{field} is not a number: {value!r}", field=field, constraint="numeric")
    if not result.is_finite():
        raise ValidationError(f"{field} must be finite", field=field, constraint="numeric")
    return result


def quantum(currency: str) -> Decimal:
    return Decimal(1).scaleb(-minor_units(currency))


def quantize(amount: Number, currency: str) -> Decimal:
    """Round an amount to the currency's minor unit (half up)."""
    return to_decimal(amount).quantize(quantum(currency), rounding=ROUND_HALF_UP)


def format_money(amount: Number, currency: str) -> str:
    """
    Format an amount for display, e.g. ``format_money(1234.5, "TZS") == "TZS 1,234.50"``.
    Negative amounts keep the sign in front of the code: ``"-TZS 150.00"``.
    """
    code = normalize_currency(currency)
    value = quantize(amount, code)
    places = minor_units(code)
    formatted = f"{abs(value):,.{places}f}"
    sign = "-" if value < 0 else ""
    return f"{sign}{code} {formatted}"
