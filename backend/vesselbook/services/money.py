"""
Money helpers

Amounts are stored as integers in minor units ("cents") together with
house_of_zeros, the number of decimal places of the currency.
"""

import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Tuple, Union

Number = Union[int, float, Decimal, str]

CURRENCIES = {
    "EUR": {"symbol": "€", "decimals": 2},
    "USD": {"symbol": "$", "decimals": 2},
    "BRL": {"symbol": "R$", "decimals": 2},
    "AOA": {"symbol": "Kz", "decimals": 2},
}

DECIMAL_SEPARATOR = ","
THOUSANDS_SEPARATOR = "."


def round_half_up(value: Number) -> int:
    """Round to the nearest integer, halves away from zero"""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_integer(value: Optional[Number], decimals: int = 2) -> int:
    """12.34 -> 1234"""
    if value is None or value == "":
        return 0
    return round_half_up(Decimal(str(value)) * (Decimal(10) ** decimals))


def to_float(value: Optional[int], decimals: int = 2) -> float:
    """1234 -> 12.34"""
    if not value:
        return 0.0
    return float(Decimal(value) / (Decimal(10) ** decimals))


def currency_symbol(currency: Optional[str]) -> str:
    code = (currency or "").upper()
    return CURRENCIES.get(code, {}).get("symbol", code)


def format_money(value: Optional[int], currency: Optional[str] = None, decimals: int = 2,
                 with_symbol: bool = False) -> str:
    """
    1234567 -> "12.345,67 EUR" (or "12.345,67 €" with_symbol)
    """
    amount = Decimal(value or 0) / (Decimal(10) ** decimals)
    sign = "-" if amount < 0 else ""
    text = f"{abs(amount):,.{decimals}f}"
    # swap separators: 12,345.67 -> 12.345,67
    text = text.replace(",", "\0").replace(".", DECIMAL_SEPARATOR).replace("\0", THOUSANDS_SEPARATOR)
    if not currency:
        return f"{sign}{text}"
    suffix = currency_symbol(currency) if with_symbol else currency.upper()
    return f"{sign}{text} {suffix}"


def calculate_vat(amount: int, rate: Number) -> int:
    """VAT in cents for a net amount in cents"""
    if not amount or not rate:
        return 0
    return round_half_up(Decimal(amount) * Decimal(str(rate)) / Decimal(100))


def split_total_including_vat(total: int, rate: Number) -> Tuple[int, int]:
    """
    Split a gross amount into (base, vat)

    base = round(total / (1 + rate/100)), vat = total - base
    """
    if not rate:
        return total, 0
    base = round_half_up(Decimal(total) / (Decimal(1) + Decimal(str(rate)) / Decimal(100)))
    return base, total - base


_NUMBER_RE = re.compile(r"-?[\d.,]+")


def parse_money_string(text: str, decimals: int = 2) -> int:
    """
    "1.234,56 €" -> 123456

    The last "," or "." followed by at most `decimals` digits is the
    decimal separator; every other separator is grouping.
    """
    if not text:
        return 0
    match = _NUMBER_RE.search(text.replace(" ", ""))
    if not match:
        raise ValueError(f"Not a money value: {text!r}")
    raw = match.group(0)
    negative = raw.startswith("-")
    raw = raw.lstrip("-")

    last_sep = max(raw.rfind(","), raw.rfind("."))
    if last_sep != -1 and 0 < len(raw) - last_sep - 1 <= decimals:
        whole = re.sub(r"[.,]", "", raw[:last_sep]) or "0"
        fraction = raw[last_sep + 1:]
        number = Decimal(f"{whole}.{fraction}")
    else:
        number = Decimal(re.sub(r"[.,]", "", raw) or "0")

    cents = to_integer(number, decimals)
    return -cents if negative else cents
