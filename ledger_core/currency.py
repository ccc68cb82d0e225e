"""
Currency Support Module

Closed table of supported ISO 4217 currency codes with their minor-unit
precision. Ledger amounts are integers in minor units; conversion to and
from major units goes through Decimal, NEVER float arithmetic.
"""

from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Union


class Currency(Enum):
    """ISO 4217 Currency Codes with precision info"""
    USD = ("USD", 2, "US Dollar")
    EUR = ("EUR", 2, "Euro")
    GBP = ("GBP", 2, "British Pound")
    JPY = ("JPY", 0, "Japanese Yen")
    KWD = ("KWD", 3, "Kuwaiti Dinar")

    def __init__(self, code: str, precision: int, display_name: str):
        self.code = code
        self.precision = precision
        self.display_name = display_name

    @classmethod
    def from_code(cls, code: str) -> "Currency":
        """
        Look up a currency by its code (case-insensitive)

        Raises:
            ValueError: If the code is not in the supported table
        """
        if isinstance(code, str):
            normalized = code.strip().upper()
            if normalized in cls.__members__:
                return cls[normalized]
        raise ValueError(f"Unsupported currency: {code}")


DEFAULT_CURRENCY = Currency.USD


def supported_codes() -> list:
    """Codes of every supported currency, in table order"""
    return [currency.code for currency in Currency]


def is_supported_currency(code: str) -> bool:
    """Check whether a currency code is in the supported table"""
    return isinstance(code, str) and code.upper() in Currency.__members__


def get_currency_decimals(currency: Union[Currency, str]) -> int:
    """Number of minor-unit decimal places; unknown codes fall back to 2"""
    if isinstance(currency, Currency):
        return currency.precision
    if is_supported_currency(currency):
        return Currency[currency.upper()].precision
    return 2


def to_minor_units(amount: Union[Decimal, int, str], currency: Currency) -> int:
    """
    Convert a major-unit amount to integer minor units

    Args:
        amount: Amount in major units (e.g. dollars)
        currency: Currency defining precision

    Returns:
        Amount in minor units, rounded half-up
    """
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    scaled = amount * (Decimal(10) ** get_currency_decimals(currency))
    return int(scaled.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def to_major_units(amount: int, currency: Currency) -> Decimal:
    """Convert integer minor units to a Decimal in major units"""
    decimals = get_currency_decimals(currency)
    major = Decimal(amount) / (Decimal(10) ** decimals)
    return major.quantize(Decimal('0.1') ** decimals, rounding=ROUND_HALF_UP)


def format_amount(amount: int, currency: Currency) -> str:
    """Format minor units for display, e.g. ``USD 1,234.50``"""
    major = to_major_units(amount, currency)
    if currency.precision == 0:
        return f"{currency.code} {major:,.0f}"
    return f"{currency.code} {major:,.{currency.precision}f}"
