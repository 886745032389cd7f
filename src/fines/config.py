"""
config.py — Display settings for club amounts

The currency is never stored with an amount: it is implied by the club's
region. This module holds the little configuration that display needs.

    settings = FineSettings.from_env()
    fmt = CurrencyFormat.for_region(settings.region_code)
    fmt.format(1234, 5)    # '1.234,05 €'

Nothing in arithmetic, resolution or aggregation reads these settings.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
import os

logger = logging.getLogger(__name__)


DEFAULT_REGION_CODE = "DE"
DEFAULT_CURRENCY_CODE = "EUR"


@dataclass(frozen=True)
class FineSettings:
    """Region and currency of the club.

    Attributes:
        region_code: ISO 3166 region of the club, drives display format.
        currency_code: ISO 4217 code sent to the payment gateway.
    """

    region_code: str = DEFAULT_REGION_CODE
    currency_code: str = DEFAULT_CURRENCY_CODE

    @classmethod
    def from_env(cls) -> FineSettings:
        """Build settings from FINES_REGION_CODE / FINES_CURRENCY_CODE."""
        region = os.getenv("FINES_REGION_CODE", DEFAULT_REGION_CODE).strip().upper()
        currency = os.getenv("FINES_CURRENCY_CODE", DEFAULT_CURRENCY_CODE).strip().upper()
        return cls(
            region_code=region or DEFAULT_REGION_CODE,
            currency_code=currency or DEFAULT_CURRENCY_CODE,
        )

    def currency_format(self) -> CurrencyFormat:
        return CurrencyFormat.for_region(self.region_code)

    def to_dict(self) -> dict:
        return {
            "region_code": self.region_code,
            "currency_code": self.currency_code,
        }


@dataclass(frozen=True)
class CurrencyFormat:
    """
    Locale formatting rules for a currency amount.

    This is the display collaborator: Amount only hands over whole units and
    sub-units, the format decides separators and symbol placement.
    """
    decimal_separator: str
    grouping_separator: str
    symbol: str
    symbol_after: bool = True

    @classmethod
    def for_region(cls, region_code: str) -> CurrencyFormat:
        """Format for a region code, DE format for unknown regions."""
        fmt = _REGION_FORMATS.get(region_code.upper())
        if fmt is None:
            logger.warning(
                "No currency format for region %r, using %s",
                region_code, DEFAULT_REGION_CODE,
            )
            fmt = _REGION_FORMATS[DEFAULT_REGION_CODE]
        return fmt

    def format(self, units: int, sub_units: int) -> str:
        digits = str(units)
        groups = []
        while len(digits) > 3:
            groups.insert(0, digits[-3:])
            digits = digits[:-3]
        groups.insert(0, digits)
        number = f"{self.grouping_separator.join(groups)}{self.decimal_separator}{sub_units:02d}"

        if self.symbol_after:
            return f"{number} {self.symbol}"
        return f"{self.symbol}{number}"


_REGION_FORMATS: dict[str, CurrencyFormat] = {
    "DE": CurrencyFormat(",", ".", "€"),
    "AT": CurrencyFormat(",", ".", "€"),
    "FR": CurrencyFormat(",", " ", "€"),
    "IT": CurrencyFormat(",", ".", "€"),
    "ES": CurrencyFormat(",", ".", "€"),
    "NL": CurrencyFormat(",", ".", "€ ", symbol_after=False),
    "CH": CurrencyFormat(".", "’", "CHF ", symbol_after=False),
    "GB": CurrencyFormat(".", ",", "£", symbol_after=False),
    "US": CurrencyFormat(".", ",", "$", symbol_after=False),
}
