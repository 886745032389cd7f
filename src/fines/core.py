"""
core.py — Amount, the club's currency primitive

================================================================================
DESIGN PRINCIPLES
================================================================================

1. INTERNAL REPRESENTATION
   Two integers: whole units and sub-units (hundredths).
   Never floating point internally.

2. NO NEGATIVE AMOUNTS
   A fine cannot be negative and neither can a sum of fines.
   units >= 0 and 0 <= sub_units <= 99 hold for every instance:
   the constructor clamps, subtraction saturates at zero,
   multiplication ignores the sign of the multiplier.

3. IMMUTABILITY
   Frozen dataclass. Every operation returns a new instance.
   No side effects, safe to share between threads.

4. ONE LOSSY DOOR
   Everything is exact integer arithmetic except two entry points that
   accept a float: from_float()/from_scalar() (the wire format is a float)
   and multiplication by a float. Both truncate, never round.

5. NO CURRENCY
   The currency is implied by the club's region. Display formatting is
   delegated to config.CurrencyFormat.

================================================================================
WIRE FORMAT
================================================================================

An amount travels as a single non-negative number:

    Amount(12, 34).to_scalar()    -> 12.34
    Amount.from_scalar(12.345)    -> Amount(12, 34)     (truncation)
    Amount.from_scalar(-0.01)     -> NegativeAmountError

The round trip goes through a float: this is the storage format of the
backend, not a bug of this type.

================================================================================
"""

from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Optional
import logging
import math
import re

from .config import FineSettings
from .errors import FineDecodingError, NegativeAmountError

logger = logging.getLogger(__name__)


SUB_UNITS_PER_UNIT = 100
MAX_SUB_UNITS = SUB_UNITS_PER_UNIT - 1

# Everything but digits and separators: currency symbols, spaces, signs
_TEXT_NOISE = re.compile(r"[^0-9,.]")


def _check_int(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be int, not {type(value).__name__}")
    return value


def _decompose(value: float) -> tuple[int, int]:
    """
    Split a non-negative float into (units, sub_units), truncating.

    The float goes through its shortest repr first, so 0.29 gives 29
    sub-units and not the 28 that 0.29 * 100 == 28.999999999999996 would.
    """
    if not math.isfinite(value):
        raise FineDecodingError(f"Amount is not a finite number: {value!r}")
    exact = abs(Decimal(repr(float(value))))
    units = int(exact)
    sub_units = int((exact - units) * SUB_UNITS_PER_UNIT)
    return units, sub_units


# ==============================================================================
# AMOUNT CLASS
# ==============================================================================

@dataclass(frozen=True, slots=True, order=False)
class Amount:
    """
    Fixed-point amount of the club's currency.

    INVARIANTS:
    1. units >= 0
    2. 0 <= sub_units <= 99
    3. No operation produces a negative amount (clamp / saturate)

    USAGE:
        fine = Amount(2, 50)
        fine * 3                       # Amount(7, 50)
        Amount(5, 0) - Amount(7, 0)    # Amount.zero(), saturated
        Amount(1, 99) < Amount(2, 0)   # True
    """
    units: int = 0
    sub_units: int = 0

    def __post_init__(self):
        units = _check_int(self.units, "units")
        sub_units = _check_int(self.sub_units, "sub_units")
        object.__setattr__(self, "units", max(units, 0))
        object.__setattr__(self, "sub_units", min(max(sub_units, 0), MAX_SUB_UNITS))

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def zero(cls) -> Amount:
        """Zero. Starting value for every sum."""
        return cls(0, 0)

    @classmethod
    def from_float(cls, value: float) -> Amount:
        """
        Build from a float, taking its absolute value and truncating
        below the hundredths.

        For input coming from the backend use from_scalar(), which
        rejects negative values instead of flipping their sign.
        """
        units, sub_units = _decompose(value)
        return cls(units, sub_units)

    @classmethod
    def from_scalar(cls, scalar: float) -> Amount:
        """
        Decode the wire representation.

        Raises:
            NegativeAmountError: if scalar < 0
            FineDecodingError: if scalar is NaN or infinite
            TypeError: if scalar is not a number
        """
        if isinstance(scalar, bool) or not isinstance(scalar, (int, float)):
            raise TypeError(f"Amount scalar must be a number, not {type(scalar).__name__}")
        if scalar < 0:
            logger.debug("Rejecting negative amount scalar %r", scalar)
            raise NegativeAmountError(scalar)
        if isinstance(scalar, int):
            return cls(scalar, 0)
        return cls.from_float(scalar)

    @classmethod
    def parse(cls, text: str) -> Amount:
        """
        Parse user input like "12", "12,5", "12.50" or "1.234,56 €".

        The last ',' or '.' separates the sub-units, earlier ones are
        grouping. One fractional digit means tens ("12,5" is 12.50), digits
        after the second are truncated. Input without any digit gives zero.
        """
        cleaned = _TEXT_NOISE.sub("", text or "")
        if not any(c.isdigit() for c in cleaned):
            return cls.zero()

        split_at = max(cleaned.rfind(","), cleaned.rfind("."))
        if split_at == -1:
            whole, fraction = cleaned, ""
        else:
            whole, fraction = cleaned[:split_at], cleaned[split_at + 1:]
        whole = whole.replace(",", "").replace(".", "")
        fraction = fraction.replace(",", "").replace(".", "")

        try:
            units = int(whole) if whole else 0
        except ValueError:
            # more digits than int() converts from text
            logger.debug("Amount text too long to parse (%d digits)", len(whole))
            return cls.zero()
        sub_units = int(fraction[:2].ljust(2, "0")) if fraction else 0
        return cls(units, sub_units)

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def __add__(self, other: Amount) -> Amount:
        if not isinstance(other, Amount):
            raise TypeError(
                f"Operation not allowed: Amount + {type(other).__name__}. "
                f"Use Amount.from_float() or Amount.parse() to convert."
            )
        total_sub_units = self.sub_units + other.sub_units
        carry, sub_units = divmod(total_sub_units, SUB_UNITS_PER_UNIT)
        return Amount(self.units + other.units + carry, sub_units)

    def __sub__(self, other: Amount) -> Amount:
        """Difference, saturated at zero: debts do not go below nothing."""
        if not isinstance(other, Amount):
            raise TypeError(
                f"Operation not allowed: Amount - {type(other).__name__}."
            )
        sub_units = self.sub_units - other.sub_units
        borrow = 1 if sub_units < 0 else 0
        units = self.units - other.units - borrow
        if units < 0:
            return Amount.zero()
        return Amount(units, sub_units + borrow * SUB_UNITS_PER_UNIT)

    def __mul__(self, multiplier: int | float) -> Amount:
        """
        Multiply by a count (int) or a factor (float).

        The sign of the multiplier is ignored: a fine cannot occur a negative
        number of times. Integer multiplication is exact. A float factor is
        taken at its shortest repr (0.333 means 333/1000) and the product
        truncates below the hundredths, the only place this type drops value.

        Raises:
            ValueError: if the float factor is NaN or infinite
        """
        if isinstance(multiplier, bool):
            raise TypeError("Amount cannot be multiplied by bool")
        if isinstance(multiplier, int):
            count = abs(multiplier)
            scaled_sub_units = self.sub_units * count
            return Amount(
                self.units * count + scaled_sub_units // SUB_UNITS_PER_UNIT,
                scaled_sub_units % SUB_UNITS_PER_UNIT,
            )
        if isinstance(multiplier, float):
            if not math.isfinite(multiplier):
                raise ValueError(f"Amount cannot be multiplied by {multiplier!r}")
            numerator, denominator = abs(Decimal(repr(multiplier))).as_integer_ratio()
            total_sub_units = self._total_sub_units() * numerator // denominator
            return Amount(*divmod(total_sub_units, SUB_UNITS_PER_UNIT))
        raise TypeError(
            f"Amount can only be multiplied by int or float, "
            f"not {type(multiplier).__name__}."
        )

    def __rmul__(self, multiplier: int | float) -> Amount:
        return self.__mul__(multiplier)

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def _key(self) -> tuple[int, int]:
        return (self.units, self.sub_units)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Amount):
            return self._key() == other._key()
        return NotImplemented

    def __lt__(self, other: Amount) -> bool:
        self._check_amount(other)
        return self._key() < other._key()

    def __le__(self, other: Amount) -> bool:
        self._check_amount(other)
        return self._key() <= other._key()

    def __gt__(self, other: Amount) -> bool:
        self._check_amount(other)
        return self._key() > other._key()

    def __ge__(self, other: Amount) -> bool:
        self._check_amount(other)
        return self._key() >= other._key()

    def _check_amount(self, other: Amount) -> None:
        if not isinstance(other, Amount):
            raise TypeError(f"Cannot compare Amount with {type(other).__name__}")

    def __hash__(self) -> int:
        return hash(self._key())

    def __bool__(self) -> bool:
        return not self.is_zero()

    # -------------------------------------------------------------------------
    # Properties and output
    # -------------------------------------------------------------------------

    @property
    def as_float(self) -> float:
        """
        Value as float.

        WARNING: for the wire format only. Never compute with it.
        Above about 1e308 units there is no float: OverflowError.
        """
        # int / int is correctly rounded, so from_float(as_float) round-trips
        return self._total_sub_units() / SUB_UNITS_PER_UNIT

    def _total_sub_units(self) -> int:
        return self.units * SUB_UNITS_PER_UNIT + self.sub_units

    def is_zero(self) -> bool:
        return self.units == 0 and self.sub_units == 0

    @property
    def string_value(self) -> str:
        """Text for the amount input field: "12" or "12,05"."""
        if self.sub_units == 0:
            return str(self.units)
        return self.to_decimal_string(",")

    @property
    def for_payment(self) -> str:
        """Text for the payment gateway: always "12.00"."""
        return self.to_decimal_string(".")

    def to_decimal_string(self, separator: str = ",") -> str:
        return f"{self.units}{separator}{self.sub_units:02d}"

    def to_display_string(
        self,
        settings: Optional[FineSettings] = None,
        formatter: Optional[Callable[[int, int], str]] = None,
    ) -> str:
        """
        Locale text with grouping and currency symbol, e.g. "1.234,50 €".

        formatter receives (units, sub_units); by default the CurrencyFormat
        of the settings' region is used.
        """
        if formatter is None:
            formatter = (settings or FineSettings()).currency_format().format
        return formatter(self.units, self.sub_units)

    def __repr__(self) -> str:
        return f"Amount(units={self.units}, sub_units={self.sub_units})"

    def __str__(self) -> str:
        return self.to_decimal_string(".")

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_scalar(self) -> float:
        """
        Encode for the backend.

        NOTE: a float, because that is what the backend stores.
        Lossy beyond ~15 significant digits, OverflowError above ~1e308 units.
        """
        return self.as_float
