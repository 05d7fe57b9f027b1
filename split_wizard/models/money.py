"""
Money and numeric coercion

DESIGN DECISION: Amounts are stored as integer minor units (cents), never as
binary floats. Sums of per-participant amounts are then exact, and the only
place rounding happens is the explicit conversion from a Decimal result.

Numeric input from text fields is coerced, not validated: anything that does
not parse becomes zero. The wizard never raises for what a user typed.
"""

from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from pydantic import BaseModel, ConfigDict, Field


NumericInput = Union[Decimal, int, float, str]

MINOR_UNITS_PER_MAJOR = 100
CENT = Decimal("0.01")


def coerce_decimal(value: object) -> Decimal:
    """
    Turn loosely-typed numeric input into a finite Decimal.

    Non-numeric text, NaN, infinities and unsupported types all become 0.
    Floats go through repr() so 0.1 stays 0.1 instead of its binary expansion.
    """
    if isinstance(value, bool):
        return Decimal(0)
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(repr(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            return Decimal(0)
    else:
        return Decimal(0)

    if not result.is_finite():
        return Decimal(0)
    return result


class Money(BaseModel):
    """
    A non-negative amount in minor units.

    Use the constructors rather than passing minor_units directly:
    - Money.parse(raw): lenient, for user-typed text (truncates to cents)
    - Money.from_decimal(value): for computed results (rounds half-up)
    """
    model_config = ConfigDict(frozen=True)

    minor_units: int = Field(
        default=0,
        ge=0,
        description="Amount in cents",
    )

    @classmethod
    def zero(cls) -> "Money":
        return cls(minor_units=0)

    @classmethod
    def parse(cls, raw: object) -> "Money":
        """
        Parse user input. Never raises.

        Non-numeric or negative input is clamped to zero. Digits past the
        second decimal place are dropped, the way the amount field filters them.
        """
        value = coerce_decimal(raw)
        if value <= 0:
            return cls.zero()
        try:
            cents = value.quantize(CENT, rounding=ROUND_DOWN)
        except InvalidOperation:
            # Too many digits for the decimal context
            return cls.zero()
        return cls(minor_units=int(cents * MINOR_UNITS_PER_MAJOR))

    @classmethod
    def from_decimal(cls, value: Decimal) -> "Money":
        """
        Round a computed major-unit value half-up to cents.

        Negatives, and values too large to hold to the cent, become zero.
        """
        if value <= 0:
            return cls.zero()
        try:
            cents = value.quantize(CENT, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            return cls.zero()
        return cls(minor_units=int(cents * MINOR_UNITS_PER_MAJOR))

    @property
    def amount(self) -> Decimal:
        """Major units as an exact Decimal (e.g. Decimal('12.34'))."""
        return Decimal(self.minor_units) / MINOR_UNITS_PER_MAJOR

    @property
    def is_zero(self) -> bool:
        return self.minor_units == 0

    def __add__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        return Money(minor_units=self.minor_units + other.minor_units)

    def __radd__(self, other: object) -> "Money":
        # Lets sum() start from the integer 0
        if other == 0:
            return self
        return NotImplemented

    def __lt__(self, other: "Money") -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.minor_units < other.minor_units

    def __le__(self, other: "Money") -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.minor_units <= other.minor_units

    def __gt__(self, other: "Money") -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.minor_units > other.minor_units

    def __ge__(self, other: "Money") -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.minor_units >= other.minor_units

    def __str__(self) -> str:
        return f"{self.amount:.2f}"
