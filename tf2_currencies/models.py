"""
Pydantic models for currency amounts, strictly typed at the boundary.

Two amount types:

  - ``Amount``        exact integers (keys + weapons). Arithmetic, ordering,
                      formatting all happen here.
  - ``ApproxAmount``  floats exactly as some external source reported them.
                      No arithmetic. Convert it with ``conversion.try_exact``
                      before doing anything with the value.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, StrictInt, ValidationInfo, field_validator

from . import arithmetic
from .constants import CURRENCY_MAX, CURRENCY_MIN
from .exceptions import OutOfRangeError


# ─── Rounding Modes ──────────────────────────────────────────────────


class Rounding(str, Enum):
    """How ``conversion.normalize`` rounds a weapon count."""

    REFINED = "REFINED"  # Nearest refined (half away from zero)
    UP_REFINED = "UP_REFINED"
    DOWN_REFINED = "DOWN_REFINED"
    UP_SCRAP = "UP_SCRAP"
    DOWN_SCRAP = "DOWN_SCRAP"


# ─── Exact Amount ────────────────────────────────────────────────────


class Amount(BaseModel):
    """An exact amount: whole keys plus metal counted in weapons.

    ``units`` is never normalized into refined; 40 refined is stored as 720.
    Either field may be negative.

    Operators saturate at the integer bounds. The in-place forms (``+=``,
    ``-=``, ``*=``, ``/=``) mutate the receiver and return it.
    """

    model_config = ConfigDict(validate_assignment=True)

    keys: StrictInt = 0
    units: StrictInt = 0

    @field_validator("keys", "units")
    @classmethod
    def _within_bounds(cls, value: int, info: ValidationInfo) -> int:
        if not CURRENCY_MIN <= value <= CURRENCY_MAX:
            raise OutOfRangeError(
                f"{info.field_name}={value} is outside [{CURRENCY_MIN}, {CURRENCY_MAX}]",
                details={"field": info.field_name, "value": value},
            )
        return value

    def is_empty(self) -> bool:
        return self.keys == 0 and self.units == 0

    def can_afford(self, price: Amount) -> bool:
        return arithmetic.can_afford(self, price)

    def _assign(self, result: Amount) -> Amount:
        self.keys = result.keys
        self.units = result.units
        return self

    # ── Ordering (keys first, then units) ───────────────────────────

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Amount):
            return NotImplemented
        return arithmetic.compare(self, other) < 0

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Amount):
            return NotImplemented
        return arithmetic.compare(self, other) <= 0

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Amount):
            return NotImplemented
        return arithmetic.compare(self, other) > 0

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Amount):
            return NotImplemented
        return arithmetic.compare(self, other) >= 0

    # ── Arithmetic ───────────────────────────────────────────────────

    def __add__(self, other: object) -> Amount:
        if not isinstance(other, Amount):
            return NotImplemented
        return arithmetic.saturating_add(self, other)

    def __sub__(self, other: object) -> Amount:
        if not isinstance(other, Amount):
            return NotImplemented
        return arithmetic.saturating_sub(self, other)

    def __mul__(self, factor: object) -> Amount:
        if not isinstance(factor, (int, float)):
            return NotImplemented
        return arithmetic.saturating_mul(self, factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: object) -> Amount:
        """Divide both fields, truncating toward zero.

        Raises:
            DivisionByZeroError: If ``divisor`` is zero.
        """
        if not isinstance(divisor, (int, float)):
            return NotImplemented
        return arithmetic.saturating_div(self, divisor)

    def __iadd__(self, other: object) -> Amount:
        if not isinstance(other, Amount):
            return NotImplemented
        return self._assign(arithmetic.saturating_add(self, other))

    def __isub__(self, other: object) -> Amount:
        if not isinstance(other, Amount):
            return NotImplemented
        return self._assign(arithmetic.saturating_sub(self, other))

    def __imul__(self, factor: object) -> Amount:
        if not isinstance(factor, (int, float)):
            return NotImplemented
        return self._assign(arithmetic.saturating_mul(self, factor))

    def __itruediv__(self, divisor: object) -> Amount:
        if not isinstance(divisor, (int, float)):
            return NotImplemented
        return self._assign(arithmetic.saturating_div(self, divisor))

    def __bool__(self) -> bool:
        return not self.is_empty()

    def __str__(self) -> str:
        from .text import format_amount

        return format_amount(self)


# ─── Approximate Amount ──────────────────────────────────────────────


class ApproxAmount(BaseModel):
    """Floating-point keys and refined, retained exactly as received.

    ``metal`` is in refined (1.33 means "1.33 ref"), NOT weapons.
    """

    keys: float = 0.0
    metal: float = 0.0

    def is_fractional(self) -> bool:
        """True if ``keys`` is not a whole number."""
        return not float(self.keys).is_integer()

    def is_empty(self) -> bool:
        return self.keys == 0.0 and self.metal == 0.0

    def __str__(self) -> str:
        from .text import format_approx

        return format_approx(self)


# ─── Structured Record ───────────────────────────────────────────────


class CurrenciesRecord(BaseModel):
    """Interchange shape: ``{"keys": 5, "metal": 2.33}``.

    Missing fields default to zero. ``keys`` must be a real integer; a float
    or a string is a type mismatch, not something to coerce.
    """

    model_config = ConfigDict(strict=True)

    keys: StrictInt = 0
    metal: float = 0.0
