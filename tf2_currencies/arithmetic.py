"""
Overflow-safe arithmetic over amounts.

Two parallel families:

  - saturating_*  never fails on overflow; clamps each field to the bounds.
  - checked_*     returns None when the exact result would leave the bounds.

Fields are computed independently. Keys and units are never carried into
each other here; see ``conversion.normalize`` / ``conversion.neaten`` for that.

Division is the one exception to "saturating never fails": dividing by zero
raises DivisionByZeroError from the saturating form and returns None from the
checked form.

Python ints are unbounded, so every result is computed exactly first and only
then compared against CURRENCY_MIN / CURRENCY_MAX.
"""

from __future__ import annotations

import logging
import math
from fractions import Fraction
from typing import TYPE_CHECKING

from .constants import CURRENCY_MAX, CURRENCY_MIN
from .exceptions import CurrencyOverflowError, CurrencyUnderflowError, DivisionByZeroError

if TYPE_CHECKING:
    from .models import Amount

logger = logging.getLogger(__name__)


# ─── Scalar Bounds ───────────────────────────────────────────────────


def saturate(value: int) -> int:
    """Clamp ``value`` into [CURRENCY_MIN, CURRENCY_MAX]."""
    if value > CURRENCY_MAX:
        logger.debug("Saturated %d to upper bound %d", value, CURRENCY_MAX)
        return CURRENCY_MAX
    if value < CURRENCY_MIN:
        logger.debug("Saturated %d to lower bound %d", value, CURRENCY_MIN)
        return CURRENCY_MIN
    return value


def checked(value: int) -> int | None:
    """Return ``value`` if it fits the integer type, else None."""
    if CURRENCY_MIN <= value <= CURRENCY_MAX:
        return value
    return None


def bounded(value: int) -> int:
    """Return ``value`` if it fits the integer type.

    Raises:
        CurrencyOverflowError: If ``value`` > CURRENCY_MAX.
        CurrencyUnderflowError: If ``value`` < CURRENCY_MIN.
    """
    if value > CURRENCY_MAX:
        raise CurrencyOverflowError(
            f"{value} exceeds the upper bound {CURRENCY_MAX}",
            details={"value": value, "bound": CURRENCY_MAX},
        )
    if value < CURRENCY_MIN:
        raise CurrencyUnderflowError(
            f"{value} is below the lower bound {CURRENCY_MIN}",
            details={"value": value, "bound": CURRENCY_MIN},
        )
    return value


def trunc_div(numerator: int, denominator: int) -> int:
    """Integer division truncating toward zero (Python's ``//`` floors)."""
    quotient = abs(numerator) // abs(denominator)
    if (numerator < 0) != (denominator < 0):
        return -quotient
    return quotient


def round_nearest(value: Fraction | float | int) -> int:
    """Round to the nearest integer, ties away from zero.

    Floats are converted exactly (no binary noise is added), so 41.94 rounds
    to 42 and 0.5 rounds to 1. The value must be finite.
    """
    exact = Fraction(value)
    magnitude = abs(exact)
    whole = math.floor(magnitude)
    if magnitude - whole >= Fraction(1, 2):
        whole += 1
    return whole if exact >= 0 else -whole


def _scale_by_float(value: int, factor: float) -> int:
    # NaN becomes 0; infinities clamp by sign.
    if math.isnan(factor) or value == 0:
        return 0
    if math.isinf(factor):
        return CURRENCY_MAX if (value > 0) == (factor > 0) else CURRENCY_MIN
    return saturate(math.trunc(Fraction(value) * Fraction(factor)))


def _divide_by_float(value: int, divisor: float) -> int:
    if math.isnan(divisor) or math.isinf(divisor):
        return 0
    return saturate(math.trunc(Fraction(value) / Fraction(divisor)))


def _require_nonzero(divisor: int | float) -> None:
    if divisor == 0:
        raise DivisionByZeroError("Cannot divide an amount by zero", details={"divisor": divisor})


# ─── Pairwise Operations ─────────────────────────────────────────────


def saturating_add(a: Amount, b: Amount) -> Amount:
    return type(a)(keys=saturate(a.keys + b.keys), units=saturate(a.units + b.units))


def checked_add(a: Amount, b: Amount) -> Amount | None:
    keys = checked(a.keys + b.keys)
    units = checked(a.units + b.units)
    if keys is None or units is None:
        return None
    return type(a)(keys=keys, units=units)


def saturating_sub(a: Amount, b: Amount) -> Amount:
    return type(a)(keys=saturate(a.keys - b.keys), units=saturate(a.units - b.units))


def checked_sub(a: Amount, b: Amount) -> Amount | None:
    keys = checked(a.keys - b.keys)
    units = checked(a.units - b.units)
    if keys is None or units is None:
        return None
    return type(a)(keys=keys, units=units)


# ─── Scalar Operations ───────────────────────────────────────────────


def saturating_mul(amount: Amount, factor: int | float) -> Amount:
    """Multiply both fields by ``factor``.

    Float factors are applied exactly and the product is truncated toward
    zero. There is no checked float multiply.
    """
    if isinstance(factor, float):
        return type(amount)(
            keys=_scale_by_float(amount.keys, factor),
            units=_scale_by_float(amount.units, factor),
        )
    return type(amount)(keys=saturate(amount.keys * factor), units=saturate(amount.units * factor))


def checked_mul(amount: Amount, factor: int) -> Amount | None:
    """Integer multiply; None if either field overflows.

    Raises:
        TypeError: If ``factor`` is not an int. Float scaling only exists in
            saturating form.
    """
    if not isinstance(factor, int):
        raise TypeError(f"checked_mul takes an int factor, got {type(factor).__name__}")
    keys = checked(amount.keys * factor)
    units = checked(amount.units * factor)
    if keys is None or units is None:
        return None
    return type(amount)(keys=keys, units=units)


def saturating_div(amount: Amount, divisor: int | float) -> Amount:
    """Divide both fields by ``divisor``, truncating toward zero.

    The only overflow case for integers is CURRENCY_MIN / -1, which clamps
    to CURRENCY_MAX.

    Raises:
        DivisionByZeroError: If ``divisor`` is zero (int or float).
    """
    _require_nonzero(divisor)
    if isinstance(divisor, float):
        return type(amount)(
            keys=_divide_by_float(amount.keys, divisor),
            units=_divide_by_float(amount.units, divisor),
        )
    return type(amount)(
        keys=saturate(trunc_div(amount.keys, divisor)),
        units=saturate(trunc_div(amount.units, divisor)),
    )


def checked_div(amount: Amount, divisor: int) -> Amount | None:
    """Integer division; None if ``divisor`` is zero or the result overflows.

    Raises:
        TypeError: If ``divisor`` is not an int.
    """
    if not isinstance(divisor, int):
        raise TypeError(f"checked_div takes an int divisor, got {type(divisor).__name__}")
    if divisor == 0:
        return None
    keys = checked(trunc_div(amount.keys, divisor))
    units = checked(trunc_div(amount.units, divisor))
    if keys is None or units is None:
        return None
    return type(amount)(keys=keys, units=units)


# ─── Ordering ────────────────────────────────────────────────────────


def compare(a: Amount, b: Amount) -> int:
    """Lexicographic comparison: keys first, then units. Returns -1, 0 or 1.

    No exchange rate is involved; 1 key always outranks any metal.
    """
    left = (a.keys, a.units)
    right = (b.keys, b.units)
    return (left > right) - (left < right)


def can_afford(amount: Amount, price: Amount) -> bool:
    return compare(amount, price) >= 0
