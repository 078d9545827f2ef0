"""
Conversion between amount representations.

Two independent axes:

  1. Flattening: (keys, weapons) ⇄ one weapon total, given a key price in
     weapons supplied by the caller. The rate is never fetched or cached here.

  2. Exact ⇄ approximate: ``ApproxAmount`` floats into an ``Amount``.
     Strict: fractional keys are rejected, never truncated.

Plus the rounding combinator ``normalize``, the only operation that may move
value between ``units`` and ``keys``.

Float → weapon rounding is half away from zero everywhere in this package.
"""

from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Decimal
from fractions import Fraction

from .arithmetic import bounded, checked, round_nearest, saturate, trunc_div
from .constants import CURRENCY_MAX, CURRENCY_MIN, ONE_REF, ONE_SCRAP
from .exceptions import FractionalKeysError, InvalidRateError, OutOfRangeError
from .models import Amount, ApproxAmount, Rounding

logger = logging.getLogger(__name__)

_CENTS = Decimal("0.01")


# ─── Rate Validation ─────────────────────────────────────────────────


def _require_rate(rate: int) -> None:
    """A key price must be a positive number of weapons."""
    if rate <= 0:
        raise InvalidRateError(
            f"Key price must be a positive number of weapons, got {rate}",
            details={"rate": rate},
        )


# ─── Metal Helpers ───────────────────────────────────────────────────


def metal_float(units: int) -> float:
    """Weapons → refined as a float, e.g. 42 → 2.333..."""
    return units / ONE_REF


def metal_decimal(units: int) -> Decimal:
    """Weapons → refined, rounded half-up to two decimal places.

    With 18 weapons per refined a tie at the third decimal is impossible, so
    the rounding direction never depends on the tie rule. As a Decimal or as
    text the result always converts back to the same weapon count; as a
    float that only holds while the value fits a double's 53-bit mantissa.
    """
    return (Decimal(units) / ONE_REF).quantize(_CENTS, rounding=ROUND_HALF_UP)


def units_from_metal(metal: float) -> int:
    """Refined → weapons, rounded to the nearest weapon. Saturating.

    NaN becomes 0; infinities clamp by sign.
    """
    if math.isnan(metal):
        return 0
    if math.isinf(metal):
        return CURRENCY_MAX if metal > 0 else CURRENCY_MIN
    return saturate(round_nearest(Fraction(metal) * ONE_REF))


def checked_units_from_metal(metal: float) -> int | None:
    """Refined → weapons; None if non-finite or out of range."""
    if not math.isfinite(metal):
        return None
    return checked(round_nearest(Fraction(metal) * ONE_REF))


# ─── Flattening ──────────────────────────────────────────────────────


def to_flat_total(amount: Amount, rate: int) -> int:
    """``keys * rate + units``, saturating at the bounds.

    Raises:
        InvalidRateError: If ``rate`` <= 0.
    """
    _require_rate(rate)
    return saturate(amount.keys * rate + amount.units)


def checked_to_flat_total(amount: Amount, rate: int) -> int | None:
    """``keys * rate + units``, or None if the exact total overflows.

    An invalid rate also yields None.
    """
    if rate <= 0:
        return None
    return checked(amount.keys * rate + amount.units)


def strict_to_flat_total(amount: Amount, rate: int) -> int:
    """``keys * rate + units``, raising instead of clamping.

    Raises:
        InvalidRateError: If ``rate`` <= 0.
        CurrencyOverflowError / CurrencyUnderflowError: If the total leaves the bounds.
    """
    _require_rate(rate)
    return bounded(amount.keys * rate + amount.units)


def from_flat_total(total: int, rate: int) -> Amount:
    """Split a weapon total into whole keys and leftover weapons.

    Both parts truncate toward zero and share the sign of ``total``:
    ``from_flat_total(-20, 18)`` is ``Amount(keys=-1, units=-2)``.

    Raises:
        InvalidRateError: If ``rate`` <= 0.
        OutOfRangeError: If ``total`` itself does not fit the integer type.
    """
    _require_rate(rate)
    if checked(total) is None:
        raise OutOfRangeError(
            f"Total {total} does not fit the integer type",
            details={"total": total},
        )
    keys = trunc_div(total, rate)
    return Amount(keys=keys, units=total - keys * rate)


def checked_from_flat_total(total: int, rate: int) -> Amount | None:
    if rate <= 0 or checked(total) is None:
        return None
    return from_flat_total(total, rate)


def neaten(amount: Amount, rate: int) -> Amount:
    """Move whole keys' worth of weapons into ``keys``. Saturating.

    ``Amount(keys=1, units=refined(60))`` at 50 ref/key becomes
    ``Amount(keys=2, units=refined(10))``.
    """
    return from_flat_total(to_flat_total(amount, rate), rate)


# ─── Fractional Keys ─────────────────────────────────────────────────


def from_keys_float(keys: float, rate: int) -> Amount:
    """Price the fractional part of ``keys`` in weapons. Saturating.

    ``from_keys_float(1.5, refined(60))`` is ``Amount(keys=1, units=refined(30))``.
    NaN gives the zero amount; infinities clamp ``keys``.
    """
    _require_rate(rate)
    if math.isnan(keys):
        return Amount()
    if math.isinf(keys):
        return Amount(keys=CURRENCY_MAX if keys > 0 else CURRENCY_MIN)
    exact = Fraction(keys)
    whole = math.trunc(exact)
    return Amount(
        keys=saturate(whole),
        units=saturate(round_nearest((exact - whole) * rate)),
    )


def checked_from_keys_float(keys: float, rate: int) -> Amount | None:
    if rate <= 0 or not math.isfinite(keys):
        return None
    exact = Fraction(keys)
    whole = math.trunc(exact)
    units = round_nearest((exact - whole) * rate)
    if checked(whole) is None or checked(units) is None:
        return None
    return Amount(keys=whole, units=units)


def approx_to_flat_total(approx: ApproxAmount, rate: int) -> int:
    """Flatten an approximate amount to weapons. Saturating.

    Keys are priced at ``rate`` and rounded to the nearest weapon, so
    fractional keys are fine here.
    """
    _require_rate(rate)
    if math.isnan(approx.keys):
        keys_units = 0
    elif math.isinf(approx.keys):
        return CURRENCY_MAX if approx.keys > 0 else CURRENCY_MIN
    else:
        keys_units = round_nearest(Fraction(approx.keys) * rate)
    return saturate(keys_units + units_from_metal(approx.metal))


def checked_approx_to_flat_total(approx: ApproxAmount, rate: int) -> int | None:
    if rate <= 0 or not math.isfinite(approx.keys):
        return None
    metal_units = checked_units_from_metal(approx.metal)
    if metal_units is None:
        return None
    return checked(round_nearest(Fraction(approx.keys) * rate) + metal_units)


# ─── Exact ⇄ Approximate ─────────────────────────────────────────────


def try_exact(approx: ApproxAmount) -> Amount:
    """Validate an approximate amount into an exact one.

    ``ApproxAmount(keys=1.0, metal=1.33)`` → ``Amount(keys=1, units=24)``
    (1.33 * 18 = 23.94, rounds to 24).

    Raises:
        FractionalKeysError: If ``keys`` is not a whole number. Checked first,
            so a bad ``metal`` never masks it.
        OutOfRangeError: If a field is NaN/infinite, or does not fit the
            integer type once converted.
    """
    if not math.isfinite(approx.keys):
        logger.debug("Rejected non-finite key count %r", approx.keys)
        raise OutOfRangeError(
            f"Key count {approx.keys} is not a finite number",
            details={"keys": approx.keys},
        )

    if approx.is_fractional():
        fract = math.modf(approx.keys)[0]
        logger.debug("Rejected fractional keys %r", approx.keys)
        raise FractionalKeysError(
            f"Key count {approx.keys} has a fractional part ({fract})",
            details={"keys": approx.keys, "fract": fract},
        )

    keys = checked(int(approx.keys))
    if keys is None:
        raise OutOfRangeError(
            f"Key count {approx.keys} does not fit the integer type",
            details={"keys": approx.keys},
        )

    units = checked_units_from_metal(approx.metal)
    if units is None:
        raise OutOfRangeError(
            f"Metal value {approx.metal} does not fit the integer type once converted to weapons",
            details={"metal": approx.metal},
        )

    return Amount(keys=keys, units=units)


def to_approx(amount: Amount) -> ApproxAmount:
    """Exact → approximate. Never fails; lossy by nature."""
    return ApproxAmount(keys=float(amount.keys), metal=metal_float(amount.units))


# ─── Rounding ────────────────────────────────────────────────────────


def _floor_multiple(value: int, step: int) -> int:
    return (value // step) * step


def _ceil_multiple(value: int, step: int) -> int:
    return -((-value) // step) * step


def _nearest_multiple(value: int, step: int) -> int:
    return round_nearest(Fraction(value, step)) * step


def round_units(units: int, mode: Rounding) -> int:
    """Round a weapon count according to ``mode``. Saturating.

    Up/down mean toward positive/negative infinity, for negative values too.
    """
    if mode is Rounding.REFINED:
        rounded = _nearest_multiple(units, ONE_REF)
    elif mode is Rounding.UP_REFINED:
        rounded = _ceil_multiple(units, ONE_REF)
    elif mode is Rounding.DOWN_REFINED:
        rounded = _floor_multiple(units, ONE_REF)
    elif mode is Rounding.UP_SCRAP:
        rounded = _ceil_multiple(units, ONE_SCRAP)
    elif mode is Rounding.DOWN_SCRAP:
        rounded = _floor_multiple(units, ONE_SCRAP)
    else:
        raise ValueError(f"Unknown rounding mode: {mode!r}")
    return saturate(rounded)


_REFINED_MODES: frozenset[Rounding] = frozenset({
    Rounding.REFINED,
    Rounding.UP_REFINED,
    Rounding.DOWN_REFINED,
})


def normalize(amount: Amount, mode: Rounding, rate: int | None = None) -> Amount:
    """Round ``units`` per ``mode``, returning a new amount.

    For the three refined modes, passing the key price ``rate`` also folds
    every whole key contained in the rounded ``units`` into ``keys``. The
    scrap modes never touch ``keys``, and neither does any mode without a rate.

    Raises:
        InvalidRateError: If ``rate`` is given and <= 0.
    """
    units = round_units(amount.units, mode)
    keys = amount.keys

    if rate is not None and mode in _REFINED_MODES:
        _require_rate(rate)
        whole_keys = trunc_div(units, rate)
        keys = saturate(keys + whole_keys)
        units -= whole_keys * rate

    return Amount(keys=keys, units=units)
