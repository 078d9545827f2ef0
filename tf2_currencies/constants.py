"""
Unit ratios, integer bounds and text symbols.

All metal is counted in weapons, the smallest denomination:

    1 scrap    =  2 weapons
    1 reclaimed =  6 weapons   (3 scrap)
    1 refined  = 18 weapons   (3 reclaimed)

Keys have no fixed ratio. Their price in weapons is supplied by the caller
at conversion time.

The integer width is chosen once, at import, from ``TF2_CURRENCY_BITS``
("64" by default, or "32"). It never changes for the life of the process.
"""

from __future__ import annotations

import os
from typing import Final

# ─── Integer Width ───────────────────────────────────────────────────

_SUPPORTED_BITS: frozenset[int] = frozenset({32, 64})


def _read_currency_bits() -> int:
    raw = os.environ.get("TF2_CURRENCY_BITS", "64").strip()
    try:
        bits = int(raw)
    except ValueError:
        raise ValueError(
            f"TF2_CURRENCY_BITS must be one of {sorted(_SUPPORTED_BITS)}, got {raw!r}"
        ) from None
    if bits not in _SUPPORTED_BITS:
        raise ValueError(
            f"TF2_CURRENCY_BITS must be one of {sorted(_SUPPORTED_BITS)}, got {bits}"
        )
    return bits


CURRENCY_BITS: Final[int] = _read_currency_bits()
CURRENCY_MIN: Final[int] = -(2 ** (CURRENCY_BITS - 1))
CURRENCY_MAX: Final[int] = 2 ** (CURRENCY_BITS - 1) - 1

# ─── Unit Ratios (in weapons) ────────────────────────────────────────

ONE_WEAPON: Final[int] = 1
ONE_SCRAP: Final[int] = ONE_WEAPON * 2
ONE_REC: Final[int] = ONE_SCRAP * 3
ONE_REF: Final[int] = ONE_REC * 3


def scrap(count: int) -> int:
    """Weapon value of ``count`` scrap metal."""
    return count * ONE_SCRAP


def reclaimed(count: int) -> int:
    """Weapon value of ``count`` reclaimed metal."""
    return count * ONE_REC


def refined(count: int) -> int:
    """Weapon value of ``count`` refined metal."""
    return count * ONE_REF


# ─── Text Symbols ────────────────────────────────────────────────────

KEY_SYMBOL: Final[str] = "key"
KEYS_SYMBOL: Final[str] = "keys"
METAL_SYMBOL: Final[str] = "ref"
