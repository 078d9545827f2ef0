"""
Text grammar for amounts: "5 keys, 2.33 ref".

    amount      := keysClause ("," ws? metalClause)? | metalClause
    keysClause  := sign? digits ws ("keys" | "key")
    metalClause := sign? digits ("." digits)? ws "ref"

Unit words are case-insensitive; whitespace around the whole string is
ignored. A missing clause means zero. Each digit run is at most 40 digits
long.

Formatting emits both clauses when both fields are non-zero or both are
zero ("0 keys, 0 ref"), otherwise only the non-zero one. Metal is rendered
as refined rounded to two decimals; whole values drop the fraction ("2 ref").

Because 1 refined = 18 weapons, a two-decimal refined value is always
within 0.09 weapons of the truth, so ``parse(format_amount(a)) == a`` holds
for every amount: 17 weapons prints as "0.94 ref" and parses back to 17,
18 weapons prints as "1 ref" and parses back to 18.
"""

from __future__ import annotations

import logging
import math
import re
from fractions import Fraction

from .arithmetic import checked, round_nearest
from .constants import KEY_SYMBOL, KEYS_SYMBOL, METAL_SYMBOL, ONE_REF
from .conversion import metal_decimal
from .exceptions import MalformedTextError, OutOfRangeError
from .models import Amount, ApproxAmount

logger = logging.getLogger(__name__)

# Longer digit runs are malformed text.
_MAX_DIGITS = 40
_CLAUSE = re.compile(
    rf"(?P<number>[+-]?\d{{1,{_MAX_DIGITS}}}(?:\.\d{{1,{_MAX_DIGITS}}})?) *(?P<unit>[A-Za-z]+)",
    re.ASCII,
)
_KEY_WORDS: frozenset[str] = frozenset({KEY_SYMBOL, KEYS_SYMBOL})


# ─── Tokenizer ───────────────────────────────────────────────────────


def _split_clauses(text: str) -> tuple[str | None, str | None]:
    """Return the raw (keys, metal) number strings; either may be None.

    Raises:
        MalformedTextError: On empty input, an unparsable clause, an unknown
            unit word, a repeated clause, or keys after metal.
    """
    stripped = text.strip()
    if not stripped:
        raise MalformedTextError("Empty text cannot be parsed as an amount", details={"text": text})

    clauses = [clause.strip() for clause in stripped.split(",")]
    if len(clauses) > 2:
        raise MalformedTextError(
            f"Expected at most two clauses in {text!r}, found {len(clauses)}",
            details={"text": text},
        )

    keys: str | None = None
    metal: str | None = None

    for index, clause in enumerate(clauses):
        match = _CLAUSE.fullmatch(clause)
        if not match:
            logger.debug("Unparsable clause %r in %r", clause, text)
            raise MalformedTextError(
                f"Could not parse {clause!r} in {text!r}",
                details={"text": text, "clause": clause},
            )

        number = match.group("number")
        unit = match.group("unit").lower()

        if unit in _KEY_WORDS:
            # Keys may only lead.
            if index != 0:
                raise MalformedTextError(
                    f"Keys must come before metal in {text!r}",
                    details={"text": text, "clause": clause},
                )
            keys = number
        elif unit == METAL_SYMBOL:
            if metal is not None:
                raise MalformedTextError(
                    f"Metal given twice in {text!r}",
                    details={"text": text, "clause": clause},
                )
            metal = number
        else:
            raise MalformedTextError(
                f"Unknown currency name {match.group('unit')!r} in {text!r}",
                details={"text": text, "unit": match.group("unit")},
            )

    return keys, metal


# ─── Parsing ─────────────────────────────────────────────────────────


def parse(text: str) -> Amount:
    """Parse canonical text into an exact amount.

    Examples:
        parse("5 keys, 2.33 ref") → Amount(keys=5, units=42)
        parse("0 keys")           → Amount(keys=0, units=0)

    Raises:
        MalformedTextError: If the text does not follow the grammar, including
            fractional keys ("1.5 keys").
        OutOfRangeError: If a value does not fit the integer type.
    """
    keys_text, metal_text = _split_clauses(text)

    keys = 0
    if keys_text is not None:
        if "." in keys_text:
            raise MalformedTextError(
                f"Key count {keys_text!r} must be a whole number",
                details={"text": text, "keys": keys_text},
            )
        keys = int(keys_text)
        if checked(keys) is None:
            raise OutOfRangeError(
                f"Key count {keys_text} does not fit the integer type",
                details={"text": text, "keys": keys_text},
            )

    units = 0
    if metal_text is not None:
        units = round_nearest(Fraction(metal_text) * ONE_REF)
        if checked(units) is None:
            raise OutOfRangeError(
                f"Metal value {metal_text} does not fit the integer type once converted to weapons",
                details={"text": text, "metal": metal_text},
            )

    return Amount(keys=keys, units=units)


def parse_approx(text: str) -> ApproxAmount:
    """Parse text into an approximate amount. Fractional keys are allowed.

    Raises:
        MalformedTextError: If the text does not follow the grammar.
    """
    keys_text, metal_text = _split_clauses(text)
    return ApproxAmount(
        keys=float(keys_text) if keys_text is not None else 0.0,
        metal=float(metal_text) if metal_text is not None else 0.0,
    )


# ─── Formatting ──────────────────────────────────────────────────────


def _join(keys_text: str, metal_text: str, has_keys: bool, has_metal: bool) -> str:
    if has_keys == has_metal:
        return f"{keys_text}, {metal_text}"
    if has_keys:
        return keys_text
    return metal_text


def format_metal(units: int) -> str:
    """Weapons → refined text without the unit: 42 → "2.33", 36 → "2"."""
    value = metal_decimal(units)
    if value == value.to_integral_value():
        return str(int(value))
    return f"{value:.2f}"


def format_amount(amount: Amount) -> str:
    """Canonical text, e.g. "5 keys, 2.33 ref"."""
    return _join(
        f"{amount.keys} {KEYS_SYMBOL}",
        f"{format_metal(amount.units)} {METAL_SYMBOL}",
        amount.keys != 0,
        amount.units != 0,
    )


def _format_float(value: float) -> str:
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    text = f"{value:.2f}"
    # No sign on a value that rounds to zero.
    if float(text) == 0.0:
        return "0"
    return text


def format_approx(approx: ApproxAmount) -> str:
    """Text for an approximate amount, e.g. "1.50 keys, 2.33 ref"."""
    return _join(
        f"{_format_float(float(approx.keys))} {KEYS_SYMBOL}",
        f"{_format_float(float(approx.metal))} {METAL_SYMBOL}",
        approx.keys != 0.0,
        approx.metal != 0.0,
    )
