"""
Structured (de)serialization: ``{"keys": 5, "metal": 2.33}``.

``metal`` is refined, written with two decimals as a float. Two decimals are
enough to recover the exact weapon count (see ``conversion.metal_decimal``)
until the float runs out of precision, around 1e16 weapons. Past that,
decode lands on the nearest weapon count the float can express. Either way
encode → decode → encode reproduces the same record.

Decoding fails only on a type mismatch (MalformedRecordError) or a value
that does not fit the integer type (OutOfRangeError). Fractional keys cannot
occur here because ``keys`` is typed as an integer.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from .arithmetic import checked
from .conversion import checked_units_from_metal, metal_decimal
from .exceptions import MalformedRecordError, OutOfRangeError
from .models import Amount, ApproxAmount, CurrenciesRecord

logger = logging.getLogger(__name__)


# ─── Exact Amounts ───────────────────────────────────────────────────


def to_record(amount: Amount) -> CurrenciesRecord:
    return CurrenciesRecord(keys=amount.keys, metal=float(metal_decimal(amount.units)))


def from_record(record: CurrenciesRecord) -> Amount:
    """Convert a validated record to an exact amount.

    Raises:
        OutOfRangeError: If ``keys`` or the converted metal does not fit.
    """
    if checked(record.keys) is None:
        raise OutOfRangeError(
            f"Key count {record.keys} does not fit the integer type",
            details={"keys": record.keys},
        )

    units = checked_units_from_metal(record.metal)
    if units is None:
        raise OutOfRangeError(
            f"Metal value {record.metal} does not fit the integer type once converted to weapons",
            details={"metal": record.metal},
        )

    return Amount(keys=record.keys, units=units)


def encode(amount: Amount) -> dict[str, Any]:
    """Amount → plain dict, ready for any JSON-like encoder."""
    return to_record(amount).model_dump()


def encode_json(amount: Amount) -> str:
    return to_record(amount).model_dump_json()


def decode(data: Mapping[str, Any]) -> Amount:
    """Plain mapping → amount.

    Raises:
        MalformedRecordError: If a field has the wrong type.
        OutOfRangeError: If a value does not fit the integer type.
    """
    try:
        record = CurrenciesRecord.model_validate(data)
    except ValidationError as e:
        logger.debug("Rejected record %r: %s", data, e)
        raise MalformedRecordError(
            f"Invalid currencies record: {e.error_count()} error(s)",
            details={"errors": e.errors(include_url=False)},
        ) from e
    return from_record(record)


def decode_json(raw: str | bytes) -> Amount:
    try:
        record = CurrenciesRecord.model_validate_json(raw)
    except ValidationError as e:
        logger.debug("Rejected JSON record %r: %s", raw, e)
        raise MalformedRecordError(
            f"Invalid currencies record: {e.error_count()} error(s)",
            details={"errors": e.errors(include_url=False)},
        ) from e
    return from_record(record)


# ─── Approximate Amounts ─────────────────────────────────────────────


def encode_approx(approx: ApproxAmount) -> dict[str, Any]:
    return approx.model_dump()


def decode_approx(data: Mapping[str, Any]) -> ApproxAmount:
    """Plain mapping → approximate amount, values kept as received.

    Raises:
        MalformedRecordError: If a field is not numeric.
    """
    try:
        return ApproxAmount.model_validate(data)
    except ValidationError as e:
        raise MalformedRecordError(
            f"Invalid approximate record: {e.error_count()} error(s)",
            details={"errors": e.errors(include_url=False)},
        ) from e
