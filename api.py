"""
TF2 Currencies — FastAPI Server
===============================

Thin HTTP wrapper around the ``tf2_currencies`` library.

Endpoints:
    POST /parse             Parse amount text into a structured record
    POST /format            Render a structured record as canonical text
    POST /flatten           Keys + metal → total weapons at a key price
    POST /unflatten         Total weapons → keys + metal at a key price
    GET  /health            Health check / readiness probe

Run:
    uvicorn api:app --reload              # Dev (http://localhost:8000)
    uvicorn api:app --host 0.0.0.0        # Production

The integer width is read from ``TF2_CURRENCY_BITS`` (environment or .env)
when the library is first imported.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field, StrictInt

# ─── Load .env before the library reads TF2_CURRENCY_BITS ────────────
load_dotenv()

from tf2_currencies import __version__  # noqa: E402
from tf2_currencies.codec import from_record, to_record  # noqa: E402
from tf2_currencies.constants import CURRENCY_BITS  # noqa: E402
from tf2_currencies.conversion import from_flat_total, to_flat_total  # noqa: E402
from tf2_currencies.exceptions import CurrencyError  # noqa: E402
from tf2_currencies.models import CurrenciesRecord  # noqa: E402
from tf2_currencies.text import format_amount, parse  # noqa: E402

logger = logging.getLogger(__name__)


# ─── Application Lifespan ────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("TF2 Currencies API starting with %d-bit amounts", CURRENCY_BITS)
    yield


# ─── FastAPI App ─────────────────────────────────────────────────────

app = FastAPI(
    title="TF2 Currencies API",
    description=(
        "Exact Team Fortress 2 currency amounts. Parses and formats "
        "\"5 keys, 2.33 ref\" text, converts structured records, and "
        "flattens keys + metal to weapons at a caller-supplied key price."
    ),
    version=__version__,
    lifespan=lifespan,
)


# ─── Request / Response Schemas ─────────────────────────────────────


class ParseRequest(BaseModel):
    """Request body for the /parse endpoint."""

    text: str = Field(
        ...,
        description="Amount text such as '5 keys, 2.33 ref'.",
        json_schema_extra={"example": "5 keys, 2.33 ref"},
    )


class ParseResponse(CurrenciesRecord):
    """Structured record plus the exact weapon count and canonical text."""

    units: int = Field(description="Metal counted in weapons (1 ref = 18)")
    text: str


class FormatResponse(BaseModel):
    text: str


class FlattenRequest(CurrenciesRecord):
    """A structured record and the key price in weapons."""

    rate: StrictInt = Field(description="Key price in weapons, must be positive")

    model_config = {"json_schema_extra": {"example": {"keys": 5, "metal": 1.33, "rate": 900}}}


class FlattenResponse(BaseModel):
    total: int = Field(description="Total value in weapons")


class UnflattenRequest(BaseModel):
    total: StrictInt = Field(description="Total value in weapons")
    rate: StrictInt = Field(description="Key price in weapons, must be positive")


class HealthResponse(BaseModel):
    status: str
    version: str
    currency_bits: int


# ─── Helpers ─────────────────────────────────────────────────────────


def _unprocessable(error: CurrencyError) -> HTTPException:
    """Map a library failure to a 422 carrying its machine-readable code."""
    logger.info("Rejected request: %s (%s)", error, error.code)
    return HTTPException(status_code=422, detail={"code": error.code, "message": str(error)})


# ─── Endpoints ───────────────────────────────────────────────────────


@app.post(
    "/parse",
    summary="Parse amount text",
    tags=["Text"],
    responses={422: {"description": "Malformed text or value out of range"}},
)
def parse_text(request: ParseRequest) -> ParseResponse:
    """Parse text into a record.

    - **keys** / **metal**: the structured record
    - **units**: exact metal in weapons
    - **text**: canonical rendering of the parsed amount
    """
    try:
        amount = parse(request.text)
    except CurrencyError as e:
        raise _unprocessable(e) from e

    record = to_record(amount)
    return ParseResponse(
        keys=record.keys,
        metal=record.metal,
        units=amount.units,
        text=format_amount(amount),
    )


@app.post(
    "/format",
    summary="Format a structured record as text",
    tags=["Text"],
    responses={422: {"description": "Malformed record or value out of range"}},
)
def format_record(record: CurrenciesRecord) -> FormatResponse:
    try:
        amount = from_record(record)
    except CurrencyError as e:
        raise _unprocessable(e) from e
    return FormatResponse(text=format_amount(amount))


@app.post(
    "/flatten",
    summary="Convert keys + metal to total weapons",
    tags=["Conversion"],
    responses={422: {"description": "Invalid key price or value out of range"}},
)
def flatten(request: FlattenRequest) -> FlattenResponse:
    """Saturating ``keys * rate + weapons``."""
    try:
        amount = from_record(request)
        total = to_flat_total(amount, request.rate)
    except CurrencyError as e:
        raise _unprocessable(e) from e
    return FlattenResponse(total=total)


@app.post(
    "/unflatten",
    summary="Split total weapons into keys + metal",
    tags=["Conversion"],
    responses={422: {"description": "Invalid key price or value out of range"}},
)
def unflatten(request: UnflattenRequest) -> CurrenciesRecord:
    try:
        amount = from_flat_total(request.total, request.rate)
    except CurrencyError as e:
        raise _unprocessable(e) from e
    return to_record(amount)


@app.get("/health", summary="Health check", tags=["System"])
def health_check() -> HealthResponse:
    """Returns service status and configuration info."""
    return HealthResponse(status="healthy", version=__version__, currency_bits=CURRENCY_BITS)
