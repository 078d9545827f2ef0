"""
FastAPI endpoint tests for the TF2 Currencies API.

Uses httpx + FastAPI TestClient, no real server needed.
"""

from __future__ import annotations

from api import app
from fastapi.testclient import TestClient

from tf2_currencies.constants import CURRENCY_BITS

client = TestClient(app)


class TestHealthEndpoint:
    def test_health_returns_200(self) -> None:
        resp = client.get("/health")
        assert resp.status_code == 200

    def test_health_response_shape(self) -> None:
        data = client.get("/health").json()
        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"
        assert data["currency_bits"] == CURRENCY_BITS


class TestParseEndpoint:
    def test_parses_keys_and_metal(self) -> None:
        resp = client.post("/parse", json={"text": "5 keys, 2.33 ref"})
        assert resp.status_code == 200
        assert resp.json() == {"keys": 5, "metal": 2.33, "units": 42, "text": "5 keys, 2.33 ref"}

    def test_returns_canonical_text(self) -> None:
        data = client.post("/parse", json={"text": " 1 KEY,2 ref "}).json()
        assert data["text"] == "1 keys, 2 ref"

    def test_malformed_text_returns_422(self) -> None:
        resp = client.post("/parse", json={"text": "5 bananas"})
        assert resp.status_code == 422
        assert resp.json()["detail"]["code"] == "MALFORMED_TEXT"

    def test_oversized_number_returns_422(self) -> None:
        resp = client.post("/parse", json={"text": "9" * 5000 + " keys"})
        assert resp.status_code == 422
        assert resp.json()["detail"]["code"] == "MALFORMED_TEXT"

    def test_fractional_keys_returns_422(self) -> None:
        resp = client.post("/parse", json={"text": "1.5 keys"})
        assert resp.status_code == 422

    def test_missing_text_returns_422(self) -> None:
        resp = client.post("/parse", json={})
        assert resp.status_code == 422


class TestFormatEndpoint:
    def test_formats_record(self) -> None:
        resp = client.post("/format", json={"keys": 5, "metal": 2.33})
        assert resp.status_code == 200
        assert resp.json() == {"text": "5 keys, 2.33 ref"}

    def test_empty_record_is_zero(self) -> None:
        assert client.post("/format", json={}).json() == {"text": "0 keys, 0 ref"}

    def test_string_keys_returns_422(self) -> None:
        resp = client.post("/format", json={"keys": "5", "metal": 1.0})
        assert resp.status_code == 422

    def test_metal_out_of_range_returns_422(self) -> None:
        resp = client.post("/format", json={"keys": 0, "metal": 1e300})
        assert resp.status_code == 422
        assert resp.json()["detail"]["code"] == "OUT_OF_RANGE"


class TestFlattenEndpoints:
    def test_flatten(self) -> None:
        resp = client.post("/flatten", json={"keys": 5, "metal": 1.33, "rate": 900})
        assert resp.status_code == 200
        assert resp.json() == {"total": 4524}

    def test_unflatten(self) -> None:
        resp = client.post("/unflatten", json={"total": 4524, "rate": 900})
        assert resp.status_code == 200
        assert resp.json() == {"keys": 5, "metal": 1.33}

    def test_zero_rate_returns_422(self) -> None:
        resp = client.post("/flatten", json={"keys": 1, "metal": 0.0, "rate": 0})
        assert resp.status_code == 422
        assert resp.json()["detail"]["code"] == "INVALID_RATE"

    def test_negative_rate_unflatten_returns_422(self) -> None:
        resp = client.post("/unflatten", json={"total": 100, "rate": -1})
        assert resp.status_code == 422
        assert resp.json()["detail"]["code"] == "INVALID_RATE"
