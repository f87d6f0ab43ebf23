"""
Test configuration and fixtures for the Etsy client
"""
import json
import os
from typing import Any, Dict, List, Optional

import pytest

from etsy_client.api.dispatcher import RequestDispatcher
from etsy_client.api.transport import HTTPTransport, TransportResponse
from etsy_client.client import Etsy
from etsy_client.utils.rate_limiting import RateLimiter


CLIENT_ID = "test-client-id"
API_KEY = "12345678.test-access-token"


# =============================================================================
# Fake Transport
# =============================================================================

class FakeTransport(HTTPTransport):
    """In-memory transport replaying queued responses and recording calls."""

    def __init__(self):
        self.responses: List[Any] = []
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def queue(self, status_code: int = 200, body: Any = None,
              headers: Optional[Dict[str, str]] = None, raw: Optional[str] = None) -> "FakeTransport":
        """Queue a response; ``body`` is JSON encoded unless ``raw`` is given."""
        if raw is not None:
            payload = raw
        elif body is None:
            payload = ""
        else:
            payload = json.dumps(body)
        self.responses.append(TransportResponse(status_code, headers or {}, payload))
        return self

    def queue_error(self, error: Exception) -> "FakeTransport":
        self.responses.append(error)
        return self

    def request(self, method, url, headers=None, data=None, files=None, timeout=None):
        call = {
            "method": method,
            "url": url,
            "headers": dict(headers or {}),
            "data": data,
            "files": files,
            "timeout": timeout,
        }
        self.calls.append(call)
        if not self.responses:
            raise AssertionError(f"Unexpected request: {method} {url}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        self.closed = True

    @property
    def last_call(self) -> Dict[str, Any]:
        return self.calls[-1]


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture
def fake_transport() -> FakeTransport:
    """Create fake transport"""
    return FakeTransport()


@pytest.fixture
def sleeps() -> List[float]:
    """Delays requested by the rate limiter"""
    return []


@pytest.fixture
def rate_limiter(sleeps) -> RateLimiter:
    """Rate limiter that records delays instead of sleeping"""
    return RateLimiter(sleep=sleeps.append)


@pytest.fixture
def dispatcher(fake_transport, rate_limiter) -> RequestDispatcher:
    """Create dispatcher on the fake transport"""
    return RequestDispatcher(
        CLIENT_ID,
        API_KEY,
        transport=fake_transport,
        rate_limiter=rate_limiter
    )


@pytest.fixture
def etsy(fake_transport, rate_limiter) -> Etsy:
    """Create Etsy client on the fake transport"""
    return Etsy(
        CLIENT_ID,
        API_KEY,
        transport=fake_transport,
        rate_limiter=rate_limiter,
        refresh_token="12345678.test-refresh-token"
    )


# =============================================================================
# Settings Isolation
# =============================================================================

@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Remove ETSY_* variables and run from a directory without .env"""
    for key in list(os.environ):
        if key.startswith("ETSY_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)

    import etsy_client.utils.config as config_module
    monkeypatch.setattr(config_module, "_config", None)
    return monkeypatch


# =============================================================================
# Test Data Fixtures
# =============================================================================

@pytest.fixture
def listing_record() -> Dict[str, Any]:
    """Listing as returned by getListing with includes"""
    return {
        "listing_id": 1001,
        "shop_id": 77,
        "title": "Hand-thrown mug",
        "state": "active",
        "quantity": 4,
        "price": {"amount": 1250, "divisor": 100, "currency_code": "USD"},
        "Images": [
            {"listing_image_id": 1, "url_fullxfull": "https://img.example/1.jpg"},
            {"listing_image_id": 2, "url_fullxfull": "https://img.example/2.jpg"},
        ],
        "Shop": {"shop_id": 77, "shop_name": "ClayWorks"},
    }


@pytest.fixture
def receipt_records() -> List[Dict[str, Any]]:
    """Three receipts without shop_id"""
    return [
        {"receipt_id": 1, "name": "Ada", "grandtotal": {"amount": 2000, "divisor": 100, "currency_code": "USD"}},
        {"receipt_id": 2, "name": "Grace", "grandtotal": {"amount": 1500, "divisor": 100, "currency_code": "USD"}},
        {"receipt_id": 3, "name": "Linus", "grandtotal": {"amount": 999, "divisor": 100, "currency_code": "EUR"}},
    ]
