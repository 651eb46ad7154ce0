"""
Shared fixtures: canned provider payloads and httpx transports that record
every outbound request so tests can assert on network activity.
"""

import httpx
import pytest

from energy_estimator.data.energy_client import EiaEnergy
from energy_estimator.data.geocode_client import NominatimGeocode

NOMINATIM_URL = "https://nominatim.test"
EIA_URL = "https://eia.test/v2/total-energy/data/"


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler):
        self.requests: list[httpx.Request] = []

        def recording(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(recording)


def json_responder(payload, status_code: int = 200):
    return lambda request: httpx.Response(status_code, json=payload)


def make_geocoder(handler) -> tuple[NominatimGeocode, RecordingTransport]:
    transport = RecordingTransport(handler)
    geo = NominatimGeocode(NOMINATIM_URL, delay_seconds=0, transport=transport)
    return geo, transport


def make_energy(handler, api_key: str | None = "test-key") -> tuple[EiaEnergy, RecordingTransport]:
    transport = RecordingTransport(handler)
    return EiaEnergy(EIA_URL, api_key, transport=transport), transport


# =============================================================================
# PROVIDER PAYLOADS
# =============================================================================

@pytest.fixture
def house_candidates() -> list[dict]:
    """Nominatim answer for '123 Main St, Vancouver'."""
    return [{
        "display_name": "123, Main Street, Strathcona, Vancouver, British Columbia, Canada",
        "lat": "49.2776",
        "lon": "-123.0999",
        "class": "building",
        "type": "house",
        "address": {"house_number": "123", "road": "Main Street", "city": "Vancouver"},
    }]


@pytest.fixture
def apartment_candidates() -> list[dict]:
    """Nominatim answer for 'V6B 1A1'."""
    return [{
        "display_name": "V6B 1A1, Downtown, Vancouver, British Columbia, Canada",
        "lat": "49.2827",
        "lon": "-123.1207",
        "class": "building",
        "type": "apartment",
        "address": {"postcode": "V6B 1A1", "road": "Homer Street"},
    }]


@pytest.fixture
def eia_payload() -> dict:
    return {
        "response": {
            "total": 2,
            "frequency": "monthly",
            "data": [
                {"period": "2024-06", "msn": "TETCBUS", "value": "8000"},
                {"period": "2024-05", "msn": "TETCBUS", "value": "7500"},
            ],
        }
    }
