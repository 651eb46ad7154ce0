import logging
import math
from typing import Any, Optional

import httpx

from .base import EnergyClient
from ..core.config import settings
from ..core.metrics import UPSTREAM_LATENCY

logger = logging.getLogger(__name__)

# 1 trillion Btu = 293,071,070 kWh
KWH_PER_TRILLION_BTU = 293_071_070
# Share of total national consumption attributed to the residential sector
RESIDENTIAL_SHARE = 0.2

EIA_PARAMS = {
    "frequency": "monthly",
    "data[0]": "value",
    "sort[0][column]": "period",
    "sort[0][direction]": "desc",
    "offset": 0,
    "length": 5000,
}

class EiaEnergy(EnergyClient):
    """
    EIA total-energy client. Only the most recent monthly record is used.

    Never raises: any failure yields None so the caller can fall back to a
    formula-based estimate.
    """
    def __init__(
        self,
        base_url: str,
        api_key: Optional[str],
        timeout: float = 10,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    async def fetch_recent_usage(self) -> Optional[float]:
        if not self.api_key:
            logger.info("EIA_API_KEY not set; skipping energy statistics lookup")
            return None

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                with UPSTREAM_LATENCY.labels(provider="eia").time():
                    r = await client.get(self.base_url, params={"api_key": self.api_key, **EIA_PARAMS})
                r.raise_for_status()
                body = r.json()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            logger.warning(f"Error fetching energy data: {exc!r}")
            return None

        value = latest_value(body)
        if value is None:
            logger.warning("Energy data response had no usable value")
            return None
        return to_residential_kwh(value)

def latest_value(body: Any) -> Optional[float]:
    """Extract response.data[0].value as a positive finite float, else None."""
    try:
        raw = body["response"]["data"][0]["value"]
        value = float(raw)
    except (KeyError, IndexError, TypeError, ValueError):
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value

def to_residential_kwh(trillion_btu: float) -> float:
    return trillion_btu * KWH_PER_TRILLION_BTU * RESIDENTIAL_SHARE

def energy_client() -> EnergyClient:
    return EiaEnergy(
        settings.ENERGY_BASE_URL,
        settings.EIA_API_KEY,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )
