import asyncio
import logging
import math
from typing import Any, Optional

import httpx

from .base import AddressDetails, GeocodeClient, LocationRecord
from ..core.config import settings
from ..core.metrics import UPSTREAM_LATENCY
from ..exceptions import InvalidDataError, NotFoundError, TransportError, TransportErrorKind

logger = logging.getLogger(__name__)

# Failures where the request went out but nothing usable came back
_NO_RESPONSE_ERRORS = (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError)

class NominatimGeocode(GeocodeClient):
    """
    OpenStreetMap Nominatim search client.

    One request per call, best match only, address details expanded. A fixed
    courtesy delay is awaited before every request to stay within the public
    instance's one-request-per-second policy.
    """
    def __init__(
        self,
        base_url: str,
        user_agent: str = "HomeEnergyEstimator/1.0",
        language: str = "en-US,en;q=0.9",
        delay_seconds: float = 1.0,
        timeout: float = 10,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.language = language
        self.delay_seconds = delay_seconds
        self.timeout = timeout
        self.transport = transport

    async def resolve(self, query: str) -> LocationRecord:
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)

        params = {
            "q": query,
            "format": "json",
            "limit": 1,
            "addressdetails": 1,
            "accept-language": self.language,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                with UPSTREAM_LATENCY.labels(provider="nominatim").time():
                    r = await client.get(
                        f"{self.base_url}/search",
                        params=params,
                        headers={"User-Agent": self.user_agent},
                    )
                r.raise_for_status()
        except httpx.HTTPStatusError as exc:
            resp = exc.response
            logger.warning(f"Geocoder returned {resp.status_code} for '{query}'")
            raise TransportError(TransportErrorKind.REMOTE, resp.status_code, resp.reason_phrase) from exc
        except _NO_RESPONSE_ERRORS as exc:
            logger.warning(f"Geocoder unreachable for '{query}': {exc!r}")
            raise TransportError(TransportErrorKind.NO_RESPONSE) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error(f"Geocoder request could not be sent for '{query}': {exc!r}")
            raise TransportError(TransportErrorKind.LOCAL) from exc

        try:
            candidates = r.json()
        except ValueError as exc:
            raise InvalidDataError() from exc

        location = parse_candidates(candidates)
        logger.info(
            f"Geocoded '{query}' -> ({location.latitude}, {location.longitude}) "
            f"type={location.property_type}"
        )
        return location

def parse_candidates(candidates: Any) -> LocationRecord:
    """
    Turn a Nominatim search response into the best-match LocationRecord.

    Raises NotFoundError for an empty list and InvalidDataError when the
    payload or its first candidate is unusable.
    """
    if candidates is None or candidates == []:
        raise NotFoundError()
    if not isinstance(candidates, list) or not isinstance(candidates[0], dict):
        raise InvalidDataError()

    top = candidates[0]
    display_name = top.get("display_name")
    lat, lon = top.get("lat"), top.get("lon")
    if not display_name or lat in (None, "") or lon in (None, ""):
        raise InvalidDataError()
    try:
        latitude, longitude = float(lat), float(lon)
    except (TypeError, ValueError) as exc:
        raise InvalidDataError() from exc
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise InvalidDataError()

    details = None
    address = top.get("address")
    if isinstance(address, dict):
        details = AddressDetails(
            house_number=_opt_str(address.get("house_number")),
            road=_opt_str(address.get("road")),
            building=_opt_str(address.get("building")),
        )

    return LocationRecord(
        display_name=str(display_name),
        latitude=latitude,
        longitude=longitude,
        property_type=top.get("type") or top.get("class") or None,
        address_details=details,
    )

def _opt_str(value: Any) -> Optional[str]:
    return str(value) if value not in (None, "") else None

def geocode_client() -> GeocodeClient:
    """
    Factory wired from settings.
    """
    return NominatimGeocode(
        settings.GEOCODER_BASE_URL,
        user_agent=settings.GEOCODER_USER_AGENT,
        language=settings.GEOCODER_LANGUAGE,
        delay_seconds=settings.GEOCODE_DELAY_SECONDS,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )
