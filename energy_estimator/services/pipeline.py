import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from ..core.config import settings
from ..core.metrics import ENERGY_SOURCE, ESTIMATES
from ..core.utils import MIN_QUERY_LENGTH, normalize_address, round_half_up
from ..data.base import AddressDetails, EnergyClient, GeocodeClient
from ..data.energy_client import energy_client
from ..data.geocode_client import geocode_client
from ..exceptions import EstimatorError, ValidationError
from .estimation import (
    estimate_annual_energy,
    estimate_fallback_energy,
    estimate_house_size,
    estimate_monthly_cost,
    estimate_window_count,
)
from .meters import MAX_ENERGY_KWH, MAX_WINDOWS, Meter, meter

logger = logging.getLogger(__name__)

class EnergySource(str, Enum):
    EIA = "EIA"
    ESTIMATED = "Estimated"

class PipelineState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

@dataclass(frozen=True)
class EstimationResult:
    address: str
    property_type: str
    house_size_sqft: int
    window_count: int
    monthly_energy_kwh: int
    data_source: EnergySource
    annual_energy_kwh: int
    estimated_monthly_cost: int
    latitude: float
    longitude: float
    address_details: Optional[AddressDetails] = None
    meters: dict[str, Meter] = field(default_factory=dict)

def validate_query(query: Optional[str]) -> str:
    """Reject empty or too-short queries; returns the normalized query."""
    normalized = normalize_address(query or "")
    if not normalized:
        raise ValidationError("Address is required")
    if len(normalized) < MIN_QUERY_LENGTH:
        raise ValidationError()
    return normalized

class EstimationPipeline:
    """
    Orchestrates, strictly in order:
      query → validate → geocode → energy statistics → heuristics → result
    Only validation and geocoding can fail the run; the energy lookup degrades
    to a formula-based figure. One instance serves one submission.
    """
    def __init__(
        self,
        geo: Optional[GeocodeClient] = None,
        energy: Optional[EnergyClient] = None,
        electricity_rate: Optional[float] = None,
    ):
        self.geo = geo or geocode_client()
        self.energy = energy or energy_client()
        self.electricity_rate = (
            settings.ELECTRICITY_RATE_PER_KWH if electricity_rate is None else electricity_rate
        )
        self.state = PipelineState.IDLE
        self.outcome: Union[EstimationResult, EstimatorError, None] = None

    async def run(self, query: str) -> EstimationResult:
        if self.state is not PipelineState.IDLE:
            raise RuntimeError(f"pipeline already {self.state.value}")
        self.state = PipelineState.RUNNING
        try:
            result = await self._run(query)
        except EstimatorError as exc:
            self.state = PipelineState.FAILED
            self.outcome = exc
            ESTIMATES.labels(outcome=exc.kind).inc()
            logger.info(f"Estimate failed ({exc.kind}): {exc.message}")
            raise
        self.state = PipelineState.SUCCEEDED
        self.outcome = result
        ESTIMATES.labels(outcome="success").inc()
        ENERGY_SOURCE.labels(source=result.data_source.value).inc()
        return result

    async def _run(self, query: str) -> EstimationResult:
        address = validate_query(query)

        # 1) Geocode (address -> location record); errors abort the run
        location = await self.geo.resolve(address)

        # 2) Energy statistics; None means "use the formula"
        recent_kwh = await self.energy.fetch_recent_usage()

        # 3) Heuristics
        house_size = estimate_house_size(location)
        windows = estimate_window_count(house_size, location)
        if recent_kwh is not None:
            monthly = round_half_up(recent_kwh)
            source = EnergySource.EIA
        else:
            monthly = estimate_fallback_energy(house_size)
            source = EnergySource.ESTIMATED

        # 4) Assemble
        return EstimationResult(
            address=location.display_name,
            property_type=location.property_type or "residential",
            house_size_sqft=house_size,
            window_count=windows,
            monthly_energy_kwh=monthly,
            data_source=source,
            annual_energy_kwh=estimate_annual_energy(monthly),
            estimated_monthly_cost=estimate_monthly_cost(monthly, self.electricity_rate),
            latitude=location.latitude,
            longitude=location.longitude,
            address_details=location.address_details,
            meters={
                "windows": meter(windows, MAX_WINDOWS),
                "energy": meter(monthly, MAX_ENERGY_KWH),
            },
        )
