from dataclasses import asdict

from fastapi import APIRouter, Depends, Query
from ..schemas import EstimateRequest, EstimateResponse, LocationResponse
from ..data.base import EnergyClient, GeocodeClient
from ..data.energy_client import energy_client
from ..data.geocode_client import geocode_client
from ..services.pipeline import EstimationPipeline, EstimationResult, validate_query
from ..core.security import require_api_key

router = APIRouter()

# Overridable in tests via app.dependency_overrides
def geocoder_dep() -> GeocodeClient:
    return geocode_client()

def energy_dep() -> EnergyClient:
    return energy_client()

def pipeline_dep(
    geo: GeocodeClient = Depends(geocoder_dep),
    energy: EnergyClient = Depends(energy_dep),
) -> EstimationPipeline:
    # One pipeline per request; submissions never share state
    return EstimationPipeline(geo=geo, energy=energy)

def to_response(result: EstimationResult) -> EstimateResponse:
    return EstimateResponse.model_validate(asdict(result))

@router.post("/estimate", response_model=EstimateResponse)
async def post_estimate(
    body: EstimateRequest,
    _auth = Depends(require_api_key),
    pipeline: EstimationPipeline = Depends(pipeline_dep),
):
    result = await pipeline.run(body.address)
    return to_response(result)

@router.get("/estimate", response_model=EstimateResponse)
async def get_estimate(
    address: str = Query(..., max_length=512),
    _auth = Depends(require_api_key),
    pipeline: EstimationPipeline = Depends(pipeline_dep),
):
    result = await pipeline.run(address)
    return to_response(result)

@router.get("/geocode", response_model=LocationResponse)
async def get_geocode(
    address: str = Query(..., max_length=512),
    _auth = Depends(require_api_key),
    geo: GeocodeClient = Depends(geocoder_dep),
):
    """Lightweight lookup: location only, no estimates."""
    location = await geo.resolve(validate_query(address))
    return LocationResponse.model_validate(asdict(location))
