from pydantic import BaseModel, Field

from .services.pipeline import EnergySource

class EstimateRequest(BaseModel):
    # Length rules are enforced by the pipeline so all rejections share one error shape
    address: str = Field(max_length=512)

class AddressDetails(BaseModel):
    house_number: str | None = None
    road: str | None = None
    building: str | None = None

class Meter(BaseModel):
    percentage: float = Field(ge=0, le=100)
    level: str

class EstimateResponse(BaseModel):
    address: str
    property_type: str
    house_size_sqft: int = Field(gt=0)
    window_count: int = Field(ge=0)
    monthly_energy_kwh: int = Field(ge=0)
    data_source: EnergySource
    annual_energy_kwh: int = Field(ge=0)
    estimated_monthly_cost: int = Field(ge=0)
    latitude: float
    longitude: float
    address_details: AddressDetails | None = None
    meters: dict[str, Meter]
    disclaimer: str = (
        "These are approximate estimates based on statistical modeling "
        "and should not be considered precise measurements."
    )

class LocationResponse(BaseModel):
    display_name: str
    latitude: float
    longitude: float
    property_type: str | None = None
    address_details: AddressDetails | None = None

class ErrorResponse(BaseModel):
    error: str
    kind: str
    cause: str | None = None        # transport errors: remote | no_response | local
    status_code: int | None = None  # upstream status for remote errors
