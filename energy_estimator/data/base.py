from typing import Protocol, Optional
from dataclasses import dataclass

# ----- Data shapes (thin & explicit) -----

@dataclass(frozen=True)
class AddressDetails:
    house_number: Optional[str] = None  # e.g., "12" or "4/12" for a unit
    road: Optional[str] = None
    building: Optional[str] = None      # named building, e.g., "Harbour Tower"

@dataclass(frozen=True)
class LocationRecord:
    display_name: str
    latitude: float
    longitude: float
    property_type: Optional[str] = None  # provider "type", falling back to "class"
    address_details: Optional[AddressDetails] = None

# ----- Protocols (interfaces) -----

class GeocodeClient(Protocol):
    async def resolve(self, query: str) -> LocationRecord: ...

class EnergyClient(Protocol):
    async def fetch_recent_usage(self) -> Optional[float]: ...
