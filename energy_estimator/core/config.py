import os
from pydantic import BaseModel

class Settings(BaseModel):
    # Basic
    ENV: str = os.getenv("ENV", "dev")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    HTTP_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))

    # Geocoding (Nominatim)
    GEOCODER_BASE_URL: str = os.getenv("GEOCODER_BASE_URL", "https://nominatim.openstreetmap.org")
    GEOCODER_USER_AGENT: str = os.getenv("GEOCODER_USER_AGENT", "HomeEnergyEstimator/1.0")
    GEOCODER_LANGUAGE: str = os.getenv("GEOCODER_LANGUAGE", "en-US,en;q=0.9")
    # Nominatim usage policy: at most one request per second
    GEOCODE_DELAY_SECONDS: float = float(os.getenv("GEOCODE_DELAY_SECONDS", "1.0"))

    # Energy statistics (EIA)
    ENERGY_BASE_URL: str = os.getenv("ENERGY_BASE_URL", "https://api.eia.gov/v2/total-energy/data/")
    EIA_API_KEY: str | None = os.getenv("EIA_API_KEY")

    # Estimates
    ELECTRICITY_RATE_PER_KWH: float = float(os.getenv("ELECTRICITY_RATE_PER_KWH", "0.12"))

    # Security
    API_KEY: str | None = os.getenv("API_KEY")

    # CORS
    ALLOW_ORIGINS: str = os.getenv("ALLOW_ORIGINS", "*")

    # Metrics
    PROMETHEUS_ENABLED: bool = os.getenv("PROMETHEUS_ENABLED", "true").lower() == "true"

settings = Settings()
