from dataclasses import dataclass

# Typical maxima the result cards compare against
MAX_WINDOWS = 30
MAX_ENERGY_KWH = 2000

@dataclass(frozen=True)
class Meter:
    percentage: float  # 0..100, one decimal
    level: str         # success | warning | error

def meter(value: float, maximum: float) -> Meter:
    """Reading for a progress-bar style gauge; capped at 100%."""
    if maximum <= 0:
        pct = 0.0
    else:
        pct = min(max(value, 0) / maximum * 100.0, 100.0)
    if pct > 80:
        level = "error"
    elif pct > 60:
        level = "warning"
    else:
        level = "success"
    return Meter(percentage=round(pct, 1), level=level)
