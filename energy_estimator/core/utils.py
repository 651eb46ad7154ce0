import math

MIN_QUERY_LENGTH = 3

def normalize_address(addr: str) -> str:
    """
    Minimal normalization before the query leaves the process:
    - trim whitespace
    - collapse multiple spaces
    Case is preserved; the geocoder handles it.
    """
    return " ".join(addr.strip().split())

def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3, not 2)."""
    return int(math.floor(value + 0.5))
