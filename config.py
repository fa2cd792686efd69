"""
config.py
---------
Central configuration for the itinerary engine.
All secrets loaded from environment variables, never hard-coded.
"""

import os

# ── External APIs ─────────────────────────────────────────────────────────────
GOOGLE_MAPS_API_KEY: str = os.getenv("GOOGLE_MAPS_API_KEY", "")

# ── Tool Endpoints ────────────────────────────────────────────────────────────
DIRECTIONS_API_URL: str = os.getenv(
    "DIRECTIONS_API_URL", "https://maps.googleapis.com/maps/api/directions/json"
)
PLACES_API_URL: str = os.getenv(
    "PLACES_API_URL", "https://maps.googleapis.com/maps/api/place"
)
# Application backend that proxies Directions requests (tried before Google).
DIRECTIONS_BACKEND_URL: str = os.getenv("DIRECTIONS_BACKEND_URL", "UNSPECIFIED")

# Applied by every network call site; the engine itself never times out.
DIRECTIONS_TIMEOUT_SECONDS: float = float(os.getenv("DIRECTIONS_TIMEOUT_SECONDS", "10"))
PLACES_TIMEOUT_SECONDS: float     = float(os.getenv("PLACES_TIMEOUT_SECONDS", "10"))

# Last link of the directions fallback chain: straight-line estimate per mode.
DIRECTIONS_HEURISTIC_FALLBACK: bool = os.getenv(
    "DIRECTIONS_HEURISTIC_FALLBACK", "true"
).lower() in ("1", "true", "yes")

# ── Planning ──────────────────────────────────────────────────────────────────
CLUSTER_RADIUS_KM: float = float(os.getenv("CLUSTER_RADIUS_KM", "2.0"))
DEFAULT_PACE: str        = os.getenv("DEFAULT_PACE", "moderate")   # relaxed | moderate | packed

# Advisory only: a day whose visits + travel exceed this is flagged, never trimmed.
SOFT_DAILY_CAP_MINUTES: int = int(os.getenv("SOFT_DAILY_CAP_MINUTES", "720"))

# ── Budget ────────────────────────────────────────────────────────────────────
CURRENCY_UNIT: str         = os.getenv("CURRENCY_UNIT", "USD")
DEFAULT_TRIP_DAYS: int     = int(os.getenv("DEFAULT_TRIP_DAYS", "3"))
# Comma-separated additions to the curated city tier lists.
EXTRA_TIER1_CITIES: list[str] = [
    c.strip().lower() for c in os.getenv("EXTRA_TIER1_CITIES", "").split(",") if c.strip()
]
EXTRA_TIER2_CITIES: list[str] = [
    c.strip().lower() for c in os.getenv("EXTRA_TIER2_CITIES", "").split(",") if c.strip()
]

# ── Transport ─────────────────────────────────────────────────────────────────
DEFAULT_TRANSPORT_MODES: list[str] = [
    m.strip() for m in os.getenv("DEFAULT_TRANSPORT_MODES", "walking,transit").split(",")
    if m.strip()
]

# ── Cache TTLs (seconds) ──────────────────────────────────────────────────────
BUDGET_CACHE_TTL_SECONDS: float     = float(os.getenv("BUDGET_CACHE_TTL_SECONDS", "3600"))
DIRECTIONS_CACHE_TTL_SECONDS: float = float(os.getenv("DIRECTIONS_CACHE_TTL_SECONDS", "900"))

# ── Logging ───────────────────────────────────────────────────────────────────
LOG_LEVEL: str  = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT: str = os.getenv("LOG_FORMAT", "json")   # "json" | "text"
