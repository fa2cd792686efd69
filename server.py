"""
server.py
---------
HTTP surface of the itinerary engine.

    GET  /                   health
    POST /itinerary          cluster_and_schedule
    POST /budget             estimate_budget
    POST /transport/compare  compare_transport_modes

Bodies are validated by the pydantic models in schemas/api.py (422 on
failure); engine results are returned as plain dataclass dicts.
"""

from contextlib import asynccontextmanager
from dataclasses import asdict
import logging

from fastapi import Depends, FastAPI, HTTPException

from infrastructure.logging_config import log_event, setup_logging
from orchestrator.trip_engine import TripEngine
from schemas.api import BudgetRequest, ItineraryRequest, TransportCompareRequest

log = logging.getLogger(__name__)

_engine: TripEngine | None = None


def get_engine() -> TripEngine:
    global _engine
    if _engine is None:
        _engine = TripEngine()
    return _engine


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    log.info("Itinerary engine starting")
    yield


app = FastAPI(title="Itinerary Optimization Engine", lifespan=lifespan)


@app.get("/")
async def root():
    return {"message": "Itinerary engine is running"}


@app.post("/itinerary")
async def plan_itinerary(request: ItineraryRequest, engine: TripEngine = Depends(get_engine)):
    """Cluster, schedule and time the selected places; includes a budget estimate."""
    try:
        itinerary = engine.cluster_and_schedule(
            request.destination,
            [p.to_place() for p in request.places],
            request.trip_length_days,
            request.pace,
            travelers=request.travelers,
            budget_preferences=request.preferences.to_preferences() if request.preferences else None,
        )
    except Exception as e:
        log.exception("Itinerary planning failed")
        raise HTTPException(status_code=500, detail=str(e))

    log_event(log, "itinerary_planned", itinerary_id=itinerary.itinerary_id,
              places=itinerary.metadata.total_places, days=itinerary.trip_length_days)
    return asdict(itinerary)


@app.post("/budget")
async def estimate_budget(request: BudgetRequest, engine: TripEngine = Depends(get_engine)):
    try:
        estimate = engine.estimate_budget(
            request.to_trip(),
            request.preferences.to_preferences() if request.preferences else None,
        )
    except Exception as e:
        log.exception("Budget estimation failed")
        raise HTTPException(status_code=500, detail=str(e))
    return asdict(estimate)


@app.post("/transport/compare")
async def compare_transport(request: TransportCompareRequest, engine: TripEngine = Depends(get_engine)):
    """Per-mode routes, comparison table and recommended mode. Partial results are normal."""
    try:
        comparison = await engine.compare_transport_modes(
            request.origin.to_latlng(),
            request.destination.to_latlng(),
            request.modes,
        )
    except Exception as e:
        log.exception("Transport comparison failed")
        raise HTTPException(status_code=500, detail=str(e))

    log_event(log, "transport_compared", status=comparison.status,
              available=sorted(comparison.routes), unavailable=sorted(comparison.unavailable))
    return asdict(comparison)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
