"""FastAPI REST endpoints for the Garba Rass events API."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy import text
from sqlalchemy.orm import Session

from garba.api.auth import verify_api_key
from garba.api.cache import cached_route, get_cache
from garba.api.schemas import (
    CacheEvictionOut,
    CacheStatsOut,
    EventExistsOut,
    EventIn,
    EventListOut,
    EventOut,
    HealthOut,
)
from garba.cache.store import TTLCache
from garba.errors import EventNotFoundError
from garba.storage.database import Event, get_db

logger = logging.getLogger(__name__)

# Every cached events response has a key containing this prefix.
EVENTS_CACHE_PATTERN = "/api/events"

events_router = APIRouter(prefix="/api", tags=["Events"], route_class=cached_route())
admin_router = APIRouter(prefix="/api/cache", tags=["Cache"], dependencies=[Depends(verify_api_key)])
health_router = APIRouter(prefix="/api", tags=["Health"])


def _get_event(db: Session, event_id: int) -> Event:
    event = db.get(Event, event_id)
    if event is None:
        raise EventNotFoundError(event_id)
    return event


# ---------------------------------------------------------------------------
# Events (reads are memoized, writes invalidate)
# ---------------------------------------------------------------------------


@events_router.get("/events", summary="List events", response_model=EventListOut)
def list_events(
    active_only: bool = Query(False, description="Only return active events"),
    db: Session = Depends(get_db),
) -> EventListOut:
    q = db.query(Event)
    if active_only:
        q = q.filter(Event.is_active.is_(True))
    rows = q.order_by(Event.date, Event.start_time).all()
    return EventListOut(total=len(rows), data=[EventOut.model_validate(r) for r in rows])


@events_router.get("/events/exists", summary="Is any active event scheduled", response_model=EventExistsOut)
def event_exists(db: Session = Depends(get_db)) -> EventExistsOut:
    found = db.query(Event.id).filter(Event.is_active.is_(True)).first() is not None
    return EventExistsOut(exists=found)


@events_router.get("/events/{event_id}", summary="Get one event", response_model=EventOut)
def get_event(event_id: int, db: Session = Depends(get_db)) -> EventOut:
    return EventOut.model_validate(_get_event(db, event_id))


@events_router.post(
    "/events",
    summary="Create an event",
    response_model=EventOut,
    status_code=201,
    dependencies=[Depends(verify_api_key)],
)
def create_event(
    payload: EventIn,
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_cache),
) -> EventOut:
    event = Event(**payload.model_dump())
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("Created event %d (%s)", event.id, event.name)
    cache.invalidate_by_pattern(EVENTS_CACHE_PATTERN)
    return EventOut.model_validate(event)


@events_router.put(
    "/events/{event_id}",
    summary="Update an event",
    response_model=EventOut,
    dependencies=[Depends(verify_api_key)],
)
def update_event(
    event_id: int,
    payload: EventIn,
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_cache),
) -> EventOut:
    event = _get_event(db, event_id)
    for field, value in payload.model_dump().items():
        setattr(event, field, value)
    db.commit()
    db.refresh(event)
    logger.info("Updated event %d", event_id)
    cache.invalidate_by_pattern(EVENTS_CACHE_PATTERN)
    return EventOut.model_validate(event)


@events_router.delete(
    "/events/{event_id}",
    summary="Delete an event",
    status_code=204,
    dependencies=[Depends(verify_api_key)],
)
def delete_event(
    event_id: int,
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_cache),
) -> Response:
    event = _get_event(db, event_id)
    db.delete(event)
    db.commit()
    logger.info("Deleted event %d", event_id)
    cache.invalidate_by_pattern(EVENTS_CACHE_PATTERN)
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Cache management
# ---------------------------------------------------------------------------


@admin_router.get("/stats", summary="Cache contents", response_model=CacheStatsOut)
def cache_stats(cache: TTLCache = Depends(get_cache)) -> CacheStatsOut:
    return CacheStatsOut(**cache.stats())


@admin_router.post("/clear", summary="Clear API cache", response_model=CacheEvictionOut)
def flush_cache(cache: TTLCache = Depends(get_cache)) -> CacheEvictionOut:
    evicted = cache.clear()
    logger.info("Cache cleared (%d entries)", evicted)
    return CacheEvictionOut(evicted=evicted)


@admin_router.post("/cleanup", summary="Evict expired entries", response_model=CacheEvictionOut)
def cleanup_cache(cache: TTLCache = Depends(get_cache)) -> CacheEvictionOut:
    return CacheEvictionOut(evicted=cache.cleanup())


@admin_router.post("/invalidate", summary="Evict entries by key substring", response_model=CacheEvictionOut)
def invalidate_cache(
    pattern: str = Query(..., min_length=1, description="Substring matched against cache keys"),
    cache: TTLCache = Depends(get_cache),
) -> CacheEvictionOut:
    return CacheEvictionOut(evicted=cache.invalidate_by_pattern(pattern))


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@health_router.get("/health", summary="Health check", response_model=HealthOut)
def health(db: Session = Depends(get_db), cache: TTLCache = Depends(get_cache)) -> HealthOut:
    try:
        db.execute(text("SELECT 1"))
    except Exception as exc:
        raise HTTPException(status_code=503, detail=f"DB error: {exc}") from exc
    return HealthOut(status="ok", database="connected", cache_entries=len(cache))
