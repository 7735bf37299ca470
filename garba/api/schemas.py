"""Pydantic schemas for API request validation and response serialization."""

from __future__ import annotations

import re
from datetime import date as date_type
from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

_TIME_RE = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")

MAX_PRICE = 50_000

# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class EventIn(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=1000)
    date: date_type
    start_time: str
    end_time: str
    venue: str = Field(min_length=1, max_length=200)
    ticket_price: float = Field(ge=0, le=MAX_PRICE)
    group_price: float = Field(ge=0, le=MAX_PRICE)
    is_active: bool = True

    @field_validator("name", "description", "venue")
    @classmethod
    def strip_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("start_time", "end_time")
    @classmethod
    def check_time_format(cls, value: str) -> str:
        value = value.strip()
        if not _TIME_RE.match(value):
            raise ValueError('must be in format "HH:MM" (e.g. "18:00")')
        return value

    @model_validator(mode="after")
    def check_time_window(self) -> EventIn:
        if self.start_time == self.end_time:
            raise ValueError("end_time must differ from start_time")
        return self


class EventOut(BaseModel):
    id: int
    name: str
    description: str
    date: date_type
    start_time: str
    end_time: str
    venue: str
    ticket_price: float
    group_price: float
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class EventListOut(BaseModel):
    total: int
    data: list[EventOut]


class EventExistsOut(BaseModel):
    exists: bool


# ---------------------------------------------------------------------------
# Cache administration
# ---------------------------------------------------------------------------


class CacheStatsOut(BaseModel):
    size: int
    keys: list[str]


class CacheEvictionOut(BaseModel):
    evicted: int


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class HealthOut(BaseModel):
    status: str
    database: str
    cache_entries: int
