"""
Calendar Service - Response Schemas (Pydantic)
===============================================

Data Transfer Objects for every JSON shape the API returns.
Child-table records are read straight from ORM rows (from_attributes).
"""

import datetime as dt
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ==========================================
# HEALTH / ERRORS
# ==========================================

class HealthDTO(BaseModel):
    ok: bool
    db: Optional[int] = None
    error: Optional[str] = None


class ErrorDTO(BaseModel):
    """Error payload for 400/500 responses."""
    error: str


# ==========================================
# STATS / MONTH
# ==========================================

class StatsDTO(BaseModel):
    """Total row counts of the tracked tables."""
    closures: int = Field(..., ge=0)
    events: int = Field(..., ge=0)
    sports: int = Field(..., ge=0)
    occupancy: int = Field(..., ge=0)


class DaySummaryDTO(BaseModel):
    """One calendar day with per-category record counts (drives the calendar dots)."""
    date_key: int
    date: Optional[dt.date] = None
    event_count: int = 0
    academic_count: int = 0
    sport_count: int = 0
    closure_count: int = 0
    occupancy_count: int = 0
    weather_count: int = 0


# ==========================================
# CHILD RECORDS
# ==========================================

class _RecordDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    date_key: int


class EventDTO(_RecordDTO):
    event_name: str
    venue: Optional[str] = None
    category: Optional[str] = None
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    expected_attendance: Optional[int] = None


class AcademicEntryDTO(_RecordDTO):
    institution: Optional[str] = None
    term: Optional[str] = None
    description: Optional[str] = None
    is_break: Optional[bool] = None


class SportDTO(_RecordDTO):
    team: Optional[str] = None
    opponent: Optional[str] = None
    venue: Optional[str] = None
    start_time: Optional[dt.time] = None
    is_home_game: Optional[bool] = None


class ClosureDTO(_RecordDTO):
    location: Optional[str] = None
    reason: Optional[str] = None
    closure_type: Optional[str] = None


class OccupancyDTO(_RecordDTO):
    property_name: Optional[str] = None
    occupancy_rate: Optional[float] = None
    rooms_sold: Optional[int] = None
    rooms_available: Optional[int] = None


class WeatherDTO(_RecordDTO):
    temp_high: Optional[float] = None
    temp_low: Optional[float] = None
    precipitation: Optional[float] = None
    conditions: Optional[str] = None


# ==========================================
# DATE DETAIL
# ==========================================

class DateDetailDTO(BaseModel):
    """
    Everything known about one date (right-side panel).

    `date` is null when the dates row is missing; weather is 1:1 and
    may be null, every other category is a list (possibly empty).
    """
    date_key: int
    date: Optional[dt.date] = None
    events: List[EventDTO] = []
    academic: List[AcademicEntryDTO] = []
    sports: List[SportDTO] = []
    closures: List[ClosureDTO] = []
    occupancy: List[OccupancyDTO] = []
    weather: Optional[WeatherDTO] = None


# ==========================================
# SERVICE PLUMBING
# ==========================================

class MonthRange(BaseModel):
    """Inclusive date_key range covering a whole calendar month."""
    year: int = Field(..., ge=1, le=9999)
    month: int = Field(..., ge=1, le=12)
    days: int = Field(..., ge=28, le=31)

    @property
    def start_key(self) -> int:
        return self.year * 10000 + self.month * 100 + 1

    @property
    def end_key(self) -> int:
        return self.year * 10000 + self.month * 100 + self.days


class ServiceResult(BaseModel):
    """
    Outcome of a service call: either `data` or an `error` message,
    with the HTTP status the API layer should answer with.
    """
    data: Any = None
    error: Optional[str] = None
    status_code: int = 200

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: Any) -> "ServiceResult":
        return cls(data=data)

    @classmethod
    def failure(cls, error: str, status_code: int) -> "ServiceResult":
        return cls(error=error, status_code=status_code)
