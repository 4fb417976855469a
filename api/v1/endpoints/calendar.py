"""
Calendar Service API - Calendar Endpoints
==========================================

Stats, month summary (calendar dots) and date detail (side panel).
All logic lives in services.py; this layer only maps results to HTTP.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.deps import get_db
from api.responses import error_response, result_response
from services import CalendarService, parse_date_key, parse_month
from schemas import DateDetailDTO, DaySummaryDTO, ErrorDTO, StatsDTO

router = APIRouter()

ERROR_RESPONSES = {400: {"model": ErrorDTO}, 500: {"model": ErrorDTO}}


@router.get(
    "/stats",
    response_model=StatsDTO,
    responses={500: {"model": ErrorDTO}},
    summary="Global Stats",
    description="Total number of closures, events, sports and occupancy records."
)
def get_stats(db: Session = Depends(get_db)):
    return result_response(CalendarService.get_stats(db))


@router.get(
    "/month",
    response_model=List[DaySummaryDTO],
    responses=ERROR_RESPONSES,
    summary="Month Summary",
    description="Per-day record counts for every known date of a month, ordered by date."
)
def get_month(
    year: Optional[str] = Query(default=None, description="Year, e.g. 2020"),
    month: Optional[str] = Query(default=None, description="Month (1-12)"),
    db: Session = Depends(get_db)
):
    """Validates year/month before touching the database."""
    month_range, error = parse_month(year, month)
    if error:
        return error_response(error, 400)
    return result_response(CalendarService.get_month_summary(db, month_range))


@router.get(
    "/date/{date_key}",
    response_model=DateDetailDTO,
    responses=ERROR_RESPONSES,
    summary="Date Details",
    description="All records attached to one date_key (YYYYMMDD). Unknown dates return empty data."
)
def get_date_detail(date_key: str, db: Session = Depends(get_db)):
    key = parse_date_key(date_key)
    if key is None:
        return error_response("Invalid date_key", 400)
    return result_response(CalendarService.get_date_detail(db, key))
