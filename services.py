import calendar
import re
from functools import wraps
from typing import List, Optional, Tuple

from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import (
    CalendarDate,
    Event,
    AcademicCalendarEntry,
    Sport,
    Closure,
    OccupancyRecord,
    WeatherRecord,
)
from logging_config import get_logger
from schemas import (
    HealthDTO,
    StatsDTO,
    DaySummaryDTO,
    DateDetailDTO,
    EventDTO,
    AcademicEntryDTO,
    SportDTO,
    ClosureDTO,
    OccupancyDTO,
    WeatherDTO,
    MonthRange,
    ServiceResult,
)

logger = get_logger(__name__)

MIN_YEAR, MAX_YEAR = 1, 9999

# ASCII digits only; int() alone also takes "20_20" and non-ASCII digits
INTEGER_PATTERN = re.compile(r"[+-]?[0-9]{1,9}")
DATE_KEY_PATTERN = re.compile(r"[0-9]{8}")  # YYYYMMDD

# Label in the month summary -> child table model
MONTH_COUNT_COLUMNS = (
    ("event_count", Event),
    ("academic_count", AcademicCalendarEntry),
    ("sport_count", Sport),
    ("closure_count", Closure),
    ("occupancy_count", OccupancyRecord),
    ("weather_count", WeatherRecord),
)


# ==========================================
# HELPERS
# ==========================================

def db_errors_as(message: str):
    """
    Turns a database failure inside a service call into a 500 ServiceResult.

    The full error goes to the log; only `message` reaches the client.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(db: Session, *args, **kwargs) -> ServiceResult:
            try:
                return fn(db, *args, **kwargs)
            except SQLAlchemyError:
                logger.exception(f"Database error in {fn.__name__}")
                return ServiceResult.failure(message, 500)
        return wrapper
    return decorator


def parse_month(year: Optional[str], month: Optional[str]) -> Tuple[Optional[MonthRange], Optional[str]]:
    """
    Validates raw query-string values and derives the month's date_key range.

    Returns (range, None) on success or (None, error message).
    The range always ends on the true last day of the month.
    """
    if year is None or month is None or not year.strip() or not month.strip():
        return None, "Missing year or month"

    year, month = year.strip(), month.strip()
    if not (INTEGER_PATTERN.fullmatch(year) and INTEGER_PATTERN.fullmatch(month)):
        return None, "Invalid year or month"

    y, m = int(year), int(month)
    if not (MIN_YEAR <= y <= MAX_YEAR and 1 <= m <= 12):
        return None, "Invalid year or month"

    return MonthRange(year=y, month=m, days=calendar.monthrange(y, m)[1]), None


def parse_date_key(raw: Optional[str]) -> Optional[int]:
    """
    Integer date_key or None unless `raw` is exactly eight ASCII digits.

    Eight digits always fit the INT column, so the value can be bound on
    any backend. Keys that are not real dates (20201399) are just unknown.
    """
    if raw is None or not DATE_KEY_PATTERN.fullmatch(raw.strip()):
        return None
    return int(raw.strip())


def _count_for_date(model):
    """Correlated COUNT(*) of `model` rows for the enclosing dates row."""
    return (
        select(func.count())
        .select_from(model)
        .where(model.date_key == CalendarDate.date_key)
        .correlate(CalendarDate)
        .scalar_subquery()
    )


def _total_count(model):
    return select(func.count()).select_from(model).scalar_subquery()


def _rows_for_date(db: Session, model, date_key: int) -> list:
    return db.query(model).filter(model.date_key == date_key).order_by(model.id).all()


# ==========================================
# SERVICES
# ==========================================

class CalendarService:
    """Read-only queries behind the calendar API."""

    @staticmethod
    def check_health(db: Session) -> ServiceResult:
        """Runs a trivial query to prove the pool can reach the database."""
        try:
            value = db.execute(text("SELECT 1 AS ok")).scalar_one()
        except SQLAlchemyError:
            logger.exception("Healthcheck error")
            return ServiceResult.failure("DB error", 500)
        return ServiceResult.success(HealthDTO(ok=True, db=value))

    @staticmethod
    @db_errors_as("Error fetching stats")
    def get_stats(db: Session) -> ServiceResult:
        """Total row counts of closures, events, sports and occupancy in one query."""
        row = db.execute(
            select(
                _total_count(Closure).label("closures"),
                _total_count(Event).label("events"),
                _total_count(Sport).label("sports"),
                _total_count(OccupancyRecord).label("occupancy"),
            )
        ).one()
        return ServiceResult.success(StatsDTO(**row._mapping))

    @staticmethod
    @db_errors_as("Could not load month data")
    def get_month_summary(db: Session, month_range: MonthRange) -> ServiceResult:
        """
        Per-day category counts for every dates row inside the month.

        Args:
            month_range: Validated range from parse_month()

        Returns:
            ServiceResult with a List[DaySummaryDTO] ordered by date_key
        """
        count_columns = [
            _count_for_date(model).label(label) for label, model in MONTH_COUNT_COLUMNS
        ]
        rows = (
            db.query(CalendarDate.date_key, CalendarDate.date, *count_columns)
            .filter(CalendarDate.date_key.between(month_range.start_key, month_range.end_key))
            .order_by(CalendarDate.date_key)
            .all()
        )
        days: List[DaySummaryDTO] = [DaySummaryDTO(**row._mapping) for row in rows]
        logger.debug(f"Month {month_range.year}-{month_range.month:02d}: {len(days)} days")
        return ServiceResult.success(days)

    @staticmethod
    @db_errors_as("Error loading date details")
    def get_date_detail(db: Session, date_key: int) -> ServiceResult:
        """
        The dates row plus every child record for one date_key.

        An unknown date_key is not an error: date is null and the
        categories are empty.
        """
        date_row = db.query(CalendarDate).filter(CalendarDate.date_key == date_key).first()
        weather = db.query(WeatherRecord).filter(WeatherRecord.date_key == date_key).first()

        detail = DateDetailDTO(
            date_key=date_key,
            date=date_row.date if date_row else None,
            events=[EventDTO.model_validate(r) for r in _rows_for_date(db, Event, date_key)],
            academic=[AcademicEntryDTO.model_validate(r) for r in _rows_for_date(db, AcademicCalendarEntry, date_key)],
            sports=[SportDTO.model_validate(r) for r in _rows_for_date(db, Sport, date_key)],
            closures=[ClosureDTO.model_validate(r) for r in _rows_for_date(db, Closure, date_key)],
            occupancy=[OccupancyDTO.model_validate(r) for r in _rows_for_date(db, OccupancyRecord, date_key)],
            weather=WeatherDTO.model_validate(weather) if weather else None,
        )
        return ServiceResult.success(detail)
