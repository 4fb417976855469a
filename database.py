import os
from typing import Optional

from sqlalchemy import (
    create_engine, Column, Integer, String, Date, Float, Boolean, ForeignKey, Time, Text
)
from sqlalchemy.engine import Engine, URL, make_url
from sqlalchemy.orm import declarative_base, sessionmaker

from logging_config import get_logger

logger = get_logger(__name__)

Base = declarative_base()

DEFAULT_POOL_SIZE = 10
DEFAULT_POOL_TIMEOUT = 30  # seconds a request waits for a free connection
REQUIRED_MYSQL_VARS = ("MYSQLHOST", "MYSQLUSER", "MYSQLDATABASE")


# ==========================================
# MODELS (Tables)
# ==========================================
# The schema is owned by the data-loading side; the service only reads it.
# Every child table references dates.date_key (integer YYYYMMDD).

class CalendarDate(Base):
    __tablename__ = "dates"
    date_key = Column(Integer, primary_key=True, autoincrement=False)  # 20200501
    date = Column(Date, nullable=False)
    day_of_week = Column(String(10))
    is_weekend = Column(Boolean, default=False)
    is_holiday = Column(Boolean, default=False)


class Event(Base):
    __tablename__ = "events"
    id = Column(Integer, primary_key=True, autoincrement=True)
    date_key = Column(Integer, ForeignKey("dates.date_key"), index=True, nullable=False)
    event_name = Column(String(255), nullable=False)
    venue = Column(String(255))
    category = Column(String(100))
    start_time = Column(Time, nullable=True)
    end_time = Column(Time, nullable=True)
    expected_attendance = Column(Integer, nullable=True)


class AcademicCalendarEntry(Base):
    __tablename__ = "academic_calendar"
    id = Column(Integer, primary_key=True, autoincrement=True)
    date_key = Column(Integer, ForeignKey("dates.date_key"), index=True, nullable=False)
    institution = Column(String(255))
    term = Column(String(100))
    description = Column(Text)
    is_break = Column(Boolean, default=False)


class Sport(Base):
    __tablename__ = "sports"
    id = Column(Integer, primary_key=True, autoincrement=True)
    date_key = Column(Integer, ForeignKey("dates.date_key"), index=True, nullable=False)
    team = Column(String(255))
    opponent = Column(String(255))
    venue = Column(String(255))
    start_time = Column(Time, nullable=True)
    is_home_game = Column(Boolean, default=True)


class Closure(Base):
    __tablename__ = "closures"
    id = Column(Integer, primary_key=True, autoincrement=True)
    date_key = Column(Integer, ForeignKey("dates.date_key"), index=True, nullable=False)
    location = Column(String(255))
    reason = Column(String(255))
    closure_type = Column(String(100))  # road, campus, venue...


class OccupancyRecord(Base):
    __tablename__ = "occupancy"
    id = Column(Integer, primary_key=True, autoincrement=True)
    date_key = Column(Integer, ForeignKey("dates.date_key"), index=True, nullable=False)
    property_name = Column(String(255))
    occupancy_rate = Column(Float)  # 0..1
    rooms_sold = Column(Integer)
    rooms_available = Column(Integer)


class WeatherRecord(Base):
    __tablename__ = "weather"
    id = Column(Integer, primary_key=True, autoincrement=True)
    # One weather row per day at most
    date_key = Column(Integer, ForeignKey("dates.date_key"), unique=True, nullable=False)
    temp_high = Column(Float)
    temp_low = Column(Float)
    precipitation = Column(Float)
    conditions = Column(String(100))


# ==========================================
# ENGINE / POOL
# ==========================================

def get_database_url() -> URL:
    """
    Builds the database URL from the environment.

    DATABASE_URL wins if present; otherwise the MYSQL* variables are
    combined into a mysql+pymysql URL.
    """
    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return make_url(explicit)

    missing = [name for name in REQUIRED_MYSQL_VARS if not os.getenv(name)]
    if missing:
        raise RuntimeError(
            f"Database is not configured, missing environment variables: {', '.join(missing)}"
        )

    return URL.create(
        "mysql+pymysql",
        username=os.getenv("MYSQLUSER"),
        password=os.getenv("MYSQLPASSWORD"),
        host=os.getenv("MYSQLHOST"),
        port=int(os.getenv("MYSQLPORT", "3306")),
        database=os.getenv("MYSQLDATABASE"),
    )


def create_db_engine(
    url=None,
    pool_size: Optional[int] = None,
    pool_timeout: Optional[float] = None,
    echo: Optional[bool] = None,
) -> Engine:
    """
    Creates the process-wide engine with a bounded connection pool.

    Requests beyond pool_size wait up to pool_timeout seconds for a free
    connection (max_overflow=0), then fail with sqlalchemy.exc.TimeoutError.
    """
    url = make_url(url) if url is not None else get_database_url()
    if pool_size is None:
        pool_size = int(os.getenv("DB_POOL_SIZE", DEFAULT_POOL_SIZE))
    if pool_timeout is None:
        pool_timeout = float(os.getenv("DB_POOL_TIMEOUT", DEFAULT_POOL_TIMEOUT))
    if echo is None:
        echo = os.getenv("DB_ECHO", "0").lower() in {"1", "true", "yes"}

    engine_kwargs = {"echo": echo, "pool_pre_ping": True}
    if not _is_memory_sqlite(url):
        # In-memory SQLite uses SingletonThreadPool, which rejects these
        engine_kwargs.update(pool_size=pool_size, max_overflow=0, pool_timeout=pool_timeout)

    engine = create_engine(url, **engine_kwargs)
    logger.info(f"Database engine created for {engine.url.render_as_string(hide_password=True)} (pool_size={pool_size})")
    return engine


def _is_memory_sqlite(url: URL) -> bool:
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_schema(engine: Engine):
    """Creates the tables. Only used for local development and tests."""
    Base.metadata.create_all(engine)
