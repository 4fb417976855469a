# tests/conftest.py
"""
Shared fixtures: an in-memory SQLite database with the calendar schema,
seeded with May 2020 plus a few rows around it, and a TestClient for an
app wired to that engine.
"""

import datetime as dt

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from api.main import create_app
from database import (
    init_schema,
    CalendarDate,
    Event,
    AcademicCalendarEntry,
    Sport,
    Closure,
    OccupancyRecord,
    WeatherRecord,
)


def date_key_of(day: dt.date) -> int:
    return day.year * 10000 + day.month * 100 + day.day


def _seed(session: Session):
    # Every day of May 2020 and February 2020 (leap year), plus June 1st
    start = dt.date(2020, 5, 1)
    days = [start + dt.timedelta(days=i) for i in range(31)]
    days += [dt.date(2020, 2, 1) + dt.timedelta(days=i) for i in range(29)]
    days.append(dt.date(2020, 6, 1))
    for day in days:
        session.add(CalendarDate(
            date_key=date_key_of(day),
            date=day,
            day_of_week=day.strftime("%A"),
            is_weekend=day.weekday() >= 5,
        ))
    session.flush()

    session.add_all([
        Event(date_key=20200501, event_name="Spring Concert", venue="Main Hall",
              category="music", start_time=dt.time(19, 0), expected_attendance=800),
        Event(date_key=20200501, event_name="Farmers Market", venue="Plaza", category="market"),
        Event(date_key=20200515, event_name="Graduation", venue="Stadium"),
        AcademicCalendarEntry(date_key=20200504, institution="State University",
                              term="Spring 2020", description="Finals week", is_break=False),
        Sport(date_key=20200509, team="Tigers", opponent="Bears", venue="Stadium",
              start_time=dt.time(13, 30), is_home_game=True),
        Closure(date_key=20200525, location="City Hall", reason="Memorial Day", closure_type="government"),
        OccupancyRecord(date_key=20200501, property_name="Downtown Inn",
                        occupancy_rate=0.82, rooms_sold=82, rooms_available=100),
        OccupancyRecord(date_key=20200601, property_name="Downtown Inn",
                        occupancy_rate=0.5, rooms_sold=50, rooms_available=100),
        WeatherRecord(date_key=20200501, temp_high=24.5, temp_low=12.0,
                      precipitation=0.0, conditions="Sunny"),
        # Child row whose date is not in the dates table
        Event(date_key=20991231, event_name="Orphan Event"),
    ])
    session.commit()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_schema(engine)
    with Session(engine) as session:
        _seed(session)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    app = create_app(engine=engine)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def broken_engine(tmp_path):
    """Engine pointing at a database file that can never be opened."""
    engine = create_engine(f"sqlite:///{tmp_path / 'missing' / 'calendar.db'}")
    yield engine
    engine.dispose()


@pytest.fixture
def broken_client(broken_engine):
    app = create_app(engine=broken_engine)
    with TestClient(app) as test_client:
        yield test_client
