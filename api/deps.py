"""
Calendar Service API - Dependency Injection
============================================

Provides the database session dependency for FastAPI endpoints.
The session factory is built once in the app lifespan and kept on
`app.state`, so handlers never touch a module-level engine.
"""

from typing import Generator

from fastapi import Request
from sqlalchemy.orm import Session


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Borrows a pooled connection for the duration of the request and
    returns it when the response is done.

    Usage:
        @router.get("/")
        def read_item(db: Session = Depends(get_db)):
            return CalendarService.some_method(db, ...)
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
