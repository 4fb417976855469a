"""
Calendar Service API - Main Application
========================================

Read-only calendar data (events, academic dates, sports, closures,
occupancy, weather) served as JSON, plus the static front-end.

- Endpoints in /api/v1/endpoints, business logic in root services.py
- Connection pool created once in the lifespan and injected per request
- Static files from public/ mounted last so API routes win

Run with: python -m uvicorn api.main:app --port 3000
      or: calendar-service
"""

import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from api.deps import get_db
from api.v1.endpoints import calendar
from database import create_db_engine, create_session_factory
from logging_config import get_logger, setup_logging
from services import CalendarService
from schemas import HealthDTO

load_dotenv()

logger = get_logger(__name__)

# ==========================================
# APP CONFIGURATION
# ==========================================

BASE_DIR = Path(os.path.abspath(os.path.dirname(__file__))).parent
DEFAULT_PORT = 3000
DEFAULT_STATIC_DIR = BASE_DIR / "public"


def create_app(engine: Optional[Engine] = None, static_dir: Optional[Path] = None) -> FastAPI:
    """
    Builds the FastAPI application.

    Args:
        engine: Pre-built engine (tests). When omitted the lifespan creates
            one from the environment and disposes it on shutdown.
        static_dir: Front-end directory. Defaults to STATIC_DIR or public/.
    """
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_engine = engine is None
        db_engine = create_db_engine() if owns_engine else engine
        app.state.engine = db_engine
        app.state.session_factory = create_session_factory(db_engine)
        logger.info("Calendar service started")
        yield
        if owns_engine:
            db_engine.dispose()
        logger.info("Calendar service stopped")

    app = FastAPI(
        title="Calendar Service API",
        version="1.0.0",
        description="""
## Calendar Service API

Read-only access to the calendar database.

### Endpoints
- **Health**: Database connectivity check
- **Stats**: Total closures, events, sports and occupancy records
- **Month**: Per-day category counts for a month (calendar dots)
- **Date**: Every record for one date (detail panel)
""",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # ==========================================
    # MIDDLEWARE
    # ==========================================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # ==========================================
    # ROUTERS
    # ==========================================

    app.include_router(calendar.router, prefix="/api", tags=["Calendar"])

    @app.get("/health", response_model=HealthDTO, tags=["Health"])
    def health_check(db: Session = Depends(get_db)):
        """Runs SELECT 1 against the pool."""
        result = CalendarService.check_health(db)
        health = result.data if result.ok else HealthDTO(ok=False, error=result.error)
        return JSONResponse(status_code=result.status_code, content=health.model_dump(exclude_none=True))

    # ==========================================
    # STATIC FRONT-END
    # ==========================================

    static_path = Path(static_dir or os.getenv("STATIC_DIR", DEFAULT_STATIC_DIR))
    if static_path.is_dir():
        app.mount("/", StaticFiles(directory=static_path, html=True), name="static")
    else:
        logger.warning(f"Static directory {static_path} not found, front-end disabled")

    return app


app = create_app()


def run():
    """Console entry point: serve the app on PORT (default 3000)."""
    port = int(os.getenv("PORT", DEFAULT_PORT))
    logger.info(f"Server running on port {port}")
    uvicorn.run(app, host="0.0.0.0", port=port)


if __name__ == "__main__":
    run()
