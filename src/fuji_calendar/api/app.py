"""FastAPI application factory.

Creates and configures the FastAPI application with all routes and middleware.

## Usage

```python
from fuji_calendar.api import create_app

app = create_app()

# Run with uvicorn
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
```

Or from the command line: `fuji-calendar serve`.

## Configuration

The app is configured via environment variables. See `fuji_calendar.config`
for available settings.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fuji_calendar.config import get_settings
from fuji_calendar.database.connection import close_db, init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Opens the event store connection on startup and closes it on shutdown.
    """
    settings = get_settings()

    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    await init_db()

    yield

    logger.info("Shutting down")
    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()
    show_docs = settings.debug and not settings.is_production

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Diamond Fuji and Pearl Fuji event calendar",
        docs_url="/docs" if show_docs else None,
        redoc_url="/redoc" if show_docs else None,
        openapi_url="/openapi.json" if show_docs else None,
        lifespan=lifespan,
    )

    # The API is read-only
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # Include routers
    from fuji_calendar.api.routes import calendar, events, locations, weather

    app.include_router(calendar.router, prefix="/api/calendar", tags=["Calendar"])
    app.include_router(events.router, prefix="/api/events", tags=["Events"])
    app.include_router(weather.router, prefix="/api/weather", tags=["Weather"])
    app.include_router(locations.router, prefix="/api/locations", tags=["Locations"])

    @app.get("/api/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": settings.app_version}

    return app
