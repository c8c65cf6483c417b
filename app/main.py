"""FastAPI application entry point.

Employee Management Service - An internal service for employee records,
leave requests and approvals, performance reviews, work logs, reports and
in-app notifications.
"""

import logging
import sys
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.errors import register_exception_handlers
from config.database import Database
from config.settings import Settings, settings as default_settings
from routers import router as api_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
    ],
)

logger = logging.getLogger(__name__)

DESCRIPTION = """
Internal service for managing employees and their day-to-day HR workflows.

## Features

- Employee directory with audited create, update and soft delete
- Leave applications with balance checks and manager approval
- Performance reviews, work logs and analytics
- PDF and Excel report generation
- In-app notifications with optional email delivery

## Authentication

All endpoints except login and health require a Bearer token issued by
`POST /api/auth/login`. Include the token in the Authorization header:
```
Authorization: Bearer <token>
```
"""


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    app.state.database.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application around one database engine.

    Args:
        settings: Configuration to use; the environment-loaded settings when
            omitted.

    Returns:
        The configured FastAPI application.
    """
    settings = settings or default_settings
    logging.getLogger().setLevel(settings.log_level.upper())

    app = FastAPI(
        title="Employee Management Service",
        description=DESCRIPTION,
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = Database(settings)
    app.state.started_at = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "%s %s %s %.1fms",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        return response

    register_exception_handlers(app)

    @app.get(
        "/health",
        tags=["Health"],
        summary="Health Check",
        description="Check if the service is running.",
    )
    async def health_check() -> dict:
        """Return service health status."""
        return {
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": round(time.monotonic() - app.state.started_at, 3),
        }

    app.include_router(api_router, prefix="/api")

    logger.info("Employee Management Service initialized (environment=%s)", settings.environment)
    return app


app = create_app()
