"""
Main FastAPI application entry point.
"""
import logging
import os
import uuid
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import text

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.database import engine, Base, SessionLocal
from app.core.exceptions import AuditTrackerError
from app.core.logging_config import setup_logging
from app.api.v1.router import api_router
from app.middleware.request_logging import RequestLoggingMiddleware

# Import all models so they register with Base.metadata before create_all()
from app.models import Audit, Auditor, Area, Credential  # noqa: F401

setup_logging()
logger = logging.getLogger(__name__)


def run_migrations() -> None:
    """Apply Alembic migrations when a real database URL is configured."""
    if not os.getenv("DATABASE_URL"):
        logger.info("[MIGRATION] DATABASE_URL not set, skipping migrations (local dev mode)")
        return
    try:
        from alembic.config import Config
        from alembic import command

        logger.info("[MIGRATION] DATABASE_URL detected, running Alembic migrations...")
        command.upgrade(Config("alembic.ini"), "head")
        logger.info("[MIGRATION] Alembic migrations completed (or already up-to-date)")
    except Exception as e:
        # Don't fail startup: the database may not be ready yet
        trace_id = str(uuid.uuid4())
        logger.warning(f"[MIGRATION] [{trace_id}] Alembic migration failed: {e}")
        logger.debug(f"[MIGRATION] [{trace_id}] Migration error details:", exc_info=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    logger.info(f"Starting up {settings.APP_NAME} API...")

    run_migrations()

    # Fallback for local dev without Alembic
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created/verified successfully")
    except Exception as e:
        logger.error(f"Failed to create database tables: {e}", exc_info=True)

    try:
        from app.services.auditor_service import ensure_areas_seeded
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
            ensure_areas_seeded(db, settings.SEED_AREAS)
        finally:
            db.close()
    except Exception as e:
        trace_id = str(uuid.uuid4())
        logger.error(f"[{trace_id}] Database check/seed failed: {e}", exc_info=True)

    yield
    logger.info(f"Shutting down {settings.APP_NAME} API...")


app = FastAPI(
    title="Safety Audit Tracker API",
    description="Record workplace hazard observations, track remediation and review statistics",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    redirect_slashes=False,  # avoid POST->GET redirects on trailing slashes
)

# Request logging middleware (must be added before other middleware)
app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


@app.exception_handler(AuditTrackerError)
async def audit_tracker_exception_handler(request: Request, exc: AuditTrackerError):
    """Domain errors that escaped an endpoint still map to their status code."""
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors with trace_id."""
    trace_id = getattr(request.state, "trace_id", str(uuid.uuid4()))

    logger.error(
        f"[{trace_id}] Unhandled exception: {type(exc).__name__}: {exc}",
        exc_info=True
    )

    if isinstance(exc, HTTPException):
        raise exc
    if isinstance(exc, SQLAlchemyError):
        error_detail = "Database error: check DATABASE_URL / migrations"
        error_type = "DatabaseError"
    else:
        error_detail = str(exc) if settings.DEBUG else "Internal Server Error"
        error_type = type(exc).__name__

    return JSONResponse(
        status_code=500,
        content={
            "detail": error_detail,
            "trace_id": trace_id,
            "error": error_type,
        },
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": f"{settings.APP_NAME} API",
        "version": "1.0.0",
        "docs": "/docs",
    }
