"""
HR Attendance API - FastAPI Application

- /docs and /openapi.json at root level, API prefix only on routers
- Middleware order: CORS → CorrelationId → Logging
- Tables, system account and default settings are created at startup
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

import app.models  # Force model registration with SQLAlchemy
from app.core.config import settings
from app.core.handlers import register_exception_handlers
from app.core.init_system import init_system_data
from app.core.limiter import limiter
from app.core.logging import setup_logging
from app.core.middleware import CorrelationIdMiddleware, LoggingMiddleware
from app.database import SessionLocal, init_db
from app.routers.api_router import api_router

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.app_name} v{settings.version} ({settings.environment}, tz={settings.timezone})")
    try:
        init_db()
    except Exception as e:
        logger.error(f"✗ Database initialization failed: {e}")
        raise
    logger.info("✓ Database ready")
    init_system_data()

    yield

    logger.info(f"{settings.app_name} stopped")


app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description="Attendance, overtime pricing and request approval for HR",
    docs_url="/docs",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.state.limiter = limiter
register_exception_handlers(app)

# Last added runs first: CORS → CorrelationId → Logging
app.add_middleware(LoggingMiddleware)
app.add_middleware(CorrelationIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[settings.request_id_header, "X-Process-Time"],
)

app.include_router(api_router, prefix=settings.api_prefix)


# Operational endpoints (root level)
@app.get("/", tags=["Health"])
def root():
    return {"message": settings.app_name, "version": settings.version, "docs": "/docs"}


@app.get("/health", tags=["Health"])
def health_check():
    """Liveness probe for load balancers and orchestrators."""
    return {
        "status": "up",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.version,
        "build_id": settings.build_id,
        "environment": settings.environment,
        "timezone": settings.timezone,
    }


@app.get("/readiness", tags=["Health"])
def readiness_check():
    """Readiness probe: the database answers a trivial query."""
    try:
        with SessionLocal() as session:
            session.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Readiness check failed: {e}")
        raise HTTPException(status_code=503, detail="Database unavailable")
    return {"status": "ready", "components": {"database": "connected"}}


@app.get("/liveness", tags=["Health"])
def liveness_check():
    return health_check()
