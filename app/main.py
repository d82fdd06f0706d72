"""Caster Tax Estimator - FastAPI Backend.

Estimates a Black Mage's spell speed and caster tax from combat logs.
"""

import os
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .api import api_router

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan - startup and shutdown."""
    logger.info("Starting Caster Tax Estimator API...")

    # Create tables (optional - analyses stay in memory if unavailable)
    try:
        from .database import async_engine, init_db
        await init_db()
        app.state.db_available = async_engine is not None
        if app.state.db_available:
            logger.info("Database connection successful")
    except Exception as e:
        logger.warning(f"Database unavailable, running without DB: {e}")
        app.state.db_available = False

    yield

    logger.info("Shutting down Caster Tax Estimator API...")
    if getattr(app.state, 'db_available', False):
        from .database import async_engine
        await async_engine.dispose()


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="""
    Caster Tax Estimator API.

    Features:
    - Cast window correlation from FF Logs events
    - Spell speed inference by search over the cast duration model
    - Caster tax estimation with queue-delay filtering
    """,
    version="1.0.0",
    lifespan=lifespan,
)

cors_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

# Add deployed frontend URL from env var
frontend_url = os.environ.get("FRONTEND_URL")
if frontend_url:
    cors_origins.append(frontend_url)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix=f"/api/{settings.api_version}")


@app.get("/")
async def root():
    """Root endpoint - API info."""
    return {
        "name": settings.app_name,
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


# For running with uvicorn directly
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=int(os.environ.get("PORT", 8000)),
        reload=True,
    )
