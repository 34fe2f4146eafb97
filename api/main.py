"""
MovieCast API - FastAPI application.

Provides endpoints for:
- Browsing and editing the local movie catalog (with CSV/XLSX export)
- Searching TMDb and importing a movie into the catalog
- Movie details enriched with TMDb metadata and an Open-Meteo forecast
"""
from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

import requests
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.deps import build_forecast_client, build_tmdb_client, get_cache_max_entries
from api.routers import movies, tmdb
from moviecast_backend.cache import ResponseCache
from moviecast_backend.repositories.movies import build_catalog_store
from moviecast_backend.utils.env import load_env

logger = logging.getLogger(__name__)

load_env()


def get_cors_origins() -> list[str]:
    """
    Get CORS allowed origins from environment.
    Set CORS_ALLOW_ORIGINS as comma-separated list of origins.
    Example: CORS_ALLOW_ORIGINS=http://localhost:3000,https://movies.example.com
    """
    origins_str = os.getenv("CORS_ALLOW_ORIGINS", "")
    if not origins_str:
        return []
    return [origin.strip() for origin in origins_str.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the shared cache, HTTP session, provider clients and catalog store."""
    # Startup
    logger.info("Starting up MovieCast API...")
    cache = ResponseCache(max_entries=get_cache_max_entries())
    await cache.open()
    session = requests.Session()

    app.state.response_cache = cache
    app.state.http_session = session
    app.state.tmdb_client = build_tmdb_client(cache, session)
    app.state.forecast_client = build_forecast_client(cache, session)
    app.state.catalog_store = build_catalog_store()
    yield
    # Shutdown
    logger.info("Shutting down MovieCast API...")
    await cache.close()
    session.close()


app = FastAPI(
    title="MovieCast API",
    description="Local movie catalog with TMDb metadata and same-day weather forecasts",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS configuration
# If no origins configured, allows all origins but disables credentials
cors_origins = get_cors_origins()
allow_credentials = len(cors_origins) > 0

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins if cors_origins else ["*"],
    allow_credentials=allow_credentials,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Include routers
app.include_router(movies.router, prefix="/api/v1")
app.include_router(tmdb.router, prefix="/api/v1")


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "moviecast-backend"}


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "healthy"}
