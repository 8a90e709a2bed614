"""Main FastAPI application"""

import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import movies, sessions, system, trending
from .config import settings
from .core.sessions import SessionRegistry
from .database import engine, init_db
from .services.log_service import log_service
from .services.tmdb_service import TMDBService
from .services.trending_service import TrendingService

APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    # Startup - refuse to run without a TMDB token
    api_token = settings.require_api_token()
    await init_db()

    tmdb = TMDBService(api_token)
    app.state.tmdb = tmdb
    app.state.trending = TrendingService(default_limit=settings.TRENDING_LIMIT)
    app.state.sessions = SessionRegistry(tmdb, app.state.trending)
    log_service.info("Trailer Finder started")
    try:
        yield
    except asyncio.CancelledError:
        pass  # Suppress CancelledError during shutdown
    finally:
        # Shutdown - cleanup runs in finally block
        await app.state.sessions.close_all()
        await tmdb.close()
        await engine.dispose()
        log_service.info("Trailer Finder stopped")


app = FastAPI(
    title="Trailer Finder",
    description="Search TMDB, browse trending searches and play YouTube trailers",
    version=APP_VERSION,
    lifespan=lifespan,
)

# Add CORS middleware
# If ALLOWED_ORIGINS is not set, default to ["*"] for maximum compatibility
allowed_origins = ["*"]
allow_credentials = False  # Credentials cannot be used with "*"

if settings.ALLOWED_ORIGINS:
    allowed_origins = settings.ALLOWED_ORIGINS.split(",")
    allow_credentials = True  # Credentials allowed with specific origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(movies.router)
app.include_router(trending.router)
app.include_router(sessions.router)
app.include_router(system.router)


# Root API endpoint
@app.get("/api")
async def api_root():
    """API root"""
    return {
        "name": "Trailer Finder API",
        "version": APP_VERSION,
        "docs": "/docs",
        "openapi": "/openapi.json",
    }
