"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from foloup import __version__
from foloup.api.v1.router import api_router
from foloup.core.config import settings
from foloup.core.database import engine, Base
from foloup.core.logging import setup_logging
import foloup.models  # noqa: F401  registers tables on Base.metadata


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    # Shutdown
    await engine.dispose()


app = FastAPI(
    title="FoloUp API",
    description="AI interview platform with ATS resume matching",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware - must be added before routes
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials="*" not in settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "foloup"}


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "FoloUp API", "version": __version__}
