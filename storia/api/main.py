"""Main FastAPI application for Storia autoproduction."""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

# Load environment variables using centralized loader
from storia.core.env_loader import ensure_env_loaded
ensure_env_loaded()

from storia.api.routers import generation
from storia.api.settings import get_settings
from storia.core.constants import PROJECT_NAME, VERSION
from storia.core.logging_config import get_logger

logger = get_logger("api.main")
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(f"Starting {PROJECT_NAME} API...")
    yield
    logger.info(f"Shutting down {PROJECT_NAME} API...")


app = FastAPI(
    title="Storia Autoproduction API",
    description="Batch story and video generation with pollable progress",
    version=VERSION,
    debug=settings.debug,
    lifespan=lifespan,
)

# Rate limiter shared with the generation router
app.state.limiter = generation.limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS middleware for web UI
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(generation.router, prefix="/api/autoproduction", tags=["generation"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Storia Autoproduction API", "version": VERSION}


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


def start_server(host: str = None, port: int = None, reload: bool = False):
    """Start the FastAPI server."""
    uvicorn.run(
        "storia.api.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level="warning",  # Suppress INFO logs for each request
    )


if __name__ == "__main__":
    start_server()
