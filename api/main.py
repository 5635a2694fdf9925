"""Main FastAPI application."""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes import jobs_router
from api.schemas.responses import ErrorResponse
from generator.providers import get_provider
from generator.runner import JobRunner, ProviderFactory
from shared.config import Settings, settings
from storage.job_store import JobStore

logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def init_state(
    app: FastAPI,
    app_settings: Optional[Settings] = None,
    provider_factory: ProviderFactory = get_provider
) -> JobRunner:
    """Create the job store and runner shared by every request."""
    store = JobStore()
    runner = JobRunner(store, app_settings or settings, provider_factory=provider_factory)
    app.state.job_store = store
    app.state.job_runner = runner
    return runner


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    runner = init_state(app)
    retention_task = asyncio.create_task(runner.run_retention())
    logger.info(f"Writing articles to {settings.output_dir}")

    yield

    # Shutdown
    retention_task.cancel()
    try:
        await retention_task
    except asyncio.CancelledError:
        pass

    await runner.shutdown()


# Create FastAPI app
app = FastAPI(
    title="Article Batch Generator",
    description="Generates keyword articles with an LLM provider and packages them as a zip archive",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error="Internal server error", detail=str(exc)).model_dump()
    )


# Include routers
app.include_router(jobs_router)


# Health check endpoint
@app.get("/health")
async def health_check(request: Request):
    """Health check endpoint."""
    return {
        "status": "healthy",
        "running_jobs": len(request.app.state.job_runner.running_jobs())
    }


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Article Batch Generator",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug
    )
