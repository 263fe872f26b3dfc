"""
Main FastAPI application for the Vibe Engine (AI UI scaffolding backend)
"""
from contextlib import asynccontextmanager
from datetime import datetime
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from vibe_engine.config import settings, validate_required_config
from vibe_engine.logging_config import logger
from vibe_engine.services.template_generator import render_default_component
from vibe_engine.services.usage_counter import UsageCounter

# Import routers
from vibe_engine.routers import export, generate


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Starting Vibe Engine", environment=settings.ENVIRONMENT)

    validate_required_config()

    # Initialize Sentry if DSN provided
    if settings.SENTRY_DSN:
        sentry_sdk.init(
            dsn=settings.SENTRY_DSN,
            environment=settings.SENTRY_ENVIRONMENT,
            traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
            integrations=[FastApiIntegration()],
        )
        logger.info("Sentry initialized")

    logger.info(
        "Vibe Engine started",
        degraded_mode=not settings.AIMLAPI_KEY,
        default_model=settings.DEFAULT_MODEL,
        rate_limit_enabled=settings.RATE_LIMIT_ENABLED
    )

    yield

    logger.info("Shutting down Vibe Engine")


# Create FastAPI app
app = FastAPI(
    title="Vibe Engine",
    description="Prompt-to-project generation with template scaffolding fallback",
    version="1.0.0",
    lifespan=lifespan
)

# Usage counter shared by every request in this process
app.state.usage_counter = UsageCounter(limit=settings.USAGE_LIMIT)

# Add rate limiter
app.state.limiter = generate.limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

ALLOWED_ORIGINS = [
    origin.strip()
    for origin in settings.CORS_ORIGINS.split(",")
    if origin.strip()
]

# In development, allow all origins for easier testing
if settings.ENVIRONMENT == "development" or settings.DEBUG:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,  # Cannot use credentials with wildcard origins
        allow_methods=["*"],
        allow_headers=["*"],
    )
else:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": "Vibe Engine",
        "version": "1.0.0",
        "status": "running",
        "degraded_mode": not settings.AIMLAPI_KEY
    }


@app.get("/health")
async def health_check():
    """Health check. Degraded when no provider key is configured."""
    health = {
        "status": "healthy",
        "version": "1.0.0",
        "timestamp": datetime.utcnow().isoformat(),
        "checks": {
            "aimlapi": {
                "configured": bool(settings.AIMLAPI_KEY),
                "status": "ok" if settings.AIMLAPI_KEY else "missing"
            },
            "usage": app.state.usage_counter.snapshot().to_dict()
        }
    }

    if not settings.AIMLAPI_KEY:
        health["status"] = "degraded"

    return health


# Include routers
app.include_router(generate.router, prefix="/api", tags=["Generation"])
app.include_router(export.router, prefix="/api", tags=["Export"])


# Error handlers
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler with Sentry integration"""
    logger.error(
        "Unhandled exception",
        error=str(exc),
        path=request.url.path,
        exc_info=True
    )

    if settings.SENTRY_DSN:
        sentry_sdk.capture_exception(exc)

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "code": render_default_component("")
        }
    )


if __name__ == "__main__":
    import uvicorn
    # Only enable reload in development
    reload_enabled = settings.ENVIRONMENT == "development" or settings.DEBUG
    uvicorn.run("vibe_engine.main:app", host="0.0.0.0", port=8001, reload=reload_enabled)
