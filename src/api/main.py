"""
FastAPI main application for the Slangify translation API.
"""
from fastapi import FastAPI, Request
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from config.settings import settings
from src.api.routes import health, translate
from src.models.schemas import ErrorResponse
from src.utils.exceptions import SlangifyException
from src.utils.logger import setup_logger

logger = setup_logger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info("🚀 Starting Slangify Translation API")
    logger.info(f"Version: {settings.APP_VERSION}")
    logger.info(f"Debug Mode: {settings.DEBUG}")
    if settings.KILL_SWITCH_ENABLED:
        logger.warning("🛑 Kill switch is ENABLED - all translations will be rejected")

    # Services are created lazily on the first request
    logger.info("✅ Application started successfully")

    yield

    # Shutdown
    logger.info("🛑 Shutting down application")


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Translates short text into six generations of slang",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url=f"{settings.API_PREFIX}/openapi.json"
)

# Add GZip compression
app.add_middleware(GZipMiddleware, minimum_size=1000)


@app.middleware("http")
async def add_cors_headers(request: Request, call_next):
    """Permissive CORS on every response, including errors and pre-flight."""
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


@app.exception_handler(SlangifyException)
async def slangify_exception_handler(request: Request, exc: SlangifyException):
    """Render every API error as ``{error, code, retryAfter?}``."""
    body = ErrorResponse(error=exc.message, code=exc.code.value, retry_after=exc.retry_after)
    headers = {}
    if exc.retry_after is not None:
        headers["Retry-After"] = str(exc.retry_after)

    if exc.status_code >= 500:
        logger.error(f"Request failed with {exc.code.value} ({exc.status_code})")

    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
        headers=headers,
    )


# Include routers
app.include_router(
    health.router,
    prefix=settings.API_PREFIX,
    tags=["Health"]
)

app.include_router(
    translate.router,
    prefix=settings.API_PREFIX,
    tags=["Translation"]
)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Slangify Translation API",
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": f"{settings.API_PREFIX}/health"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "src.api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
