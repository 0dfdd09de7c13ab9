"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator
import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pathlib import Path
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from weather_server import __version__
from weather_server.dependencies import close_http_client, settings
from weather_server.routers import weather
from weather_server.schemas.weather import HealthStatus
from weather_server.static import SPAStaticFiles

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all requests and responses."""

    async def dispatch(self, request: Request, call_next):
        """Log request and response details."""
        # Generate request ID for tracing
        request_id = id(request)

        start_time = time.time()
        logger.info(
            f"Request started",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "client": request.client.host if request.client else None
            }
        )

        try:
            response = await call_next(request)

            duration = time.time() - start_time
            logger.info(
                f"Request completed",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": round(duration * 1000, 2)
                }
            )

            return response

        except Exception as exc:
            duration = time.time() - start_time
            logger.error(
                f"Request failed",
                exc_info=True,
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "duration_ms": round(duration * 1000, 2),
                    "error_type": type(exc).__name__,
                    "error_message": str(exc)
                }
            )

            # Re-raise to let exception handlers deal with it
            raise


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown events."""
    logger.info(f"Application started: {settings.app_name}")
    logger.info(f"Serving static assets from: {static_path.absolute()}")
    logger.info(f"Debug mode: {settings.debug}")

    yield

    await close_http_client()
    logger.info(f"Application shutdown: {settings.app_name}")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="""
    Weather Insights API

    A single endpoint that turns a city name into its current weather:

    1. The city is geocoded with the Open-Meteo geocoding API (first match)
    2. The current weather for those coordinates is fetched from the
       Open-Meteo forecast API and returned unchanged

    Every other path serves the prebuilt frontend, falling back to
    `index.html` so client-side routes resolve.

    ## Error Handling

    API errors return JSON responses with:
    - `detail`: Human-readable error message
    - `error_code`: Machine-readable error code

    Common HTTP status codes:
    - `200`: Success
    - `400`: Missing or empty `city` parameter
    - `404`: City coordinates not found
    - `405`: Method other than GET
    - `502`: Upstream service error
    - `504`: Upstream service timeout
    - `500`: Internal Server Error
    """,
    version=__version__,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "weather",
            "description": "Current weather lookup by city name.",
        },
    ],
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins_list(),
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Add logging middleware
app.add_middleware(LoggingMiddleware)


@app.get("/health", response_model=HealthStatus)
async def health_check() -> dict:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app_name": settings.app_name
    }


# Include routers
app.include_router(weather.router, tags=["weather"])


# Mount the frontend last so API routes take precedence
# Ensure static directory exists before mounting
static_path = Path(settings.static_dir)
static_path.mkdir(parents=True, exist_ok=True)

app.mount(
    "/",
    SPAStaticFiles(directory=str(static_path), index_document=settings.index_document),
    name="frontend"
)


# Global exception handlers

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions raised by routes, services and the static mount."""
    # Log based on status code
    if exc.status_code >= 500:
        logger.error(f"HTTP error {exc.status_code}: {request.url.path} - {exc.detail}")
    else:
        logger.info(f"HTTP {exc.status_code}: {request.url.path}")

    # Map status codes to error codes
    error_code_map = {
        400: "BAD_REQUEST",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        502: "BAD_GATEWAY",
        504: "GATEWAY_TIMEOUT",
    }

    error_code = error_code_map.get(exc.status_code, f"HTTP_{exc.status_code}")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.detail,
            "error_code": error_code
        },
        headers=exc.headers
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all unhandled exceptions."""
    # Log the full exception with stack trace
    logger.error(
        f"Unhandled exception: {request.url.path}",
        exc_info=True,
        extra={
            "method": request.method,
            "url": str(request.url),
            "client": request.client.host if request.client else None
        }
    )

    if settings.debug:
        # In debug mode, return detailed error information
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "error_code": "INTERNAL_ERROR",
                "error_type": type(exc).__name__,
                "error_message": str(exc)
            }
        )
    else:
        # In production, return generic error message
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "error_code": "INTERNAL_ERROR"
            }
        )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "weather_server.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
