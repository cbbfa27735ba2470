"""
Main FastAPI application.

1. Layout, code and screen generation endpoints (/api/v1/generate-*)
2. Structured logging with correlation tracking
3. Health checks (/health, /health/live)
"""
from contextlib import asynccontextmanager
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uuid
import time

from layoutforge.config import settings
from layoutforge.core.logger import setup_logging
from layoutforge.utils.logging import get_logger, log_context

# Import routers
from layoutforge.api.v1 import health, generate, components

logger = get_logger(__name__)


# ============================================================================
# APPLICATION LIFESPAN
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan with structured logging"""

    setup_logging()

    with log_context(correlation_id=str(uuid.uuid4()), operation="startup"):
        logger.info(
            "app.startup.completed",
            extra={
                "service": settings.app_name,
                "version": settings.app_version,
                "debug": settings.debug,
                "backend_configured": bool(settings.llm_api_key),
            }
        )

        if not settings.llm_api_key:
            logger.warning(
                "app.startup.backend_unconfigured",
                message="APP_LLM_API_KEY not set, only test mode generation is available"
            )

    yield

    with log_context(correlation_id=str(uuid.uuid4()), operation="shutdown"):
        logger.info("app.shutdown.completed")


# ============================================================================
# FASTAPI APP
# ============================================================================

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Layout generation and Angular + PrimeNG code generation service",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# REQUEST/RESPONSE LOGGING MIDDLEWARE
# ============================================================================

@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    """Log all HTTP requests with correlation tracking"""

    correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())

    start_time = time.time()

    with log_context(
        correlation_id=correlation_id,
        endpoint=request.url.path,
        method=request.method
    ):
        logger.info(
            "http.request.received",
            extra={
                "path": request.url.path,
                "method": request.method,
                "client_ip": request.client.host if request.client else None,
            }
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "http.request.failed",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "duration_ms": (time.time() - start_time) * 1000
                },
                exc_info=e
            )
            raise

        logger.performance(
            "http.request.completed",
            duration_ms=(time.time() - start_time) * 1000,
            extra={
                "status_code": response.status_code,
                "path": request.url.path,
                "method": request.method
            }
        )

        response.headers["X-Correlation-ID"] = correlation_id
        return response


# ============================================================================
# EXCEPTION HANDLERS
# ============================================================================

def _validation_messages(exc: RequestValidationError) -> List[str]:
    messages = []
    for error in exc.errors():
        message = str(error.get("msg", "Invalid request"))
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {message}" if location else message)
    return messages


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors"""
    errors = _validation_messages(exc)

    logger.warning(
        "app.request.invalid",
        extra={"path": request.url.path, "errors": errors}
    )

    content: Dict[str, Any] = {
        "success": False,
        "error": errors[0] if errors else "Invalid request",
        "errors": errors,
    }
    return JSONResponse(status_code=400, content=content)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler with structured logging"""

    logger.error(
        "app.exception.unhandled",
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__
        },
        exc_info=exc
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred. Please try again later.",
            "correlation_id": request.headers.get("X-Correlation-ID", "unknown")
        }
    )


# ============================================================================
# ROUTERS
# ============================================================================

app.include_router(
    health.router,
    tags=["Health"]
)

app.include_router(
    generate.router,
    prefix="/api/v1",
    tags=["Generation"]
)

app.include_router(
    components.router,
    prefix="/api/v1",
    tags=["Components"]
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "layoutforge.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
