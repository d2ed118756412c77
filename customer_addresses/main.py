"""
Customer addresses FastAPI application

HTTP surface for the checkout screen's saved delivery addresses.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from customer_addresses.config import get_settings
from customer_addresses.models.base import close_db, init_db
from customer_addresses.utils.logging import setup_logging, get_logger
from customer_addresses.utils.exceptions import AppException

from customer_addresses.api.addresses import router as addresses_router


settings = get_settings()

setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT, settings.LOG_FILE)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifecycle

    Creates tables in development when the SQLAlchemy store is used and
    disposes of the engine on shutdown.
    """
    logger.info("Starting customer address service")

    if settings.is_development and settings.STORE_BACKEND == "sqlalchemy":
        logger.info("Creating database tables")
        await init_db()

    yield

    logger.info("Shutting down customer address service")
    await close_db()


app = FastAPI(
    title=settings.APP_NAME,
    description="Saved delivery addresses with a single default per customer.",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    """Render application exceptions"""
    logger.warning(
        f"AppException: {exc.message}",
        extra={
            "error_code": exc.error_code,
            "path": request.url.path,
            "method": request.method,
        },
    )
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.error_code,
            "message": exc.message,
            "details": exc.details,
        },
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request body, path or query parameters"""
    errors = jsonable_encoder(exc.errors())
    logger.info(
        "Request validation failed",
        extra={"path": request.url.path, "method": request.method},
    )
    return JSONResponse(
        status_code=422,
        content={
            "error": "validation_error",
            "message": "Request validation failed",
            "details": {"errors": errors},
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Last-resort handler"""
    logger.error(
        f"Unhandled exception: {str(exc)}",
        exc_info=True,
        extra={
            "path": request.url.path,
            "method": request.method,
        },
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "Something went wrong. Please try again.",
        },
    )


@app.get("/health", tags=["Health"])
async def health_check():
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "store_backend": settings.STORE_BACKEND,
    }


app.include_router(addresses_router)


if __name__ == "__main__":
    uvicorn.run(
        "customer_addresses.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development,
        log_level="info",
    )
