from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tvcatalog.config import settings, setup_logging
from tvcatalog.dependencies import create_http_client
from tvcatalog.routers import main_router


setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events"""
    logger.info("Starting TV Catalog Service...")

    try:
        app.state.http_client = create_http_client(settings)
        logger.info("HTTP client ready (timeout %ss)", settings.http_timeout_sec)
    except Exception as e:
        logger.error(f"Failed to start TV Catalog Service: {e}", exc_info=True)
        raise

    logger.info("TV Catalog Service started successfully")

    yield

    logger.info("Shutting down TV Catalog Service...")

    try:
        await app.state.http_client.aclose()
        logger.info("HTTP client closed")
    except Exception as e:
        logger.error(f"Error during HTTP client shutdown: {e}", exc_info=True)

    logger.info("TV Catalog Service stopped")


app = FastAPI(
    title="TV Catalog Service",
    version=settings.addon_version,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(main_router)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Log validation errors with details"""
    logger.error(f"Validation error for {request.method} {request.url.path}")
    logger.error(f"Validation details: {exc.errors()}")

    # Create a properly serializable error response
    errors = []
    for error in exc.errors():
        error_dict = {
            "type": error.get("type"),
            "loc": error.get("loc"),
            "msg": error.get("msg"),
            "input": str(error.get("input", ""))[:100]
        }
        errors.append(error_dict)

    return JSONResponse(
        status_code=422,
        content={
            "detail": errors
        }
    )
