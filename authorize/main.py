"""Authorization server API."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from core.models import Base
from core.observability.observability import RequestContextMiddleware
from core.utils.logging import get_logger, setup_structlog_json
from authorize import models  # noqa: F401  registers subject/auth_code tables
from authorize.config import settings

from .deps import session_manager
from .routers.authorize import router as authorize_router

logger = get_logger(__name__)

root_path = settings.APP_ROOT_PATH


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup/shutdown hooks."""
    if settings.LOG_JSON:
        setup_structlog_json()
    session_manager.init(settings.DB_URL)
    if settings.DB_CREATE_TABLES:
        await session_manager.create_all(Base)
    try:
        yield
    finally:
        await session_manager.close()


app = FastAPI(
    title=settings.APP_TITLE,
    version=settings.APP_VERSION,
    openapi_url=f"{root_path}{settings.OPENAPI_URL}",
    default_response_class=ORJSONResponse,
    lifespan=lifespan,
    root_path=root_path,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
)
app.add_middleware(RequestContextMiddleware)

app.include_router(authorize_router)


@app.get("/healthz")
async def health_check():
    """Simple health check."""
    return {"status": "ok"}


@app.exception_handler(Exception)
async def log_unhandled_exception(request: Request, ex: Exception):
    """Log unhandled exceptions with request context."""
    logger.exception(
        "unhandled_exception",
        method=request.method,
        path=request.url.path,
    )
    return ORJSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"status": "fail", "error": f"Internal Server Error: {ex}"},
    )
