from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from coursetrack.api.activities import router as activities_router
from coursetrack.api.admin import router as admin_router
from coursetrack.api.health import router as health_router
from coursetrack.api.metrics_endpoint import router as metrics_router
from coursetrack.api.positions import router as positions_router
from coursetrack.api.progress import router as progress_router
from coursetrack.api.sections import router as sections_router
from coursetrack.core.config import SETTINGS
from coursetrack.core.errors import InvalidInputError, StoreUnavailableError
from coursetrack.core.logging import setup_logging
from coursetrack.db.engine import lifespan_db
from coursetrack.db.redis import lifespan_redis
from coursetrack.middleware.metrics import MetricsMiddleware
from coursetrack.middleware.request_context import RequestContextMiddleware, request_id_var

# Configure logging before anything else runs.
setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)

logger = logging.getLogger(__name__)

STORE_RETRY_AFTER_SECONDS = 5


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    # Nested so teardown runs in reverse order even if one fails.
    async with lifespan_db():
        async with lifespan_redis():
            yield


app = FastAPI(
    title="coursetrack",
    lifespan=lifespan,
    docs_url="/docs" if SETTINGS.is_dev else None,
    redoc_url="/redoc" if SETTINGS.is_dev else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Last-added runs first (outermost layer):
# RequestContext -> Metrics -> CORS -> route handler
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestContextMiddleware)


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError) -> JSONResponse:
    logger.warning(
        "Invalid input on %s %s: %s", request.method, request.url.path, exc.message
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": exc.message,
            "code": exc.code,
            "field": exc.field,
            "request_id": request_id_var.get(),
        },
    )


@app.exception_handler(StoreUnavailableError)
async def store_unavailable_handler(
    request: Request, exc: StoreUnavailableError
) -> JSONResponse:
    # Already logged with a traceback where the store call failed.
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "detail": exc.message,
            "code": exc.code,
            "request_id": request_id_var.get(),
        },
        headers={"Retry-After": str(STORE_RETRY_AFTER_SECONDS)},
    )


app.include_router(metrics_router)
app.include_router(health_router)
app.include_router(activities_router)
app.include_router(progress_router)
app.include_router(positions_router)
app.include_router(admin_router)
app.include_router(sections_router)

logger.info(
    "coursetrack started  env=%s log_level=%s port=%d dedup_window=%ds docs=%s",
    SETTINGS.app_env,
    SETTINGS.log_level,
    SETTINGS.port,
    SETTINGS.dedup_window_seconds,
    "on" if SETTINGS.is_dev else "off",
)
