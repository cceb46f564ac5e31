from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from classgrid.api.routes import classes, health, subjects, teachers, terms, timetable
from classgrid.core.config import get_settings
from classgrid.core.exceptions import AppError
from classgrid.core.middleware import (
    RequestSizeLimitMiddleware,
    RequestTimingMiddleware,
    SecurityHeadersMiddleware,
)
from classgrid.db.bootstrap import ensure_runtime_schema

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    if settings.bootstrap_schema:
        ensure_runtime_schema()
    logger.info("%s started", settings.project_name)
    yield


async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "details": exc.details},
    )


app = FastAPI(title=settings.project_name, lifespan=lifespan)
app.add_exception_handler(AppError, app_error_handler)

app.add_middleware(RequestTimingMiddleware)
app.add_middleware(RequestSizeLimitMiddleware, max_bytes=settings.max_request_size_bytes)
app.add_middleware(SecurityHeadersMiddleware, settings=settings)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix=settings.api_prefix, tags=["health"])
app.include_router(timetable.router, prefix=f"{settings.api_prefix}/timetables", tags=["timetables"])
app.include_router(terms.router, prefix=f"{settings.api_prefix}/terms", tags=["terms"])
app.include_router(subjects.router, prefix=f"{settings.api_prefix}/subjects", tags=["subjects"])
app.include_router(classes.router, prefix=f"{settings.api_prefix}/classes", tags=["classes"])
app.include_router(teachers.router, prefix=f"{settings.api_prefix}/teachers", tags=["teachers"])
