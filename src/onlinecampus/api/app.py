"""FastAPI application setup."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import replace
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from onlinecampus import __version__
from onlinecampus.api.dependencies import (
    close_campus_store,
    close_settings,
    init_campus_store,
    init_settings,
)
from onlinecampus.api.models import APIResponse
from onlinecampus.api.routes import courses, enrolments, students
from onlinecampus.config import Settings
from onlinecampus.records import DataSourceUnavailable, InvalidPageQueryError
from onlinecampus.state_store import (
    CourseExistsError,
    CourseNotFoundError,
    EnrolmentExistsError,
    EnrolmentNotFoundError,
    StateStoreError,
    StudentNotFoundError,
)

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=APIResponse[None](data=None, error=message).model_dump(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    # Startup
    init_settings(settings)
    init_campus_store(settings.db_path)
    logger.info("OnlineCampus API started (db=%s)", settings.db_path)

    yield
    # Shutdown
    close_campus_store()
    close_settings()


def create_app(db_path: str | None = None, settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        db_path: Overrides settings.db_path when given.
        settings: Explicit settings; read from the environment when omitted.
    """
    if settings is None:
        settings = Settings.from_env()
    if db_path is not None:
        settings = replace(settings, db_path=db_path)

    app = FastAPI(
        title="OnlineCampus API",
        description="REST API for OnlineCampus - Student records and enrolments",
        version=__version__,
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.settings = settings

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(StudentNotFoundError)
    async def student_not_found_handler(
        _request: Request, _exc: StudentNotFoundError
    ) -> JSONResponse:
        return _error_response(status.HTTP_404_NOT_FOUND, "Student was not found.")

    @app.exception_handler(CourseNotFoundError)
    async def course_not_found_handler(
        _request: Request, _exc: CourseNotFoundError
    ) -> JSONResponse:
        return _error_response(status.HTTP_404_NOT_FOUND, "Course was not found.")

    @app.exception_handler(EnrolmentNotFoundError)
    async def enrolment_not_found_handler(
        _request: Request, _exc: EnrolmentNotFoundError
    ) -> JSONResponse:
        return _error_response(status.HTTP_404_NOT_FOUND, "Enrolment was not found.")

    @app.exception_handler(CourseExistsError)
    async def course_exists_handler(_request: Request, _exc: CourseExistsError) -> JSONResponse:
        return _error_response(status.HTTP_409_CONFLICT, "Course with this code already exists")

    @app.exception_handler(EnrolmentExistsError)
    async def enrolment_exists_handler(
        _request: Request, _exc: EnrolmentExistsError
    ) -> JSONResponse:
        return _error_response(
            status.HTTP_409_CONFLICT, "Student is already enrolled in this course"
        )

    @app.exception_handler(InvalidPageQueryError)
    async def invalid_page_query_handler(
        _request: Request, exc: InvalidPageQueryError
    ) -> JSONResponse:
        return _error_response(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(DataSourceUnavailable)
    async def data_source_unavailable_handler(
        request: Request, exc: DataSourceUnavailable
    ) -> JSONResponse:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return _error_response(status.HTTP_503_SERVICE_UNAVAILABLE, exc.user_message)

    @app.exception_handler(StateStoreError)
    async def state_store_error_handler(_request: Request, _exc: StateStoreError) -> JSONResponse:
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    # Include routers
    app.include_router(students.router, prefix="/api/v1")
    app.include_router(enrolments.router, prefix="/api/v1")
    app.include_router(courses.router, prefix="/api/v1")

    return app


# Default app instance
app = create_app()
