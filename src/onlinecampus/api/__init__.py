"""REST API for OnlineCampus."""

from onlinecampus.api.app import app, create_app
from onlinecampus.api.models import (
    APIResponse,
    StudentCreate,
    StudentDetailResponse,
    StudentEdit,
    StudentPageResponse,
)

__all__ = [
    "APIResponse",
    "StudentCreate",
    "StudentDetailResponse",
    "StudentEdit",
    "StudentPageResponse",
    "app",
    "create_app",
]
