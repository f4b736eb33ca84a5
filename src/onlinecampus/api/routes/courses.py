"""Course endpoints."""

from fastapi import APIRouter, status

from onlinecampus.api.dependencies import CampusStoreDep
from onlinecampus.api.models import (
    APIResponse,
    CourseCreate,
    CourseResponse,
    course_to_response,
)

router = APIRouter(prefix="/courses", tags=["courses"])


@router.get("", response_model=APIResponse[list[CourseResponse]])
def list_courses(store: CampusStoreDep) -> APIResponse[list[CourseResponse]]:
    """List all courses."""
    courses = store.list_courses()
    return APIResponse(data=[course_to_response(c) for c in courses])


@router.post(
    "",
    response_model=APIResponse[CourseResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_course(course: CourseCreate, store: CampusStoreDep) -> APIResponse[CourseResponse]:
    """Create a new course."""
    created = store.create_course(
        code=course.code,
        name=course.name,
        description=course.description,
        credits=course.credits,
    )
    return APIResponse(data=course_to_response(created))


@router.get("/{course_id}", response_model=APIResponse[CourseResponse])
def get_course(course_id: str, store: CampusStoreDep) -> APIResponse[CourseResponse]:
    """Get a course by ID."""
    course = store.get_course(course_id)
    return APIResponse(data=course_to_response(course))
