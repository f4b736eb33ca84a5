"""Enrolment endpoints, nested under a student."""

from fastapi import APIRouter, status

from onlinecampus.api.dependencies import CampusStoreDep
from onlinecampus.api.models import (
    APIResponse,
    CourseResponse,
    EnrolmentCreate,
    EnrolmentResponse,
    course_to_response,
    enrolment_to_response,
)

router = APIRouter(prefix="/students/{student_id}/enrolments", tags=["enrolments"])


@router.get("", response_model=APIResponse[list[CourseResponse]])
def list_enrolments(student_id: str, store: CampusStoreDep) -> APIResponse[list[CourseResponse]]:
    """List the courses a student is enrolled in."""
    courses = store.list_student_courses(student_id)
    return APIResponse(data=[course_to_response(c) for c in courses])


@router.post(
    "",
    response_model=APIResponse[EnrolmentResponse],
    status_code=status.HTTP_201_CREATED,
)
def enrol_student(
    student_id: str, enrolment: EnrolmentCreate, store: CampusStoreDep
) -> APIResponse[EnrolmentResponse]:
    """Enrol a student in a course."""
    created = store.enrol(student_id, enrolment.course_id)
    return APIResponse(data=enrolment_to_response(created))


@router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
def unenrol_student(student_id: str, course_id: str, store: CampusStoreDep) -> None:
    """Remove a student from a course."""
    store.unenrol(student_id, course_id)
