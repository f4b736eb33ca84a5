"""Pydantic models for REST API."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from onlinecampus.records import PageResult, StudentRecord

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


# Student models


class StudentNames(BaseModel):
    """Name fields shared by student create and edit requests."""

    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)

    @field_validator("first_name", "last_name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name is required")
        return value


class StudentCreate(StudentNames):
    """Request model for creating a student."""


class StudentEdit(StudentNames):
    """Request model for editing a student.

    row_version is the hex token returned by the last read of the student.
    """

    row_version: str = Field(..., min_length=2, pattern=r"^([0-9a-fA-F]{2})+$")

    @property
    def row_version_bytes(self) -> bytes:
        return bytes.fromhex(self.row_version)


class StudentResponse(BaseModel):
    """Response model for a student in a listing."""

    id: str
    first_name: str
    last_name: str


class StudentDetailResponse(StudentResponse):
    """Response model for a single student, including its row version."""

    row_version: str


def student_to_response(record: StudentRecord) -> StudentResponse:
    """Convert a StudentRecord to StudentResponse."""
    return StudentResponse(id=record.id, first_name=record.first_name, last_name=record.last_name)


def student_to_detail(record: StudentRecord) -> StudentDetailResponse:
    """Convert a StudentRecord to StudentDetailResponse."""
    return StudentDetailResponse(
        id=record.id,
        first_name=record.first_name,
        last_name=record.last_name,
        row_version=record.row_version.hex(),
    )


class StudentPageResponse(BaseModel):
    """Response model for one page of the student listing."""

    items: list[StudentResponse]
    page_number: int
    total_pages: int
    total_count: int
    has_previous_page: bool
    has_next_page: bool
    name_sort_param: str
    current_filter: str | None


def page_to_response(
    page: PageResult[StudentRecord], name_sort_param: str, current_filter: str | None
) -> StudentPageResponse:
    """Convert a PageResult to StudentPageResponse."""
    return StudentPageResponse(
        items=[student_to_response(r) for r in page.items],
        page_number=page.page_number,
        total_pages=page.total_pages,
        total_count=page.total_count,
        has_previous_page=page.has_previous_page,
        has_next_page=page.has_next_page,
        name_sort_param=name_sort_param,
        current_filter=current_filter,
    )


class EditConflictResponse(BaseModel):
    """Response model for an edit that lost a concurrency race.

    current is None when the student was deleted by another user.
    field_errors maps each changed field to its current value message.
    """

    current: StudentDetailResponse | None
    field_errors: dict[str, str] = Field(default_factory=dict)


# Course models


class CourseCreate(BaseModel):
    """Request model for creating a course."""

    code: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(default="")
    credits: int = Field(default=0, ge=0)


class CourseResponse(BaseModel):
    """Response model for a course."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    code: str
    name: str
    description: str
    credits: int


def course_to_response(course: Any) -> CourseResponse:
    """Convert a Course model to CourseResponse."""
    return CourseResponse.model_validate(course)


# Enrolment models


class EnrolmentCreate(BaseModel):
    """Request model for enrolling a student in a course."""

    course_id: str = Field(..., min_length=1)


class EnrolmentResponse(BaseModel):
    """Response model for an enrolment."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    student_id: str
    course_id: str


def enrolment_to_response(enrolment: Any) -> EnrolmentResponse:
    """Convert an Enrolment model to EnrolmentResponse."""
    return EnrolmentResponse.model_validate(enrolment)
