"""State Store - Persistent storage for students, courses and enrolments."""

from onlinecampus.state_store.database import Database
from onlinecampus.state_store.exceptions import (
    CourseExistsError,
    CourseNotFoundError,
    EnrolmentExistsError,
    EnrolmentNotFoundError,
    StateStoreError,
    StudentNotFoundError,
)
from onlinecampus.state_store.models import Course, Enrolment, Student
from onlinecampus.state_store.store import CampusStore

__all__ = [
    "CampusStore",
    "Course",
    "CourseExistsError",
    "CourseNotFoundError",
    "Database",
    "Enrolment",
    "EnrolmentExistsError",
    "EnrolmentNotFoundError",
    "StateStoreError",
    "Student",
    "StudentNotFoundError",
]
