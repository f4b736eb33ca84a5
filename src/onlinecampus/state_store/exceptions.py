"""Custom exceptions for State Store."""


class StateStoreError(Exception):
    """Base exception for State Store errors."""


class StudentNotFoundError(StateStoreError):
    """Student with given ID does not exist."""


class CourseNotFoundError(StateStoreError):
    """Course with given ID does not exist."""


class CourseExistsError(StateStoreError):
    """Course with given code already exists."""


class EnrolmentExistsError(StateStoreError):
    """Student is already enrolled in this course."""


class EnrolmentNotFoundError(StateStoreError):
    """Student is not enrolled in this course."""
