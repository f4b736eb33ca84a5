"""SQLAlchemy models for State Store."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Integer,
    LargeBinary,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    relationship,
)

from onlinecampus.records import StudentRecord, new_row_version


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Current time in UTC."""
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class Student(Base):
    """Student model - a person who can enrol in courses."""

    __tablename__ = "students"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    row_version: Mapped[bytes] = mapped_column(LargeBinary(16), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    # Relationships
    enrolments: Mapped[list[Enrolment]] = relationship(
        "Enrolment", back_populates="student", cascade="all, delete-orphan"
    )

    def __init__(
        self,
        first_name: str,
        last_name: str,
        id: str | None = None,
        row_version: bytes | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.first_name = first_name
        self.last_name = last_name
        self.row_version = row_version if row_version is not None else new_row_version()

    def to_record(self) -> StudentRecord:
        """Detach this row into an immutable StudentRecord."""
        return StudentRecord(
            id=self.id,
            first_name=self.first_name,
            last_name=self.last_name,
            row_version=self.row_version,
        )

    def __repr__(self) -> str:
        return (
            f"<Student(id={self.id!r}, first_name={self.first_name!r}, "
            f"last_name={self.last_name!r})>"
        )


class Course(Base):
    """Course model - something a student can enrol in."""

    __tablename__ = "courses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    credits: Mapped[int] = mapped_column(Integer, nullable=False)

    # Relationships
    enrolments: Mapped[list[Enrolment]] = relationship(
        "Enrolment", back_populates="course", cascade="all, delete-orphan"
    )

    def __init__(
        self,
        code: str,
        name: str,
        id: str | None = None,
        description: str = "",
        credits: int = 0,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.code = code
        self.name = name
        self.description = description
        self.credits = credits

    def __repr__(self) -> str:
        return f"<Course(id={self.id!r}, code={self.code!r}, name={self.name!r})>"


class Enrolment(Base):
    """Enrolment model - links a student to a course."""

    __tablename__ = "enrolments"
    __table_args__ = (UniqueConstraint("student_id", "course_id", name="uq_enrolment"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    student_id: Mapped[str] = mapped_column(String(36), ForeignKey("students.id"), nullable=False)
    course_id: Mapped[str] = mapped_column(String(36), ForeignKey("courses.id"), nullable=False)
    enrolled_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    # Relationships
    student: Mapped[Student] = relationship("Student", back_populates="enrolments")
    course: Mapped[Course] = relationship("Course", back_populates="enrolments")

    def __init__(
        self,
        student_id: str,
        course_id: str,
        id: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.student_id = student_id
        self.course_id = course_id

    def __repr__(self) -> str:
        return (
            f"<Enrolment(id={self.id!r}, student_id={self.student_id!r}, "
            f"course_id={self.course_id!r})>"
        )
