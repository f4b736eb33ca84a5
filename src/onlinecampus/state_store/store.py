"""CampusStore - SQLAlchemy-backed RecordStore plus course and enrolment operations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import literal_column, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from onlinecampus.records import (
    CasApplied,
    CasConflict,
    CasResult,
    DataOperation,
    DataSourceUnavailable,
    StudentRecord,
    new_row_version,
)
from onlinecampus.state_store.database import Database
from onlinecampus.state_store.exceptions import (
    CourseExistsError,
    CourseNotFoundError,
    EnrolmentExistsError,
    EnrolmentNotFoundError,
    StudentNotFoundError,
)
from onlinecampus.state_store.models import Course, Enrolment, Student

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

# SQLite assigns each new row a rowid above every live row, so it tracks
# insertion order without depending on the wall clock
_STUDENT_INSERTION_ORDER = literal_column("students.rowid")

# SQLite message for a uq_enrolment violation
_UNIQUE_ENROLMENT_VIOLATION = (
    "UNIQUE constraint failed: enrolments.student_id, enrolments.course_id"
)


def _unavailable(operation: DataOperation, error: SQLAlchemyError) -> DataSourceUnavailable:
    logger.error("Database %s failed: %s", operation.value, error)
    return DataSourceUnavailable(operation, str(getattr(error, "orig", None) or error))


class CampusStore:
    """Main API for State Store operations.

    Implements the RecordStore protocol for students and provides CRUD
    operations for courses and enrolments. Every operation runs in its own
    session; a failed operation is rolled back in full.
    """

    def __init__(self, db_path: str = "onlinecampus.db") -> None:
        """Initialize CampusStore with SQLite database.

        Creates database and tables if they don't exist.

        Args:
            db_path: Path to SQLite database file
        """
        self._db = Database(db_path)
        self._db.create_tables()

    @property
    def database(self) -> Database:
        return self._db

    def close(self) -> None:
        """Close the database connection."""
        self._db.close()

    # --- Student Operations (RecordStore) ---

    def find_by_id(self, student_id: str) -> StudentRecord | None:
        """Get a student by ID.

        Args:
            student_id: The student's unique ID

        Returns:
            The StudentRecord, or None if it doesn't exist

        Raises:
            DataSourceUnavailable: If the database fails
        """
        session = self._db.get_session()
        try:
            student = session.get(Student, student_id)
            return student.to_record() if student is not None else None
        except SQLAlchemyError as e:
            raise _unavailable(DataOperation.RETRIEVE, e) from e
        finally:
            session.close()

    def find_all(self) -> list[StudentRecord]:
        """List all students in insertion order.

        Raises:
            DataSourceUnavailable: If the database fails
        """
        session = self._db.get_session()
        try:
            stmt = select(Student).order_by(_STUDENT_INSERTION_ORDER)
            result = session.execute(stmt)
            return [s.to_record() for s in result.scalars().all()]
        except SQLAlchemyError as e:
            raise _unavailable(DataOperation.RETRIEVE, e) from e
        finally:
            session.close()

    def insert(self, first_name: str, last_name: str) -> StudentRecord:
        """Create a new student.

        Args:
            first_name: Student's first name
            last_name: Student's last name

        Returns:
            Created StudentRecord with generated ID and row version

        Raises:
            DataSourceUnavailable: If the database fails
        """
        session = self._db.get_session()
        try:
            student = Student(first_name=first_name, last_name=last_name)
            session.add(student)
            session.commit()
            return student.to_record()
        except SQLAlchemyError as e:
            session.rollback()
            raise _unavailable(DataOperation.INSERT, e) from e
        finally:
            session.close()

    def compare_and_swap_update(
        self,
        student_id: str,
        expected_row_version: bytes,
        first_name: str,
        last_name: str,
    ) -> CasResult:
        """Update a student's names if its row version is still expected_row_version.

        The version check and the write are one UPDATE statement, so a
        concurrent writer can never slip in between them.

        Args:
            student_id: The student's unique ID
            expected_row_version: Row version the caller last observed
            first_name: New first name
            last_name: New last name

        Returns:
            CasApplied with the updated record, or CasConflict carrying the
            latest persisted record (None if the student was deleted)

        Raises:
            DataSourceUnavailable: If the database fails
        """
        session = self._db.get_session()
        try:
            row_version = new_row_version()
            stmt = (
                update(Student)
                .where(
                    Student.id == student_id,
                    Student.row_version == expected_row_version,
                )
                .values(first_name=first_name, last_name=last_name, row_version=row_version)
                .execution_options(synchronize_session=False)
            )
            result = session.execute(stmt)
            if result.rowcount == 1:
                session.commit()
                return CasApplied(
                    record=StudentRecord(
                        id=student_id,
                        first_name=first_name,
                        last_name=last_name,
                        row_version=row_version,
                    )
                )

            session.rollback()
            latest = session.get(Student, student_id)
            return CasConflict(latest=latest.to_record() if latest is not None else None)
        except SQLAlchemyError as e:
            session.rollback()
            raise _unavailable(DataOperation.EDIT, e) from e
        finally:
            session.close()

    def delete(self, student_id: str) -> None:
        """Delete a student and its enrolments. Missing students are ignored.

        Raises:
            DataSourceUnavailable: If the database fails
        """
        session = self._db.get_session()
        try:
            student = session.get(Student, student_id)
            if student is None:
                return
            session.delete(student)
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise _unavailable(DataOperation.REMOVE, e) from e
        finally:
            session.close()

    # --- Course Operations ---

    def create_course(
        self,
        code: str,
        name: str,
        description: str = "",
        credits: int = 0,
    ) -> Course:
        """Create a new course.

        Args:
            code: Unique course code, e.g. "CS101"
            name: Human-readable course name
            description: Free-text description
            credits: Credit points awarded

        Returns:
            Created Course object with generated ID

        Raises:
            CourseExistsError: If a course with the same code already exists
            DataSourceUnavailable: If the database fails
        """
        session = self._db.get_session()
        try:
            course = Course(code=code, name=name, description=description, credits=credits)
            session.add(course)
            session.commit()
            session.refresh(course)
            return course
        except IntegrityError as e:
            session.rollback()
            raise CourseExistsError(f"Course with code '{code}' already exists") from e
        except SQLAlchemyError as e:
            session.rollback()
            raise _unavailable(DataOperation.INSERT, e) from e
        finally:
            session.close()

    def get_course(self, course_id: str) -> Course:
        """Get course by ID.

        Raises:
            CourseNotFoundError: If course doesn't exist
            DataSourceUnavailable: If the database fails
        """
        session = self._db.get_session()
        try:
            course = session.get(Course, course_id)
            if course is None:
                raise CourseNotFoundError(f"Course with id '{course_id}' not found")
            return course
        except SQLAlchemyError as e:
            raise _unavailable(DataOperation.RETRIEVE, e) from e
        finally:
            session.close()

    def list_courses(self) -> list[Course]:
        """List all courses, ordered by code."""
        session = self._db.get_session()
        try:
            stmt = select(Course).order_by(Course.code)
            return list(session.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            raise _unavailable(DataOperation.RETRIEVE, e) from e
        finally:
            session.close()

    # --- Enrolment Operations ---

    def enrol(self, student_id: str, course_id: str) -> Enrolment:
        """Enrol a student in a course.

        Args:
            student_id: The student's unique ID
            course_id: The course's unique ID

        Returns:
            Created Enrolment object

        Raises:
            StudentNotFoundError: If student doesn't exist
            CourseNotFoundError: If course doesn't exist
            EnrolmentExistsError: If the student is already enrolled
            DataSourceUnavailable: If the database fails
        """
        session = self._db.get_session()
        try:
            if session.get(Student, student_id) is None:
                raise StudentNotFoundError(f"Student with id '{student_id}' not found")
            if session.get(Course, course_id) is None:
                raise CourseNotFoundError(f"Course with id '{course_id}' not found")

            stmt = select(Enrolment).where(
                Enrolment.student_id == student_id,
                Enrolment.course_id == course_id,
            )
            if session.execute(stmt).scalar_one_or_none() is not None:
                raise EnrolmentExistsError(
                    f"Student '{student_id}' is already enrolled in course '{course_id}'"
                )

            enrolment = Enrolment(student_id=student_id, course_id=course_id)
            session.add(enrolment)
            session.commit()
            session.refresh(enrolment)
            return enrolment
        except IntegrityError as e:
            # Lost a race: either the same pair was enrolled concurrently or
            # the student or course was deleted after the checks above
            session.rollback()
            raise self._enrol_conflict(session, student_id, course_id, e) from e
        except SQLAlchemyError as e:
            session.rollback()
            raise _unavailable(DataOperation.INSERT, e) from e
        finally:
            session.close()

    def _enrol_conflict(
        self, session: Session, student_id: str, course_id: str, error: IntegrityError
    ) -> Exception:
        """Choose the error for an enrolment insert rejected by a constraint.

        SQLite does not say which foreign key failed, so the student and the
        course are looked up again.
        """
        try:
            student_exists = session.execute(
                select(Student.id).where(Student.id == student_id)
            ).first()
            course_exists = session.execute(
                select(Course.id).where(Course.id == course_id)
            ).first()
        except SQLAlchemyError as e:
            return _unavailable(DataOperation.INSERT, e)

        if student_exists is None:
            return StudentNotFoundError(f"Student with id '{student_id}' not found")
        if course_exists is None:
            return CourseNotFoundError(f"Course with id '{course_id}' not found")
        if _UNIQUE_ENROLMENT_VIOLATION in str(error.orig):
            return EnrolmentExistsError(
                f"Student '{student_id}' is already enrolled in course '{course_id}'"
            )
        return _unavailable(DataOperation.INSERT, error)

    def list_student_courses(self, student_id: str) -> list[Course]:
        """List the courses a student is enrolled in, ordered by code.

        Raises:
            StudentNotFoundError: If student doesn't exist
            DataSourceUnavailable: If the database fails
        """
        session = self._db.get_session()
        try:
            if session.get(Student, student_id) is None:
                raise StudentNotFoundError(f"Student with id '{student_id}' not found")

            stmt = (
                select(Course)
                .join(Enrolment, Enrolment.course_id == Course.id)
                .where(Enrolment.student_id == student_id)
                .order_by(Course.code)
            )
            return list(session.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            raise _unavailable(DataOperation.RETRIEVE, e) from e
        finally:
            session.close()

    def unenrol(self, student_id: str, course_id: str) -> None:
        """Remove a student from a course.

        Raises:
            EnrolmentNotFoundError: If the student is not enrolled in the course
            DataSourceUnavailable: If the database fails
        """
        session = self._db.get_session()
        try:
            stmt = select(Enrolment).where(
                Enrolment.student_id == student_id,
                Enrolment.course_id == course_id,
            )
            enrolment = session.execute(stmt).scalar_one_or_none()
            if enrolment is None:
                raise EnrolmentNotFoundError(
                    f"Student '{student_id}' is not enrolled in course '{course_id}'"
                )
            session.delete(enrolment)
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise _unavailable(DataOperation.REMOVE, e) from e
        finally:
            session.close()
