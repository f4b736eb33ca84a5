"""RecordStore interface and an in-memory implementation."""

from __future__ import annotations

import os
import threading
import uuid
from typing import TYPE_CHECKING, Protocol

from onlinecampus.records.models import CasApplied, CasConflict, StudentRecord

if TYPE_CHECKING:
    from collections.abc import Sequence

    from onlinecampus.records.models import CasResult

ROW_VERSION_BYTES = 16


def new_row_version() -> bytes:
    """Generate a fresh opaque row version."""
    return os.urandom(ROW_VERSION_BYTES)


def new_student_id() -> str:
    """Generate a new student ID."""
    return str(uuid.uuid4())


class RecordStore(Protocol):
    """Interface the persistence layer implements for the records core.

    compare_and_swap_update must check the expected row version and write
    the new values atomically.
    """

    def find_by_id(self, student_id: str) -> StudentRecord | None:
        """Return the student, or None if absent."""
        ...

    def find_all(self) -> Sequence[StudentRecord]:
        """Return all students in insertion order."""
        ...

    def compare_and_swap_update(
        self,
        student_id: str,
        expected_row_version: bytes,
        first_name: str,
        last_name: str,
    ) -> CasResult:
        """Write new names only if the stored row version equals expected_row_version."""
        ...

    def insert(self, first_name: str, last_name: str) -> StudentRecord:
        """Persist a new student, assigning its ID and initial row version."""
        ...

    def delete(self, student_id: str) -> None:
        """Remove a student. Does nothing if it does not exist."""
        ...


class InMemoryRecordStore:
    """Dict-backed RecordStore.

    Useful for tests and for running the core without a database. A lock
    makes each compare-and-swap atomic with respect to other threads.
    """

    def __init__(self, records: Sequence[StudentRecord] = ()) -> None:
        # dicts preserve insertion order, which find_all relies on
        self._records: dict[str, StudentRecord] = {r.id: r for r in records}
        self._lock = threading.Lock()

    def find_by_id(self, student_id: str) -> StudentRecord | None:
        with self._lock:
            return self._records.get(student_id)

    def find_all(self) -> list[StudentRecord]:
        with self._lock:
            return list(self._records.values())

    def compare_and_swap_update(
        self,
        student_id: str,
        expected_row_version: bytes,
        first_name: str,
        last_name: str,
    ) -> CasResult:
        with self._lock:
            current = self._records.get(student_id)
            if current is None or current.row_version != expected_row_version:
                return CasConflict(latest=current)

            updated = StudentRecord(
                id=student_id,
                first_name=first_name,
                last_name=last_name,
                row_version=new_row_version(),
            )
            self._records[student_id] = updated
            return CasApplied(record=updated)

    def insert(self, first_name: str, last_name: str) -> StudentRecord:
        record = StudentRecord(
            id=new_student_id(),
            first_name=first_name,
            last_name=last_name,
            row_version=new_row_version(),
        )
        with self._lock:
            self._records[record.id] = record
        return record

    def delete(self, student_id: str) -> None:
        with self._lock:
            self._records.pop(student_id, None)
