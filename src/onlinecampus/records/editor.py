"""ConcurrentEditor - optimistic-concurrency edits of student records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from onlinecampus.records.models import (
    Applied,
    CasApplied,
    Conflict,
    EditOutcome,
    EditRequest,
    NoOp,
    NotFound,
    StudentRecord,
)

if TYPE_CHECKING:
    from onlinecampus.records.store import RecordStore


class ConcurrentEditor:
    """Decides whether a submitted edit is applied, skipped or in conflict.

    Every call is independent: the editor keeps no state between calls and
    relies on the store's compare-and-swap for conflict detection.
    """

    def __init__(self, store: RecordStore) -> None:
        """Initialize the editor.

        Args:
            store: Persistence layer performing the compare-and-swap write.
        """
        self.store = store

    def edit(self, current: StudentRecord | None, request: EditRequest) -> EditOutcome:
        """Apply request on top of current.

        Args:
            current: The record as read before the edit, or None if missing.
            request: Proposed names plus the row version the caller observed.

        Returns:
            NotFound if current is None, NoOp if the names are unchanged,
            Applied with the updated record, or Conflict with the latest
            persisted values (None when deleted concurrently).

        Raises:
            ValueError: If current and request refer to different students.
            DataSourceUnavailable: If the store fails.
        """
        if current is None:
            return NotFound()
        if current.id != request.id:
            raise ValueError(f"Edit for '{request.id}' applied to record '{current.id}'")

        if current.first_name == request.first_name and current.last_name == request.last_name:
            return NoOp()

        result = self.store.compare_and_swap_update(
            request.id,
            request.observed_row_version,
            request.first_name,
            request.last_name,
        )
        if isinstance(result, CasApplied):
            return Applied(record=result.record)

        latest = result.latest
        if latest is None:
            return Conflict(latest=None)
        return Conflict(
            latest=latest,
            first_name_changed=latest.first_name != request.first_name,
            last_name_changed=latest.last_name != request.last_name,
        )

    def edit_by_id(self, request: EditRequest) -> EditOutcome:
        """Read the current record from the store, then edit it."""
        return self.edit(self.store.find_by_id(request.id), request)
