"""Custom exceptions for the records core."""

from __future__ import annotations

from enum import StrEnum


class DataOperation(StrEnum):
    """Kind of data-source operation that failed."""

    RETRIEVE = "retrieve"
    INSERT = "insert"
    EDIT = "edit"
    REMOVE = "remove"


_OPERATION_PHRASES = {
    DataOperation.RETRIEVE: "retrieving data from",
    DataOperation.INSERT: "inserting data into",
    DataOperation.EDIT: "editing data in",
    DataOperation.REMOVE: "removing data from",
}


class RecordsError(Exception):
    """Base exception for records errors."""


class InvalidPageQueryError(RecordsError, ValueError):
    """Page number or page size is out of range."""


class DataSourceUnavailable(RecordsError):  # noqa: N818
    """The persistence layer could not complete an operation.

    Raised for infrastructure failures only. Version mismatches are reported
    through ``CasConflict`` and never through this exception.
    """

    def __init__(self, operation: DataOperation, detail: str = "") -> None:
        self.operation = operation
        self.detail = detail
        message = f"Data source unavailable during {operation.value}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)

    @property
    def user_message(self) -> str:
        """Generic sentence safe to show to end users."""
        return f"An error occurred while {_OPERATION_PHRASES[self.operation]} the database."
