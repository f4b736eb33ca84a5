"""Records - Paginated student listings and optimistic-concurrency edits."""

from onlinecampus.records.editor import ConcurrentEditor
from onlinecampus.records.exceptions import (
    DataOperation,
    DataSourceUnavailable,
    InvalidPageQueryError,
    RecordsError,
)
from onlinecampus.records.models import (
    Applied,
    CasApplied,
    CasConflict,
    CasResult,
    Conflict,
    EditOutcome,
    EditRequest,
    NoOp,
    NotFound,
    PageQuery,
    PageResult,
    SortKey,
    StudentRecord,
)
from onlinecampus.records.paging import QueryPage, paginate
from onlinecampus.records.store import InMemoryRecordStore, RecordStore, new_row_version

__all__ = [
    "Applied",
    "CasApplied",
    "CasConflict",
    "CasResult",
    "ConcurrentEditor",
    "Conflict",
    "DataOperation",
    "DataSourceUnavailable",
    "EditOutcome",
    "EditRequest",
    "InMemoryRecordStore",
    "InvalidPageQueryError",
    "NoOp",
    "NotFound",
    "PageQuery",
    "PageResult",
    "QueryPage",
    "RecordStore",
    "RecordsError",
    "SortKey",
    "StudentRecord",
    "new_row_version",
    "paginate",
]
