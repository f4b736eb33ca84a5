"""Data models for the records core."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Generic, TypeVar

from onlinecampus.records.exceptions import InvalidPageQueryError

T = TypeVar("T")

# Value of the web layer's sort_order parameter that selects descending order
SORT_ORDER_NAME_DESC = "name_desc"


class SortKey(StrEnum):
    """Ordering applied to a student listing."""

    LAST_NAME_ASC = "last_name_asc"
    LAST_NAME_DESC = "last_name_desc"

    @classmethod
    def from_sort_order(cls, sort_order: str | None) -> SortKey:
        """Map the listing page's ``sort_order`` parameter to a SortKey.

        Only ``"name_desc"`` selects descending order; anything else,
        including None, falls back to ascending.
        """
        if sort_order == SORT_ORDER_NAME_DESC:
            return cls.LAST_NAME_DESC
        return cls.LAST_NAME_ASC


@dataclass(frozen=True)
class StudentRecord:
    """Persisted state of a student.

    Attributes:
        id: Opaque unique identifier.
        first_name: Student's first name.
        last_name: Student's last name.
        row_version: Opaque token reassigned on every successful write.
    """

    id: str
    first_name: str
    last_name: str
    row_version: bytes


@dataclass(frozen=True)
class EditRequest:
    """A caller-submitted edit of a student.

    Attributes:
        id: ID of the student being edited.
        first_name: Proposed first name.
        last_name: Proposed last name.
        observed_row_version: Row version the caller last read.
    """

    id: str
    first_name: str
    last_name: str
    observed_row_version: bytes


@dataclass(frozen=True)
class PageQuery:
    """Listing parameters."""

    sort_key: SortKey = SortKey.LAST_NAME_ASC
    search_text: str | None = None
    page_number: int = 1

    def __post_init__(self) -> None:
        if self.page_number < 1:
            raise InvalidPageQueryError(f"page_number must be >= 1, got {self.page_number}")


@dataclass
class PageResult(Generic[T]):
    """One page of results plus pagination metadata.

    Attributes:
        items: Items on this page, at most page_size long.
        page_number: 1-based page index that was requested.
        total_pages: ceil(total_count / page_size).
        total_count: Size of the filtered set before slicing.
    """

    items: list[T] = field(default_factory=list)
    page_number: int = 1
    total_pages: int = 0
    total_count: int = 0

    @property
    def has_previous_page(self) -> bool:
        return self.page_number > 1

    @property
    def has_next_page(self) -> bool:
        return self.page_number < self.total_pages

    @classmethod
    def from_count(
        cls, items: list[T], total_count: int, page_number: int, page_size: int
    ) -> PageResult[T]:
        """Build a page, deriving total_pages from the unsliced count."""
        return cls(
            items=items,
            page_number=page_number,
            total_pages=math.ceil(total_count / page_size),
            total_count=total_count,
        )


# --- Compare-and-swap results ---


@dataclass(frozen=True)
class CasApplied:
    """The write succeeded; record carries the fresh row version."""

    record: StudentRecord


@dataclass(frozen=True)
class CasConflict:
    """The expected row version no longer matched.

    latest is None when the record was deleted by another writer.
    """

    latest: StudentRecord | None


CasResult = CasApplied | CasConflict


# --- Edit outcomes ---


@dataclass(frozen=True)
class NotFound:
    """The record did not exist when the edit was read."""


@dataclass(frozen=True)
class NoOp:
    """The submitted names equal the current ones; nothing was written."""


@dataclass(frozen=True)
class Applied:
    """The edit was persisted."""

    record: StudentRecord


@dataclass(frozen=True)
class Conflict:
    """Another writer changed or deleted the record first.

    Attributes:
        latest: Current persisted values, or None if the record was deleted.
        first_name_changed: latest.first_name differs from the attempted value.
        last_name_changed: latest.last_name differs from the attempted value.
    """

    latest: StudentRecord | None
    first_name_changed: bool = False
    last_name_changed: bool = False

    @property
    def deleted(self) -> bool:
        return self.latest is None

    @property
    def changed_fields(self) -> list[str]:
        fields = []
        if self.first_name_changed:
            fields.append("first_name")
        if self.last_name_changed:
            fields.append("last_name")
        return fields


EditOutcome = NotFound | NoOp | Applied | Conflict
