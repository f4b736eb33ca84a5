"""QueryPage - filtered, sorted and paginated student listings."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, TypeVar

from onlinecampus.records.exceptions import InvalidPageQueryError
from onlinecampus.records.models import PageQuery, PageResult, SortKey, StudentRecord

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

T = TypeVar("T")

_DIGITS = re.compile(r"(\d+)")


NaturalKey = tuple[list[str | tuple[int, str]], str]


def _digit_run_key(run: str) -> tuple[int, str]:
    # Numeric order without int(): fewer significant digits first, then lexically
    significant = run.lstrip("0")
    return len(significant), significant


def natural_key(value: str, case_sensitive: bool = True) -> NaturalKey:
    """Build a digit-aware sort key that orders distinct strings strictly.

    re.split with a capturing group always yields text at even positions and
    digit runs at odd positions, so two chunk lists never compare str against
    a digit-run tuple. Strings whose chunks tie ("Smith1", "Smith01") fall
    back to the original value.
    """
    folded = value if case_sensitive else value.casefold()
    chunks = [
        _digit_run_key(chunk) if i % 2 else chunk
        for i, chunk in enumerate(_DIGITS.split(folded))
    ]
    return chunks, value


def paginate(items: Sequence[T], page_number: int, page_size: int) -> PageResult[T]:
    """Slice one page out of an already filtered and ordered sequence.

    Args:
        items: The full result set.
        page_number: 1-based page index.
        page_size: Maximum items per page.

    Returns:
        PageResult whose items may be empty if page_number is past the end.

    Raises:
        InvalidPageQueryError: If page_number < 1 or page_size < 1.
    """
    if page_size < 1:
        raise InvalidPageQueryError(f"page_size must be >= 1, got {page_size}")
    if page_number < 1:
        raise InvalidPageQueryError(f"page_number must be >= 1, got {page_number}")

    start = (page_number - 1) * page_size
    page_items = list(items[start : start + page_size])
    return PageResult.from_count(page_items, len(items), page_number, page_size)


class QueryPage:
    """Builds one page of a student listing.

    Stateless apart from its collation options; a single instance may be
    shared across requests.
    """

    def __init__(self, case_sensitive: bool = True) -> None:
        """Initialize QueryPage.

        Args:
            case_sensitive: Whether search matching and sort comparison
                respect letter case.
        """
        self.case_sensitive = case_sensitive

    def _matches(self, record: StudentRecord, needle: str) -> bool:
        if self.case_sensitive:
            return needle in record.first_name or needle in record.last_name
        needle = needle.casefold()
        return needle in record.first_name.casefold() or needle in record.last_name.casefold()

    def query(
        self,
        source: Iterable[StudentRecord],
        params: PageQuery,
        page_size: int,
    ) -> PageResult[StudentRecord]:
        """Filter, sort and paginate records.

        Args:
            source: Records in insertion order. Consumed once.
            params: Search text, sort key and page number.
            page_size: Maximum records per page.

        Returns:
            The requested page with pagination metadata.

        Raises:
            InvalidPageQueryError: If page_size < 1.
        """
        if page_size < 1:
            raise InvalidPageQueryError(f"page_size must be >= 1, got {page_size}")

        records: Iterable[StudentRecord] = source
        if params.search_text:
            needle = params.search_text
            records = (r for r in records if self._matches(r, needle))

        ordered = sorted(
            records,
            key=lambda r: natural_key(r.last_name, self.case_sensitive),
            reverse=params.sort_key is SortKey.LAST_NAME_DESC,
        )
        return paginate(ordered, params.page_number, page_size)
