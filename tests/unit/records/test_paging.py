"""Unit tests for QueryPage and paginate."""

import math

import pytest

from onlinecampus.records import (
    DataOperation,
    DataSourceUnavailable,
    InvalidPageQueryError,
    PageQuery,
    QueryPage,
    SortKey,
    StudentRecord,
    paginate,
)
from onlinecampus.records.paging import natural_key


def _students(*names: tuple[str, str]) -> list[StudentRecord]:
    return [
        StudentRecord(id=f"s{i}", first_name=first, last_name=last, row_version=b"\x00")
        for i, (first, last) in enumerate(names)
    ]


def _numbered(count: int) -> list[StudentRecord]:
    return _students(*[(f"FirstName{i}", f"LastName{i}") for i in range(1, count + 1)])


MIXED = _students(
    ("John", "Smith"),
    ("Jane", "Doe"),
    ("Alice", "Johnson"),
    ("Bob", "Brown"),
    ("Carol", "Adams"),
    ("Dave", "smithers"),
    ("Eve", "Zimmer"),
)


@pytest.mark.unit
class TestFiltering:
    """Tests for search_text filtering."""

    @pytest.mark.parametrize("needle", ["Jo", "Smith", "a", "e", "mm", "Doe", "x"])
    def test_every_result_contains_search_text(self, needle: str) -> None:
        """Every returned record contains the needle in first or last name."""
        page = QueryPage().query(MIXED, PageQuery(search_text=needle), page_size=100)

        for record in page.items:
            assert needle in record.first_name or needle in record.last_name
        expected = sum(1 for r in MIXED if needle in r.first_name or needle in r.last_name)
        assert page.total_count == expected

    def test_search_matches_last_name(self) -> None:
        """Searching 'Doe' returns only Jane Doe."""
        people = _students(("John", "Smith"), ("Jane", "Doe"))

        page = QueryPage().query(people, PageQuery(search_text="Doe"), page_size=8)

        assert len(page.items) == 1
        assert page.items[0].last_name == "Doe"

    def test_search_matches_first_name(self) -> None:
        """First names are searched as well."""
        page = QueryPage().query(MIXED, PageQuery(search_text="Carol"), page_size=8)

        assert [r.last_name for r in page.items] == ["Adams"]

    def test_search_is_case_sensitive_by_default(self) -> None:
        """'smith' does not match 'Smith' unless case-insensitive."""
        page = QueryPage().query(MIXED, PageQuery(search_text="smith"), page_size=8)

        assert [r.last_name for r in page.items] == ["smithers"]

    def test_search_case_insensitive_option(self) -> None:
        """case_sensitive=False matches regardless of case."""
        page = QueryPage(case_sensitive=False).query(
            MIXED, PageQuery(search_text="SMITH"), page_size=8
        )

        assert {r.last_name for r in page.items} == {"Smith", "smithers"}

    @pytest.mark.parametrize("needle", [None, ""])
    def test_empty_search_returns_everything(self, needle: str | None) -> None:
        """No search text means no filtering."""
        page = QueryPage().query(MIXED, PageQuery(search_text=needle), page_size=100)

        assert page.total_count == len(MIXED)


@pytest.mark.unit
class TestSorting:
    """Tests for last-name ordering."""

    def test_default_sort_is_ascending(self) -> None:
        """Default sort key orders by last name ascending."""
        people = _students(("John", "Smith"), ("Jane", "Doe"), ("Carol", "Adams"))

        page = QueryPage().query(people, PageQuery(), page_size=8)

        assert [r.last_name for r in page.items] == ["Adams", "Doe", "Smith"]

    def test_descending_sort(self) -> None:
        """name_desc puts Smith before Doe."""
        people = _students(("John", "Smith"), ("Jane", "Doe"))

        page = QueryPage().query(
            people, PageQuery(sort_key=SortKey.LAST_NAME_DESC), page_size=8
        )

        assert page.items[0].last_name == "Smith"
        assert page.items[1].last_name == "Doe"

    def test_desc_is_reverse_of_asc_for_distinct_names(self) -> None:
        """Distinct last names give exactly reversed orderings."""
        query_page = QueryPage()
        asc = query_page.query(MIXED, PageQuery(sort_key=SortKey.LAST_NAME_ASC), page_size=100)
        desc = query_page.query(MIXED, PageQuery(sort_key=SortKey.LAST_NAME_DESC), page_size=100)

        assert [r.id for r in desc.items] == [r.id for r in reversed(asc.items)]

    def test_ties_keep_source_order(self) -> None:
        """Equal last names keep their insertion order in both directions."""
        people = _students(("A", "Same"), ("B", "Other"), ("C", "Same"), ("D", "Same"))
        query_page = QueryPage()

        asc = query_page.query(people, PageQuery(), page_size=8)
        desc = query_page.query(people, PageQuery(sort_key=SortKey.LAST_NAME_DESC), page_size=8)

        assert [r.first_name for r in asc.items] == ["B", "A", "C", "D"]
        assert [r.first_name for r in desc.items] == ["A", "C", "D", "B"]

    def test_digit_runs_compare_numerically(self) -> None:
        """LastName9 sorts before LastName10."""
        page = QueryPage().query(_numbered(12), PageQuery(), page_size=100)

        assert [r.last_name for r in page.items] == [f"LastName{i}" for i in range(1, 13)]

    def test_natural_key_orders_mixed_shapes(self) -> None:
        """Strings with digits in different positions stay comparable."""
        values = ["abc10", "a1b2", "10abc", "abc", "", "9"]

        assert sorted(values, key=natural_key) == ["", "9", "10abc", "a1b2", "abc", "abc10"]

    def test_zero_padded_digits_are_distinct(self) -> None:
        """Smith1 and Smith01 never tie, so desc reverses asc."""
        people = _students(("A", "Smith1"), ("B", "Smith01"))
        query_page = QueryPage()

        asc = query_page.query(people, PageQuery(), page_size=8)
        desc = query_page.query(people, PageQuery(sort_key=SortKey.LAST_NAME_DESC), page_size=8)

        assert [r.id for r in desc.items] == [r.id for r in reversed(asc.items)]
        assert [r.last_name for r in asc.items] == ["Smith01", "Smith1"]

    @pytest.mark.parametrize("case_sensitive", [True, False])
    def test_desc_reverses_asc_for_digit_names(self, case_sensitive: bool) -> None:
        """Distinct names with digits, padding and case variants reverse exactly."""
        people = _students(
            ("A", "Room7"),
            ("B", "Room007"),
            ("C", "room7"),
            ("D", "Room10"),
            ("E", "Room0"),
            ("F", "Room"),
            ("G", "Room00"),
        )
        query_page = QueryPage(case_sensitive=case_sensitive)

        asc = query_page.query(people, PageQuery(), page_size=100)
        desc = query_page.query(people, PageQuery(sort_key=SortKey.LAST_NAME_DESC), page_size=100)

        assert [r.id for r in desc.items] == [r.id for r in reversed(asc.items)]

    def test_very_long_digit_run(self) -> None:
        """Digit runs longer than int() accepts still sort numerically."""
        huge = "A" + "9" * 5000
        people = _students(("X", huge), ("Y", "A10"), ("Z", "A" + "1" + "0" * 5000))

        page = QueryPage().query(people, PageQuery(), page_size=8)

        assert [r.first_name for r in page.items] == ["Y", "X", "Z"]

    def test_natural_key_orders_distinct_strings_strictly(self) -> None:
        assert natural_key("Smith01") < natural_key("Smith1")
        assert natural_key("Smith1") != natural_key("Smith01")

    def test_source_is_not_mutated(self) -> None:
        """Sorting works on a copy of the source."""
        people = _students(("John", "Smith"), ("Jane", "Doe"))
        original = list(people)

        QueryPage().query(people, PageQuery(), page_size=8)

        assert people == original


@pytest.mark.unit
class TestPagination:
    """Tests for page slicing and metadata."""

    def test_second_page_of_twenty(self) -> None:
        """Page 2 of 20 records with size 8 starts at FirstName9."""
        page = QueryPage().query(_numbered(20), PageQuery(page_number=2), page_size=8)

        assert len(page.items) == 8
        assert page.items[0].first_name == "FirstName9"
        assert page.total_pages == 3
        assert page.has_previous_page
        assert page.has_next_page

    def test_last_page_is_partial(self) -> None:
        """Page 3 of 20 records holds the remaining 4."""
        page = QueryPage().query(_numbered(20), PageQuery(page_number=3), page_size=8)

        assert [r.first_name for r in page.items] == [f"FirstName{i}" for i in range(17, 21)]
        assert page.has_previous_page
        assert not page.has_next_page

    def test_first_page_has_no_previous(self) -> None:
        page = QueryPage().query(_numbered(20), PageQuery(), page_size=8)

        assert not page.has_previous_page
        assert page.has_next_page

    def test_page_past_end_is_empty(self) -> None:
        """Out-of-range page numbers yield no items, not an error."""
        page = QueryPage().query(_numbered(5), PageQuery(page_number=4), page_size=8)

        assert page.items == []
        assert page.page_number == 4
        assert page.total_pages == 1
        assert page.total_count == 5
        assert not page.has_next_page

    def test_empty_source(self) -> None:
        page = QueryPage().query([], PageQuery(), page_size=8)

        assert page.items == []
        assert page.total_pages == 0
        assert not page.has_previous_page
        assert not page.has_next_page

    @pytest.mark.parametrize("count", [0, 1, 7, 8, 9, 16, 17, 20])
    @pytest.mark.parametrize("page_size", [1, 3, 8, 25])
    @pytest.mark.parametrize("page_number", [1, 2, 5])
    def test_page_bounds(self, count: int, page_size: int, page_number: int) -> None:
        """items never exceed page_size and total_pages is ceil(count / size)."""
        page = QueryPage().query(
            _numbered(count), PageQuery(page_number=page_number), page_size=page_size
        )

        assert len(page.items) <= page_size
        assert page.total_count == count
        assert page.total_pages == math.ceil(count / page_size)

    def test_total_count_is_filtered_count(self) -> None:
        """Counting happens after filtering and before slicing."""
        people = _numbered(20)

        page = QueryPage().query(people, PageQuery(search_text="Name1"), page_size=4)

        # FirstName1 and FirstName10..19
        assert page.total_count == 11
        assert page.total_pages == 3
        assert len(page.items) == 4

    def test_zero_page_size_raises(self) -> None:
        with pytest.raises(InvalidPageQueryError):
            QueryPage().query(_numbered(3), PageQuery(), page_size=0)


@pytest.mark.unit
class TestDataSourceFailure:
    """Failures of the source propagate unchanged."""

    def test_source_error_propagates(self) -> None:
        def failing_source():
            yield from _numbered(2)
            raise DataSourceUnavailable(DataOperation.RETRIEVE, "connection lost")

        with pytest.raises(DataSourceUnavailable) as exc_info:
            QueryPage().query(failing_source(), PageQuery(), page_size=8)

        assert exc_info.value.operation is DataOperation.RETRIEVE


@pytest.mark.unit
class TestPaginate:
    """Tests for the generic paginate helper."""

    def test_paginate_plain_sequence(self) -> None:
        page = paginate(list(range(10)), page_number=2, page_size=4)

        assert page.items == [4, 5, 6, 7]
        assert page.total_count == 10
        assert page.total_pages == 3

    @pytest.mark.parametrize(("page_number", "page_size"), [(0, 4), (1, 0), (-1, 4)])
    def test_paginate_rejects_invalid_arguments(self, page_number: int, page_size: int) -> None:
        with pytest.raises(InvalidPageQueryError):
            paginate([1, 2, 3], page_number=page_number, page_size=page_size)
