"""Unit tests for CampusStore student operations."""

from datetime import datetime

import pytest

from onlinecampus.records import (
    CasApplied,
    CasConflict,
    DataOperation,
    DataSourceUnavailable,
    StudentRecord,
    new_row_version,
)
from onlinecampus.state_store import CampusStore
from onlinecampus.state_store.models import Student


@pytest.mark.unit
class TestInsert:
    """Tests for insert."""

    def test_insert_student(self, campus_store: CampusStore) -> None:
        record = campus_store.insert(first_name="John", last_name="Doe")

        assert isinstance(record, StudentRecord)
        assert record.id is not None
        assert record.first_name == "John"
        assert record.last_name == "Doe"
        assert len(record.row_version) == 16

    def test_insert_round_trips(self, campus_store: CampusStore) -> None:
        record = campus_store.insert(first_name="John", last_name="Doe")

        assert campus_store.find_by_id(record.id) == record


@pytest.mark.unit
class TestFind:
    """Tests for find_by_id and find_all."""

    def test_find_by_id_not_found(self, campus_store: CampusStore) -> None:
        assert campus_store.find_by_id("nonexistent-id") is None

    def test_find_all_empty(self, campus_store: CampusStore) -> None:
        assert campus_store.find_all() == []

    def test_find_all_in_insertion_order(self, campus_store: CampusStore) -> None:
        names = [("Carol", "Zimmer"), ("Alice", "Adams"), ("Bob", "Moore")]
        inserted = [campus_store.insert(first, last) for first, last in names]

        assert campus_store.find_all() == inserted

    def test_find_all_ignores_created_at(self, campus_store: CampusStore) -> None:
        """A clock that steps backwards does not reorder students."""
        session = campus_store.database.get_session()
        try:
            session.add(Student("Late", "Clock", id="a", created_at=datetime(2030, 1, 1)))
            session.add(Student("Early", "Clock", id="b", created_at=datetime(2000, 1, 1)))
            session.add(Student("Same", "Clock", id="c", created_at=datetime(2000, 1, 1)))
            session.commit()
        finally:
            session.close()

        assert [r.id for r in campus_store.find_all()] == ["a", "b", "c"]


@pytest.mark.unit
class TestCompareAndSwapUpdate:
    """Tests for compare_and_swap_update."""

    def test_matching_version_applies(self, campus_store: CampusStore) -> None:
        record = campus_store.insert("John", "Doe")

        result = campus_store.compare_and_swap_update(
            record.id, record.row_version, first_name="Jane", last_name="Roe"
        )

        assert isinstance(result, CasApplied)
        assert result.record.first_name == "Jane"
        assert result.record.last_name == "Roe"
        assert campus_store.find_by_id(record.id) == result.record

    def test_applied_write_gets_new_version(self, campus_store: CampusStore) -> None:
        record = campus_store.insert("John", "Doe")

        result = campus_store.compare_and_swap_update(record.id, record.row_version, "Jane", "Doe")

        assert isinstance(result, CasApplied)
        assert result.record.row_version != record.row_version

    def test_stale_version_conflicts_with_latest(self, campus_store: CampusStore) -> None:
        record = campus_store.insert("John", "Doe")
        first = campus_store.compare_and_swap_update(record.id, record.row_version, "Jim", "Doe")

        second = campus_store.compare_and_swap_update(record.id, record.row_version, "Joe", "Doe")

        assert isinstance(first, CasApplied)
        assert second == CasConflict(latest=first.record)
        assert campus_store.find_by_id(record.id).first_name == "Jim"

    def test_unknown_version_conflicts(self, campus_store: CampusStore) -> None:
        record = campus_store.insert("John", "Doe")

        result = campus_store.compare_and_swap_update(record.id, new_row_version(), "Jane", "Doe")

        assert result == CasConflict(latest=record)

    def test_deleted_student_conflicts_with_none(self, campus_store: CampusStore) -> None:
        record = campus_store.insert("John", "Doe")
        campus_store.delete(record.id)

        result = campus_store.compare_and_swap_update(record.id, record.row_version, "Jane", "Doe")

        assert result == CasConflict(latest=None)


@pytest.mark.unit
class TestDelete:
    """Tests for delete."""

    def test_delete_student(self, campus_store: CampusStore) -> None:
        record = campus_store.insert("John", "Doe")

        campus_store.delete(record.id)

        assert campus_store.find_by_id(record.id) is None

    def test_delete_missing_student_is_noop(self, campus_store: CampusStore) -> None:
        campus_store.insert("John", "Doe")

        campus_store.delete("nonexistent-id")

        assert len(campus_store.find_all()) == 1


@pytest.mark.unit
class TestDatabaseFailure:
    """Infrastructure failures surface as DataSourceUnavailable."""

    @pytest.fixture
    def broken_store(self, campus_store: CampusStore) -> CampusStore:
        campus_store.database.drop_tables()
        return campus_store

    def test_find_all_failure(self, broken_store: CampusStore) -> None:
        with pytest.raises(DataSourceUnavailable) as exc_info:
            broken_store.find_all()

        assert exc_info.value.operation is DataOperation.RETRIEVE
        assert "no such table" in exc_info.value.detail

    def test_find_by_id_failure(self, broken_store: CampusStore) -> None:
        with pytest.raises(DataSourceUnavailable) as exc_info:
            broken_store.find_by_id("any")

        assert exc_info.value.operation is DataOperation.RETRIEVE

    def test_insert_failure(self, broken_store: CampusStore) -> None:
        with pytest.raises(DataSourceUnavailable) as exc_info:
            broken_store.insert("John", "Doe")

        assert exc_info.value.operation is DataOperation.INSERT

    def test_update_failure(self, broken_store: CampusStore) -> None:
        with pytest.raises(DataSourceUnavailable) as exc_info:
            broken_store.compare_and_swap_update("any", b"\x01", "John", "Doe")

        assert exc_info.value.operation is DataOperation.EDIT

    def test_delete_failure(self, broken_store: CampusStore) -> None:
        with pytest.raises(DataSourceUnavailable) as exc_info:
            broken_store.delete("any")

        assert exc_info.value.operation is DataOperation.REMOVE

    def test_failure_is_logged(
        self, broken_store: CampusStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level("ERROR", logger="onlinecampus.state_store.store"):
            with pytest.raises(DataSourceUnavailable):
                broken_store.find_all()

        assert "Database retrieve failed" in caplog.text
