"""Shared pytest fixtures and configuration."""

from collections.abc import Callable

import pytest

from onlinecampus.records import InMemoryRecordStore, StudentRecord
from onlinecampus.state_store import CampusStore


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


# Shared fixtures


@pytest.fixture
def make_record() -> Callable[..., StudentRecord]:
    """Factory for StudentRecords with sensible defaults."""

    def _make(
        first_name: str = "John",
        last_name: str = "Doe",
        id: str = "student-1",
        row_version: bytes = b"\x01" * 16,
    ) -> StudentRecord:
        return StudentRecord(
            id=id, first_name=first_name, last_name=last_name, row_version=row_version
        )

    return _make


@pytest.fixture
def memory_store() -> InMemoryRecordStore:
    """Create an empty in-memory RecordStore."""
    return InMemoryRecordStore()


@pytest.fixture
def campus_store():
    """Create an in-memory SQLite CampusStore."""
    s = CampusStore(":memory:")
    yield s
    s.close()
