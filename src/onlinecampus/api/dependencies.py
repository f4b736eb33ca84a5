"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003
from typing import Annotated

from fastapi import Depends

from onlinecampus.config import Settings
from onlinecampus.records import ConcurrentEditor, QueryPage
from onlinecampus.state_store import CampusStore

# Global CampusStore instance (initialized on app startup)
_campus_store: CampusStore | None = None

# Global Settings instance (initialized on app startup)
_settings: Settings | None = None


def init_campus_store(db_path: str = "onlinecampus.db") -> CampusStore:
    """Initialize the global CampusStore instance."""
    global _campus_store  # noqa: PLW0603
    _campus_store = CampusStore(db_path)
    return _campus_store


def close_campus_store() -> None:
    """Close the global CampusStore instance."""
    global _campus_store  # noqa: PLW0603
    if _campus_store is not None:
        _campus_store.close()
        _campus_store = None


def get_campus_store() -> Generator[CampusStore, None, None]:
    """Dependency that provides the CampusStore instance."""
    if _campus_store is None:
        raise RuntimeError("CampusStore not initialized. Call init_campus_store() first.")
    yield _campus_store


# Type alias for dependency injection
CampusStoreDep = Annotated[CampusStore, Depends(get_campus_store)]


def init_settings(settings: Settings) -> Settings:
    """Initialize the global Settings instance."""
    global _settings  # noqa: PLW0603
    _settings = settings
    return _settings


def close_settings() -> None:
    """Forget the global Settings instance."""
    global _settings  # noqa: PLW0603
    _settings = None


def get_settings() -> Settings:
    """Dependency that provides the Settings, falling back to defaults."""
    return _settings if _settings is not None else Settings()


SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_query_page(settings: SettingsDep) -> QueryPage:
    """Dependency that provides a QueryPage configured from settings."""
    return QueryPage(case_sensitive=settings.case_sensitive_search)


QueryPageDep = Annotated[QueryPage, Depends(get_query_page)]


def get_editor(store: CampusStoreDep) -> ConcurrentEditor:
    """Dependency that provides a ConcurrentEditor bound to the store."""
    return ConcurrentEditor(store)


EditorDep = Annotated[ConcurrentEditor, Depends(get_editor)]
