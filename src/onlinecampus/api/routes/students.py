"""Student CRUD endpoints."""

import logging

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from onlinecampus.api.dependencies import (
    CampusStoreDep,
    EditorDep,
    QueryPageDep,
    SettingsDep,
)
from onlinecampus.api.models import (
    APIResponse,
    EditConflictResponse,
    StudentCreate,
    StudentDetailResponse,
    StudentEdit,
    StudentPageResponse,
    page_to_response,
    student_to_detail,
)
from onlinecampus.records import (
    Applied,
    Conflict,
    EditRequest,
    NoOp,
    NotFound,
    PageQuery,
    SortKey,
)
from onlinecampus.records.models import SORT_ORDER_NAME_DESC
from onlinecampus.state_store import StudentNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/students", tags=["students"])

STUDENT_NOT_FOUND = "Student was not found."
STUDENT_DETAIL_NOT_FOUND = "The Student has not been found."
NOT_MODIFIED = "Data has not been modified"
DELETED_BY_ANOTHER_USER = "Unable to save changes. The student was deleted by another user."
MODIFIED_BY_ANOTHER_USER = (
    "The record you attempted to edit was modified by another user after you got the "
    "original value. The edit operation was canceled and the current values in the "
    "database have been returned. If you still want to edit this record, submit it "
    "again with the returned row_version."
)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=APIResponse[None](data=None, error=message).model_dump(),
    )


def _conflict_response(student_id: str, conflict: Conflict) -> JSONResponse:
    """Build the 409 body carrying the latest persisted values."""
    latest = conflict.latest
    if latest is None:
        logger.info("Edit of student %s lost to a concurrent delete", student_id)
        body = APIResponse[EditConflictResponse](
            data=EditConflictResponse(current=None),
            error=DELETED_BY_ANOTHER_USER,
        )
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=body.model_dump())

    logger.info(
        "Edit of student %s lost to a concurrent update (changed: %s)",
        student_id,
        ", ".join(conflict.changed_fields) or "none",
    )
    field_errors = {}
    if conflict.first_name_changed:
        field_errors["first_name"] = f"Current Value: {latest.first_name}"
    if conflict.last_name_changed:
        field_errors["last_name"] = f"Current Value: {latest.last_name}"
    body = APIResponse[EditConflictResponse](
        data=EditConflictResponse(current=student_to_detail(latest), field_errors=field_errors),
        error=MODIFIED_BY_ANOTHER_USER,
    )
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=body.model_dump())


@router.get("", response_model=APIResponse[StudentPageResponse])
def list_students(
    store: CampusStoreDep,
    query_page: QueryPageDep,
    settings: SettingsDep,
    sort_order: str | None = Query(default=None, description="'name_desc' for descending"),
    search_string: str | None = Query(default=None, description="New search text"),
    current_filter: str | None = Query(default=None, description="Search text in effect"),
    page_number: int | None = Query(default=None, ge=1, description="1-based page"),
) -> APIResponse[StudentPageResponse]:
    """List students with search, sort and pagination.

    A new search_string restarts at page 1; otherwise current_filter keeps
    the previous search while paging.
    """
    name_sort_param = SORT_ORDER_NAME_DESC if not sort_order else ""
    if search_string is not None:
        page_number = 1
    else:
        search_string = current_filter

    params = PageQuery(
        sort_key=SortKey.from_sort_order(sort_order),
        search_text=search_string,
        page_number=page_number or 1,
    )
    page = query_page.query(store.find_all(), params, settings.page_size)
    return APIResponse(data=page_to_response(page, name_sort_param, search_string))


@router.post(
    "",
    response_model=APIResponse[StudentDetailResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_student(
    student: StudentCreate, store: CampusStoreDep
) -> APIResponse[StudentDetailResponse]:
    """Create a new student."""
    created = store.insert(first_name=student.first_name, last_name=student.last_name)
    return APIResponse(data=student_to_detail(created))


@router.get(
    "/{student_id}",
    response_model=APIResponse[StudentDetailResponse],
    responses={status.HTTP_404_NOT_FOUND: {"model": APIResponse[None]}},
)
def get_student(
    student_id: str, store: CampusStoreDep
) -> APIResponse[StudentDetailResponse] | JSONResponse:
    """Get a student by ID, including the row version needed to edit it."""
    record = store.find_by_id(student_id)
    if record is None:
        return _error(status.HTTP_404_NOT_FOUND, STUDENT_DETAIL_NOT_FOUND)
    return APIResponse(data=student_to_detail(record))


@router.put(
    "/{student_id}",
    response_model=APIResponse[StudentDetailResponse],
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": APIResponse[None]},
        status.HTTP_404_NOT_FOUND: {"model": APIResponse[None]},
        status.HTTP_409_CONFLICT: {"model": APIResponse[EditConflictResponse]},
    },
)
def edit_student(
    student_id: str, edit: StudentEdit, editor: EditorDep
) -> APIResponse[StudentDetailResponse] | JSONResponse:
    """Edit a student's names, guarded by the row version the caller last read."""
    request = EditRequest(
        id=student_id,
        first_name=edit.first_name,
        last_name=edit.last_name,
        observed_row_version=edit.row_version_bytes,
    )
    outcome = editor.edit_by_id(request)

    if isinstance(outcome, Applied):
        return APIResponse(data=student_to_detail(outcome.record))
    if isinstance(outcome, NotFound):
        return _error(status.HTTP_404_NOT_FOUND, STUDENT_NOT_FOUND)
    if isinstance(outcome, NoOp):
        return _error(status.HTTP_400_BAD_REQUEST, NOT_MODIFIED)
    if isinstance(outcome, Conflict):
        return _conflict_response(student_id, outcome)
    raise TypeError(f"Unexpected edit outcome: {outcome!r}")


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_student(student_id: str, store: CampusStoreDep) -> None:
    """Delete a student and its enrolments."""
    if store.find_by_id(student_id) is None:
        raise StudentNotFoundError(f"Student with id '{student_id}' not found")
    store.delete(student_id)
