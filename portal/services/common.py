"""
Helpers shared by the role services: pagination, request-body
serialisation and the mentor access check.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Iterator
from uuid import UUID

from pydantic import BaseModel

from portal.domain.dates import as_datetime, iso
from portal.domain.errors import NotFoundError, PermissionDeniedError
from portal.ports.database_port import DatabasePort

# Page size for internal scans that must see every matching row
SCAN_LIMIT = 1000

ListPage = Callable[[dict[str, Any], int, int], Awaitable[tuple[list[dict[str, Any]], int]]]


def offset(page: int, limit: int) -> int:
    return (max(page, 1) - 1) * limit


async def scan_all(
    list_page: ListPage, filters: dict[str, Any], batch: int | None = None
) -> list[dict[str, Any]]:
    """
    Read every row matching ``filters`` from a paginated ``list_*`` port
    method, one page of ``batch`` rows at a time.

    All rows are collected before returning, so callers may update them
    afterwards without shifting later pages.
    """
    size = batch or SCAN_LIMIT
    rows: list[dict[str, Any]] = []
    while True:
        page, total = await list_page(filters, len(rows), size)
        rows.extend(page)
        if not page or len(rows) >= total:
            return rows


def chunked(ids: list[str], size: int | None = None) -> Iterator[list[str]]:
    """Split an id list for ``in`` filters so no single query grows unbounded."""
    size = size or SCAN_LIMIT
    for start in range(0, len(ids), size):
        yield ids[start:start + size]


def to_row(body: BaseModel, exclude: set[str] | None = None) -> dict[str, Any]:
    """
    Dump only the fields the client actually sent, in storage form.

    Dates become full ISO timestamps because every date column is a
    timestamptz in Supabase.
    """
    row = body.model_dump(exclude_unset=True, exclude=exclude)
    for key, value in row.items():
        if isinstance(value, (date, datetime)):
            row[key] = iso(as_datetime(value))
        elif isinstance(value, Enum):
            row[key] = value.value
        elif isinstance(value, UUID):
            row[key] = str(value)
    return row


async def load_application(db: DatabasePort, application_id: str) -> dict[str, Any]:
    application = await db.get_application(application_id)
    if not application or not application.get("is_active", True):
        raise NotFoundError("Internship application", application_id)
    return application


async def is_mentor_of(db: DatabasePort, faculty_id: str, student_id: str) -> bool:
    """Active mentor assignment, or named mentor on one of the student's applications."""
    if await db.find_active_assignment(faculty_id, student_id):
        return True
    _, total = await db.list_applications(
        {"student_id": student_id, "mentor_id": faculty_id, "is_active": True}, 0, 1
    )
    return total > 0


async def ensure_mentor(
    db: DatabasePort, faculty_id: str, application: dict[str, Any]
) -> None:
    """Raise PermissionDeniedError unless ``faculty_id`` mentors this application."""
    if application.get("mentor_id") == faculty_id:
        return
    if await db.find_active_assignment(faculty_id, application["student_id"]):
        return
    raise PermissionDeniedError("You are not the assigned mentor for this internship")
