"""
In-memory DatabasePort for tests.

Implements the same filter-key convention as the Supabase adapter and
mirrors its default orderings, so services behave as they do in production.
"""

import itertools
import uuid
from datetime import datetime
from typing import Any

from portal.domain.dates import as_datetime, utcnow
from portal.ports.database_port import DatabasePort
from portal.ports.filters import split_filter

_ORDER: dict[str, list[tuple[str, bool]]] = {
    "users": [("name", False)],
    "students": [("name", False)],
    "student_documents": [("uploaded_at", True)],
    "internship_applications": [("created_at", True)],
    "monthly_reports": [("report_year", True), ("report_month", True)],
    "faculty_visit_logs": [("visit_date", True)],
    "grievances": [("created_at", True)],
    "mentor_assignments": [("assigned_at", True)],
}


def _comparable(value: Any) -> Any:
    if isinstance(value, datetime):
        return as_datetime(value)
    if isinstance(value, str):
        try:
            return as_datetime(value)
        except ValueError:
            return value
    return value


def _matches(row: dict[str, Any], filters: dict[str, Any]) -> bool:
    for key, expected in filters.items():
        column, op = split_filter(key, expected)
        actual = row.get(column)
        if op == "eq":
            ok = actual == expected
        elif op == "in":
            ok = actual in expected
        elif op == "is":
            ok = actual is None
        elif op == "notnull":
            ok = actual is not None
        elif op == "ne":
            # SQL semantics: NULL <> x is not true
            ok = actual is not None and actual != expected
        elif op == "ilike":
            ok = actual is not None and str(expected).lower() in str(actual).lower()
        else:
            if actual is None:
                return False
            a, b = _comparable(actual), _comparable(expected)
            ok = {
                "lt": a < b,
                "lte": a <= b,
                "gt": a > b,
                "gte": a >= b,
            }[op]
        if not ok:
            return False
    return True


class MemoryDatabase(DatabasePort):
    """Dict-backed tables keyed by row id."""

    def __init__(self) -> None:
        self.tables: dict[str, dict[str, dict[str, Any]]] = {
            name: {} for name in (*_ORDER, "audit_logs")
        }
        self.locks: dict[str, bool] = {}
        self._seq = itertools.count()
        self._inserted: dict[str, int] = {}

    # ── Test helpers ──────────────────────────────────────────

    def seed(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        """Synchronous insert for fixtures; fills id and created_at."""
        row = dict(row)
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", utcnow().isoformat())
        self.tables[table][row["id"]] = row
        self._inserted[row["id"]] = next(self._seq)
        return dict(row)

    def row(self, table: str, row_id: str) -> dict[str, Any] | None:
        found = self.tables[table].get(row_id)
        return dict(found) if found else None

    @property
    def audit_logs(self) -> list[dict[str, Any]]:
        return list(self.tables["audit_logs"].values())

    # ── Generic operations ────────────────────────────────────

    def _select(self, table: str, filters: dict[str, Any]) -> list[dict[str, Any]]:
        rows = [r for r in self.tables[table].values() if _matches(r, filters)]
        # newest insert first as the final tie-breaker
        rows.sort(key=lambda r: self._inserted.get(r["id"], 0), reverse=True)
        for column, desc in reversed(_ORDER.get(table, [])):
            rows.sort(
                key=lambda r: (r.get(column) is None, _comparable(r.get(column))),
                reverse=desc,
            )
        return [dict(r) for r in rows]

    def _page(
        self, table: str, filters: dict[str, Any], skip: int, limit: int
    ) -> tuple[list[dict[str, Any]], int]:
        rows = self._select(table, filters)
        return rows[skip:skip + limit], len(rows)

    def _get(self, table: str, row_id: str) -> dict[str, Any] | None:
        return self.row(table, row_id)

    def _update(self, table: str, row_id: str, data: dict[str, Any]) -> dict[str, Any]:
        existing = self.tables[table].get(row_id)
        if existing is None:
            return {}
        existing.update(data)
        return dict(existing)

    # ── Users ─────────────────────────────────────────────────

    async def get_user(self, user_id: str) -> dict[str, Any] | None:
        return self._get("users", user_id)

    async def upsert_user(self, user_id: str, data: dict[str, Any]) -> None:
        if user_id in self.tables["users"]:
            self._update("users", user_id, data)
        else:
            self.seed("users", {**data, "id": user_id})

    async def list_users(self, filters: dict[str, Any]) -> list[dict[str, Any]]:
        return self._select("users", filters)

    # ── Students ──────────────────────────────────────────────

    async def get_student(self, student_id: str) -> dict[str, Any] | None:
        return self._get("students", student_id)

    async def get_student_by_user(self, user_id: str) -> dict[str, Any] | None:
        rows = self._select("students", {"user_id": user_id})
        return rows[0] if rows else None

    async def update_student(self, student_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return self._update("students", student_id, data)

    async def list_students(self, filters, skip=0, limit=20):
        return self._page("students", filters, skip, limit)

    async def create_document(self, data: dict[str, Any]) -> dict[str, Any]:
        return self.seed("student_documents", data)

    async def get_document(self, document_id: str) -> dict[str, Any] | None:
        return self._get("student_documents", document_id)

    async def delete_document(self, document_id: str) -> None:
        self.tables["student_documents"].pop(document_id, None)

    async def list_documents(self, filters, skip=0, limit=20):
        return self._page("student_documents", filters, skip, limit)

    # ── Mentor assignments ────────────────────────────────────

    async def find_active_assignment(self, mentor_id: str, student_id: str):
        rows = self._select(
            "mentor_assignments",
            {"mentor_id": mentor_id, "student_id": student_id, "is_active": True},
        )
        return rows[0] if rows else None

    async def get_active_assignment_for_student(self, student_id: str):
        rows = self._select("mentor_assignments", {"student_id": student_id, "is_active": True})
        return rows[0] if rows else None

    async def list_assigned_student_ids(self, mentor_id: str) -> list[str]:
        rows = self._select("mentor_assignments", {"mentor_id": mentor_id, "is_active": True})
        return [r["student_id"] for r in rows]

    async def list_mentored_student_ids(self, student_ids: list[str]) -> list[str]:
        rows = self._select("mentor_assignments", {"student_id": list(student_ids), "is_active": True})
        return sorted({r["student_id"] for r in rows})

    async def create_assignment(self, data: dict[str, Any]) -> dict[str, Any]:
        return self.seed("mentor_assignments", data)

    async def deactivate_assignments(self, student_id: str) -> None:
        for row in self.tables["mentor_assignments"].values():
            if row.get("student_id") == student_id and row.get("is_active"):
                row["is_active"] = False

    # ── Applications ──────────────────────────────────────────

    async def create_application(self, data: dict[str, Any]) -> dict[str, Any]:
        return self.seed("internship_applications", data)

    async def get_application(self, application_id: str):
        return self._get("internship_applications", application_id)

    async def update_application(self, application_id: str, data: dict[str, Any]):
        return self._update("internship_applications", application_id, data)

    async def list_applications(self, filters, skip=0, limit=20):
        return self._page("internship_applications", filters, skip, limit)

    # ── Monthly reports ───────────────────────────────────────

    async def create_monthly_report(self, data: dict[str, Any]) -> dict[str, Any]:
        return self.seed("monthly_reports", data)

    async def get_monthly_report(self, report_id: str):
        return self._get("monthly_reports", report_id)

    async def update_monthly_report(self, report_id: str, data: dict[str, Any]):
        return self._update("monthly_reports", report_id, data)

    async def find_monthly_report(self, application_id: str, month: int, year: int):
        rows = self._select(
            "monthly_reports",
            {
                "application_id": application_id,
                "report_month": month,
                "report_year": year,
                "is_deleted": False,
            },
        )
        return rows[0] if rows else None

    async def list_monthly_reports(self, filters, skip=0, limit=20):
        return self._page("monthly_reports", filters, skip, limit)

    # ── Visit logs ────────────────────────────────────────────

    async def create_visit_log(self, data: dict[str, Any]) -> dict[str, Any]:
        return self.seed("faculty_visit_logs", data)

    async def get_visit_log(self, visit_id: str):
        return self._get("faculty_visit_logs", visit_id)

    async def update_visit_log(self, visit_id: str, data: dict[str, Any]):
        return self._update("faculty_visit_logs", visit_id, data)

    async def delete_visit_log(self, visit_id: str) -> None:
        self.tables["faculty_visit_logs"].pop(visit_id, None)

    async def list_visit_logs(self, filters, skip=0, limit=20):
        return self._page("faculty_visit_logs", filters, skip, limit)

    # ── Grievances ────────────────────────────────────────────

    async def create_grievance(self, data: dict[str, Any]) -> dict[str, Any]:
        return self.seed("grievances", data)

    async def list_grievances(self, filters, skip=0, limit=20):
        return self._page("grievances", filters, skip, limit)

    # ── Audit / locks ─────────────────────────────────────────

    async def insert_audit_log(self, data: dict[str, Any]) -> None:
        self.seed("audit_logs", data)

    async def acquire_cron_lock(self, lock_name: str, ttl_minutes: int) -> bool:
        if self.locks.get(lock_name):
            return False
        self.locks[lock_name] = True
        return True

    async def release_cron_lock(self, lock_name: str) -> None:
        self.locks[lock_name] = False
