"""
Concrete implementation of DatabasePort using the Supabase Python client.
"""

import logging
from typing import Any

from supabase import Client

from portal.ports.database_port import DatabasePort
from portal.ports.filters import split_filter

logger = logging.getLogger(__name__)


class SupabaseAdapter(DatabasePort):
    """All database I/O goes through the Supabase REST client."""

    def __init__(self, client: Client) -> None:
        self._client = client

    # ── Query helpers ─────────────────────────────────────────

    @staticmethod
    def _apply_filters(query, filters: dict[str, Any]):
        for key, value in filters.items():
            column, op = split_filter(key, value)
            if op == "eq":
                query = query.eq(column, value)
            elif op == "in":
                query = query.in_(column, list(value))
            elif op == "is":
                query = query.is_(column, "null")
            elif op == "notnull":
                query = query.not_.is_(column, "null")
            elif op == "ne":
                query = query.neq(column, value)
            elif op == "ilike":
                query = query.ilike(column, f"%{value}%")
            else:  # lt / lte / gt / gte
                query = getattr(query, op)(column, value)
        return query

    def _get_one(self, table: str, row_id: str) -> dict[str, Any] | None:
        result = (
            self._client.table(table)
            .select("*")
            .eq("id", row_id)
            .maybe_single()
            .execute()
        )
        return result.data if result else None

    def _update_one(self, table: str, row_id: str, data: dict[str, Any]) -> dict[str, Any]:
        result = self._client.table(table).update(data).eq("id", row_id).execute()
        return result.data[0] if result.data else {}

    def _page(
        self,
        table: str,
        filters: dict[str, Any],
        skip: int,
        limit: int,
        order: list[tuple[str, bool]],
    ) -> tuple[list[dict[str, Any]], int]:
        query = self._client.table(table).select("*", count="exact")
        query = self._apply_filters(query, filters)
        for column, desc in order:
            query = query.order(column, desc=desc)
        result = query.range(skip, skip + limit - 1).execute()
        rows = result.data or []
        total = result.count if result.count is not None else len(rows)
        return rows, total

    # ── Users ─────────────────────────────────────────────────

    async def get_user(self, user_id: str) -> dict[str, Any] | None:
        return self._get_one("users", user_id)

    async def upsert_user(self, user_id: str, data: dict[str, Any]) -> None:
        # Try update first (preserves existing columns like email)
        result = (
            self._client.table("users")
            .update(data)
            .eq("id", user_id)
            .execute()
        )
        # If no rows were updated, the user doesn't exist yet — insert
        if not result.data:
            self._client.table("users").insert({**data, "id": user_id}).execute()

    async def list_users(self, filters: dict[str, Any]) -> list[dict[str, Any]]:
        query = self._apply_filters(self._client.table("users").select("*"), filters)
        result = query.order("name").execute()
        return result.data or []

    # ── Students ──────────────────────────────────────────────

    async def get_student(self, student_id: str) -> dict[str, Any] | None:
        return self._get_one("students", student_id)

    async def get_student_by_user(self, user_id: str) -> dict[str, Any] | None:
        result = (
            self._client.table("students")
            .select("*")
            .eq("user_id", user_id)
            .maybe_single()
            .execute()
        )
        return result.data if result else None

    async def update_student(self, student_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return self._update_one("students", student_id, data)

    async def list_students(
        self, filters: dict[str, Any], skip: int = 0, limit: int = 20
    ) -> tuple[list[dict[str, Any]], int]:
        return self._page("students", filters, skip, limit, [("name", False)])

    # ── Student documents ─────────────────────────────────────

    async def create_document(self, data: dict[str, Any]) -> dict[str, Any]:
        result = self._client.table("student_documents").insert(data).execute()
        return result.data[0]

    async def get_document(self, document_id: str) -> dict[str, Any] | None:
        return self._get_one("student_documents", document_id)

    async def delete_document(self, document_id: str) -> None:
        self._client.table("student_documents").delete().eq("id", document_id).execute()

    async def list_documents(
        self, filters: dict[str, Any], skip: int = 0, limit: int = 20
    ) -> tuple[list[dict[str, Any]], int]:
        return self._page("student_documents", filters, skip, limit, [("uploaded_at", True)])

    # ── Mentor assignments ────────────────────────────────────

    async def find_active_assignment(
        self, mentor_id: str, student_id: str
    ) -> dict[str, Any] | None:
        result = (
            self._client.table("mentor_assignments")
            .select("*")
            .eq("mentor_id", mentor_id)
            .eq("student_id", student_id)
            .eq("is_active", True)
            .limit(1)
            .maybe_single()
            .execute()
        )
        return result.data if result else None

    async def get_active_assignment_for_student(self, student_id: str) -> dict[str, Any] | None:
        result = (
            self._client.table("mentor_assignments")
            .select("*")
            .eq("student_id", student_id)
            .eq("is_active", True)
            .order("assigned_at", desc=True)
            .limit(1)
            .maybe_single()
            .execute()
        )
        return result.data if result else None

    async def list_assigned_student_ids(self, mentor_id: str) -> list[str]:
        result = (
            self._client.table("mentor_assignments")
            .select("student_id")
            .eq("mentor_id", mentor_id)
            .eq("is_active", True)
            .execute()
        )
        return [row["student_id"] for row in (result.data or [])]

    async def list_mentored_student_ids(self, student_ids: list[str]) -> list[str]:
        if not student_ids:
            return []
        result = (
            self._client.table("mentor_assignments")
            .select("student_id")
            .in_("student_id", student_ids)
            .eq("is_active", True)
            .execute()
        )
        return sorted({row["student_id"] for row in (result.data or [])})

    async def create_assignment(self, data: dict[str, Any]) -> dict[str, Any]:
        result = self._client.table("mentor_assignments").insert(data).execute()
        return result.data[0]

    async def deactivate_assignments(self, student_id: str) -> None:
        (
            self._client.table("mentor_assignments")
            .update({"is_active": False})
            .eq("student_id", student_id)
            .eq("is_active", True)
            .execute()
        )

    # ── Internship applications ───────────────────────────────

    async def create_application(self, data: dict[str, Any]) -> dict[str, Any]:
        result = self._client.table("internship_applications").insert(data).execute()
        return result.data[0]

    async def get_application(self, application_id: str) -> dict[str, Any] | None:
        return self._get_one("internship_applications", application_id)

    async def update_application(
        self, application_id: str, data: dict[str, Any]
    ) -> dict[str, Any]:
        return self._update_one("internship_applications", application_id, data)

    async def list_applications(
        self, filters: dict[str, Any], skip: int = 0, limit: int = 20
    ) -> tuple[list[dict[str, Any]], int]:
        return self._page(
            "internship_applications", filters, skip, limit, [("created_at", True)]
        )

    # ── Monthly reports ───────────────────────────────────────

    async def create_monthly_report(self, data: dict[str, Any]) -> dict[str, Any]:
        result = self._client.table("monthly_reports").insert(data).execute()
        return result.data[0]

    async def get_monthly_report(self, report_id: str) -> dict[str, Any] | None:
        return self._get_one("monthly_reports", report_id)

    async def update_monthly_report(self, report_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return self._update_one("monthly_reports", report_id, data)

    async def find_monthly_report(
        self, application_id: str, month: int, year: int
    ) -> dict[str, Any] | None:
        result = (
            self._client.table("monthly_reports")
            .select("*")
            .eq("application_id", application_id)
            .eq("report_month", month)
            .eq("report_year", year)
            .eq("is_deleted", False)
            .limit(1)
            .maybe_single()
            .execute()
        )
        return result.data if result else None

    async def list_monthly_reports(
        self, filters: dict[str, Any], skip: int = 0, limit: int = 20
    ) -> tuple[list[dict[str, Any]], int]:
        return self._page(
            "monthly_reports",
            filters,
            skip,
            limit,
            [("report_year", True), ("report_month", True)],
        )

    # ── Faculty visit logs ────────────────────────────────────

    async def create_visit_log(self, data: dict[str, Any]) -> dict[str, Any]:
        result = self._client.table("faculty_visit_logs").insert(data).execute()
        return result.data[0]

    async def get_visit_log(self, visit_id: str) -> dict[str, Any] | None:
        return self._get_one("faculty_visit_logs", visit_id)

    async def update_visit_log(self, visit_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return self._update_one("faculty_visit_logs", visit_id, data)

    async def delete_visit_log(self, visit_id: str) -> None:
        self._client.table("faculty_visit_logs").delete().eq("id", visit_id).execute()

    async def list_visit_logs(
        self, filters: dict[str, Any], skip: int = 0, limit: int = 20
    ) -> tuple[list[dict[str, Any]], int]:
        return self._page("faculty_visit_logs", filters, skip, limit, [("visit_date", True)])

    # ── Grievances ────────────────────────────────────────────

    async def create_grievance(self, data: dict[str, Any]) -> dict[str, Any]:
        result = self._client.table("grievances").insert(data).execute()
        return result.data[0]

    async def list_grievances(
        self, filters: dict[str, Any], skip: int = 0, limit: int = 20
    ) -> tuple[list[dict[str, Any]], int]:
        return self._page("grievances", filters, skip, limit, [("created_at", True)])

    # ── Audit trail ───────────────────────────────────────────

    async def insert_audit_log(self, data: dict[str, Any]) -> None:
        self._client.table("audit_logs").insert(data).execute()

    # ── Scheduler locks ───────────────────────────────────────

    async def acquire_cron_lock(self, lock_name: str, ttl_minutes: int) -> bool:
        # The RPC does INSERT ... ON CONFLICT DO UPDATE WHERE locked_until < NOW(),
        # so exactly one caller wins while the lock is live.
        result = self._client.rpc("acquire_cron_lock", {
            "p_lock_name": lock_name,
            "p_ttl_minutes": ttl_minutes,
        }).execute()
        return bool(result.data)

    async def release_cron_lock(self, lock_name: str) -> None:
        self._client.table("cron_locks").update({
            "locked_until": "2000-01-01T00:00:00Z",  # Far past → effectively unlocked
        }).eq("lock_name", lock_name).execute()
