from abc import ABC, abstractmethod
from typing import Any

from portal.ports.application_port import ApplicationPort
from portal.ports.grievance_port import GrievancePort
from portal.ports.mentor_port import MentorPort
from portal.ports.report_port import ReportPort
from portal.ports.student_port import StudentPort
from portal.ports.user_port import UserPort
from portal.ports.visit_port import VisitPort


class DatabasePort(
    UserPort,
    StudentPort,
    MentorPort,
    ApplicationPort,
    ReportPort,
    VisitPort,
    GrievancePort,
    ABC,
):
    """
    Aggregate port for CRUD operations against the data store.
    Inherits from domain-specific ports to strictly follow ISP.
    """

    # ── Audit trail ───────────────────────────────────────────

    @abstractmethod
    async def insert_audit_log(self, data: dict[str, Any]) -> None:
        """Append an audit entry."""
        ...

    # ── Scheduler locks ───────────────────────────────────────

    @abstractmethod
    async def acquire_cron_lock(self, lock_name: str, ttl_minutes: int) -> bool:
        """Try to take a named lock; True if this caller now holds it."""
        ...

    @abstractmethod
    async def release_cron_lock(self, lock_name: str) -> None:
        ...
