"""
Principal workflows: institution overview and mentor assignment.
"""

import logging
from typing import Any

from portal.domain.dates import iso, utcnow
from portal.domain.enums import (
    AuditAction,
    AuditCategory,
    AuditSeverity,
    InternshipPhase,
    UserRole,
)
from portal.domain.errors import NotFoundError, PermissionDeniedError, ValidationFailedError
from portal.domain.lifecycle import phase_of
from portal.domain.models import Page, PhaseBreakdown
from portal.ports.database_port import DatabasePort
from portal.services.audit_service import AuditService
from portal.services.common import chunked, offset, scan_all

logger = logging.getLogger(__name__)


class PrincipalService:
    """Institution-wide views scoped to the principal's own institution."""

    def __init__(self, db: DatabasePort, audit: AuditService) -> None:
        self._db = db
        self._audit = audit

    async def _institution_students(self, institution_id: str | None) -> list[dict[str, Any]]:
        return await scan_all(
            self._db.list_students, {"institution_id": institution_id, "is_active": True}
        )

    async def _latest_phases(self, student_ids: list[str]) -> dict[str, InternshipPhase]:
        latest: dict[str, InternshipPhase] = {}
        for chunk in chunked(student_ids):
            rows = await scan_all(
                self._db.list_applications, {"student_id": chunk, "is_active": True}
            )
            for row in rows:  # newest first
                latest.setdefault(row["student_id"], phase_of(row))
        return latest

    async def get_dashboard(self, principal: dict[str, Any]) -> dict[str, Any]:
        institution_id = principal.get("institution_id")
        _, total_students = await self._db.list_students(
            {"institution_id": institution_id, "is_active": True}, 0, 1
        )
        student_ids = [s["id"] for s in await self._institution_students(institution_id)]
        phases = await self._latest_phases(student_ids)
        breakdown = PhaseBreakdown.from_rows(
            [{"internship_phase": p.value} for p in phases.values()]
        )

        mentored = 0
        for chunk in chunked(student_ids):
            mentored += len(await self._db.list_mentored_student_ids(chunk))

        return {
            "totalStudents": total_students,
            "studentsWithInternship": len(phases),
            "joinedStudents": breakdown.active,
            "phaseBreakdown": breakdown.model_dump(by_alias=True),
            "studentsWithoutMentor": total_students - mentored,
        }

    async def list_students(
        self,
        principal: dict[str, Any],
        page: int = 1,
        limit: int = 20,
        phase: InternshipPhase | None = None,
        search: str | None = None,
    ) -> Page:
        filters: dict[str, Any] = {"institution_id": principal.get("institution_id")}
        if search:
            filters["name__ilike"] = search.strip()

        if phase is not None:
            students = await self._institution_students(principal.get("institution_id"))
            phases = await self._latest_phases([s["id"] for s in students])
            matching = [sid for sid, p in phases.items() if p == phase]
            if not matching:
                return Page.build([], 0, page, limit)
            filters["id"] = matching

        rows, total = await self._db.list_students(filters, offset(page, limit), limit)
        phases = await self._latest_phases([r["id"] for r in rows])
        for row in rows:
            p = phases.get(row["id"])
            row["internship_phase"] = p.value if p else None
        return Page.build(rows, total, page, limit)

    async def assign_mentor(
        self, principal: dict[str, Any], mentor_id: str, student_id: str
    ) -> dict[str, Any]:
        """
        Make ``mentor_id`` the student's only active mentor and point the
        student's live applications at them.
        """
        institution_id = principal.get("institution_id")
        student = await self._db.get_student(student_id)
        if not student:
            raise NotFoundError("Student", student_id)
        if student.get("institution_id") != institution_id:
            raise PermissionDeniedError("Student belongs to another institution")

        mentor = await self._db.get_user(mentor_id)
        if not mentor:
            raise NotFoundError("Mentor", mentor_id)
        if mentor.get("role") != UserRole.TEACHER.value:
            raise ValidationFailedError("Mentors must be faculty members")
        if mentor.get("institution_id") != institution_id:
            raise PermissionDeniedError("Mentor belongs to another institution")
        if mentor.get("is_active") is False:
            raise ValidationFailedError("Mentor account is deactivated")

        previous = await self._db.get_active_assignment_for_student(student_id)
        await self._db.deactivate_assignments(student_id)
        assignment = await self._db.create_assignment({
            "mentor_id": mentor_id,
            "student_id": student_id,
            "assigned_by": principal["id"],
            "is_active": True,
            "assigned_at": iso(utcnow()),
        })

        applications = await scan_all(
            self._db.list_applications, {"student_id": student_id, "is_active": True}
        )
        for application in applications:
            if application.get("mentor_id") != mentor_id:
                await self._db.update_application(application["id"], {"mentor_id": mentor_id})

        await self._audit.log(
            AuditAction.MENTOR_ASSIGN,
            "MentorAssignment",
            assignment["id"],
            principal,
            f"Mentor {mentor.get('name')} assigned to {student.get('name')}",
            category=AuditCategory.ADMINISTRATIVE,
            severity=AuditSeverity.MEDIUM,
            old_values={"mentor_id": previous["mentor_id"] if previous else None},
            new_values={"mentor_id": mentor_id},
        )
        logger.info(f"Mentor {mentor_id} assigned to student {student_id}")
        return assignment
