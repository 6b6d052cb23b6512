"""
Faculty (mentor) workflows: assigned students, internship review, monthly
report review, joining-letter verification and industry visit logs.
Depends on ports only (Dependency Inversion).
"""

import logging
from typing import Any

from portal.config import settings
from portal.domain.cycles import due_so_far, total_expected
from portal.domain.dates import as_datetime, iso, utcnow
from portal.domain.enums import (
    ApplicationStatus,
    AuditAction,
    AuditCategory,
    AuditSeverity,
    InternshipPhase,
    MonthlyReportStatus,
    VisitLogStatus,
    VisitType,
)
from portal.domain.errors import (
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from portal.domain.lifecycle import has_joined, phase_of, phase_updates
from portal.domain.models import (
    FacultyStudentUpdate,
    InternshipUpdate,
    Page,
    PhaseBreakdown,
    ReportProgress,
    SignedUrlResponse,
    VisitLogCreate,
    VisitLogUpdate,
)
from portal.ports.database_port import DatabasePort
from portal.ports.storage_port import StoragePort
from portal.services.audit_service import AuditService
from portal.services.common import (
    chunked,
    ensure_mentor,
    is_mentor_of,
    load_application,
    offset,
    scan_all,
    to_row,
)

logger = logging.getLogger(__name__)

REPORTS_BUCKET = "reports"
JOINING_LETTERS_BUCKET = "joining-letters"

# Visit details that cannot change once the log exists
_LOCKED_VISIT_FIELDS = {"visit_date", "visit_type"}
# May be filled in later (drafts), but never overwritten
_SET_ONCE_VISIT_FIELDS = {"visit_location", "latitude", "longitude"}


class FacultyService:
    """Orchestrates mentor-side business logic."""

    def __init__(self, db: DatabasePort, storage: StoragePort, audit: AuditService) -> None:
        self._db = db
        self._storage = storage
        self._audit = audit

    # ── Scope helpers ─────────────────────────────────────────

    async def _assigned_student_ids(self, faculty_id: str) -> list[str]:
        """Students under an active assignment plus those naming us as mentor."""
        ids = set(await self._db.list_assigned_student_ids(faculty_id))
        rows = await scan_all(
            self._db.list_applications, {"mentor_id": faculty_id, "is_active": True}
        )
        ids.update(row["student_id"] for row in rows)
        return sorted(ids)

    async def _latest_applications(self, student_ids: list[str]) -> dict[str, dict[str, Any]]:
        """Newest active application per student."""
        latest: dict[str, dict[str, Any]] = {}
        for chunk in chunked(student_ids):
            rows = await scan_all(
                self._db.list_applications, {"student_id": chunk, "is_active": True}
            )
            for row in rows:  # newest first
                latest.setdefault(row["student_id"], row)
        return latest

    async def _ensure_student_access(self, faculty_id: str, student_id: str) -> dict[str, Any]:
        student = await self._db.get_student(student_id)
        if not student:
            raise NotFoundError("Student", student_id)
        if not await is_mentor_of(self._db, faculty_id, student_id):
            raise PermissionDeniedError("You are not the assigned mentor for this student")
        return student

    async def _mentored_application(self, faculty_id: str, application_id: str) -> dict[str, Any]:
        application = await load_application(self._db, application_id)
        await ensure_mentor(self._db, faculty_id, application)
        return application

    async def _mentored_report(self, faculty_id: str, report_id: str) -> dict[str, Any]:
        report = await self._db.get_monthly_report(report_id)
        if not report or report.get("is_deleted"):
            raise NotFoundError("Monthly report", report_id)
        application = await self._db.get_application(report["application_id"])
        if not application:
            raise NotFoundError("Internship application", report["application_id"])
        await ensure_mentor(self._db, faculty_id, application)
        return report

    # ── Dashboard / students ──────────────────────────────────

    async def get_dashboard(self, faculty_id: str) -> dict[str, Any]:
        student_ids = await self._assigned_student_ids(faculty_id)
        latest = await self._latest_applications(student_ids)
        breakdown = PhaseBreakdown.from_rows(list(latest.values()))

        pending_letters = pending_reports = 0
        if student_ids:
            _, pending_letters = await self._db.list_applications(
                {
                    "student_id": student_ids,
                    "is_active": True,
                    "joining_letter_url__notnull": True,
                    "internship_phase": InternshipPhase.NOT_STARTED.value,
                },
                0,
                1,
            )
            _, pending_reports = await self._db.list_monthly_reports(
                {
                    "student_id": student_ids,
                    "is_deleted": False,
                    "status": [
                        MonthlyReportStatus.SUBMITTED.value,
                        MonthlyReportStatus.UNDER_REVIEW.value,
                    ],
                },
                0,
                1,
            )
        _, scheduled_visits = await self._db.list_visit_logs(
            {"faculty_id": faculty_id, "status": VisitLogStatus.SCHEDULED.value}, 0, 1
        )
        _, completed_visits = await self._db.list_visit_logs(
            {"faculty_id": faculty_id, "status": VisitLogStatus.COMPLETED.value}, 0, 1
        )

        return {
            "assignedStudents": len(student_ids),
            "joinedStudents": breakdown.active,
            "phaseBreakdown": breakdown.model_dump(by_alias=True),
            "pendingJoiningLetters": pending_letters,
            "reportsAwaitingReview": pending_reports,
            "scheduledVisits": scheduled_visits,
            "completedVisits": completed_visits,
        }

    async def list_students(
        self,
        faculty_id: str,
        page: int = 1,
        limit: int = 20,
        search: str | None = None,
        phase: InternshipPhase | None = None,
    ) -> Page:
        student_ids = await self._assigned_student_ids(faculty_id)
        latest = await self._latest_applications(student_ids)
        if phase is not None:
            student_ids = [
                sid for sid in student_ids
                if sid in latest and phase_of(latest[sid]) == phase
            ]
        if not student_ids:
            return Page.build([], 0, page, limit)

        filters: dict[str, Any] = {"id": student_ids}
        if search:
            filters["name__ilike"] = search.strip()
        rows, total = await self._db.list_students(filters, offset(page, limit), limit)
        for row in rows:
            app = latest.get(row["id"])
            row["internship_phase"] = phase_of(app).value if app else None
        return Page.build(rows, total, page, limit)

    async def get_student(self, faculty_id: str, student_id: str) -> dict[str, Any]:
        student = await self._ensure_student_access(faculty_id, student_id)
        app = (await self._latest_applications([student_id])).get(student_id)
        return {**student, "internship_phase": phase_of(app).value if app else None}

    async def get_student_progress(self, faculty_id: str, student_id: str) -> ReportProgress:
        await self._ensure_student_access(faculty_id, student_id)
        app = (await self._latest_applications([student_id])).get(student_id)
        if not app:
            return ReportProgress()

        start = as_datetime(app.get("start_date"))
        end = as_datetime(app.get("end_date"))
        expected = due = 0
        if start and end:
            expected = total_expected(start, end)
            due = due_so_far(start, end, utcnow(), settings.report_window_end_day)

        _, submitted = await self._db.list_monthly_reports(
            {"application_id": app["id"], "is_deleted": False}, 0, 1
        )
        _, approved = await self._db.list_monthly_reports(
            {
                "application_id": app["id"],
                "is_deleted": False,
                "status": MonthlyReportStatus.APPROVED.value,
            },
            0,
            1,
        )
        _, visits = await self._db.list_visit_logs(
            {"application_id": app["id"], "status": VisitLogStatus.COMPLETED.value}, 0, 1
        )
        return ReportProgress(
            application_id=app["id"],
            internship_phase=phase_of(app),
            has_joined=has_joined(app),
            total_expected_reports=expected,
            reports_due_so_far=due,
            reports_submitted=submitted,
            reports_approved=approved,
            visits_completed=visits,
            total_expected_visits=expected,  # one visit per internship month
        )

    async def get_student_internships(
        self, faculty_id: str, student_id: str
    ) -> list[dict[str, Any]]:
        await self._ensure_student_access(faculty_id, student_id)
        return await scan_all(
            self._db.list_applications, {"student_id": student_id, "is_active": True}
        )

    async def update_student(
        self, faculty: dict[str, Any], student_id: str, body: FacultyStudentUpdate
    ) -> dict[str, Any]:
        student = await self._ensure_student_access(faculty["id"], student_id)
        changes = to_row(body)
        if not changes:
            return student
        updated = await self._db.update_student(student_id, changes)
        await self._audit.log(
            AuditAction.STUDENT_PROFILE_UPDATE,
            "Student",
            student_id,
            faculty,
            f"Student profile updated by mentor: {student.get('name')}",
            category=AuditCategory.PROFILE_MANAGEMENT,
            old_values={k: student.get(k) for k in changes},
            new_values=changes,
        )
        return updated

    async def toggle_student_status(
        self, faculty: dict[str, Any], student_id: str, is_active: bool
    ) -> dict[str, Any]:
        student = await self._ensure_student_access(faculty["id"], student_id)
        updated = await self._db.update_student(student_id, {"is_active": is_active})
        if student.get("user_id"):
            await self._db.upsert_user(student["user_id"], {"is_active": is_active})
        await self._audit.log(
            AuditAction.USER_ACTIVATION if is_active else AuditAction.USER_DEACTIVATION,
            "Student",
            student_id,
            faculty,
            f"Student {'activated' if is_active else 'deactivated'}: {student.get('name')}",
            category=AuditCategory.USER_MANAGEMENT,
            severity=AuditSeverity.MEDIUM,
            old_values={"is_active": student.get("is_active")},
            new_values={"is_active": is_active},
        )
        logger.info(f"Student {student_id} is_active={is_active} (by {faculty['id']})")
        return updated

    # ── Internship applications ───────────────────────────────

    async def update_internship(
        self, faculty: dict[str, Any], application_id: str, body: InternshipUpdate
    ) -> dict[str, Any]:
        """
        Edit an application. A phase change is transition-checked and carries
        its date side effects; every edit stamps ``reviewed_at``.
        """
        application = await self._mentored_application(faculty["id"], application_id)
        now = utcnow()

        changes = to_row(body, exclude={"internship_phase"})
        start = as_datetime(changes.get("start_date", application.get("start_date")))
        end = as_datetime(changes.get("end_date", application.get("end_date")))
        if start and end and end < start:
            raise ValidationFailedError("endDate cannot be before startDate")

        if body.internship_phase is not None:
            changes.update(phase_updates(application, body.internship_phase, now))
        changes["reviewed_at"] = iso(now)

        updated = await self._db.update_application(application_id, changes)
        await self._audit.log(
            AuditAction.APPLICATION_UPDATE,
            "InternshipApplication",
            application_id,
            faculty,
            f"Internship updated: {application.get('company_name')}",
            category=AuditCategory.APPLICATION_PROCESS,
            old_values={
                "status": application.get("status"),
                "internship_phase": phase_of(application).value,
            },
            new_values=changes,
        )
        return updated

    async def delete_internship(self, faculty: dict[str, Any], application_id: str) -> None:
        application = await self._mentored_application(faculty["id"], application_id)
        await self._db.update_application(application_id, {"is_active": False})
        await self._audit.log(
            AuditAction.INTERNSHIP_DELETE,
            "InternshipApplication",
            application_id,
            faculty,
            f"Internship removed: {application.get('company_name')}",
            category=AuditCategory.APPLICATION_PROCESS,
            severity=AuditSeverity.HIGH,
        )

    async def list_self_identified(
        self,
        faculty_id: str,
        page: int = 1,
        limit: int = 20,
        status: ApplicationStatus | None = ApplicationStatus.APPROVED,
    ) -> Page:
        student_ids = await self._assigned_student_ids(faculty_id)
        if not student_ids:
            return Page.build([], 0, page, limit)
        filters: dict[str, Any] = {
            "student_id": student_ids,
            "is_self_identified": True,
            "is_active": True,
        }
        if status is not None:
            filters["status"] = status.value
        rows, total = await self._db.list_applications(filters, offset(page, limit), limit)
        return Page.build(rows, total, page, limit)

    async def decide_self_identified(
        self,
        faculty: dict[str, Any],
        application_id: str,
        decision: str,
        remarks: str | None,
    ) -> dict[str, Any]:
        application = await self._mentored_application(faculty["id"], application_id)
        if not application.get("is_self_identified"):
            raise ValidationFailedError("This is not a self-identified internship")

        now = utcnow()
        changes: dict[str, Any] = {
            "status": decision,
            "reviewed_at": iso(now),
            "review_remarks": remarks,
        }
        if decision == ApplicationStatus.REJECTED.value:
            changes["rejection_reason"] = remarks
            # a running internship ends with the rejection; finished ones cannot be rejected
            if phase_of(application) != InternshipPhase.NOT_STARTED:
                changes.update(phase_updates(application, InternshipPhase.TERMINATED, now))

        updated = await self._db.update_application(application_id, changes)
        await self._audit.log(
            AuditAction.APPLICATION_APPROVE
            if decision == ApplicationStatus.APPROVED.value
            else AuditAction.APPLICATION_REJECT,
            "InternshipApplication",
            application_id,
            faculty,
            f"Self-identified internship {decision.lower()}: {application.get('company_name')}",
            category=AuditCategory.APPLICATION_PROCESS,
            severity=AuditSeverity.MEDIUM,
            old_values={"status": application.get("status")},
            new_values={"status": decision, "review_remarks": remarks},
        )
        return updated

    # ── Monthly reports ───────────────────────────────────────

    async def list_monthly_reports(
        self,
        faculty_id: str,
        page: int = 1,
        limit: int = 20,
        status: MonthlyReportStatus | None = None,
    ) -> Page:
        student_ids = await self._assigned_student_ids(faculty_id)
        if not student_ids:
            return Page.build([], 0, page, limit)
        filters: dict[str, Any] = {"student_id": student_ids, "is_deleted": False}
        if status is not None:
            filters["status"] = status.value
        rows, total = await self._db.list_monthly_reports(filters, offset(page, limit), limit)
        return Page.build(rows, total, page, limit)

    async def review_report(
        self,
        faculty: dict[str, Any],
        report_id: str,
        is_approved: bool,
        comments: str | None,
    ) -> dict[str, Any]:
        report = await self._mentored_report(faculty["id"], report_id)
        now = iso(utcnow())
        status = MonthlyReportStatus.APPROVED if is_approved else MonthlyReportStatus.REJECTED
        changes: dict[str, Any] = {
            "status": status.value,
            "is_approved": is_approved,
            "reviewed_at": now,
            "reviewed_by": faculty["id"],
            "review_comments": comments,
        }
        if is_approved:
            changes["approved_at"] = now
            changes["approved_by"] = faculty["id"]

        updated = await self._db.update_monthly_report(report_id, changes)
        await self._audit.log(
            AuditAction.MONTHLY_REPORT_APPROVE if is_approved else AuditAction.MONTHLY_REPORT_REJECT,
            "MonthlyReport",
            report_id,
            faculty,
            f"Monthly report {'approved' if is_approved else 'rejected'}: "
            f"{report.get('month_name')} {report.get('report_year')}",
            severity=AuditSeverity.MEDIUM,
            old_values={"status": report.get("status")},
            new_values={"status": status.value, "review_comments": comments},
        )
        return updated

    async def approve_report(
        self, faculty: dict[str, Any], report_id: str, remarks: str | None
    ) -> dict[str, Any]:
        return await self.review_report(faculty, report_id, True, remarks)

    async def reject_report(
        self, faculty: dict[str, Any], report_id: str, reason: str
    ) -> dict[str, Any]:
        return await self.review_report(faculty, report_id, False, reason)

    async def delete_report(self, faculty: dict[str, Any], report_id: str) -> None:
        report = await self._mentored_report(faculty["id"], report_id)
        await self._db.update_monthly_report(report_id, {"is_deleted": True})
        await self._audit.log(
            AuditAction.MONTHLY_REPORT_DELETE,
            "MonthlyReport",
            report_id,
            faculty,
            f"Monthly report deleted: {report.get('month_name')} {report.get('report_year')}",
            severity=AuditSeverity.HIGH,
        )

    async def report_download_url(self, faculty_id: str, report_id: str) -> SignedUrlResponse:
        report = await self._mentored_report(faculty_id, report_id)
        if not report.get("report_file_url"):
            raise NotFoundError("Report file", report_id)
        url = await self._storage.get_signed_url(
            bucket=REPORTS_BUCKET,
            path=report["report_file_url"],
            expires_in=settings.signed_url_ttl_seconds,
        )
        return SignedUrlResponse(
            download_url=url, expires_in_seconds=settings.signed_url_ttl_seconds
        )

    # ── Joining letters ───────────────────────────────────────

    async def list_joining_letters(
        self,
        faculty_id: str,
        page: int = 1,
        limit: int = 20,
        pending: bool | None = None,
    ) -> Page:
        """
        Applications with an uploaded letter. ``pending=True`` narrows to
        letters not yet verified (phase still NOT_STARTED).
        """
        student_ids = await self._assigned_student_ids(faculty_id)
        if not student_ids:
            return Page.build([], 0, page, limit)
        filters: dict[str, Any] = {
            "student_id": student_ids,
            "is_active": True,
            "joining_letter_url__notnull": True,
        }
        if pending is True:
            filters["internship_phase"] = InternshipPhase.NOT_STARTED.value
        elif pending is False:
            filters["internship_phase__ne"] = InternshipPhase.NOT_STARTED.value
        rows, total = await self._db.list_applications(filters, offset(page, limit), limit)
        return Page.build(rows, total, page, limit)

    async def _letter_application(self, faculty_id: str, application_id: str) -> dict[str, Any]:
        application = await self._mentored_application(faculty_id, application_id)
        if not application.get("joining_letter_url"):
            raise ValidationFailedError("No joining letter has been uploaded for this internship")
        return application

    async def verify_joining_letter(
        self, faculty: dict[str, Any], application_id: str, remarks: str | None
    ) -> dict[str, Any]:
        application = await self._letter_application(faculty["id"], application_id)
        now = utcnow()
        changes = phase_updates(application, InternshipPhase.ACTIVE, now)
        changes.update({"reviewed_at": iso(now), "review_remarks": remarks})

        updated = await self._db.update_application(application_id, changes)
        await self._audit.log(
            AuditAction.JOINING_LETTER_VERIFY,
            "InternshipApplication",
            application_id,
            faculty,
            f"Joining letter verified: {application.get('company_name')}",
            severity=AuditSeverity.MEDIUM,
            old_values={"internship_phase": phase_of(application).value},
            new_values={"internship_phase": InternshipPhase.ACTIVE.value, "remarks": remarks},
        )
        logger.info(f"Joining letter verified for application {application_id}")
        return updated

    async def reject_joining_letter(
        self, faculty: dict[str, Any], application_id: str, reason: str
    ) -> dict[str, Any]:
        application = await self._letter_application(faculty["id"], application_id)
        now = utcnow()
        changes = phase_updates(application, InternshipPhase.NOT_STARTED, now)
        changes.update({
            "joining_date": None,
            "reviewed_at": iso(now),
            "review_remarks": reason,
        })

        updated = await self._db.update_application(application_id, changes)
        await self._audit.log(
            AuditAction.JOINING_LETTER_REJECT,
            "InternshipApplication",
            application_id,
            faculty,
            f"Joining letter rejected: {application.get('company_name')}",
            severity=AuditSeverity.MEDIUM,
            old_values={"internship_phase": phase_of(application).value},
            new_values={"internship_phase": InternshipPhase.NOT_STARTED.value, "reason": reason},
        )
        return updated

    async def delete_joining_letter(
        self, faculty: dict[str, Any], application_id: str
    ) -> dict[str, Any]:
        application = await self._letter_application(faculty["id"], application_id)
        changes = phase_updates(application, InternshipPhase.NOT_STARTED, utcnow())
        changes.update({
            "joining_letter_url": None,
            "joining_letter_uploaded_at": None,
            "joining_date": None,
            "reviewed_at": None,
            "review_remarks": None,
        })

        updated = await self._db.update_application(application_id, changes)
        try:
            await self._storage.delete_file(JOINING_LETTERS_BUCKET, application["joining_letter_url"])
        except Exception as exc:
            logger.warning(f"Could not remove joining letter file for {application_id}: {exc}")
        await self._audit.log(
            AuditAction.JOINING_LETTER_DELETE,
            "InternshipApplication",
            application_id,
            faculty,
            f"Joining letter deleted: {application.get('company_name')}",
            severity=AuditSeverity.HIGH,
            old_values={"joining_letter_url": application.get("joining_letter_url")},
        )
        return updated

    # ── Visit logs ────────────────────────────────────────────

    async def _own_visit(self, faculty_id: str, visit_id: str) -> dict[str, Any]:
        visit = await self._db.get_visit_log(visit_id)
        if not visit:
            raise NotFoundError("Visit log", visit_id)
        if visit.get("faculty_id") != faculty_id:
            raise PermissionDeniedError("Only the faculty member who logged this visit can change it")
        return visit

    async def _visitable_application(
        self, faculty_id: str, body: VisitLogCreate
    ) -> dict[str, Any]:
        """Active, approved or joined, non-terminated application we mentor."""
        visitable = [ApplicationStatus.APPROVED.value, ApplicationStatus.JOINED.value]
        if body.application_id:
            application = await self._db.get_application(str(body.application_id))
            if (
                not application
                or not application.get("is_active", True)
                or application.get("status") not in visitable
            ):
                application = None
        else:
            rows, _ = await self._db.list_applications(
                {
                    "student_id": str(body.student_id),
                    "is_active": True,
                    "status": visitable,
                },
                0,
                1,
            )
            application = rows[0] if rows else None

        if not application:
            raise NotFoundError("Internship application")
        await ensure_mentor(self._db, faculty_id, application)
        if phase_of(application) == InternshipPhase.TERMINATED:
            raise ValidationFailedError("Cannot log a visit for a terminated internship")
        return application

    async def list_visit_logs(
        self,
        faculty_id: str,
        page: int = 1,
        limit: int = 20,
        application_id: str | None = None,
        status: VisitLogStatus | None = None,
    ) -> Page:
        filters: dict[str, Any] = {"faculty_id": faculty_id}
        if application_id:
            filters["application_id"] = application_id
        if status is not None:
            filters["status"] = status.value
        rows, total = await self._db.list_visit_logs(filters, offset(page, limit), limit)
        return Page.build(rows, total, page, limit)

    async def get_visit_log(self, faculty_id: str, visit_id: str) -> dict[str, Any]:
        return await self._own_visit(faculty_id, visit_id)

    async def create_visit_log(
        self, faculty: dict[str, Any], body: VisitLogCreate
    ) -> dict[str, Any]:
        if (
            body.visit_type == VisitType.PHYSICAL
            and not body.visit_location
            and body.status != VisitLogStatus.DRAFT
        ):
            raise ValidationFailedError("visitLocation is required for physical visits")

        application = await self._visitable_application(faculty["id"], body)

        visit_date = as_datetime(body.visit_date) or utcnow()
        start = as_datetime(application.get("start_date"))
        end = as_datetime(application.get("end_date"))
        # internship dates are whole days, so compare calendar dates
        if start and visit_date.date() < start.date():
            raise ValidationFailedError(
                f"Visit date cannot be before internship start date ({start.date()})"
            )
        if end and visit_date.date() > end.date():
            raise ValidationFailedError(
                f"Visit date cannot be after internship end date ({end.date()})"
            )

        row = to_row(body, exclude={"application_id", "student_id"})
        row.update({
            "application_id": application["id"],
            "student_id": application["student_id"],
            "faculty_id": faculty["id"],
            "visit_date": iso(visit_date),
            "status": (body.status or VisitLogStatus.COMPLETED).value,
        })
        visit = await self._db.create_visit_log(row)
        await self._audit.log(
            AuditAction.VISIT_LOG_CREATE,
            "FacultyVisitLog",
            visit["id"],
            faculty,
            f"Faculty visit log created: {body.visit_type.value} at {body.visit_location}",
            new_values={
                "application_id": application["id"],
                "visit_type": body.visit_type.value,
                "visit_date": row["visit_date"],
            },
        )
        return visit

    async def update_visit_log(
        self, faculty: dict[str, Any], visit_id: str, body: VisitLogUpdate
    ) -> dict[str, Any]:
        visit = await self._own_visit(faculty["id"], visit_id)
        changes = to_row(body)

        locked = sorted(
            f for f in changes
            if f in _LOCKED_VISIT_FIELDS
            or (f in _SET_ONCE_VISIT_FIELDS and visit.get(f) is not None)
        )
        if locked:
            raise ValidationFailedError(
                f"Cannot modify locked fields: {', '.join(locked)}",
                details={"fields": locked},
            )

        status = changes.get("status", visit.get("status"))
        location = changes.get("visit_location", visit.get("visit_location"))
        if (
            visit.get("visit_type") == VisitType.PHYSICAL.value
            and status != VisitLogStatus.DRAFT.value
            and not location
        ):
            raise ValidationFailedError("visitLocation is required for physical visits")

        if not changes:
            return visit
        updated = await self._db.update_visit_log(visit_id, changes)
        await self._audit.log(
            AuditAction.VISIT_LOG_UPDATE,
            "FacultyVisitLog",
            visit_id,
            faculty,
            "Faculty visit log updated",
            old_values={"status": visit.get("status")},
            new_values=changes,
        )
        return updated

    async def delete_visit_log(self, faculty: dict[str, Any], visit_id: str) -> None:
        visit = await self._own_visit(faculty["id"], visit_id)
        await self._db.delete_visit_log(visit_id)
        await self._audit.log(
            AuditAction.VISIT_LOG_DELETE,
            "FacultyVisitLog",
            visit_id,
            faculty,
            "Faculty visit log deleted",
            severity=AuditSeverity.MEDIUM,
            old_values={
                "visit_type": visit.get("visit_type"),
                "visit_date": visit.get("visit_date"),
            },
        )
