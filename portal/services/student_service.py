"""
Student workflows: profile, applications, self-identified internships,
joining letters, monthly reports, documents and grievances.
Depends on ports only (Dependency Inversion).
"""

import logging
import os
import re
import uuid
from typing import Any

from portal.config import settings
from portal.domain.cycles import MONTH_NAMES, cycle_for, month_in_range, total_expected
from portal.domain.dates import as_datetime, iso, utcnow
from portal.domain.enums import (
    ApplicationStatus,
    AuditAction,
    AuditCategory,
    AuditSeverity,
    DocumentType,
    EscalationLevel,
    GrievanceStatus,
    InternshipPhase,
    MonthlyReportStatus,
)
from portal.domain.errors import ConflictError, NotFoundError, ValidationFailedError
from portal.domain.lifecycle import accepts_reports, has_joined, is_terminal, phase_of
from portal.domain.models import (
    GrievanceCreate,
    Page,
    SelfIdentifiedCreate,
    SelfIdentifiedUpdate,
    SignedUrlResponse,
    StudentProfileUpdate,
)
from portal.ports.database_port import DatabasePort
from portal.ports.document_port import DocumentPort
from portal.ports.storage_port import StoragePort
from portal.services.audit_service import AuditService
from portal.services.common import offset, scan_all, to_row

logger = logging.getLogger(__name__)

REPORTS_BUCKET = "reports"
JOINING_LETTERS_BUCKET = "joining-letters"
DOCUMENTS_BUCKET = "documents"

_NON_WITHDRAWABLE = {
    ApplicationStatus.SELECTED.value,
    ApplicationStatus.JOINED.value,
    ApplicationStatus.COMPLETED.value,
    ApplicationStatus.WITHDRAWN.value,
}
_CLOSED_STATUSES = [ApplicationStatus.REJECTED.value, ApplicationStatus.WITHDRAWN.value]
# Portal applications that already tie the student to a company
_PLACED_STATUSES = [
    ApplicationStatus.APPLIED.value,
    ApplicationStatus.SELECTED.value,
    ApplicationStatus.JOINED.value,
]
_OPEN_GRIEVANCE = [
    GrievanceStatus.SUBMITTED.value,
    GrievanceStatus.PENDING.value,
    GrievanceStatus.UNDER_REVIEW.value,
    GrievanceStatus.IN_PROGRESS.value,
    GrievanceStatus.ESCALATED.value,
]


def _storage_path(owner_id: str, file_name: str) -> str:
    """``"<owner>/<8 hex>_<sanitised name>"`` so re-uploads never collide."""
    safe_name = re.sub(r"[^\w.\-]", "_", file_name)  # keep alphanum, dot, dash
    safe_name = re.sub(r"_+", "_", safe_name)        # collapse multiple _
    return f"{owner_id}/{uuid.uuid4().hex[:8]}_{safe_name}"


def _extension(file_name: str) -> str:
    return os.path.splitext(file_name)[1].lower().lstrip(".")


class StudentService:
    """Orchestrates student-side business logic."""

    def __init__(
        self,
        db: DatabasePort,
        storage: StoragePort,
        doc_parser: DocumentPort,
        audit: AuditService,
    ) -> None:
        self._db = db
        self._storage = storage
        self._doc = doc_parser
        self._audit = audit

    # ── Lookups ───────────────────────────────────────────────

    async def _student(self, user: dict[str, Any]) -> dict[str, Any]:
        student = await self._db.get_student_by_user(user["id"])
        if not student:
            raise NotFoundError("Student")
        return student

    async def _own_application(self, student_id: str, application_id: str) -> dict[str, Any]:
        """Another student's application is reported as missing, not forbidden."""
        application = await self._db.get_application(application_id)
        if (
            not application
            or application.get("student_id") != student_id
            or not application.get("is_active", True)
        ):
            raise NotFoundError("Internship application", application_id)
        return application

    async def _own_report(self, student_id: str, report_id: str) -> dict[str, Any]:
        report = await self._db.get_monthly_report(report_id)
        if not report or report.get("student_id") != student_id or report.get("is_deleted"):
            raise NotFoundError("Monthly report", report_id)
        return report

    async def _current_application(self, student_id: str) -> dict[str, Any] | None:
        """Prefer a running internship, then the newest live one."""
        rows = await scan_all(
            self._db.list_applications,
            {"student_id": student_id, "is_active": True, "status__ne": ApplicationStatus.WITHDRAWN.value},
        )
        for row in rows:
            if has_joined(row):
                return row
        return rows[0] if rows else None

    async def _mentor(self, student_id: str) -> dict[str, Any] | None:
        assignment = await self._db.get_active_assignment_for_student(student_id)
        if not assignment:
            return None
        return await self._db.get_user(assignment["mentor_id"])

    # ── Dashboard / profile ───────────────────────────────────

    async def get_dashboard(self, user: dict[str, Any]) -> dict[str, Any]:
        student = await self._student(user)
        application = await self._current_application(student["id"])

        expected = submitted = 0
        if application:
            start = as_datetime(application.get("start_date"))
            end = as_datetime(application.get("end_date"))
            if start and end:
                expected = total_expected(start, end)
            _, submitted = await self._db.list_monthly_reports(
                {"application_id": application["id"], "is_deleted": False}, 0, 1
            )
        _, open_grievances = await self._db.list_grievances(
            {"student_id": student["id"], "status": _OPEN_GRIEVANCE}, 0, 1
        )
        mentor = await self._mentor(student["id"])

        return {
            "student": student,
            "currentApplication": application,
            "internshipPhase": phase_of(application).value if application else None,
            "hasJoined": has_joined(application) if application else False,
            "reportsSubmitted": submitted,
            "reportsExpected": expected,
            "openGrievances": open_grievances,
            "mentor": mentor,
        }

    async def get_profile(self, user: dict[str, Any]) -> dict[str, Any]:
        return await self._student(user)

    async def update_profile(
        self, user: dict[str, Any], body: StudentProfileUpdate
    ) -> dict[str, Any]:
        student = await self._student(user)
        changes = to_row(body)
        if not changes:
            return student
        updated = await self._db.update_student(student["id"], changes)
        await self._audit.log(
            AuditAction.STUDENT_PROFILE_UPDATE,
            "Student",
            student["id"],
            user,
            "Student updated own profile",
            category=AuditCategory.PROFILE_MANAGEMENT,
            old_values={k: student.get(k) for k in changes},
            new_values=changes,
        )
        return updated

    async def get_mentor(self, user: dict[str, Any]) -> dict[str, Any] | None:
        student = await self._student(user)
        return await self._mentor(student["id"])

    # ── Applications ──────────────────────────────────────────

    async def list_applications(
        self,
        user: dict[str, Any],
        page: int = 1,
        limit: int = 20,
        status: ApplicationStatus | None = None,
    ) -> Page:
        student = await self._student(user)
        filters: dict[str, Any] = {"student_id": student["id"], "is_active": True}
        if status is not None:
            filters["status"] = status.value
        rows, total = await self._db.list_applications(filters, offset(page, limit), limit)
        return Page.build(rows, total, page, limit)

    async def get_application(self, user: dict[str, Any], application_id: str) -> dict[str, Any]:
        student = await self._student(user)
        return await self._own_application(student["id"], application_id)

    async def withdraw_application(
        self, user: dict[str, Any], application_id: str
    ) -> dict[str, Any]:
        student = await self._student(user)
        application = await self._own_application(student["id"], application_id)
        if application.get("status") in _NON_WITHDRAWABLE or has_joined(application):
            raise ValidationFailedError(
                f"Cannot withdraw application with status: {application.get('status')}"
            )

        updated = await self._db.update_application(
            application_id, {"status": ApplicationStatus.WITHDRAWN.value}
        )
        await self._audit.log(
            AuditAction.APPLICATION_WITHDRAW,
            "InternshipApplication",
            application_id,
            user,
            f"Application withdrawn: {application.get('company_name')}",
            category=AuditCategory.APPLICATION_PROCESS,
            old_values={"status": application.get("status")},
            new_values={"status": ApplicationStatus.WITHDRAWN.value},
        )
        return updated

    # ── Self-identified internships ───────────────────────────

    async def create_self_identified(
        self, user: dict[str, Any], body: SelfIdentifiedCreate
    ) -> dict[str, Any]:
        """
        Register an internship the student found themselves.

        It is approved on creation and starts NOT_STARTED; the phase only
        moves to ACTIVE once the mentor verifies the joining letter.
        """
        student = await self._student(user)

        _, placed = await self._db.list_applications(
            {
                "student_id": student["id"],
                "is_self_identified": False,
                "is_active": True,
                "status": _PLACED_STATUSES,
            },
            0,
            1,
        )
        if placed:
            raise ConflictError("You already have an active internship application")

        _, open_count = await self._db.list_applications(
            {
                "student_id": student["id"],
                "is_self_identified": True,
                "is_active": True,
                "status": ApplicationStatus.APPROVED.value,
                "internship_phase": [
                    InternshipPhase.NOT_STARTED.value,
                    InternshipPhase.ACTIVE.value,
                ],
            },
            0,
            1,
        )
        if open_count:
            raise ConflictError("You already have an open self-identified internship")

        assignment = await self._db.get_active_assignment_for_student(student["id"])
        row = to_row(body, exclude={"cover_letter"})
        row.update({
            "student_id": student["id"],
            "mentor_id": assignment["mentor_id"] if assignment else None,
            "is_self_identified": True,
            "is_active": True,
            "status": ApplicationStatus.APPROVED.value,
            "internship_phase": InternshipPhase.NOT_STARTED.value,
            "notes": body.cover_letter,
            "reviewed_at": iso(utcnow()),
        })
        application = await self._db.create_application(row)
        await self._audit.log(
            AuditAction.APPLICATION_SUBMIT,
            "InternshipApplication",
            application["id"],
            user,
            f"Self-identified internship submitted: {body.company_name}",
            category=AuditCategory.APPLICATION_PROCESS,
            new_values={"company_name": body.company_name, "status": ApplicationStatus.APPROVED.value},
        )
        logger.info(f"Self-identified internship {application['id']} created for student {student['id']}")
        return application

    async def list_self_identified(
        self, user: dict[str, Any], page: int = 1, limit: int = 20
    ) -> Page:
        student = await self._student(user)
        rows, total = await self._db.list_applications(
            {"student_id": student["id"], "is_self_identified": True, "is_active": True},
            offset(page, limit),
            limit,
        )
        return Page.build(rows, total, page, limit)

    async def update_self_identified(
        self, user: dict[str, Any], application_id: str, body: SelfIdentifiedUpdate
    ) -> dict[str, Any]:
        student = await self._student(user)
        application = await self._own_application(student["id"], application_id)
        if not application.get("is_self_identified"):
            raise ValidationFailedError("This is not a self-identified internship")

        changes = to_row(body)
        moved_dates = {"start_date", "end_date"} & changes.keys()
        if moved_dates and phase_of(application) != InternshipPhase.NOT_STARTED:
            raise ValidationFailedError(
                "Internship dates cannot be changed after the internship has started",
                details={"fields": sorted(moved_dates)},
            )
        start = as_datetime(changes.get("start_date", application.get("start_date")))
        end = as_datetime(changes.get("end_date", application.get("end_date")))
        if start and end and end < start:
            raise ValidationFailedError("endDate cannot be before startDate")
        if not changes:
            return application

        updated = await self._db.update_application(application_id, changes)
        await self._audit.log(
            AuditAction.APPLICATION_UPDATE,
            "InternshipApplication",
            application_id,
            user,
            f"Self-identified internship updated: {updated.get('company_name')}",
            category=AuditCategory.APPLICATION_PROCESS,
            old_values={k: application.get(k) for k in changes},
            new_values=changes,
        )
        return updated

    # ── Joining letter ────────────────────────────────────────

    async def upload_joining_letter(
        self,
        user: dict[str, Any],
        application_id: str,
        file_bytes: bytes,
        file_name: str,
        content_type: str,
    ) -> dict[str, Any]:
        """
        Store the letter. The phase is untouched: the mentor's verification
        is what starts the internship.
        """
        student = await self._student(user)
        application = await self._own_application(student["id"], application_id)
        if application.get("status") in _CLOSED_STATUSES:
            raise ValidationFailedError(
                f"Cannot upload a joining letter for a {application['status'].lower()} application"
            )
        if is_terminal(phase_of(application)):
            raise ValidationFailedError("This internship has already ended")

        path = _storage_path(f"{student['id']}/{application_id}", file_name)
        await self._storage.upload_file(
            bucket=JOINING_LETTERS_BUCKET,
            path=path,
            file_bytes=file_bytes,
            content_type=content_type,
        )
        updated = await self._db.update_application(application_id, {
            "joining_letter_url": path,
            "joining_letter_uploaded_at": iso(utcnow()),
        })
        await self._audit.log(
            AuditAction.JOINING_LETTER_UPLOAD,
            "InternshipApplication",
            application_id,
            user,
            f"Joining letter uploaded: {application.get('company_name')}",
            new_values={"joining_letter_url": path},
        )
        await self._remove_file(JOINING_LETTERS_BUCKET, application.get("joining_letter_url"))
        return updated

    # ── Monthly reports ───────────────────────────────────────

    async def submit_monthly_report(
        self,
        user: dict[str, Any],
        application_id: str,
        month: int,
        year: int,
        file_bytes: bytes,
        file_name: str,
        content_type: str,
    ) -> dict[str, Any]:
        """
        Upload the report for ``month``/``year``.

        Reports are auto-approved on submission. A non-approved report for
        the same month is replaced in place; an approved one is final.
        """
        if not 1 <= month <= 12:
            raise ValidationFailedError("reportMonth must be between 1 and 12")

        student = await self._student(user)
        application = await self._own_application(student["id"], application_id)

        phase = phase_of(application)
        if not accepts_reports(phase):
            raise ValidationFailedError(
                f"Monthly reports can only be submitted after joining (phase is {phase.value})"
            )
        start = as_datetime(application.get("start_date"))
        end = as_datetime(application.get("end_date"))
        if not month_in_range(month, year, start, end):
            raise ValidationFailedError(
                f"{MONTH_NAMES[month - 1]} {year} is outside the internship period"
            )

        existing = await self._db.find_monthly_report(application_id, month, year)
        if existing and existing.get("status") == MonthlyReportStatus.APPROVED.value:
            raise ConflictError(
                f"The report for {MONTH_NAMES[month - 1]} {year} has already been approved"
            )

        try:
            info = await self._doc.inspect(file_bytes, _extension(file_name))
        except ValueError as exc:
            raise ValidationFailedError(str(exc)) from exc

        path = _storage_path(f"{student['id']}/{application_id}", file_name)
        await self._storage.upload_file(
            bucket=REPORTS_BUCKET,
            path=path,
            file_bytes=file_bytes,
            content_type=content_type,
        )

        now = utcnow()
        cycle = cycle_for(month, year, settings.report_window_end_day)
        overdue = now > cycle.window_end
        fields = {
            "report_file_url": path,
            "page_count": info.pages,
            "status": MonthlyReportStatus.APPROVED.value,
            "is_approved": True,
            "submitted_at": iso(now),
            "approved_at": iso(now),
            "reviewed_at": None,
            "review_comments": None,
            "is_overdue": overdue,
            "submission_window_start": iso(cycle.window_start),
            "submission_window_end": iso(cycle.window_end),
            "due_date": iso(cycle.window_end),
            "period_start_date": iso(cycle.period_start),
            "period_end_date": iso(cycle.period_end),
        }
        if existing:
            report = await self._db.update_monthly_report(existing["id"], fields)
        else:
            report = await self._db.create_monthly_report({
                **fields,
                "application_id": application_id,
                "student_id": student["id"],
                "report_month": month,
                "report_year": year,
                "month_name": cycle.month_name,
                "is_deleted": False,
            })

        await self._audit.log(
            AuditAction.MONTHLY_REPORT_SUBMIT,
            "MonthlyReport",
            report["id"],
            user,
            f"Monthly report submitted for {cycle.month_name} {year}"
            + (" (overdue)" if overdue else ""),
            severity=AuditSeverity.MEDIUM if overdue else AuditSeverity.LOW,
            new_values={"status": MonthlyReportStatus.APPROVED.value, "is_overdue": overdue},
        )
        if existing:
            await self._remove_file(REPORTS_BUCKET, existing.get("report_file_url"))
        return report

    async def list_monthly_reports(
        self,
        user: dict[str, Any],
        page: int = 1,
        limit: int = 20,
        application_id: str | None = None,
    ) -> Page:
        student = await self._student(user)
        filters: dict[str, Any] = {"student_id": student["id"], "is_deleted": False}
        if application_id:
            filters["application_id"] = application_id
        rows, total = await self._db.list_monthly_reports(filters, offset(page, limit), limit)
        return Page.build(rows, total, page, limit)

    async def view_monthly_report(self, user: dict[str, Any], report_id: str) -> SignedUrlResponse:
        student = await self._student(user)
        report = await self._own_report(student["id"], report_id)
        if not report.get("report_file_url"):
            raise NotFoundError("Report file", report_id)
        url = await self._storage.get_signed_url(
            bucket=REPORTS_BUCKET,
            path=report["report_file_url"],
            expires_in=settings.signed_url_ttl_seconds,
        )
        return SignedUrlResponse(download_url=url, expires_in_seconds=settings.signed_url_ttl_seconds)

    async def delete_monthly_report(self, user: dict[str, Any], report_id: str) -> None:
        student = await self._student(user)
        report = await self._own_report(student["id"], report_id)
        if report.get("status") == MonthlyReportStatus.APPROVED.value:
            raise ValidationFailedError("An approved report cannot be deleted")
        await self._db.update_monthly_report(report_id, {"is_deleted": True})
        await self._audit.log(
            AuditAction.MONTHLY_REPORT_DELETE,
            "MonthlyReport",
            report_id,
            user,
            f"Monthly report deleted: {report.get('month_name')} {report.get('report_year')}",
            severity=AuditSeverity.MEDIUM,
        )

    # ── Documents ─────────────────────────────────────────────

    async def list_documents(
        self,
        user: dict[str, Any],
        page: int = 1,
        limit: int = 20,
        doc_type: DocumentType | None = None,
    ) -> Page:
        student = await self._student(user)
        filters: dict[str, Any] = {"student_id": student["id"]}
        if doc_type is not None:
            filters["type"] = doc_type.value
        rows, total = await self._db.list_documents(filters, offset(page, limit), limit)
        return Page.build(rows, total, page, limit)

    async def upload_document(
        self,
        user: dict[str, Any],
        doc_type: DocumentType,
        file_bytes: bytes,
        file_name: str,
        content_type: str,
    ) -> dict[str, Any]:
        student = await self._student(user)
        path = _storage_path(student["id"], file_name)
        await self._storage.upload_file(
            bucket=DOCUMENTS_BUCKET,
            path=path,
            file_bytes=file_bytes,
            content_type=content_type,
        )
        document = await self._db.create_document({
            "student_id": student["id"],
            "type": doc_type.value,
            "file_name": file_name,
            "file_url": path,
            "uploaded_at": iso(utcnow()),
        })
        await self._audit.log(
            AuditAction.STUDENT_DOCUMENT_UPLOAD,
            "Document",
            document["id"],
            user,
            f"Document uploaded: {doc_type.value}",
            category=AuditCategory.PROFILE_MANAGEMENT,
        )
        return document

    async def delete_document(self, user: dict[str, Any], document_id: str) -> None:
        student = await self._student(user)
        document = await self._db.get_document(document_id)
        if not document or document.get("student_id") != student["id"]:
            raise NotFoundError("Document", document_id)
        await self._db.delete_document(document_id)
        await self._remove_file(DOCUMENTS_BUCKET, document.get("file_url"))
        await self._audit.log(
            AuditAction.STUDENT_DOCUMENT_DELETE,
            "Document",
            document_id,
            user,
            f"Document deleted: {document.get('type')}",
            category=AuditCategory.PROFILE_MANAGEMENT,
        )

    async def _remove_file(self, bucket: str, path: str | None) -> None:
        if not path:
            return
        try:
            await self._storage.delete_file(bucket, path)
        except Exception as exc:
            logger.warning(f"Could not remove {bucket}/{path}: {exc}")

    # ── Grievances ────────────────────────────────────────────

    async def submit_grievance(
        self, user: dict[str, Any], body: GrievanceCreate
    ) -> dict[str, Any]:
        """Routed to the student's mentor unless another assignee is given."""
        student = await self._student(user)
        row = to_row(body)
        if not row.get("assigned_to_id"):
            assignment = await self._db.get_active_assignment_for_student(student["id"])
            row["assigned_to_id"] = assignment["mentor_id"] if assignment else None
        row.update({
            "student_id": student["id"],
            "severity": body.severity.value,
            "status": GrievanceStatus.SUBMITTED.value,
            "escalation_level": EscalationLevel.MENTOR.value,
        })
        grievance = await self._db.create_grievance(row)
        await self._audit.log(
            AuditAction.GRIEVANCE_SUBMIT,
            "Grievance",
            grievance["id"],
            user,
            f"Grievance submitted: {body.title}",
            category=AuditCategory.ADMINISTRATIVE,
            severity=AuditSeverity.HIGH
            if body.severity.value in ("HIGH", "CRITICAL")
            else AuditSeverity.MEDIUM,
            new_values={"category": body.category.value, "severity": body.severity.value},
        )
        return grievance

    async def list_grievances(
        self,
        user: dict[str, Any],
        page: int = 1,
        limit: int = 20,
        status: GrievanceStatus | None = None,
    ) -> Page:
        student = await self._student(user)
        filters: dict[str, Any] = {"student_id": student["id"]}
        if status is not None:
            filters["status"] = status.value
        rows, total = await self._db.list_grievances(filters, offset(page, limit), limit)
        return Page.build(rows, total, page, limit)
