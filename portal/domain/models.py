"""
Pydantic models for requests, responses, and internal data transfer.
Pure data — no I/O, no side effects.

Wire format is camelCase (``internshipPhase``, ``reviewRemarks``); the
storage layer is snake_case. Every model accepts both on input.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Generic, Literal, TypeVar
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    computed_field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from portal.domain.enums import (
    ApplicationStatus,
    DocumentType,
    EscalationLevel,
    GrievanceCategory,
    GrievanceSeverity,
    GrievanceStatus,
    InternshipPhase,
    MonthlyReportStatus,
    UserRole,
    VisitLogStatus,
    VisitType,
)
from portal.domain.lifecycle import joined, phase_from_legacy

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Page(CamelModel, Generic[T]):
    """Paginated list envelope."""

    items: list[T]
    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def build(cls, items: list[Any], total: int, page: int, limit: int) -> "Page[T]":
        pages = (total + limit - 1) // limit if limit else 0
        return cls(items=items, total=total, page=page, limit=limit, total_pages=pages)


# ── Users / Students ──────────────────────────────────────────


class UserProfile(CamelModel):
    """Response model for GET /users/me and GET /faculty/profile."""

    id: UUID
    email: str
    role: UserRole
    name: str | None = None
    institution_id: UUID | None = None
    designation: str | None = None
    phone_no: str | None = None
    is_active: bool = True
    created_at: datetime | None = None


class MentorInfo(CamelModel):
    id: UUID
    name: str | None = None
    email: str | None = None
    phone_no: str | None = None
    designation: str | None = None


class StudentOut(CamelModel):
    id: UUID
    user_id: UUID | None = None
    institution_id: UUID | None = None
    name: str | None = None
    roll_number: str | None = None
    branch: str | None = None
    email: str | None = None
    phone_no: str | None = None
    address: str | None = None
    profile_image_url: str | None = None
    is_active: bool = True
    # phase of the student's latest active application, when listed
    internship_phase: InternshipPhase | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_joined(self) -> bool:
        return self.internship_phase is not None and joined(self.internship_phase)


class StudentProfileUpdate(CamelModel):
    """Fields a student may change on their own profile."""

    email: EmailStr | None = None
    phone_no: str | None = Field(None, max_length=20)
    address: str | None = Field(None, max_length=500)


class FacultyStudentUpdate(StudentProfileUpdate):
    """Fields a mentor may change on an assigned student."""

    name: str | None = Field(None, min_length=2, max_length=120)
    roll_number: str | None = Field(None, max_length=40)
    branch: str | None = Field(None, max_length=80)


class StatusToggle(CamelModel):
    is_active: bool


# ── Internship applications ───────────────────────────────────


class ApplicationOut(CamelModel):
    id: UUID
    student_id: UUID
    mentor_id: UUID | None = None
    is_self_identified: bool = False
    is_active: bool = True
    status: ApplicationStatus
    internship_phase: InternshipPhase = InternshipPhase.NOT_STARTED
    company_name: str | None = None
    company_address: str | None = None
    company_contact: str | None = None
    company_email: str | None = None
    hr_name: str | None = None
    hr_designation: str | None = None
    hr_contact: str | None = None
    hr_email: str | None = None
    job_profile: str | None = None
    stipend: str | None = None
    internship_duration: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    joining_date: datetime | None = None
    completion_date: datetime | None = None
    joining_letter_url: str | None = None
    joining_letter_uploaded_at: datetime | None = None
    reviewed_at: datetime | None = None
    review_remarks: str | None = None
    rejection_reason: str | None = None
    notes: str | None = None
    created_at: datetime | None = None

    @field_validator("internship_phase", mode="before")
    @classmethod
    def _unset_phase(cls, value: Any) -> Any:
        # rows written before the phase column read as NOT_STARTED
        return value or InternshipPhase.NOT_STARTED

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_joined(self) -> bool:
        return joined(self.internship_phase)


class _InternshipDetails(CamelModel):
    company_contact: str | None = Field(None, max_length=40)
    company_email: EmailStr | None = None
    hr_name: str | None = Field(None, max_length=120)
    hr_designation: str | None = Field(None, max_length=120)
    hr_contact: str | None = Field(None, max_length=40)
    hr_email: EmailStr | None = None
    internship_duration: str | None = Field(None, max_length=60)
    stipend: str | None = Field(None, max_length=60)
    job_profile: str | None = Field(None, max_length=500)

    @model_validator(mode="after")
    def _check_dates(self):
        start = getattr(self, "start_date", None)
        end = getattr(self, "end_date", None)
        if start and end and end < start:
            raise ValueError("endDate cannot be before startDate")
        return self


class SelfIdentifiedCreate(_InternshipDetails):
    """Request body for POST /student/self-identified."""

    company_name: str = Field(..., min_length=2, max_length=200)
    company_address: str = Field(..., min_length=2, max_length=500)
    start_date: date | None = None
    end_date: date | None = None
    cover_letter: str | None = Field(None, max_length=5000)


class SelfIdentifiedUpdate(_InternshipDetails):
    """Request body for PUT /student/self-identified/{id}."""

    company_name: str | None = Field(None, min_length=2, max_length=200)
    company_address: str | None = Field(None, min_length=2, max_length=500)
    start_date: date | None = None
    end_date: date | None = None


class InternshipUpdate(_InternshipDetails):
    """
    Request body for PUT /faculty/internships/{id}.

    Older clients still send ``hasJoined`` or ``internshipStatus``; those are
    translated to ``internshipPhase`` unless the phase is given explicitly.
    """

    status: ApplicationStatus | None = None
    internship_phase: InternshipPhase | None = None
    review_remarks: str | None = Field(None, max_length=2000)
    company_name: str | None = Field(None, min_length=2, max_length=200)
    company_address: str | None = Field(None, max_length=500)
    start_date: date | None = None
    end_date: date | None = None
    notes: str | None = Field(None, max_length=2000)

    @model_validator(mode="before")
    @classmethod
    def _translate_legacy_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        has_joined_raw = data.pop("hasJoined", data.pop("has_joined", None))
        legacy_status = data.pop("internshipStatus", data.pop("internship_status", None))
        remarks = data.pop("remarks", None)
        if remarks is not None and "reviewRemarks" not in data:
            data["reviewRemarks"] = remarks

        if has_joined_raw is None and legacy_status is None:
            return data

        logger.warning(
            "Deprecated internship fields in request "
            f"(hasJoined={has_joined_raw}, internshipStatus={legacy_status})"
        )
        if "internshipPhase" in data or "internship_phase" in data:
            return data
        if isinstance(has_joined_raw, str):
            has_joined_raw = has_joined_raw.strip().lower() in ("true", "1", "yes")
        mapped = phase_from_legacy(
            has_joined=bool(has_joined_raw) if has_joined_raw is not None else None,
            internship_status=legacy_status,
        )
        if mapped is not None:
            data["internshipPhase"] = mapped.value
        return data


class ApprovalDecision(CamelModel):
    """Request body for PUT /faculty/approvals/self-identified/{id}."""

    status: Literal["APPROVED", "REJECTED"]
    review_remarks: str | None = Field(None, max_length=2000)


class RemarksBody(CamelModel):
    remarks: str | None = Field(None, max_length=2000)


class ReasonBody(CamelModel):
    reason: str = Field(..., min_length=3, max_length=2000)


class ActionResult(CamelModel):
    success: bool = True
    message: str
    data: dict[str, Any] | None = None


# ── Monthly reports ───────────────────────────────────────────


class MonthlyReportOut(CamelModel):
    id: UUID
    application_id: UUID
    student_id: UUID
    report_month: int
    report_year: int
    month_name: str | None = None
    report_file_url: str | None = None
    page_count: int | None = None
    status: MonthlyReportStatus
    is_approved: bool = False
    submitted_at: datetime | None = None
    approved_at: datetime | None = None
    reviewed_at: datetime | None = None
    review_comments: str | None = None
    submission_window_start: datetime | None = None
    submission_window_end: datetime | None = None
    due_date: datetime | None = None
    is_overdue: bool = False
    period_start_date: datetime | None = None
    period_end_date: datetime | None = None


class ReportReview(CamelModel):
    """Request body for PUT /faculty/monthly-reports/{id}/review."""

    is_approved: bool
    review_comments: str | None = Field(None, max_length=2000)


class ReportProgress(CamelModel):
    application_id: UUID | None = None
    internship_phase: InternshipPhase | None = None
    has_joined: bool = False
    total_expected_reports: int = 0
    reports_due_so_far: int = 0
    reports_submitted: int = 0
    reports_approved: int = 0
    visits_completed: int = 0
    total_expected_visits: int = 0


class SignedUrlResponse(CamelModel):
    download_url: str
    expires_in_seconds: int


# ── Faculty visit logs ────────────────────────────────────────


class _VisitFields(CamelModel):
    status: VisitLogStatus | None = None
    visit_date: datetime | None = None
    visit_location: str | None = Field(None, max_length=500)
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    visit_duration: str | None = None
    student_performance: str | None = None
    work_environment: str | None = None
    observations_about_student: str | None = None
    feedback_shared_with_student: str | None = None
    issues_identified: str | None = None
    recommendations: str | None = None
    action_required: str | None = None
    student_progress_rating: int | None = Field(None, ge=1, le=5)
    industry_cooperation_rating: int | None = Field(None, ge=1, le=5)
    work_environment_rating: int | None = Field(None, ge=1, le=5)
    mentoring_support_rating: int | None = Field(None, ge=1, le=5)
    overall_satisfaction_rating: int | None = Field(None, ge=1, le=5)
    follow_up_required: bool | None = None
    next_visit_date: datetime | None = None
    signed_document_url: str | None = None


class VisitLogCreate(_VisitFields):
    application_id: UUID | None = None
    student_id: UUID | None = None
    visit_type: VisitType

    @model_validator(mode="after")
    def _require_target(self):
        if not self.application_id and not self.student_id:
            raise ValueError("Either applicationId or studentId is required")
        return self


class VisitLogUpdate(_VisitFields):
    visit_type: VisitType | None = None


class VisitLogOut(_VisitFields):
    id: UUID
    application_id: UUID
    student_id: UUID
    faculty_id: UUID
    visit_type: VisitType
    created_at: datetime | None = None


# ── Documents / Grievances ────────────────────────────────────


class DocumentOut(CamelModel):
    id: UUID
    student_id: UUID
    type: DocumentType
    file_name: str
    file_url: str
    uploaded_at: datetime | None = None


class GrievanceCreate(CamelModel):
    title: str = Field(..., min_length=3, max_length=200)
    category: GrievanceCategory
    description: str = Field(..., min_length=10, max_length=5000)
    severity: GrievanceSeverity = GrievanceSeverity.MEDIUM
    action_requested: str | None = Field(None, max_length=2000)
    preferred_contact_method: str | None = Field(None, max_length=40)
    assigned_to_id: UUID | None = None


class GrievanceOut(CamelModel):
    id: UUID
    student_id: UUID
    title: str
    category: GrievanceCategory
    description: str
    severity: GrievanceSeverity
    status: GrievanceStatus
    escalation_level: EscalationLevel | None = None
    assigned_to_id: UUID | None = None
    action_requested: str | None = None
    created_at: datetime | None = None


# ── Principal ─────────────────────────────────────────────────


class MentorAssignmentCreate(CamelModel):
    mentor_id: UUID
    student_id: UUID


class PhaseBreakdown(CamelModel):
    not_started: int = 0
    active: int = 0
    completed: int = 0
    terminated: int = 0

    @classmethod
    def from_rows(cls, rows: list[dict[str, Any]]) -> "PhaseBreakdown":
        counts = {p: 0 for p in InternshipPhase}
        for row in rows:
            counts[InternshipPhase(row.get("internship_phase") or InternshipPhase.NOT_STARTED)] += 1
        return cls(
            not_started=counts[InternshipPhase.NOT_STARTED],
            active=counts[InternshipPhase.ACTIVE],
            completed=counts[InternshipPhase.COMPLETED],
            terminated=counts[InternshipPhase.TERMINATED],
        )
