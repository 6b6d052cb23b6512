"""
Faculty (mentor) endpoints — thin HTTP layer, delegates all logic to FacultyService.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query, Response, status

from portal.dependencies import get_faculty_service
from portal.domain.enums import (
    ApplicationStatus,
    InternshipPhase,
    MonthlyReportStatus,
    UserRole,
    VisitLogStatus,
)
from portal.domain.models import (
    ActionResult,
    ApplicationOut,
    ApprovalDecision,
    FacultyStudentUpdate,
    InternshipUpdate,
    MonthlyReportOut,
    Page,
    ReasonBody,
    RemarksBody,
    ReportProgress,
    ReportReview,
    SignedUrlResponse,
    StatusToggle,
    StudentOut,
    UserProfile,
    VisitLogCreate,
    VisitLogOut,
    VisitLogUpdate,
)
from portal.services.auth_service import require_roles
from portal.services.faculty_service import FacultyService

router = APIRouter(prefix="/faculty", tags=["Faculty"])

_faculty = require_roles(UserRole.TEACHER)


# ── Dashboard / profile ───────────────────────────────────────


@router.get("/dashboard")
async def get_dashboard(
    faculty: dict[str, Any] = Depends(_faculty),
    service: FacultyService = Depends(get_faculty_service),
):
    """Counts for the mentor's landing page."""
    return await service.get_dashboard(faculty["id"])


@router.get("/profile", response_model=UserProfile)
async def get_profile(faculty: dict[str, Any] = Depends(_faculty)):
    return UserProfile(**faculty)


# ── Students ──────────────────────────────────────────────────


@router.get("/students", response_model=Page[StudentOut])
async def list_students(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: str | None = Query(None, max_length=100),
    phase: InternshipPhase | None = Query(None),
    faculty: dict[str, Any] = Depends(_faculty),
    service: FacultyService = Depends(get_faculty_service),
):
    """Assigned students with the phase of their latest internship."""
    return await service.list_students(faculty["id"], page, limit, search, phase)


@router.get("/students/{student_id}", response_model=StudentOut)
async def get_student(
    student_id: str,
    faculty: dict[str, Any] = Depends(_faculty),
    service: FacultyService = Depends(get_faculty_service),
):
    return await service.get_student(faculty["id"], student_id)


@router.get("/students/{student_id}/progress", response_model=ReportProgress)
async def get_student_progress(
    student_id: str,
    faculty: dict[str, Any] = Depends(_faculty),
    service: FacultyService = Depends(get_faculty_service),
):
    return await service.get_student_progress(faculty["id"], student_id)


@router.get("/students/{student_id}/internships", response_model=list[ApplicationOut])
async def get_student_internships(
    student_id: str,
    faculty: dict[str, Any] = Depends(_faculty),
    service: FacultyService = Depends(get_faculty_service),
):
    return await service.get_student_internships(faculty["id"], student_id)


@router.put("/students/{student_id}", response_model=StudentOut)
async def update_student(
    student_id: str,
    body: FacultyStudentUpdate,
    faculty: dict[str, Any] = Depends(_faculty),
    service: FacultyService = Depends(get_faculty_service),
):
    return await service.update_student(faculty, student_id, body)


@router.patch("/students/{student_id}/toggle-status", response_model=StudentOut)
async def toggle_student_status(
    student_id: str,
    body: StatusToggle,
    faculty: dict[str, Any] = Depends(_faculty),
    service: FacultyService = Depends(get_faculty_service),
):
    return await service.toggle_student_status(faculty, student_id, body.is_active)


# ── Internships ───────────────────────────────────────────────


@router.put("/internships/{application_id}", response_model=ApplicationOut)
async def update_internship(
    application_id: str,
    body: InternshipUpdate,
    faculty: dict[str, Any] = Depends(_faculty),
    service: FacultyService = Depends(get_faculty_service),
):
    """
    Edit an internship. ``internshipPhase`` changes are transition-checked;
    the deprecated ``hasJoined`` / ``internshipStatus`` fields still work.
    """
    return await service.update_internship(faculty, application_id, body)


@router.delete("/internships/{application_id}", response_model=ActionResult)
async def delete_internship(
    application_id: str,
    faculty: dict[str, Any] = Depends(_faculty),
    service: FacultyService = Depends(get_faculty_service),
):
    await service.delete_internship(faculty, application_id)
    return ActionResult(message="Internship deleted")


@router.get("/approvals/self-identified", response_model=Page[ApplicationOut])
async def list_self_identified(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status: ApplicationStatus | None = Query(ApplicationStatus.APPROVED),
    faculty: dict[str, Any] = Depends(_faculty),
    service: FacultyService = Depends(get_faculty_service),
):
    return await service.list_self_identified(faculty["id"], page, limit, status)


@router.put("/approvals/self-identified/{application_id}", response_model=ApplicationOut)
async def decide_self_identified(
    application_id: str,
    body: ApprovalDecision,
    faculty: dict[str, Any] = Depends(_faculty),
    service: FacultyService = Depends(get_faculty_service),
):
    return await service.decide_self_identified(
        faculty, application_id, body.status, body.review_remarks
    )


# ── Monthly reports ───────────────────────────────────────────


@router.get("/monthly-reports", response_model=Page[MonthlyReportOut])
async def list_monthly_reports(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status: MonthlyReportStatus | None = Query(None),
    faculty: dict[str, Any] = Depends(_faculty),
    service: FacultyService = Depends(get_faculty_service),
):
    return await service.list_monthly_reports(faculty["id"], page, limit, status)


@router.put("/monthly-reports/{report_id}/review", response_model=MonthlyReportOut)
async def review_monthly_report(
    report_id: str,
    body: ReportReview,
    faculty: dict[str, Any] = Depends(_faculty),
    service: FacultyService = Depends(get_faculty_service),
):
    return await service.review_report(faculty, report_id, body.is_approved, body.review_comments)


@router.put("/monthly-reports/{report_id}/approve", response_model=MonthlyReportOut)
async def approve_monthly_report(
    report_id: str,
    body: RemarksBody | None = None,
    faculty: dict[str, Any] = Depends(_faculty),
    service: FacultyService = Depends(get_faculty_service),
):
    return await service.approve_report(faculty, report_id, body.remarks if body else None)


@router.put("/monthly-reports/{report_id}/reject", response_model=MonthlyReportOut)
async def reject_monthly_report(
    report_id: str,
    body: ReasonBody,
    faculty: dict[str, Any] = Depends(_faculty),
    service: FacultyService = Depends(get_faculty_service),
):
    return await service.reject_report(faculty, report_id, body.reason)


@router.delete("/monthly-reports/{report_id}", response_model=ActionResult)
async def delete_monthly_report(
    report_id: str,
    faculty: dict[str, Any] = Depends(_faculty),
    service: FacultyService = Depends(get_faculty_service),
):
    await service.delete_report(faculty, report_id)
    return ActionResult(message="Monthly report deleted")


@router.get("/monthly-reports/{report_id}/download", response_model=SignedUrlResponse)
async def download_monthly_report(
    report_id: str,
    response: Response,
    faculty: dict[str, Any] = Depends(_faculty),
    service: FacultyService = Depends(get_faculty_service),
):
    """Short-lived signed URL for the report file."""
    response.headers["Cache-Control"] = "no-store"
    return await service.report_download_url(faculty["id"], report_id)


# ── Joining letters ───────────────────────────────────────────


@router.get("/joining-letters", response_model=Page[ApplicationOut])
async def list_joining_letters(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    pending: bool | None = Query(None),
    faculty: dict[str, Any] = Depends(_faculty),
    service: FacultyService = Depends(get_faculty_service),
):
    return await service.list_joining_letters(faculty["id"], page, limit, pending)


@router.put("/joining-letters/{application_id}/verify", response_model=ApplicationOut)
async def verify_joining_letter(
    application_id: str,
    body: RemarksBody | None = None,
    faculty: dict[str, Any] = Depends(_faculty),
    service: FacultyService = Depends(get_faculty_service),
):
    """Verifying the letter starts the internship (phase ACTIVE)."""
    return await service.verify_joining_letter(
        faculty, application_id, body.remarks if body else None
    )


@router.put("/joining-letters/{application_id}/reject", response_model=ApplicationOut)
async def reject_joining_letter(
    application_id: str,
    body: ReasonBody,
    faculty: dict[str, Any] = Depends(_faculty),
    service: FacultyService = Depends(get_faculty_service),
):
    return await service.reject_joining_letter(faculty, application_id, body.reason)


@router.delete("/joining-letters/{application_id}", response_model=ApplicationOut)
async def delete_joining_letter(
    application_id: str,
    faculty: dict[str, Any] = Depends(_faculty),
    service: FacultyService = Depends(get_faculty_service),
):
    return await service.delete_joining_letter(faculty, application_id)


# ── Visit logs ────────────────────────────────────────────────


@router.get("/visit-logs", response_model=Page[VisitLogOut])
async def list_visit_logs(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    application_id: str | None = Query(None, alias="applicationId"),
    status: VisitLogStatus | None = Query(None),
    faculty: dict[str, Any] = Depends(_faculty),
    service: FacultyService = Depends(get_faculty_service),
):
    return await service.list_visit_logs(faculty["id"], page, limit, application_id, status)


@router.post("/visit-logs", response_model=VisitLogOut, status_code=status.HTTP_201_CREATED)
async def create_visit_log(
    body: VisitLogCreate,
    faculty: dict[str, Any] = Depends(_faculty),
    service: FacultyService = Depends(get_faculty_service),
):
    return await service.create_visit_log(faculty, body)


@router.get("/visit-logs/{visit_id}", response_model=VisitLogOut)
async def get_visit_log(
    visit_id: str,
    faculty: dict[str, Any] = Depends(_faculty),
    service: FacultyService = Depends(get_faculty_service),
):
    return await service.get_visit_log(faculty["id"], visit_id)


@router.put("/visit-logs/{visit_id}", response_model=VisitLogOut)
async def update_visit_log(
    visit_id: str,
    body: VisitLogUpdate,
    faculty: dict[str, Any] = Depends(_faculty),
    service: FacultyService = Depends(get_faculty_service),
):
    return await service.update_visit_log(faculty, visit_id, body)


@router.delete("/visit-logs/{visit_id}", response_model=ActionResult)
async def delete_visit_log(
    visit_id: str,
    faculty: dict[str, Any] = Depends(_faculty),
    service: FacultyService = Depends(get_faculty_service),
):
    await service.delete_visit_log(faculty, visit_id)
    return ActionResult(message="Visit log deleted")
