"""
Student endpoints — thin HTTP layer, delegates all logic to StudentService.
"""

import os
from typing import Any

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Response, UploadFile, status

from portal.config import settings
from portal.dependencies import get_student_service
from portal.domain.enums import ApplicationStatus, DocumentType, GrievanceStatus, UserRole
from portal.domain.models import (
    ActionResult,
    ApplicationOut,
    DocumentOut,
    GrievanceCreate,
    GrievanceOut,
    MentorInfo,
    MonthlyReportOut,
    Page,
    SelfIdentifiedCreate,
    SelfIdentifiedUpdate,
    SignedUrlResponse,
    StudentOut,
    StudentProfileUpdate,
)
from portal.services.auth_service import require_roles
from portal.services.student_service import StudentService

router = APIRouter(prefix="/student", tags=["Student"])

_student = require_roles(UserRole.STUDENT)

# Allowed upload extensions per kind of file
_REPORT_EXTENSIONS = {".pdf", ".docx"}
_LETTER_EXTENSIONS = {".pdf", ".docx", ".jpg", ".jpeg", ".png"}
_DOCUMENT_EXTENSIONS = {".pdf", ".jpg", ".jpeg", ".png"}


async def _read_upload(file: UploadFile, allowed: set[str]) -> bytes:
    """Validate the extension and size of an upload and return its bytes."""
    if not file.filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Filename is required",
        )
    ext = os.path.splitext(file.filename)[1].lower()
    if ext not in allowed:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Only {', '.join(sorted(allowed))} files are accepted",
        )
    file_bytes = await file.read()
    if not file_bytes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded file is empty",
        )
    if len(file_bytes) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds the {settings.max_upload_bytes // (1024 * 1024)} MB limit",
        )
    return file_bytes


# ── Dashboard / profile ───────────────────────────────────────


@router.get("/dashboard")
async def get_dashboard(
    student: dict[str, Any] = Depends(_student),
    service: StudentService = Depends(get_student_service),
):
    return await service.get_dashboard(student)


@router.get("/profile", response_model=StudentOut)
async def get_profile(
    student: dict[str, Any] = Depends(_student),
    service: StudentService = Depends(get_student_service),
):
    return await service.get_profile(student)


@router.put("/profile", response_model=StudentOut)
async def update_profile(
    body: StudentProfileUpdate,
    student: dict[str, Any] = Depends(_student),
    service: StudentService = Depends(get_student_service),
):
    return await service.update_profile(student, body)


@router.get("/mentor", response_model=MentorInfo | None)
async def get_mentor(
    student: dict[str, Any] = Depends(_student),
    service: StudentService = Depends(get_student_service),
):
    """The student's assigned mentor, or null."""
    return await service.get_mentor(student)


# ── Applications ──────────────────────────────────────────────


@router.get("/applications", response_model=Page[ApplicationOut])
async def list_applications(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status: ApplicationStatus | None = Query(None),
    student: dict[str, Any] = Depends(_student),
    service: StudentService = Depends(get_student_service),
):
    return await service.list_applications(student, page, limit, status)


@router.get("/applications/{application_id}", response_model=ApplicationOut)
async def get_application(
    application_id: str,
    student: dict[str, Any] = Depends(_student),
    service: StudentService = Depends(get_student_service),
):
    return await service.get_application(student, application_id)


@router.post("/applications/{application_id}/withdraw", response_model=ApplicationOut)
async def withdraw_application(
    application_id: str,
    student: dict[str, Any] = Depends(_student),
    service: StudentService = Depends(get_student_service),
):
    return await service.withdraw_application(student, application_id)


@router.post("/applications/{application_id}/joining-letter", response_model=ApplicationOut)
async def upload_joining_letter(
    application_id: str,
    file: UploadFile,
    student: dict[str, Any] = Depends(_student),
    service: StudentService = Depends(get_student_service),
):
    """Upload the joining letter; the mentor verifies it to start the internship."""
    file_bytes = await _read_upload(file, _LETTER_EXTENSIONS)
    return await service.upload_joining_letter(
        student,
        application_id,
        file_bytes,
        file.filename,
        file.content_type or "application/octet-stream",
    )


# ── Self-identified internships ───────────────────────────────


@router.post(
    "/self-identified",
    response_model=ApplicationOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_self_identified(
    body: SelfIdentifiedCreate,
    student: dict[str, Any] = Depends(_student),
    service: StudentService = Depends(get_student_service),
):
    return await service.create_self_identified(student, body)


@router.get("/self-identified", response_model=Page[ApplicationOut])
async def list_self_identified(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    student: dict[str, Any] = Depends(_student),
    service: StudentService = Depends(get_student_service),
):
    return await service.list_self_identified(student, page, limit)


@router.put("/self-identified/{application_id}", response_model=ApplicationOut)
async def update_self_identified(
    application_id: str,
    body: SelfIdentifiedUpdate,
    student: dict[str, Any] = Depends(_student),
    service: StudentService = Depends(get_student_service),
):
    return await service.update_self_identified(student, application_id, body)


# ── Monthly reports ───────────────────────────────────────────


@router.post(
    "/monthly-reports",
    response_model=MonthlyReportOut,
    status_code=status.HTTP_201_CREATED,
)
async def submit_monthly_report(
    file: UploadFile,
    application_id: str = Form(..., alias="applicationId"),
    report_month: int = Form(..., alias="reportMonth", ge=1, le=12),
    report_year: int = Form(..., alias="reportYear", ge=2000, le=2100),
    student: dict[str, Any] = Depends(_student),
    service: StudentService = Depends(get_student_service),
):
    """
    Multipart upload of a monthly report (PDF or DOCX).

    Re-submitting a month that has not been approved replaces the earlier file.
    """
    file_bytes = await _read_upload(file, _REPORT_EXTENSIONS)
    return await service.submit_monthly_report(
        student,
        application_id,
        report_month,
        report_year,
        file_bytes,
        file.filename,
        file.content_type or "application/octet-stream",
    )


@router.get("/monthly-reports", response_model=Page[MonthlyReportOut])
async def list_monthly_reports(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    application_id: str | None = Query(None, alias="applicationId"),
    student: dict[str, Any] = Depends(_student),
    service: StudentService = Depends(get_student_service),
):
    return await service.list_monthly_reports(student, page, limit, application_id)


@router.get("/monthly-reports/{report_id}", response_model=SignedUrlResponse)
async def view_monthly_report(
    report_id: str,
    response: Response,
    student: dict[str, Any] = Depends(_student),
    service: StudentService = Depends(get_student_service),
):
    response.headers["Cache-Control"] = "no-store"
    return await service.view_monthly_report(student, report_id)


@router.delete("/monthly-reports/{report_id}", response_model=ActionResult)
async def delete_monthly_report(
    report_id: str,
    student: dict[str, Any] = Depends(_student),
    service: StudentService = Depends(get_student_service),
):
    await service.delete_monthly_report(student, report_id)
    return ActionResult(message="Monthly report deleted")


# ── Documents ─────────────────────────────────────────────────


@router.get("/documents", response_model=Page[DocumentOut])
async def list_documents(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    doc_type: DocumentType | None = Query(None, alias="type"),
    student: dict[str, Any] = Depends(_student),
    service: StudentService = Depends(get_student_service),
):
    return await service.list_documents(student, page, limit, doc_type)


@router.post("/documents", response_model=DocumentOut, status_code=status.HTTP_201_CREATED)
async def upload_document(
    file: UploadFile,
    doc_type: DocumentType = Form(..., alias="type"),
    student: dict[str, Any] = Depends(_student),
    service: StudentService = Depends(get_student_service),
):
    file_bytes = await _read_upload(file, _DOCUMENT_EXTENSIONS)
    return await service.upload_document(
        student,
        doc_type,
        file_bytes,
        file.filename,
        file.content_type or "application/octet-stream",
    )


@router.delete("/documents/{document_id}", response_model=ActionResult)
async def delete_document(
    document_id: str,
    student: dict[str, Any] = Depends(_student),
    service: StudentService = Depends(get_student_service),
):
    await service.delete_document(student, document_id)
    return ActionResult(message="Document deleted")


# ── Grievances ────────────────────────────────────────────────


@router.get("/grievances", response_model=Page[GrievanceOut])
async def list_grievances(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status: GrievanceStatus | None = Query(None),
    student: dict[str, Any] = Depends(_student),
    service: StudentService = Depends(get_student_service),
):
    return await service.list_grievances(student, page, limit, status)


@router.post("/grievances", response_model=GrievanceOut, status_code=status.HTTP_201_CREATED)
async def submit_grievance(
    body: GrievanceCreate,
    student: dict[str, Any] = Depends(_student),
    service: StudentService = Depends(get_student_service),
):
    return await service.submit_grievance(student, body)
