"""
Principal endpoints — institution overview and mentor assignment.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query, status

from portal.dependencies import get_principal_service
from portal.domain.enums import InternshipPhase, UserRole
from portal.domain.models import MentorAssignmentCreate, Page, StudentOut
from portal.services.auth_service import require_roles
from portal.services.principal_service import PrincipalService

router = APIRouter(prefix="/principal", tags=["Principal"])

_principal = require_roles(UserRole.PRINCIPAL)


@router.get("/dashboard")
async def get_dashboard(
    principal: dict[str, Any] = Depends(_principal),
    service: PrincipalService = Depends(get_principal_service),
):
    """Institution totals, including how many students have joined."""
    return await service.get_dashboard(principal)


@router.get("/students", response_model=Page[StudentOut])
async def list_students(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    phase: InternshipPhase | None = Query(None),
    search: str | None = Query(None, max_length=100),
    principal: dict[str, Any] = Depends(_principal),
    service: PrincipalService = Depends(get_principal_service),
):
    return await service.list_students(principal, page, limit, phase, search)


@router.post("/mentor-assignments", status_code=status.HTTP_201_CREATED)
async def assign_mentor(
    body: MentorAssignmentCreate,
    principal: dict[str, Any] = Depends(_principal),
    service: PrincipalService = Depends(get_principal_service),
):
    return await service.assign_mentor(principal, str(body.mentor_id), str(body.student_id))
