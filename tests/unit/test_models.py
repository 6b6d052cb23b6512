"""
Unit Tests for request/response models
"""
import uuid

import pytest
from pydantic import ValidationError

from portal.domain.enums import InternshipPhase
from portal.domain.models import (
    ApplicationOut,
    InternshipUpdate,
    Page,
    PhaseBreakdown,
    SelfIdentifiedCreate,
    StudentOut,
    VisitLogCreate,
)


class TestLegacyFields:
    """Older clients still send hasJoined / internshipStatus"""

    def test_has_joined_true_maps_to_active(self):
        body = InternshipUpdate.model_validate({'hasJoined': True})
        assert body.internship_phase == InternshipPhase.ACTIVE
        assert 'internship_phase' in body.model_fields_set

    def test_has_joined_false_maps_to_not_started(self):
        body = InternshipUpdate.model_validate({'hasJoined': 'false'})
        assert body.internship_phase == InternshipPhase.NOT_STARTED

    def test_internship_status_maps(self):
        body = InternshipUpdate.model_validate({'internshipStatus': 'CANCELLED'})
        assert body.internship_phase == InternshipPhase.TERMINATED

    def test_explicit_phase_wins(self):
        body = InternshipUpdate.model_validate({'hasJoined': True, 'internshipPhase': 'COMPLETED'})
        assert body.internship_phase == InternshipPhase.COMPLETED

    def test_remarks_alias(self):
        body = InternshipUpdate.model_validate({'remarks': 'Looks good'})
        assert body.review_remarks == 'Looks good'

    def test_no_legacy_fields_leaves_phase_unset(self):
        body = InternshipUpdate.model_validate({'stipend': '10000'})
        assert 'internship_phase' not in body.model_fields_set


class TestWireFormat:

    def test_application_serialises_camel_case_with_has_joined(self):
        app = ApplicationOut(
            id=uuid.uuid4(),
            student_id=uuid.uuid4(),
            status='APPROVED',
            internship_phase='ACTIVE',
        )
        data = app.model_dump(by_alias=True)
        assert data['internshipPhase'] == InternshipPhase.ACTIVE
        assert data['hasJoined'] is True
        assert 'reviewRemarks' in data

    def test_student_without_application_has_not_joined(self):
        student = StudentOut(id=uuid.uuid4())
        assert student.model_dump(by_alias=True)['hasJoined'] is False

    def test_page_counts_total_pages(self):
        page = Page.build(items=[1, 2], total=45, page=1, limit=20)
        assert page.total_pages == 3
        assert page.model_dump(by_alias=True)['totalPages'] == 3


class TestValidation:

    def test_end_before_start_rejected(self):
        with pytest.raises(ValidationError):
            SelfIdentifiedCreate(
                company_name='Acme',
                company_address='1 Road',
                start_date='2025-05-01',
                end_date='2025-04-01',
            )

    def test_visit_needs_a_target(self):
        with pytest.raises(ValidationError):
            VisitLogCreate(visit_type='VIRTUAL')

    def test_visit_rating_bounds(self):
        with pytest.raises(ValidationError):
            VisitLogCreate(visit_type='VIRTUAL', student_id=uuid.uuid4(), student_progress_rating=6)

    def test_phase_breakdown_defaults_missing_phase(self):
        breakdown = PhaseBreakdown.from_rows([
            {'internship_phase': 'ACTIVE'},
            {'internship_phase': None},
            {'internship_phase': 'TERMINATED'},
        ])
        assert (breakdown.active, breakdown.not_started, breakdown.terminated) == (1, 1, 1)
