"""
Unit Tests for PrincipalService
"""
import uuid

import pytest

from portal.domain.enums import InternshipPhase, UserRole
from portal.domain.errors import NotFoundError, PermissionDeniedError, ValidationFailedError
from portal.services import common as common_module


class TestDashboard:

    async def test_counts(self, principal_service, principal, make_student, make_application, assignment):
        make_application(internship_phase='ACTIVE')
        make_student()

        dashboard = await principal_service.get_dashboard(principal)

        assert dashboard['totalStudents'] == 2
        assert dashboard['studentsWithInternship'] == 1
        assert dashboard['joinedStudents'] == 1
        assert dashboard['studentsWithoutMentor'] == 1

    async def test_counts_span_several_scan_pages(
        self, db, monkeypatch, principal_service, principal, faculty, student,
        make_student, make_application, assignment,
    ):
        monkeypatch.setattr(common_module, 'SCAN_LIMIT', 2)
        others = [make_student()[1] for _ in range(4)]
        for phase, s in zip(['ACTIVE', 'ACTIVE', 'COMPLETED', 'NOT_STARTED'], others):
            make_application(student_id=s['id'], internship_phase=phase)
        make_application(internship_phase='ACTIVE')
        db.seed('mentor_assignments', {
            'mentor_id': faculty['id'], 'student_id': others[0]['id'], 'is_active': True,
        })

        dashboard = await principal_service.get_dashboard(principal)

        assert dashboard['totalStudents'] == 5
        assert dashboard['studentsWithInternship'] == 5
        assert dashboard['phaseBreakdown']['active'] == 3
        assert dashboard['phaseBreakdown']['completed'] == 1
        assert dashboard['phaseBreakdown']['notStarted'] == 1
        assert dashboard['studentsWithoutMentor'] == 3

    async def test_phase_filter_uses_latest_application(
        self, principal_service, principal, student, make_application
    ):
        make_application(internship_phase='COMPLETED')
        make_application(internship_phase='ACTIVE')

        active = await principal_service.list_students(principal, phase=InternshipPhase.ACTIVE)
        completed = await principal_service.list_students(
            principal, phase=InternshipPhase.COMPLETED
        )

        assert [s['id'] for s in active.items] == [student['id']]
        assert active.items[0]['internship_phase'] == 'ACTIVE'
        assert completed.total == 0


class TestAssignMentor:

    async def test_reassignment_replaces_previous(
        self, db, principal_service, principal, other_faculty, student, assignment, application
    ):
        created = await principal_service.assign_mentor(
            principal, other_faculty['id'], student['id']
        )

        assert db.row('mentor_assignments', assignment['id'])['is_active'] is False
        assert db.row('mentor_assignments', created['id'])['is_active'] is True
        assert db.row('internship_applications', application['id'])['mentor_id'] == other_faculty['id']
        entry = db.audit_logs[-1]
        assert entry['action'] == 'MENTOR_ASSIGN'
        assert entry['old_values'] == {'mentor_id': assignment['mentor_id']}

    async def test_mentor_must_be_faculty(
        self, principal_service, principal, make_user, student
    ):
        not_faculty = make_user(UserRole.STUDENT)
        with pytest.raises(ValidationFailedError):
            await principal_service.assign_mentor(principal, not_faculty['id'], student['id'])

    async def test_inactive_mentor(self, principal_service, principal, make_user, student):
        retired = make_user(UserRole.TEACHER, is_active=False)
        with pytest.raises(ValidationFailedError):
            await principal_service.assign_mentor(principal, retired['id'], student['id'])

    async def test_other_institution(self, principal_service, principal, make_user, student):
        outsider = make_user(UserRole.TEACHER, institution_id=str(uuid.uuid4()))
        with pytest.raises(PermissionDeniedError):
            await principal_service.assign_mentor(principal, outsider['id'], student['id'])

    async def test_unknown_student(self, principal_service, principal, faculty):
        with pytest.raises(NotFoundError):
            await principal_service.assign_mentor(principal, faculty['id'], str(uuid.uuid4()))
