"""
Unit Tests for internship phase rules
"""
from datetime import datetime, timedelta, timezone

import pytest

from portal.domain.enums import InternshipPhase
from portal.domain.errors import InvalidTransitionError
from portal.domain.lifecycle import (
    accepts_reports,
    backfill_phase,
    can_transition,
    has_joined,
    is_terminal,
    phase_from_legacy,
    phase_updates,
)

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


class TestHasJoined:
    """hasJoined is true exactly when the phase is ACTIVE"""

    @pytest.mark.parametrize('phase,expected', [
        (InternshipPhase.NOT_STARTED, False),
        (InternshipPhase.ACTIVE, True),
        (InternshipPhase.COMPLETED, False),
        (InternshipPhase.TERMINATED, False),
    ])
    def test_only_active_counts_as_joined(self, phase, expected):
        assert has_joined({'internship_phase': phase.value}) is expected

    def test_missing_phase_is_not_started(self):
        assert has_joined({}) is False


class TestTransitions:

    def test_not_started_can_activate_or_terminate(self):
        assert can_transition(InternshipPhase.NOT_STARTED, InternshipPhase.ACTIVE)
        assert can_transition(InternshipPhase.NOT_STARTED, InternshipPhase.TERMINATED)
        assert not can_transition(InternshipPhase.NOT_STARTED, InternshipPhase.COMPLETED)

    def test_active_can_revert_to_not_started(self):
        assert can_transition(InternshipPhase.ACTIVE, InternshipPhase.NOT_STARTED)

    @pytest.mark.parametrize('terminal', [InternshipPhase.COMPLETED, InternshipPhase.TERMINATED])
    def test_terminal_phases_never_move(self, terminal):
        assert is_terminal(terminal)
        for target in InternshipPhase:
            if target != terminal:
                assert not can_transition(terminal, target)

    def test_same_phase_is_always_allowed(self):
        for phase in InternshipPhase:
            assert can_transition(phase, phase)


class TestPhaseUpdates:

    def test_activation_sets_joining_date(self):
        updates = phase_updates({'internship_phase': 'NOT_STARTED'}, InternshipPhase.ACTIVE, NOW)
        assert updates == {'internship_phase': 'ACTIVE', 'joining_date': NOW.isoformat()}

    def test_activation_keeps_existing_joining_date(self):
        app = {'internship_phase': 'NOT_STARTED', 'joining_date': '2025-05-01T00:00:00+00:00'}
        updates = phase_updates(app, InternshipPhase.ACTIVE, NOW)
        assert 'joining_date' not in updates

    def test_reverting_clears_joining_date(self):
        app = {'internship_phase': 'ACTIVE', 'joining_date': '2025-05-01T00:00:00+00:00'}
        updates = phase_updates(app, InternshipPhase.NOT_STARTED, NOW)
        assert updates['joining_date'] is None

    def test_completion_sets_completion_date(self):
        updates = phase_updates({'internship_phase': 'ACTIVE'}, InternshipPhase.COMPLETED, NOW)
        assert updates['completion_date'] == NOW.isoformat()

    def test_same_phase_is_a_no_op(self):
        assert phase_updates({'internship_phase': 'ACTIVE'}, InternshipPhase.ACTIVE, NOW) == {}

    def test_illegal_move_raises(self):
        with pytest.raises(InvalidTransitionError) as exc:
            phase_updates({'internship_phase': 'COMPLETED'}, InternshipPhase.ACTIVE, NOW)
        assert exc.value.code == 'INVALID_PHASE_TRANSITION'
        assert exc.value.status_code == 409


class TestAcceptsReports:

    def test_reports_need_a_joined_internship(self):
        assert accepts_reports(InternshipPhase.ACTIVE)
        assert accepts_reports(InternshipPhase.COMPLETED)
        assert not accepts_reports(InternshipPhase.NOT_STARTED)
        assert not accepts_reports(InternshipPhase.TERMINATED)


class TestLegacyTranslation:

    @pytest.mark.parametrize('status,expected', [
        ('ONGOING', InternshipPhase.ACTIVE),
        ('in_progress', InternshipPhase.ACTIVE),
        ('COMPLETED', InternshipPhase.COMPLETED),
        ('CANCELLED', InternshipPhase.TERMINATED),
        ('TERMINATED', InternshipPhase.TERMINATED),
    ])
    def test_status_mapping(self, status, expected):
        assert phase_from_legacy(internship_status=status) == expected

    def test_has_joined_flag(self):
        assert phase_from_legacy(has_joined=True) == InternshipPhase.ACTIVE
        assert phase_from_legacy(has_joined=False) == InternshipPhase.NOT_STARTED

    def test_known_status_beats_flag(self):
        assert phase_from_legacy(has_joined=True, internship_status='COMPLETED') == InternshipPhase.COMPLETED

    def test_nothing_usable(self):
        assert phase_from_legacy() is None
        assert phase_from_legacy(internship_status='SOMETHING_ELSE') is None


class TestBackfill:

    def test_plain_row_is_not_started(self):
        assert backfill_phase({}, NOW) == InternshipPhase.NOT_STARTED

    def test_legacy_status_maps(self):
        assert backfill_phase({'internship_status': 'ONGOING'}, NOW) == InternshipPhase.ACTIVE

    def test_joined_status_activates(self):
        assert backfill_phase({'status': 'JOINED'}, NOW) == InternshipPhase.ACTIVE

    def test_joining_date_activates(self):
        assert backfill_phase({'joining_date': '2025-01-01'}, NOW) == InternshipPhase.ACTIVE

    def test_completion_date_always_wins(self):
        row = {'internship_status': 'CANCELLED', 'completion_date': '2025-04-01'}
        assert backfill_phase(row, NOW) == InternshipPhase.COMPLETED

    def test_unmapped_status_falls_back_to_dates(self):
        started = {'internship_status': 'PENDING', 'start_date': (NOW - timedelta(days=5)).isoformat()}
        ended = {
            'internship_status': 'PENDING',
            'start_date': '2025-01-01T00:00:00Z',
            'end_date': '2025-03-01T00:00:00Z',
        }
        assert backfill_phase(started, NOW) == InternshipPhase.ACTIVE
        assert backfill_phase(ended, NOW) == InternshipPhase.COMPLETED
