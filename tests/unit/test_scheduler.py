"""
Unit Tests for the internship phase sweep
"""
from datetime import timedelta

from portal import scheduler
from portal.services import common as common_module
from portal.domain.dates import iso, utcnow


async def test_ended_internships_are_completed(db, make_application):
    ended = make_application(
        internship_phase='ACTIVE',
        end_date=iso(utcnow() - timedelta(days=1)),
    )
    running = make_application(internship_phase='ACTIVE')
    not_started = make_application(end_date=iso(utcnow() - timedelta(days=1)))

    count = await scheduler.sweep_internship_phases(db)

    assert count == 1
    row = db.row('internship_applications', ended['id'])
    assert row['internship_phase'] == 'COMPLETED'
    assert row['completion_date'] is not None
    assert db.row('internship_applications', running['id'])['internship_phase'] == 'ACTIVE'
    assert db.row('internship_applications', not_started['id'])['internship_phase'] == 'NOT_STARTED'
    entry = db.audit_logs[-1]
    assert entry['action'] == 'INTERNSHIP_PHASE_SWEEP'
    assert entry['category'] == 'SYSTEM'
    assert db.locks['internship_phase_sweep'] is False


async def test_skips_when_lock_held(db, make_application):
    make_application(internship_phase='ACTIVE', end_date=iso(utcnow() - timedelta(days=1)))
    db.locks['internship_phase_sweep'] = True

    assert await scheduler.sweep_internship_phases(db) is None
    assert db.audit_logs == []


async def test_runs_when_lock_table_missing(db, make_application, monkeypatch):
    async def _broken(lock_name, ttl_minutes):
        raise RuntimeError('relation "cron_locks" does not exist')

    monkeypatch.setattr(db, 'acquire_cron_lock', _broken)
    make_application(internship_phase='ACTIVE', end_date=iso(utcnow() - timedelta(days=1)))

    assert await scheduler.sweep_internship_phases(db) == 1


async def test_sweep_reads_past_one_scan_page(db, make_application, monkeypatch):
    monkeypatch.setattr(common_module, 'SCAN_LIMIT', 2)
    ended = [
        make_application(internship_phase='ACTIVE', end_date=iso(utcnow() - timedelta(days=d)))
        for d in range(1, 6)
    ]

    assert await scheduler.sweep_internship_phases(db) == 5
    assert all(
        db.row('internship_applications', a['id'])['internship_phase'] == 'COMPLETED'
        for a in ended
    )
