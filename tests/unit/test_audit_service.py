"""
Unit Tests for AuditService
"""
from portal.domain.enums import AuditAction, AuditCategory
from portal.services.audit_service import AuditService


class _BrokenDatabase:
    async def insert_audit_log(self, data):
        raise RuntimeError('audit_logs table is missing')


async def test_entry_shape(db, audit, faculty):
    await audit.log(
        AuditAction.MONTHLY_REPORT_APPROVE,
        'MonthlyReport',
        'report-1',
        faculty,
        'Monthly report approved',
        new_values={'status': 'APPROVED'},
    )

    entry = db.audit_logs[-1]
    assert entry['action'] == 'MONTHLY_REPORT_APPROVE'
    assert entry['user_id'] == faculty['id']
    assert entry['user_role'] == 'TEACHER'
    assert entry['category'] == AuditCategory.INTERNSHIP_WORKFLOW.value
    assert entry['severity'] == 'LOW'
    assert entry['institution_id'] == faculty['institution_id']


async def test_system_actor(db, audit):
    await audit.log(AuditAction.INTERNSHIP_PHASE_SWEEP, 'InternshipApplication', 'a-1', None, 'sweep')
    entry = db.audit_logs[-1]
    assert entry['user_id'] is None
    assert entry['user_role'] == 'SYSTEM'


async def test_failed_write_is_not_raised(caplog):
    audit = AuditService(_BrokenDatabase())
    await audit.log(AuditAction.APPLICATION_UPDATE, 'InternshipApplication', 'a-1', None, 'x')
    assert 'Audit write failed for APPLICATION_UPDATE a-1' in caplog.text
