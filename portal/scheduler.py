"""
Scheduler module for periodic background tasks.
Uses APScheduler's AsyncIOScheduler.

Production hardening:
  - Supabase-backed distributed lock prevents duplicate cron runs
    when multiple Uvicorn workers are active.
"""

import logging
from typing import Optional
from zoneinfo import ZoneInfo

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from portal.config import settings
from portal.dependencies import get_db
from portal.domain.dates import utcnow
from portal.domain.enums import AuditAction, AuditCategory, InternshipPhase
from portal.domain.lifecycle import phase_updates
from portal.ports.database_port import DatabasePort
from portal.services.audit_service import AuditService
from portal.services.common import scan_all

logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler = AsyncIOScheduler()

# Lock TTL in minutes — if a worker crashes mid-sweep, the lock
# auto-expires after this duration so another worker can pick it up.
_LOCK_TTL_MINUTES = 30
_SWEEP_LOCK = "internship_phase_sweep"


async def _acquire_cron_lock(db: DatabasePort, lock_name: str) -> bool:
    """
    Attempt to acquire the named distributed lock.

    Returns True if this worker acquired the lock, False otherwise.
    """
    try:
        acquired = await db.acquire_cron_lock(lock_name, _LOCK_TTL_MINUTES)
        logger.info(f"Cron lock '{lock_name}': {'ACQUIRED ✓' if acquired else 'ALREADY HELD ✗'}")
        return acquired

    except Exception as exc:
        # If the cron_locks table doesn't exist yet (migration not run),
        # fall through and allow execution (single-worker backward compat).
        logger.warning(
            f"Cron lock acquisition failed (table may not exist yet): {exc}. "
            "Proceeding without lock — safe only for single-worker deploys."
        )
        return True


async def _release_cron_lock(db: DatabasePort, lock_name: str) -> None:
    try:
        await db.release_cron_lock(lock_name)
        logger.info(f"Cron lock '{lock_name}' released.")
    except Exception as exc:
        logger.warning(f"Failed to release cron lock '{lock_name}': {exc}")


async def complete_ended_internships(db: DatabasePort) -> int:
    """
    Move every ACTIVE internship whose end date has passed to COMPLETED.

    Returns the number of applications updated.
    """
    now = utcnow()
    audit = AuditService(db)
    rows = await scan_all(
        db.list_applications,
        {
            "is_active": True,
            "internship_phase": InternshipPhase.ACTIVE.value,
            "end_date__lt": now.isoformat(),
        },
    )

    completed = 0
    for application in rows:
        try:
            changes = phase_updates(application, InternshipPhase.COMPLETED, now)
            await db.update_application(application["id"], changes)
        except Exception as exc:
            logger.error(f"  ✗ Could not complete application {application['id']}: {exc}")
            continue
        completed += 1
        await audit.log(
            AuditAction.INTERNSHIP_PHASE_SWEEP,
            "InternshipApplication",
            application["id"],
            None,
            f"Internship completed automatically after end date: {application.get('company_name')}",
            category=AuditCategory.SYSTEM,
            old_values={"internship_phase": InternshipPhase.ACTIVE.value},
            new_values={"internship_phase": InternshipPhase.COMPLETED.value},
        )
    return completed


async def sweep_internship_phases(db: Optional[DatabasePort] = None) -> Optional[int]:
    """
    Task wrapper for scheduled execution with distributed locking.

    Returns the number of internships completed, or None when another
    worker holds the lock.
    """
    db = db or get_db()

    if not await _acquire_cron_lock(db, _SWEEP_LOCK):
        logger.info("Another worker holds the sweep lock — skipping this run.")
        return None

    try:
        count = await complete_ended_internships(db)
        logger.info(f"🕒 Phase sweep complete: {count} internship(s) moved to COMPLETED")
        return count
    finally:
        # Always release the lock, even if the sweep fails,
        # so the next scheduled run can proceed.
        await _release_cron_lock(db, _SWEEP_LOCK)


def start_scheduler():
    """Start the background scheduler."""
    # Sweep just after midnight, institution time
    trigger = CronTrigger(
        hour=0,
        minute=30,
        timezone=ZoneInfo(settings.scheduler_timezone),
    )

    scheduler.add_job(
        sweep_internship_phases,
        trigger,
        id=_SWEEP_LOCK,
        replace_existing=True,
    )

    scheduler.start()

    job = scheduler.get_job(_SWEEP_LOCK)
    if job:
        logger.info(f"📅 Scheduler started. Next phase sweep at: {job.next_run_time}")


def shutdown_scheduler():
    """Stop the scheduler."""
    if scheduler.running:
        scheduler.shutdown()
    logger.info("Scheduler shut down.")
