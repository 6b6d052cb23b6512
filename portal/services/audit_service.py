"""
Audit trail writer.

Audit entries are best-effort: a failed insert is logged and swallowed so
it never turns a successful workflow action into an error response.
"""

import logging
from typing import Any

from portal.domain.enums import AuditAction, AuditCategory, AuditSeverity
from portal.ports.database_port import DatabasePort

logger = logging.getLogger(__name__)


class AuditService:
    """Records who did what to which entity."""

    def __init__(self, db: DatabasePort) -> None:
        self._db = db

    async def log(
        self,
        action: AuditAction,
        entity_type: str,
        entity_id: str | None,
        actor: dict[str, Any] | None,
        description: str,
        category: AuditCategory = AuditCategory.INTERNSHIP_WORKFLOW,
        severity: AuditSeverity = AuditSeverity.LOW,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
    ) -> None:
        actor = actor or {}
        entry = {
            "action": action.value,
            "entity_type": entity_type,
            "entity_id": entity_id,
            "user_id": actor.get("id"),
            "user_role": actor.get("role", "SYSTEM"),
            "description": description,
            "category": category.value,
            "severity": severity.value,
            "institution_id": actor.get("institution_id"),
            "old_values": old_values,
            "new_values": new_values,
        }
        try:
            await self._db.insert_audit_log(entry)
        except Exception as exc:
            logger.warning(f"Audit write failed for {action.value} {entity_id}: {exc}")
