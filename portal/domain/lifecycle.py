"""
Internship phase rules.

The phase enum replaced the old ``hasJoined`` boolean and the free-text
``internshipStatus`` column. Everything that needs to know whether a
student "has joined" goes through :func:`has_joined` so the rule lives in
one place.
"""

from datetime import datetime
from typing import Any, Mapping

from portal.domain.dates import as_datetime, iso
from portal.domain.enums import ApplicationStatus, InternshipPhase
from portal.domain.errors import InvalidTransitionError

_TRANSITIONS: dict[InternshipPhase, frozenset[InternshipPhase]] = {
    InternshipPhase.NOT_STARTED: frozenset({
        InternshipPhase.ACTIVE,
        InternshipPhase.TERMINATED,
    }),
    InternshipPhase.ACTIVE: frozenset({
        InternshipPhase.COMPLETED,
        InternshipPhase.TERMINATED,
        InternshipPhase.NOT_STARTED,  # joining letter reverted
    }),
    InternshipPhase.COMPLETED: frozenset(),
    InternshipPhase.TERMINATED: frozenset(),
}

# Old free-text internshipStatus values -> phase
LEGACY_STATUS_MAP: dict[str, InternshipPhase] = {
    "ONGOING": InternshipPhase.ACTIVE,
    "IN_PROGRESS": InternshipPhase.ACTIVE,
    "COMPLETED": InternshipPhase.COMPLETED,
    "CANCELLED": InternshipPhase.TERMINATED,
    "TERMINATED": InternshipPhase.TERMINATED,
}


def phase_of(application: Mapping[str, Any]) -> InternshipPhase:
    raw = application.get("internship_phase") or InternshipPhase.NOT_STARTED
    return InternshipPhase(raw)


def joined(phase: InternshipPhase) -> bool:
    return phase == InternshipPhase.ACTIVE


def has_joined(application: Mapping[str, Any]) -> bool:
    """True iff the internship is currently running."""
    return joined(phase_of(application))


def accepts_reports(phase: InternshipPhase) -> bool:
    """Monthly reports and visits only make sense once the student has joined."""
    return phase in (InternshipPhase.ACTIVE, InternshipPhase.COMPLETED)


def is_terminal(phase: InternshipPhase) -> bool:
    return not _TRANSITIONS[phase]


def can_transition(current: InternshipPhase, target: InternshipPhase) -> bool:
    if current == target:
        return True
    return target in _TRANSITIONS[current]


def ensure_transition(current: InternshipPhase, target: InternshipPhase) -> None:
    if not can_transition(current, target):
        raise InvalidTransitionError(current.value, target.value)


def phase_updates(
    application: Mapping[str, Any],
    target: InternshipPhase,
    now: datetime,
) -> dict[str, Any]:
    """
    Column updates implied by moving ``application`` to ``target``.

    Raises InvalidTransitionError for a disallowed move. Re-applying the
    current phase returns an empty dict.
    """
    current = phase_of(application)
    ensure_transition(current, target)
    if current == target:
        return {}

    updates: dict[str, Any] = {"internship_phase": target.value}
    if target == InternshipPhase.ACTIVE:
        if not application.get("joining_date"):
            updates["joining_date"] = iso(now)
    elif target == InternshipPhase.NOT_STARTED:
        updates["joining_date"] = None
    elif target == InternshipPhase.COMPLETED:
        if not application.get("completion_date"):
            updates["completion_date"] = iso(now)
    return updates


def phase_from_legacy(
    has_joined: bool | None = None,
    internship_status: str | None = None,
) -> InternshipPhase | None:
    """Translate the removed request fields; None when neither is usable."""
    if internship_status:
        mapped = LEGACY_STATUS_MAP.get(internship_status.strip().upper())
        if mapped is not None:
            return mapped
    if has_joined is not None:
        return InternshipPhase.ACTIVE if has_joined else InternshipPhase.NOT_STARTED
    return None


def backfill_phase(row: Mapping[str, Any], now: datetime) -> InternshipPhase:
    """
    Phase for a stored row written before the phase column existed.

    Steps run in the order of the legacy-field data migration, so a later
    step can override an earlier one (a completion date always wins).
    """
    legacy = str(row.get("internship_status") or "").strip().upper()
    phase = InternshipPhase.NOT_STARTED

    if legacy:
        mapped = LEGACY_STATUS_MAP.get(legacy)
        if mapped is not None:
            phase = mapped
        else:
            start = as_datetime(row.get("start_date"))
            end = as_datetime(row.get("end_date"))
            if start is not None and start <= now and end is None:
                phase = InternshipPhase.ACTIVE
            elif end is not None and end <= now:
                phase = InternshipPhase.COMPLETED
    elif row.get("status") == ApplicationStatus.JOINED.value:
        phase = InternshipPhase.ACTIVE

    if row.get("joining_date") and phase == InternshipPhase.NOT_STARTED:
        phase = InternshipPhase.ACTIVE
    if row.get("completion_date"):
        phase = InternshipPhase.COMPLETED
    return phase
