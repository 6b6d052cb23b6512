"""
Domain exceptions raised by services.

Services never raise HTTPException; the API layer maps each class to a
status code in main.py.
"""

from typing import Any, Optional


class PortalError(Exception):
    """Base exception for all portal errors."""

    status_code = 400

    def __init__(
        self,
        message: str,
        code: str = "PORTAL_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"detail": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body


class NotFoundError(PortalError):
    """Requested resource does not exist (or is not visible to the caller)."""

    status_code = 404

    def __init__(self, resource: str, resource_id: str | None = None) -> None:
        message = f"{resource} not found"
        details = {"resource": resource}
        if resource_id:
            details["id"] = resource_id
        super().__init__(message, code=f"{_code(resource)}_NOT_FOUND", details=details)


class PermissionDeniedError(PortalError):
    status_code = 403

    def __init__(self, message: str = "You are not authorized to perform this action") -> None:
        super().__init__(message, code="NOT_AUTHORIZED")


class ValidationFailedError(PortalError):
    status_code = 400

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message, code="VALIDATION_FAILED", details=details)


class ConflictError(PortalError):
    status_code = 409

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message, code="CONFLICT", details=details)


class InvalidTransitionError(ConflictError):
    """Requested internship phase change is not allowed."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(
            f"Cannot move internship from {current} to {target}",
            details={"from": current, "to": target},
        )
        self.code = "INVALID_PHASE_TRANSITION"


def _code(resource: str) -> str:
    return resource.upper().replace(" ", "_").replace("-", "_")
