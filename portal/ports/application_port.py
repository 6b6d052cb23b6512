from abc import ABC, abstractmethod
from typing import Any


class ApplicationPort(ABC):
    """Port for internship applications."""

    @abstractmethod
    async def create_application(self, data: dict[str, Any]) -> dict[str, Any]:
        """Insert a new application and return the created row."""
        ...

    @abstractmethod
    async def get_application(self, application_id: str) -> dict[str, Any] | None:
        ...

    @abstractmethod
    async def update_application(
        self, application_id: str, data: dict[str, Any]
    ) -> dict[str, Any]:
        """Partially update an application and return the updated row."""
        ...

    @abstractmethod
    async def list_applications(
        self, filters: dict[str, Any], skip: int = 0, limit: int = 20
    ) -> tuple[list[dict[str, Any]], int]:
        """Paginated applications, newest first; returns (rows, total)."""
        ...
