from abc import ABC, abstractmethod
from typing import Any


class ReportPort(ABC):
    """Port for monthly internship reports."""

    @abstractmethod
    async def create_monthly_report(self, data: dict[str, Any]) -> dict[str, Any]:
        ...

    @abstractmethod
    async def get_monthly_report(self, report_id: str) -> dict[str, Any] | None:
        ...

    @abstractmethod
    async def update_monthly_report(self, report_id: str, data: dict[str, Any]) -> dict[str, Any]:
        ...

    @abstractmethod
    async def find_monthly_report(
        self, application_id: str, month: int, year: int
    ) -> dict[str, Any] | None:
        """Non-deleted report for the given application and month, if any."""
        ...

    @abstractmethod
    async def list_monthly_reports(
        self, filters: dict[str, Any], skip: int = 0, limit: int = 20
    ) -> tuple[list[dict[str, Any]], int]:
        """Paginated reports, latest period first; returns (rows, total)."""
        ...
