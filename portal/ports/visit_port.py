from abc import ABC, abstractmethod
from typing import Any


class VisitPort(ABC):
    """Port for faculty visit logs."""

    @abstractmethod
    async def create_visit_log(self, data: dict[str, Any]) -> dict[str, Any]:
        ...

    @abstractmethod
    async def get_visit_log(self, visit_id: str) -> dict[str, Any] | None:
        ...

    @abstractmethod
    async def update_visit_log(self, visit_id: str, data: dict[str, Any]) -> dict[str, Any]:
        ...

    @abstractmethod
    async def delete_visit_log(self, visit_id: str) -> None:
        ...

    @abstractmethod
    async def list_visit_logs(
        self, filters: dict[str, Any], skip: int = 0, limit: int = 20
    ) -> tuple[list[dict[str, Any]], int]:
        ...
