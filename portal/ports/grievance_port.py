from abc import ABC, abstractmethod
from typing import Any


class GrievancePort(ABC):
    @abstractmethod
    async def create_grievance(self, data: dict[str, Any]) -> dict[str, Any]:
        ...

    @abstractmethod
    async def list_grievances(
        self, filters: dict[str, Any], skip: int = 0, limit: int = 20
    ) -> tuple[list[dict[str, Any]], int]:
        ...
