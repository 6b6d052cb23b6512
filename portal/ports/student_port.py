from abc import ABC, abstractmethod
from typing import Any


class StudentPort(ABC):
    @abstractmethod
    async def get_student(self, student_id: str) -> dict[str, Any] | None:
        """Fetch a student record by its own ID."""
        ...

    @abstractmethod
    async def get_student_by_user(self, user_id: str) -> dict[str, Any] | None:
        """Fetch the student record linked to an auth user."""
        ...

    @abstractmethod
    async def update_student(self, student_id: str, data: dict[str, Any]) -> dict[str, Any]:
        """Partially update a student and return the updated row."""
        ...

    @abstractmethod
    async def list_students(
        self, filters: dict[str, Any], skip: int = 0, limit: int = 20
    ) -> tuple[list[dict[str, Any]], int]:
        """Paginated students ordered by name; returns (rows, total)."""
        ...

    # ── Documents ─────────────────────────────────────────────

    @abstractmethod
    async def create_document(self, data: dict[str, Any]) -> dict[str, Any]:
        ...

    @abstractmethod
    async def get_document(self, document_id: str) -> dict[str, Any] | None:
        ...

    @abstractmethod
    async def delete_document(self, document_id: str) -> None:
        ...

    @abstractmethod
    async def list_documents(
        self, filters: dict[str, Any], skip: int = 0, limit: int = 20
    ) -> tuple[list[dict[str, Any]], int]:
        ...
