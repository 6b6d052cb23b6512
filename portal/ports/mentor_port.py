from abc import ABC, abstractmethod
from typing import Any


class MentorPort(ABC):
    """Port for faculty-to-student mentor assignments."""

    @abstractmethod
    async def find_active_assignment(
        self, mentor_id: str, student_id: str
    ) -> dict[str, Any] | None:
        """Return the active assignment linking mentor and student, if any."""
        ...

    @abstractmethod
    async def get_active_assignment_for_student(self, student_id: str) -> dict[str, Any] | None:
        ...

    @abstractmethod
    async def list_assigned_student_ids(self, mentor_id: str) -> list[str]:
        """IDs of students with an active assignment to this mentor."""
        ...

    @abstractmethod
    async def list_mentored_student_ids(self, student_ids: list[str]) -> list[str]:
        """Which of ``student_ids`` currently have an active mentor assignment."""
        ...

    @abstractmethod
    async def create_assignment(self, data: dict[str, Any]) -> dict[str, Any]:
        ...

    @abstractmethod
    async def deactivate_assignments(self, student_id: str) -> None:
        """Mark every active assignment of the student inactive."""
        ...
