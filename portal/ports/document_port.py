"""
Abstract interface for inspecting uploaded documents (PDF, DOCX).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class DocumentInfo:
    extension: str
    pages: int
    characters: int


class DocumentPort(ABC):
    """Port for opening document files and reporting what they contain."""

    @abstractmethod
    async def inspect(self, file_bytes: bytes, file_extension: str) -> DocumentInfo:
        """
        Open a document from raw bytes and summarise it.

        Args:
            file_bytes: Raw file content
            file_extension: Lowercase extension without dot (e.g., 'pdf', 'docx')

        Raises:
            ValueError: unsupported type, unreadable file, or no content.
        """
        ...

    @abstractmethod
    def supported_extensions(self) -> list[str]:
        """Return list of supported file extensions (without dots)."""
        ...
