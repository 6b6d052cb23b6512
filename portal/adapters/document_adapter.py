"""
Concrete implementation of DocumentPort supporting PDF and DOCX files.

CPU-bound parsing is offloaded to a threadpool via asyncio.to_thread()
so large uploads do not block the event loop.
"""

import asyncio
import io

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from portal.ports.document_port import DocumentInfo, DocumentPort


class DocumentAdapter(DocumentPort):
    """Opens PDF and DOCX uploads and counts their pages and text."""

    _SUPPORTED = ["pdf", "docx"]

    async def inspect(self, file_bytes: bytes, file_extension: str) -> DocumentInfo:
        """
        Route to the correct parser based on file extension.

        Scanned reports are accepted (no minimum text length), but the file
        must open and contain at least one page or paragraph.
        """
        ext = file_extension.lower().strip(".")

        if ext == "pdf":
            pages, chars = await asyncio.to_thread(self._inspect_pdf, file_bytes)
        elif ext == "docx":
            pages, chars = await asyncio.to_thread(self._inspect_docx, file_bytes)
        else:
            raise ValueError(
                f"Unsupported file type: .{ext}. "
                f"Supported: {', '.join(self._SUPPORTED)}"
            )

        if pages == 0:
            raise ValueError("The uploaded document is empty.")

        return DocumentInfo(extension=ext, pages=pages, characters=chars)

    def supported_extensions(self) -> list[str]:
        return self._SUPPORTED.copy()

    @staticmethod
    def _inspect_pdf(file_bytes: bytes) -> tuple[int, int]:
        try:
            reader = PdfReader(io.BytesIO(file_bytes))
            chars = 0
            for page in reader.pages:
                chars += len((page.extract_text() or "").strip())
            return len(reader.pages), chars
        except (PdfReadError, KeyError, OSError) as exc:
            raise ValueError(f"Could not read PDF: {exc}") from exc

    @staticmethod
    def _inspect_docx(file_bytes: bytes) -> tuple[int, int]:
        """DOCX has no fixed pages; non-empty paragraphs stand in for them."""
        from docx import Document

        try:
            doc = Document(io.BytesIO(file_bytes))
        except Exception as exc:  # python-docx raises zipfile/KeyError/lxml errors
            raise ValueError(f"Could not read DOCX: {exc}") from exc
        paragraphs = [p.text.strip() for p in doc.paragraphs if p.text.strip()]
        return len(paragraphs), sum(len(p) for p in paragraphs)
