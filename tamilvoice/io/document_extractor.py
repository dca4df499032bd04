"""Document text extraction for PDF and Word uploads.

Responsibilities:
- Resolve a declared format tag or filename extension to a supported format.
- Extract plain text from PDF (`pypdf`) and Word (`python-docx`) payloads.
- Enforce per-format page ceilings through an explicit `PageLimitPolicy`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import io
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from docx import Document
from pypdf import PdfReader

from ..errors import DocumentTooLarge, ExtractionFailed, UnsupportedFormat
from ..models.datatypes import DocumentFormat, ExtractionRequest, ExtractionResult
from ..telemetry.logger import StageLogger


@dataclass(frozen=True, slots=True)
class PageLimitPolicy:
    """Per-format page ceilings; `None` means the format is not page-checked.

    Only PDF carries a ceiling. Word documents have no reliable page count
    before rendering, so they are accepted at any length.
    """

    limits: Mapping[DocumentFormat, int | None] = field(
        default_factory=lambda: MappingProxyType(
            {
                DocumentFormat.PDF: 25,
                DocumentFormat.DOC: None,
                DocumentFormat.DOCX: None,
            }
        )
    )

    @classmethod
    def pdf_only(cls, pdf_limit: int) -> PageLimitPolicy:
        """Build the default policy with a custom PDF ceiling."""

        return cls(
            limits=MappingProxyType(
                {
                    DocumentFormat.PDF: pdf_limit,
                    DocumentFormat.DOC: None,
                    DocumentFormat.DOCX: None,
                }
            )
        )

    def limit_for(self, document_format: DocumentFormat) -> int | None:
        """Return the page ceiling for one format."""

        return self.limits.get(document_format)

    def check(self, document_format: DocumentFormat, page_count: int) -> None:
        """Raise `DocumentTooLarge` when `page_count` exceeds the format's ceiling."""

        limit = self.limit_for(document_format)
        if limit is not None and page_count > limit:
            raise DocumentTooLarge(page_count=page_count, page_limit=limit)


def resolve_document_format(value: object) -> DocumentFormat:
    """Resolve a format enum, tag (`pdf`), extension (`.pdf`) or filename to a format.

    Raises:
        UnsupportedFormat: If the value does not name PDF, DOC or DOCX.
    """

    if isinstance(value, DocumentFormat):
        return value

    raw = str(value or "").strip().lower()
    token = raw.rsplit(".", 1)[-1] if "." in raw else raw
    try:
        return DocumentFormat(token)
    except ValueError as exc:
        raise UnsupportedFormat(
            "Unsupported file format",
            hint="Upload a PDF, DOC or DOCX document.",
        ) from exc


class DocumentExtractor:
    """Extract plain text from uploaded document bytes."""

    def __init__(
        self,
        page_limits: PageLimitPolicy | None = None,
        logger: StageLogger | None = None,
    ) -> None:
        self.page_limits = page_limits or PageLimitPolicy()
        self.logger = logger or StageLogger()

    def extract(self, file_bytes: bytes, declared_format: object) -> ExtractionResult:
        """Extract text from `file_bytes` parsed as `declared_format`.

        The format is resolved before any byte of the payload is inspected, so
        unsupported uploads are rejected without parsing.
        """

        request = ExtractionRequest(
            file_bytes=file_bytes,
            declared_format=resolve_document_format(declared_format),
        )
        self.logger.log_stage_start(
            "extract",
            format=request.declared_format.value,
            size_bytes=len(request.file_bytes),
        )
        if request.declared_format is DocumentFormat.PDF:
            result = self._extract_pdf(request.file_bytes)
        else:
            result = self._extract_word(request.file_bytes, request.declared_format)

        self.logger.log_stage_complete(
            "extract",
            format=result.declared_format.value,
            pages=result.page_count if result.page_count is not None else "n/a",
            text_chars=len(result.text),
        )
        return result

    def extract_path(self, path: Path) -> ExtractionResult:
        """Extract text from a document on disk, deriving the format from its suffix."""

        document_format = resolve_document_format(path.suffix)
        try:
            file_bytes = path.read_bytes()
        except OSError as exc:
            raise ExtractionFailed(f"Could not read document `{path}`: {exc}") from exc
        return self.extract(file_bytes, document_format)

    def _extract_pdf(self, file_bytes: bytes) -> ExtractionResult:
        """Parse a PDF, check its page count, then return its text."""

        try:
            reader = PdfReader(io.BytesIO(file_bytes))
            page_count = len(reader.pages)
        except Exception as exc:
            raise ExtractionFailed(f"Failed to parse PDF document: {exc}") from exc

        self.page_limits.check(DocumentFormat.PDF, page_count)

        try:
            pages = [(page.extract_text() or "").replace("\f", "\n").strip() for page in reader.pages]
        except Exception as exc:
            raise ExtractionFailed(f"Failed to extract PDF text: {exc}") from exc
        text = "\n".join(page for page in pages if page)
        return ExtractionResult(text=text, declared_format=DocumentFormat.PDF, page_count=page_count)

    def _extract_word(self, file_bytes: bytes, document_format: DocumentFormat) -> ExtractionResult:
        """Return paragraph and table text from a Word document."""

        try:
            document = Document(io.BytesIO(file_bytes))
        except Exception as exc:
            raise ExtractionFailed(
                f"Failed to parse {document_format.value.upper()} document: {exc}",
                hint="Legacy binary `.doc` files must be re-saved as `.docx`.",
            ) from exc

        parts: list[str] = []
        for paragraph in document.paragraphs:
            text = paragraph.text.strip()
            if text:
                parts.append(text)
        for table in document.tables:
            for row in table.rows:
                for cell in row.cells:
                    text = cell.text.strip()
                    if text:
                        parts.append(text)

        limit = self.page_limits.limit_for(document_format)
        if limit is not None:
            self.logger.log_warning(
                "extract",
                "page_limit_unenforceable",
                format=document_format.value,
                limit=limit,
            )
        return ExtractionResult(text="\n".join(parts), declared_format=document_format)
