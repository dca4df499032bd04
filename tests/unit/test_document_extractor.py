"""Unit tests for document text extraction and page-limit rules."""

from __future__ import annotations

from pathlib import Path

import pytest
from pytest import MonkeyPatch

from tamilvoice.errors import DocumentTooLarge, ExtractionFailed, UnsupportedFormat
from tamilvoice.io import document_extractor
from tamilvoice.io.document_extractor import DocumentExtractor, PageLimitPolicy, resolve_document_format
from tamilvoice.models.datatypes import DocumentFormat
from tests.document_builders import build_docx, build_pdf


def test_extract_pdf_returns_text_and_page_count() -> None:
    """A small text PDF should yield its text and page count."""

    result = DocumentExtractor().extract(build_pdf(2, text="Orchard ledger"), "pdf")

    assert "Orchard ledger 1" in result.text
    assert "Orchard ledger 2" in result.text
    assert result.page_count == 2
    assert result.declared_format is DocumentFormat.PDF


def test_extract_pdf_at_page_limit_succeeds() -> None:
    """Exactly 25 pages is within the PDF ceiling."""

    result = DocumentExtractor().extract(build_pdf(25), ".pdf")

    assert result.page_count == 25
    assert result.text


def test_extract_pdf_over_page_limit_fails_without_text(monkeypatch: MonkeyPatch) -> None:
    """26 pages should fail with `DocumentTooLarge` before any page text is read."""

    def _unexpected_text(*_: object, **__: object) -> str:
        raise AssertionError("page text must not be extracted past the page ceiling")

    monkeypatch.setattr("pypdf.PageObject.extract_text", _unexpected_text)

    with pytest.raises(DocumentTooLarge) as excinfo:
        DocumentExtractor().extract(build_pdf(26), DocumentFormat.PDF)

    assert excinfo.value.page_count == 26
    assert excinfo.value.page_limit == 25
    assert excinfo.value.status_code == 400
    assert str(excinfo.value) == "Document exceeds 25 page limit."


def test_custom_pdf_limit_is_honored() -> None:
    """The PDF ceiling should come from the configured policy."""

    extractor = DocumentExtractor(page_limits=PageLimitPolicy.pdf_only(2))

    with pytest.raises(DocumentTooLarge):
        extractor.extract(build_pdf(3), "pdf")


def test_default_policy_limits_only_pdf() -> None:
    """Only PDF carries a page ceiling; Word formats are unchecked."""

    policy = PageLimitPolicy()

    assert policy.limit_for(DocumentFormat.PDF) == 25
    assert policy.limit_for(DocumentFormat.DOC) is None
    assert policy.limit_for(DocumentFormat.DOCX) is None
    policy.check(DocumentFormat.DOCX, 10_000)


def test_extract_docx_returns_paragraph_and_table_text() -> None:
    """DOCX extraction should include paragraphs and table cells."""

    payload = build_docx(["வணக்கம்", "Second paragraph"], table_cells=["Cell A", "Cell B"])

    result = DocumentExtractor().extract(payload, "report.docx")

    assert result.text.splitlines() == ["வணக்கம்", "Second paragraph", "Cell A", "Cell B"]
    assert result.page_count is None
    assert result.declared_format is DocumentFormat.DOCX


def test_unsupported_format_is_rejected_before_parsing(monkeypatch: MonkeyPatch) -> None:
    """Unknown formats should fail without handing bytes to any parser."""

    def _unexpected_parse(*_: object, **__: object) -> None:
        raise AssertionError("parser must not run for unsupported formats")

    monkeypatch.setattr(document_extractor, "PdfReader", _unexpected_parse)
    monkeypatch.setattr(document_extractor, "Document", _unexpected_parse)

    with pytest.raises(UnsupportedFormat) as excinfo:
        DocumentExtractor().extract(b"plain text", "notes.txt")

    assert excinfo.value.status_code == 400
    assert excinfo.value.detail == "Unsupported file format"


def test_corrupt_pdf_maps_to_extraction_failed() -> None:
    """Unreadable PDF bytes should surface as `ExtractionFailed`."""

    with pytest.raises(ExtractionFailed) as excinfo:
        DocumentExtractor().extract(b"definitely not a pdf", "pdf")

    assert excinfo.value.status_code == 500
    assert excinfo.value.stage == "extract"


def test_legacy_doc_bytes_map_to_extraction_failed() -> None:
    """Binary `.doc` payloads that python-docx cannot open should fail cleanly."""

    legacy_header = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 64

    with pytest.raises(ExtractionFailed) as excinfo:
        DocumentExtractor().extract(legacy_header, "old.doc")

    assert excinfo.value.hint is not None


def test_extract_path_uses_file_suffix(tmp_path: Path) -> None:
    """Path extraction should derive the format from the filename suffix."""

    document = tmp_path / "letter.DOCX"
    document.write_bytes(build_docx(["From disk"]))

    result = DocumentExtractor().extract_path(document)

    assert result.text == "From disk"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("pdf", DocumentFormat.PDF),
        (".PDF", DocumentFormat.PDF),
        ("archive/report.docx", DocumentFormat.DOCX),
        ("doc", DocumentFormat.DOC),
        (DocumentFormat.DOCX, DocumentFormat.DOCX),
    ],
)
def test_resolve_document_format_accepts_tags_extensions_and_names(
    value: object, expected: DocumentFormat
) -> None:
    """Format resolution should accept tags, extensions and filenames."""

    assert resolve_document_format(value) is expected


@pytest.mark.parametrize("value", ["", None, "txt", "image.png", "pdfx"])
def test_resolve_document_format_rejects_unknown_values(value: object) -> None:
    """Anything but PDF, DOC and DOCX should be unsupported."""

    with pytest.raises(UnsupportedFormat):
        resolve_document_format(value)
