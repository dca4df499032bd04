"""Domain exceptions for conversion stages, HTTP responses and CLI diagnostics.

Every failure raised by the conversion pipeline derives from `ConversionError`.
Each subclass pins the stage it belongs to and whether it is a client-side
(bad input) or server-side (processing) failure.
"""

from __future__ import annotations


class ConversionError(RuntimeError):
    """Raised when a specific conversion stage fails."""

    stage = "convert"
    status_code = 500

    def __init__(
        self,
        detail: str,
        *,
        stage: str | None = None,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped conversion error."""

        super().__init__(detail)
        if stage is not None:
            self.stage = stage
        self.detail = detail
        self.hint = hint

    @property
    def is_client_error(self) -> bool:
        """Return whether the failure was caused by caller input."""

        return 400 <= self.status_code < 500


class UnsupportedFormat(ConversionError):
    """Raised when a document format is not one of PDF, DOC or DOCX."""

    stage = "extract"
    status_code = 400


class DocumentTooLarge(ConversionError):
    """Raised when a document exceeds its format's page limit."""

    stage = "extract"
    status_code = 400

    def __init__(self, page_count: int, page_limit: int, *, hint: str | None = None) -> None:
        super().__init__(f"Document exceeds {page_limit} page limit.", hint=hint)
        self.page_count = page_count
        self.page_limit = page_limit


class ExtractionFailed(ConversionError):
    """Raised when the document parser cannot read the uploaded bytes."""

    stage = "extract"


class ValidationFailed(ConversionError):
    """Raised when a required request field is missing or malformed."""

    stage = "validate"
    status_code = 400


class MissingLogo(ValidationFailed):
    """Raised when no logo image bytes were supplied for composition."""

    def __init__(self, detail: str = "Logo image is required", *, hint: str | None = None) -> None:
        super().__init__(detail, hint=hint)


class SynthesisFailed(ConversionError):
    """Raised when the speech provider answered without an audio payload."""

    stage = "synthesize"


class ProviderError(ConversionError):
    """Raised when the speech provider request fails at transport or auth level."""

    stage = "synthesize"

    def __init__(
        self,
        detail: str,
        *,
        failure_kind: str = "unknown",
        provider_status: int | None = None,
        hint: str | None = None,
    ) -> None:
        """Initialize provider error metadata for stage-aware diagnostics."""

        super().__init__(detail, hint=hint)
        self.failure_kind = failure_kind
        self.provider_status = provider_status


class EncodingFailed(ConversionError):
    """Raised when ffmpeg reports an error while encoding the video."""

    stage = "compose"

    def __init__(self, detail: str, *, diagnostics: str = "", hint: str | None = None) -> None:
        super().__init__(detail, hint=hint)
        self.diagnostics = diagnostics


class OutputMissing(ConversionError):
    """Raised when ffmpeg exits cleanly but produced no output file."""

    stage = "compose"
