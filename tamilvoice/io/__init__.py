"""Input stage components for Tamilvoice.

This package contains document text extraction and upload staging used by the
HTTP service and CLI.
"""

from .document_extractor import DocumentExtractor, PageLimitPolicy, resolve_document_format
from .uploads import UploadStaging

__all__ = ["DocumentExtractor", "PageLimitPolicy", "UploadStaging", "resolve_document_format"]
