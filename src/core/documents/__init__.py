from src.core.documents.allocator import (
    DocumentNumberAllocator,
    NumberSource,
    StaticNumberSource,
    format_document_number,
    parse_sequence,
)
from src.core.documents.fallback import fallback_document_number
from src.core.documents.kinds import PREFIXES, DocumentKind, resolve_kind
from src.core.documents.models import DocumentMixin, DocumentStatus
from src.core.documents.service import DocumentNumberService
from src.core.documents.sources import SqlNumberSource, register_number_column

__all__ = [
    "DocumentKind",
    "DocumentMixin",
    "DocumentNumberAllocator",
    "DocumentNumberService",
    "DocumentStatus",
    "NumberSource",
    "PREFIXES",
    "SqlNumberSource",
    "StaticNumberSource",
    "fallback_document_number",
    "format_document_number",
    "parse_sequence",
    "register_number_column",
    "resolve_kind",
]
