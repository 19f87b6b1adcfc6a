"""Degraded-mode document numbers.

Used by clients only when the next-number endpoint cannot be reached. These
numbers are neither sequential nor guaranteed unique, and must never be used
as a substitute for the allocator on the server side.
"""

from datetime import datetime

from src.core.documents.kinds import DocumentKind, resolve_kind


def epoch_millis(now: datetime) -> int:
    return int(now.timestamp() * 1000)


def fallback_document_number(kind: DocumentKind | str, now: datetime) -> str:
    """Placeholder number ``PREFIX-YYYY-<last 6 digits of epoch millis>``."""
    kind = resolve_kind(kind)
    return f"{kind.prefix}-{now.year}-{str(epoch_millis(now))[-6:]}"
