"""
Sequential document numbers: PREFIX-YYYY-NNN

Examples:
    ADJ-2024-001
    TRF-2024-042
    REC-2025-1000   (never truncated past three digits)

The allocator derives the next number from the numbers already stored for a
kind and year. It proposes a candidate only: nothing is written, reserved or
locked, so two callers may receive the same candidate. Collisions are settled
at insert time (see DocumentNumberService).
"""

import logging
import re
from collections.abc import Iterable
from datetime import datetime
from typing import Protocol

from src.core.documents.kinds import DocumentKind, resolve_kind
from src.core.exceptions import PersistenceUnavailableError

logger = logging.getLogger(__name__)

SEPARATOR = "-"
SEQUENCE_WIDTH = 3

_SEQUENCE_RE = re.compile(r"[0-9]+")


class NumberSource(Protocol):
    """Read access to document numbers already stored for a kind."""

    async def list_numbers(self, kind: DocumentKind, prefix_pattern: str) -> Iterable[str]:
        """Return stored numbers of ``kind`` starting with ``prefix_pattern``."""
        ...


class StaticNumberSource:
    """In-memory number source, keyed by kind."""

    def __init__(self, numbers: dict[DocumentKind, Iterable[str]] | None = None):
        self.numbers = {kind: list(values) for kind, values in (numbers or {}).items()}

    def add(self, kind: DocumentKind, number: str) -> None:
        self.numbers.setdefault(kind, []).append(number)

    async def list_numbers(self, kind: DocumentKind, prefix_pattern: str) -> list[str]:
        return [n for n in self.numbers.get(kind, []) if n.startswith(prefix_pattern)]


def period_pattern(prefix: str, year: int) -> str:
    """Match pattern shared by all numbers of one prefix and year: ``ADJ-2024-``."""
    return f"{prefix}{SEPARATOR}{year:04d}{SEPARATOR}"


def format_document_number(prefix: str, year: int, sequence: int) -> str:
    return f"{period_pattern(prefix, year)}{sequence:0{SEQUENCE_WIDTH}d}"


def parse_sequence(number: str) -> int | None:
    """Return the sequence part of ``PREFIX-YYYY-NNN``, or None if malformed."""
    parts = number.split(SEPARATOR)
    if len(parts) != 3:
        return None
    if not _SEQUENCE_RE.fullmatch(parts[2]):
        return None
    return int(parts[2], 10)


def max_sequence(numbers: Iterable[str], pattern: str) -> int:
    """Highest parseable sequence among numbers starting with ``pattern`` (0 if none)."""
    highest = 0
    for number in numbers:
        # Storage LIKE may be case-insensitive; the prefix match must not be
        if not number.startswith(pattern):
            continue
        sequence = parse_sequence(number)
        if sequence is None:
            logger.debug("Skipping malformed document number %r", number)
            continue
        if sequence > highest:
            highest = sequence
    return highest


class DocumentNumberAllocator:
    """Computes the next document number candidate for a kind and year."""

    def __init__(self, source: NumberSource):
        self.source = source

    async def allocate_next(self, kind: DocumentKind | str, now: datetime) -> str:
        """
        Return the next number for ``kind`` in the year of ``now``.

        Raises:
            InvalidDocumentKindError: unknown kind
            PersistenceUnavailableError: stored numbers could not be read
        """
        kind = resolve_kind(kind)
        prefix = kind.prefix
        year = now.year
        pattern = period_pattern(prefix, year)

        try:
            numbers = await self.source.list_numbers(kind, pattern)
        except PersistenceUnavailableError:
            raise
        except (OSError, TimeoutError) as e:
            raise PersistenceUnavailableError(
                f"Could not read existing {kind.value} numbers: {e}"
            ) from e

        next_sequence = max_sequence(numbers, pattern) + 1
        number = format_document_number(prefix, year, next_sequence)
        logger.debug("Allocated %s number candidate %s", kind.value, number)
        return number
