import logging
from collections.abc import Callable
from datetime import datetime
from typing import TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import settings
from src.core.documents.allocator import DocumentNumberAllocator
from src.core.documents.kinds import DocumentKind, resolve_kind
from src.core.documents.sources import SqlNumberSource
from src.core.exceptions import DuplicateError

logger = logging.getLogger(__name__)

DocumentT = TypeVar("DocumentT")


class DocumentNumberService:
    """Allocates document numbers and inserts documents under them."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.source = SqlNumberSource(session)
        self.allocator = DocumentNumberAllocator(self.source)

    async def next_number(self, kind: DocumentKind | str, now: datetime | None = None) -> str:
        """Next number candidate for ``kind``; ``now`` defaults to wall-clock time."""
        return await self.allocator.allocate_next(kind, now or datetime.now())

    async def insert_with_number(
        self,
        kind: DocumentKind | str,
        build: Callable[[str], DocumentT],
        requested_number: str | None = None,
        now: datetime | None = None,
    ) -> DocumentT:
        """
        Build a document for a number and flush it.

        A client-supplied number is used as-is and a collision raises
        DuplicateError. Without one, the number is allocated here and
        re-allocated when another document took it in the meantime.
        """
        kind = resolve_kind(kind)
        requested = (requested_number or "").strip()

        if requested:
            if await self.source.number_exists(kind, requested):
                raise self._duplicate(kind, requested)
            document = build(requested)
            if not await self._try_insert(kind, document, requested):
                raise self._duplicate(kind, requested)
            return document

        attempts = settings.document_number_max_retries
        number = None
        for attempt in range(1, attempts + 1):
            number = await self.next_number(kind, now)
            if await self.source.number_exists(kind, number):
                logger.warning(
                    "%s number %s taken before insert (attempt %d/%d)",
                    kind.value, number, attempt, attempts,
                )
                continue
            document = build(number)
            if await self._try_insert(kind, document, number):
                return document
            logger.warning(
                "%s number %s collided on insert (attempt %d/%d)",
                kind.value, number, attempt, attempts,
            )

        raise self._duplicate(kind, number)

    async def _try_insert(self, kind: DocumentKind, document: object, number: str) -> bool:
        """Flush ``document`` in a savepoint; False if its number is already taken."""
        try:
            async with self.session.begin_nested():
                self.session.add(document)
                await self.session.flush()
        except IntegrityError:
            if await self.source.number_exists(kind, number):
                return False
            raise
        return True

    @staticmethod
    def _duplicate(kind: DocumentKind, number: str | None) -> DuplicateError:
        return DuplicateError(kind.value.capitalize(), f"{kind.value}_number", number)
