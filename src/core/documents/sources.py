"""SQL-backed number source and the kind -> number column registry."""

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from src.core.documents.kinds import DocumentKind, resolve_kind
from src.core.exceptions import InvalidDocumentKindError, PersistenceUnavailableError

# Filled by the document models at import time
_NUMBER_COLUMNS: dict[DocumentKind, InstrumentedAttribute] = {}


def register_number_column(kind: DocumentKind, column: InstrumentedAttribute) -> None:
    """Declare which model column stores the numbers of ``kind``."""
    _NUMBER_COLUMNS[kind] = column


def get_number_column(kind: DocumentKind | str) -> InstrumentedAttribute:
    kind = resolve_kind(kind)
    column = _NUMBER_COLUMNS.get(kind)
    if column is None:
        raise InvalidDocumentKindError(kind)
    return column


class SqlNumberSource:
    """Reads stored document numbers with a ``LIKE 'prefix%'`` filter."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_numbers(self, kind: DocumentKind, prefix_pattern: str) -> list[str]:
        column = get_number_column(kind)
        stmt = select(column).where(column.startswith(prefix_pattern, autoescape=True))
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise PersistenceUnavailableError(
                f"Could not read existing {kind.value} numbers"
            ) from e
        return [number for number in result.scalars().all() if number]

    async def number_exists(self, kind: DocumentKind, number: str) -> bool:
        column = get_number_column(kind)
        stmt = select(column).where(column == number).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None
