"""Document kinds and their fixed number prefixes."""

from enum import StrEnum

from src.core.exceptions import InvalidDocumentKindError


class DocumentKind(StrEnum):
    """Inventory document kinds that carry a sequential number."""

    ADJUSTMENT = "adjustment"
    DELIVERY = "delivery"
    TRANSFER = "transfer"
    RECEIPT = "receipt"

    @property
    def prefix(self) -> str:
        return PREFIXES[self]

    @property
    def route(self) -> str:
        """URL segment of the kind's API (``/api/<route>``)."""
        return ROUTES[self]


PREFIXES: dict[DocumentKind, str] = {
    DocumentKind.ADJUSTMENT: "ADJ",
    DocumentKind.DELIVERY: "DEL",
    DocumentKind.TRANSFER: "TRF",
    DocumentKind.RECEIPT: "REC",
}

ROUTES: dict[DocumentKind, str] = {
    DocumentKind.ADJUSTMENT: "adjustments",
    DocumentKind.DELIVERY: "deliveries",
    DocumentKind.TRANSFER: "transfers",
    DocumentKind.RECEIPT: "receipts",
}


def resolve_kind(kind: DocumentKind | str) -> DocumentKind:
    """Return the DocumentKind for an enum member or its string value."""
    if isinstance(kind, DocumentKind):
        return kind
    try:
        return DocumentKind(kind)
    except ValueError:
        raise InvalidDocumentKindError(kind) from None
