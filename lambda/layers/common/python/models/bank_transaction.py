"""
Bank Statement Transaction Data Models
======================================

Represents rows recovered from an uploaded bank statement and the
results of matching them to invoices, receipts, or expense categories.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Any, Union


class TransactionType(str, Enum):
    """Direction of money on the statement."""
    CREDIT = "credit"  # Money in
    DEBIT = "debit"  # Money out


class MatchType(str, Enum):
    """What a statement row was reconciled against."""
    INVOICE = "invoice"
    RECEIPT = "receipt"
    CATEGORIZED = "categorized"
    NONE = "none"


class Confidence(str, Enum):
    """Coarse certainty of a match."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"


@dataclass
class ParsedTransaction:
    """
    One row recovered from an uploaded statement.

    The id is only stable within a single upload.
    """

    id: str
    date: str  # Raw statement string, not normalized
    description: str
    amount: float
    type: TransactionType

    @property
    def is_credit(self) -> bool:
        return self.type == TransactionType.CREDIT

    @property
    def is_debit(self) -> bool:
        return self.type == TransactionType.DEBIT

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date,
            "description": self.description,
            "amount": self.amount,
            "type": self.type.value,
        }


# =============================================================================
# MATCH VARIANTS
# =============================================================================


@dataclass(frozen=True)
class Unmatched:
    """No invoice, receipt, or category assigned yet."""

    match_type = MatchType.NONE

    @property
    def label(self) -> Optional[str]:
        return None


@dataclass(frozen=True)
class InvoiceMatch:
    """Credit matched to a paid invoice."""

    invoice_id: str
    label: str

    match_type = MatchType.INVOICE

    def __post_init__(self):
        if not self.invoice_id:
            raise ValueError("InvoiceMatch requires an invoice_id")


@dataclass(frozen=True)
class ReceiptMatch:
    """Debit matched to a project receipt."""

    receipt_id: str
    label: str

    match_type = MatchType.RECEIPT

    def __post_init__(self):
        if not self.receipt_id:
            raise ValueError("ReceiptMatch requires a receipt_id")


@dataclass(frozen=True)
class Categorized:
    """Debit assigned to an expense category."""

    category_id: str
    category_name: str

    match_type = MatchType.CATEGORIZED

    def __post_init__(self):
        if not self.category_id:
            raise ValueError("Categorized requires a category_id")

    @property
    def label(self) -> str:
        return f"Expense: {self.category_name}"


Match = Union[Unmatched, InvoiceMatch, ReceiptMatch, Categorized]


@dataclass
class MatchedTransaction(ParsedTransaction):
    """
    A parsed statement row enriched with its reconciliation state.

    The match is a tagged union so a categorized row always carries a
    category id and an invoice/receipt match always carries a target id.
    Once is_saved is set the row is terminal.
    """

    match: Match = field(default_factory=Unmatched)
    confidence: Confidence = Confidence.NONE
    is_saved: bool = False

    @classmethod
    def from_parsed(
        cls,
        parsed: ParsedTransaction,
        match: Optional[Match] = None,
        confidence: Confidence = Confidence.NONE
    ) -> "MatchedTransaction":
        """Enrich a parsed row with a match result."""
        return cls(
            id=parsed.id,
            date=parsed.date,
            description=parsed.description,
            amount=parsed.amount,
            type=parsed.type,
            match=match or Unmatched(),
            confidence=confidence,
        )

    @property
    def match_type(self) -> MatchType:
        return self.match.match_type

    @property
    def match_id(self) -> Optional[str]:
        if isinstance(self.match, InvoiceMatch):
            return self.match.invoice_id
        if isinstance(self.match, ReceiptMatch):
            return self.match.receipt_id
        return None

    @property
    def match_label(self) -> Optional[str]:
        return self.match.label

    @property
    def category_id(self) -> Optional[str]:
        if isinstance(self.match, Categorized):
            return self.match.category_id
        return None

    @property
    def category_name(self) -> Optional[str]:
        if isinstance(self.match, Categorized):
            return self.match.category_name
        return None

    @property
    def is_matched(self) -> bool:
        return self.match_type != MatchType.NONE

    @property
    def is_categorized(self) -> bool:
        return self.match_type == MatchType.CATEGORIZED

    def with_match(self, match: Match, confidence: Confidence) -> "MatchedTransaction":
        """Return a copy carrying a new match."""
        return replace(self, match=match, confidence=confidence)

    def mark_saved(self) -> "MatchedTransaction":
        """Return a copy flagged as persisted."""
        return replace(self, is_saved=True)

    @classmethod
    def from_dict(cls, data: dict) -> "MatchedTransaction":
        """
        Rebuild a working-set row from its JSON shape.

        Raises:
            ValueError: If the row is missing fields or violates the
                match invariants (e.g. categorized without category_id)
        """
        if not data.get("id"):
            raise ValueError("Transaction is missing an id")

        match_type = MatchType(data.get("match_type") or "none")
        match_id = data.get("match_id")
        label = data.get("match_label") or ""

        match: Match
        if match_type == MatchType.INVOICE:
            match = InvoiceMatch(invoice_id=match_id, label=label)
        elif match_type == MatchType.RECEIPT:
            match = ReceiptMatch(receipt_id=match_id, label=label)
        elif match_type == MatchType.CATEGORIZED:
            match = Categorized(
                category_id=data.get("category_id"),
                category_name=data.get("category_name") or "",
            )
        else:
            match = Unmatched()

        return cls(
            id=data["id"],
            date=data.get("date", ""),
            description=data.get("description", ""),
            amount=float(data.get("amount", 0)),
            type=TransactionType(data.get("type", "debit")),
            match=match,
            confidence=Confidence(data.get("confidence") or "none"),
            is_saved=bool(data.get("is_saved", False)),
        )

    def to_dict(self) -> dict:
        """Convert to the JSON shape returned to the web app."""
        return {
            **super().to_dict(),
            "match_type": self.match_type.value,
            "match_id": self.match_id,
            "match_label": self.match_label,
            "confidence": self.confidence.value,
            "category_id": self.category_id,
            "category_name": self.category_name,
            "is_saved": self.is_saved,
        }


def transactions_from_payload(rows: Optional[list[Any]]) -> list[MatchedTransaction]:
    """Rebuild the working set sent back by the web app."""
    if not rows:
        return []
    if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
        raise ValueError("transactions must be a list of objects")
    return [MatchedTransaction.from_dict(row) for row in rows]
