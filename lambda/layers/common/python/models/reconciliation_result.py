"""
Reconciliation Result Data Models
=================================

Summary counts for a working set and the outcome of saving
categorized transactions as expenses.
"""

from dataclasses import dataclass, field

from .bank_transaction import MatchedTransaction


@dataclass
class ReconciliationSummary:
    """Counts shown above the transactions table."""
    total_count: int = 0
    matched_count: int = 0
    unmatched_count: int = 0
    categorized_count: int = 0
    saved_count: int = 0

    @classmethod
    def from_transactions(cls, transactions: list[MatchedTransaction]) -> "ReconciliationSummary":
        matched = sum(1 for tx in transactions if tx.is_matched)
        return cls(
            total_count=len(transactions),
            matched_count=matched,
            unmatched_count=len(transactions) - matched,
            categorized_count=sum(1 for tx in transactions if tx.is_categorized),
            saved_count=sum(1 for tx in transactions if tx.is_saved),
        )

    def to_dict(self) -> dict:
        return {
            "total_count": self.total_count,
            "matched_count": self.matched_count,
            "unmatched_count": self.unmatched_count,
            "categorized_count": self.categorized_count,
            "saved_count": self.saved_count,
        }


@dataclass
class SaveResult:
    """
    Outcome of one save invocation.

    Partial success is normal: each categorized row is persisted on its
    own and failures are reported alongside the saved count.
    """

    transactions: list[MatchedTransaction] = field(default_factory=list)
    eligible_count: int = 0
    saved_count: int = 0
    failed_ids: list[str] = field(default_factory=list)

    @property
    def nothing_to_save(self) -> bool:
        return self.eligible_count == 0

    @property
    def has_failures(self) -> bool:
        return len(self.failed_ids) > 0

    @property
    def message(self) -> str:
        """Generate human-readable summary."""
        if self.nothing_to_save:
            return "No new categorized transactions to save"
        noun = "expense" if self.saved_count == 1 else "expenses"
        text = f"Saved {self.saved_count} {noun}"
        if self.has_failures:
            text += f", failed to save {len(self.failed_ids)}"
        return text

    def to_dict(self) -> dict:
        return {
            "transactions": [tx.to_dict() for tx in self.transactions],
            "eligible_count": self.eligible_count,
            "saved_count": self.saved_count,
            "failed_ids": list(self.failed_ids),
            "nothing_to_save": self.nothing_to_save,
            "message": self.message,
        }
