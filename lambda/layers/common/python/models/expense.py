"""
Bank Expense Data Model
=======================

Represents an expense created from a reconciled bank statement row.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass
class BankExpense:
    """
    A reconciled bank expense, written once to bank_expenses.

    The database assigns id and created_at on insert.
    """

    # Owner
    user_id: str

    # Core expense data
    amount: float
    description: str
    expense_date: date
    vendor: Optional[str] = None
    category_id: Optional[str] = None

    # Reconciliation
    bank_statement_ref: Optional[str] = None  # Statement transaction id
    is_reconciled: bool = False

    def to_insert(self) -> dict:
        """Row for inserting into bank_expenses."""
        return {
            "user_id": self.user_id,
            "amount": self.amount,
            "description": self.description,
            "expense_date": self.expense_date.isoformat(),
            "vendor": self.vendor or None,
            "category_id": self.category_id or None,
            "bank_statement_ref": self.bank_statement_ref or None,
            "is_reconciled": self.is_reconciled,
        }
