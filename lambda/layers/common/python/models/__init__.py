"""
Statement Reconciliation - Data Models
======================================

Typed data models for bank statement reconciliation.
"""

from .bank_transaction import (
    TransactionType,
    MatchType,
    Confidence,
    ParsedTransaction,
    MatchedTransaction,
    Unmatched,
    InvoiceMatch,
    ReceiptMatch,
    Categorized,
    Match,
    transactions_from_payload,
)
from .reference import InvoiceStatus, LineItem, Invoice, Receipt, ExpenseCategory
from .expense import BankExpense
from .reconciliation_result import ReconciliationSummary, SaveResult

__all__ = [
    "TransactionType",
    "MatchType",
    "Confidence",
    "ParsedTransaction",
    "MatchedTransaction",
    "Unmatched",
    "InvoiceMatch",
    "ReceiptMatch",
    "Categorized",
    "Match",
    "transactions_from_payload",
    "InvoiceStatus",
    "LineItem",
    "Invoice",
    "Receipt",
    "ExpenseCategory",
    "BankExpense",
    "ReconciliationSummary",
    "SaveResult",
]
