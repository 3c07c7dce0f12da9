"""
Manual Match and Categorization Tool
====================================

Human corrections to the working set: match a row to a chosen invoice
or receipt, assign an expense category, or drop the row.

Each operation returns a new list and touches only the row with the
given id. Saved rows are terminal and never change.
"""

from typing import Optional

from aws_lambda_powertools import Logger

from models import (
    MatchedTransaction,
    MatchType,
    InvoiceMatch,
    ReceiptMatch,
    Categorized,
    Confidence,
    Invoice,
    Receipt,
    ExpenseCategory,
    ReconciliationSummary,
)

logger = Logger()

MANUAL_MATCH_TYPES = (MatchType.INVOICE, MatchType.RECEIPT)


def _find(transactions: list[MatchedTransaction], transaction_id: str) -> Optional[MatchedTransaction]:
    return next((tx for tx in transactions if tx.id == transaction_id), None)


def _replace(
    transactions: list[MatchedTransaction],
    updated: MatchedTransaction
) -> list[MatchedTransaction]:
    return [updated if tx.id == updated.id else tx for tx in transactions]


def _editable(transactions: list[MatchedTransaction], transaction_id: Optional[str]) -> Optional[MatchedTransaction]:
    """Return the row if it exists and has not been saved."""
    if not transaction_id:
        return None
    tx = _find(transactions, transaction_id)
    if tx is None:
        logger.warning(f"Transaction {transaction_id} is not in the working set")
        return None
    if tx.is_saved:
        logger.warning(f"Transaction {transaction_id} is already saved")
        return None
    return tx


def manual_match(
    transactions: list[MatchedTransaction],
    transaction_id: Optional[str],
    match_type: str,
    target_id: Optional[str],
    invoices: list[Invoice],
    receipts: list[Receipt]
) -> list[MatchedTransaction]:
    """
    Match a row to a user-selected invoice or receipt.

    Manual selections are always high confidence. Missing ids or a
    target that cannot be found leave the working set unchanged.

    Raises:
        ValueError: If match_type is not invoice or receipt
    """
    kind = MatchType(match_type)
    if kind not in MANUAL_MATCH_TYPES:
        raise ValueError(f"Cannot manually match to {kind.value}")

    tx = _editable(transactions, transaction_id)
    if tx is None or not target_id:
        return transactions

    if kind == MatchType.INVOICE:
        invoice = next((inv for inv in invoices if inv.id == target_id), None)
        if invoice is None:
            logger.warning(f"Invoice {target_id} not found")
            return transactions
        match = InvoiceMatch(invoice_id=invoice.id, label=invoice.label)
    else:
        receipt = next((rec for rec in receipts if rec.id == target_id), None)
        if receipt is None:
            logger.warning(f"Receipt {target_id} not found")
            return transactions
        match = ReceiptMatch(receipt_id=receipt.id, label=receipt.label)

    logger.info(f"Manually matched {tx.id} to {kind.value} {target_id}")
    return _replace(transactions, tx.with_match(match, Confidence.HIGH))


def categorize(
    transactions: list[MatchedTransaction],
    transaction_id: Optional[str],
    category_id: Optional[str],
    categories: list[ExpenseCategory]
) -> list[MatchedTransaction]:
    """
    Assign an expense category to a debit row.

    Credits map to invoices, not expense categories, so categorizing a
    credit is a no-op, as is an unknown category.
    """
    tx = _editable(transactions, transaction_id)
    if tx is None or not category_id:
        return transactions

    if not tx.is_debit:
        logger.warning(f"Only debits can be categorized, {tx.id} is a credit")
        return transactions

    category = next((c for c in categories if c.id == category_id), None)
    if category is None:
        logger.warning(f"Expense category {category_id} not found")
        return transactions

    match = Categorized(category_id=category.id, category_name=category.name)
    logger.info(f"Categorized {tx.id} as {category.name}")
    return _replace(transactions, tx.with_match(match, Confidence.HIGH))


def ignore(transactions: list[MatchedTransaction], transaction_id: Optional[str]) -> list[MatchedTransaction]:
    """Remove a row from the working set."""
    if _editable(transactions, transaction_id) is None:
        return transactions
    return [tx for tx in transactions if tx.id != transaction_id]


def match_candidates(
    tx: MatchedTransaction,
    invoices: list[Invoice],
    receipts: list[Receipt]
) -> list[dict]:
    """Options for the manual match picker: paid invoices for credits, receipts for debits."""
    if tx.is_credit:
        return [
            {
                "id": inv.id,
                "match_type": MatchType.INVOICE.value,
                "label": inv.label,
                "amount": round(inv.total, 2),
            }
            for inv in invoices if inv.is_paid
        ]

    return [
        {
            "id": rec.id,
            "match_type": MatchType.RECEIPT.value,
            "label": rec.label,
            "amount": round(rec.amount, 2),
        }
        for rec in receipts
    ]


def summarize(transactions: list[MatchedTransaction]) -> ReconciliationSummary:
    return ReconciliationSummary.from_transactions(transactions)
