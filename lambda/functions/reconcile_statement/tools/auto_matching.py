"""
Statement Auto-Matching Tool
============================

Matches credits to paid invoices and debits to project receipts by
amount, within a proportional tolerance band.
"""

from typing import Optional, Iterable, Callable, TypeVar

from aws_lambda_powertools import Logger

from models import (
    ParsedTransaction,
    MatchedTransaction,
    InvoiceMatch,
    ReceiptMatch,
    Confidence,
    Invoice,
    Receipt,
)

logger = Logger()

# Amounts within 5% of the reference amount are considered the same
AMOUNT_TOLERANCE_RATIO = 0.05

# Differences under one currency unit are treated as exact
HIGH_CONFIDENCE_MAX_DIFF = 1.0

T = TypeVar("T")


def within_tolerance(reference: float, amount: float) -> bool:
    """Check |reference - amount| <= reference * 5%."""
    return abs(reference - amount) <= reference * AMOUNT_TOLERANCE_RATIO


def confidence_for(reference: float, amount: float) -> Confidence:
    """High for a near-exact amount, medium otherwise."""
    if abs(reference - amount) < HIGH_CONFIDENCE_MAX_DIFF:
        return Confidence.HIGH
    return Confidence.MEDIUM


def _first_match(
    candidates: Iterable[T],
    amount: float,
    reference_of: Callable[[T], float]
) -> Optional[T]:
    # First qualifying candidate wins, in the caller's order
    for candidate in candidates:
        if within_tolerance(reference_of(candidate), amount):
            return candidate
    return None


def find_invoice_match(amount: float, invoices: list[Invoice]) -> Optional[Invoice]:
    """First paid invoice whose total is within tolerance of the amount."""
    paid = (inv for inv in invoices if inv.is_paid)
    return _first_match(paid, amount, lambda inv: inv.total)


def find_receipt_match(amount: float, receipts: list[Receipt]) -> Optional[Receipt]:
    """First receipt whose amount is within tolerance of the amount."""
    return _first_match(receipts, amount, lambda rec: rec.amount)


def match_transaction(
    tx: ParsedTransaction,
    invoices: list[Invoice],
    receipts: list[Receipt]
) -> MatchedTransaction:
    """
    Match a single statement row.

    Credits are only compared with paid invoices and debits only with
    receipts. No candidate leaves the row unmatched with no confidence.
    """
    if tx.is_credit:
        invoice = find_invoice_match(tx.amount, invoices)
        if invoice:
            return MatchedTransaction.from_parsed(
                tx,
                match=InvoiceMatch(invoice_id=invoice.id, label=invoice.label),
                confidence=confidence_for(invoice.total, tx.amount),
            )

    if tx.is_debit:
        receipt = find_receipt_match(tx.amount, receipts)
        if receipt:
            return MatchedTransaction.from_parsed(
                tx,
                match=ReceiptMatch(receipt_id=receipt.id, label=receipt.label),
                confidence=confidence_for(receipt.amount, tx.amount),
            )

    return MatchedTransaction.from_parsed(tx)


def auto_match(
    transactions: list[ParsedTransaction],
    invoices: list[Invoice],
    receipts: list[Receipt]
) -> list[MatchedTransaction]:
    """
    Match every parsed row, preserving order.

    Args:
        transactions: Rows from parse_statement_csv
        invoices: The user's invoices in display order
        receipts: The user's project receipts in display order

    Returns:
        One MatchedTransaction per input row
    """
    matched = [match_transaction(tx, invoices, receipts) for tx in transactions]

    auto_matched = sum(1 for tx in matched if tx.is_matched)
    logger.info(f"Auto-matched {auto_matched} of {len(matched)} transactions")
    return matched
