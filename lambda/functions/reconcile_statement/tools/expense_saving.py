"""
Reconciled Expense Saving Tool
==============================

Persists categorized statement rows as bank expenses, once each.
"""

import re
from datetime import date
from typing import Any, Optional

from aws_lambda_powertools import Logger

from models import BankExpense, MatchedTransaction, SaveResult

logger = Logger()

_DATE_SEPARATORS = re.compile(r"[/-]")


def _parse_year(value: str) -> int:
    """Four-digit year, or a two-digit one in the 2000s."""
    if len(value) == 2:
        return 2000 + int(value)
    if len(value) != 4:
        raise ValueError(f"Unsupported year '{value}'")
    return int(value)


def parse_statement_date(raw: Optional[str], today: Optional[date] = None) -> date:
    """
    Best-effort parse of a raw statement date.

    YYYY-M-D when the first segment has four characters, M-D-YYYY
    otherwise. A two-digit year is read as 20YY. Anything else,
    including years of other lengths, falls back to today.
    """
    fallback = today or date.today()
    if not raw:
        return fallback

    parts = _DATE_SEPARATORS.split(raw.strip())
    try:
        if len(parts[0]) == 4:
            year_part, month, day = parts[0], int(parts[1]), int(parts[2])
        else:
            month, day, year_part = int(parts[0]), int(parts[1]), parts[2]
        return date(_parse_year(year_part), month, day)
    except (ValueError, IndexError):
        logger.warning(f"Could not parse statement date '{raw}', using {fallback.isoformat()}")
        return fallback


def build_expense(tx: MatchedTransaction, user_id: str, today: Optional[date] = None) -> BankExpense:
    """Build the bank_expenses row for a categorized transaction."""
    return BankExpense(
        user_id=user_id,
        amount=tx.amount,
        description=tx.description,
        expense_date=parse_statement_date(tx.date, today),
        category_id=tx.category_id,
        bank_statement_ref=tx.id,
        is_reconciled=True,
    )


def save_categorized(
    transactions: list[MatchedTransaction],
    user_id: str,
    supabase: Any,
    today: Optional[date] = None
) -> SaveResult:
    """
    Persist every categorized, unsaved row.

    Rows are inserted one at a time. A failed insert is logged and the
    row stays unsaved for a retry; the remaining rows are still attempted.

    Args:
        transactions: Current working set
        user_id: Acting user, owner of the new expenses
        supabase: Client exposing create_bank_expense
        today: Fallback date for unparseable statement dates

    Returns:
        SaveResult with the updated working set and counts
    """
    result = SaveResult()
    updated = []

    for tx in transactions:
        if not tx.is_categorized or tx.is_saved:
            updated.append(tx)
            continue

        result.eligible_count += 1
        expense = build_expense(tx, user_id, today)

        try:
            supabase.create_bank_expense(expense.to_insert())
            updated.append(tx.mark_saved())
            result.saved_count += 1
        except Exception as e:
            logger.error(f"Failed to save expense for {tx.id}: {e}")
            result.failed_ids.append(tx.id)
            updated.append(tx)

    result.transactions = updated
    logger.info(result.message)
    return result
