"""
Reconciled Expense Saving Tests
===============================

Usage:
    pytest lambda/tests/test_expense_saving.py -v
"""

from datetime import date
from unittest.mock import Mock

import httpx
import pytest

from models import MatchedTransaction, ParsedTransaction, TransactionType
from tools.expense_saving import save_categorized, parse_statement_date, build_expense

TODAY = date(2024, 6, 30)


class TestParseStatementDate:

    @pytest.mark.parametrize("raw,expected", [
        ("01/15/2024", date(2024, 1, 15)),
        ("1/5/2024", date(2024, 1, 5)),
        ("2024-01-15", date(2024, 1, 15)),
        ("2024/3/9", date(2024, 3, 9)),
        ("12-31-2023", date(2023, 12, 31)),
        ("01/15/24", date(2024, 1, 15)),
        ("3-9-99", date(2099, 3, 9)),
    ])
    def test_supported_formats(self, raw, expected):
        assert parse_statement_date(raw, TODAY) == expected

    def test_short_year_is_not_year_zero(self):
        """Two-digit statement years land in the 2000s."""
        parsed = parse_statement_date("01/15/24", TODAY)
        assert parsed.year >= 1900

    @pytest.mark.parametrize("raw", [
        "", None, "Jan 15 2024", "2024", "13/45/2024", "2024-02-30", "15.01.2024",
        "01/15/024", "01/15/202", "01/15/20245",
    ])
    def test_falls_back_to_today(self, raw):
        assert parse_statement_date(raw, TODAY) == TODAY


class TestBuildExpense:

    def test_insert_row(self, make_categorized):
        tx = make_categorized("tx-3", amount=45.99, date="01/15/2024")
        row = build_expense(tx, "user-1", TODAY).to_insert()

        assert row == {
            "user_id": "user-1",
            "amount": 45.99,
            "description": "Purchase tx-3",
            "expense_date": "2024-01-15",
            "vendor": None,
            "category_id": "cat1",
            "bank_statement_ref": "tx-3",
            "is_reconciled": True,
        }


class TestSaveCategorized:

    def test_saves_only_categorized_unsaved(self, make_categorized):
        unmatched = MatchedTransaction.from_parsed(
            ParsedTransaction("tx-0", "01/15/2024", "Deposit", 100.0, TransactionType.CREDIT)
        )
        rows = [unmatched, make_categorized("tx-1"), make_categorized("tx-2", saved=True)]
        supabase = Mock()

        result = save_categorized(rows, "user-1", supabase, TODAY)

        supabase.create_bank_expense.assert_called_once()
        inserted = supabase.create_bank_expense.call_args.args[0]
        assert inserted["bank_statement_ref"] == "tx-1"
        assert inserted["user_id"] == "user-1"

        assert result.saved_count == 1
        assert result.eligible_count == 1
        assert [tx.is_saved for tx in result.transactions] == [False, True, True]
        assert result.message == "Saved 1 expense"

    def test_partial_failure_continues(self, make_categorized):
        """The 2nd of 3 inserts fails; the others still save."""
        rows = [make_categorized("tx-0"), make_categorized("tx-1"), make_categorized("tx-2")]
        supabase = Mock()
        supabase.create_bank_expense.side_effect = [
            {"id": "exp-0"},
            httpx.HTTPStatusError("boom", request=Mock(), response=Mock()),
            {"id": "exp-2"},
        ]

        result = save_categorized(rows, "user-1", supabase, TODAY)

        assert supabase.create_bank_expense.call_count == 3
        assert result.saved_count == 2
        assert result.failed_ids == ["tx-1"]
        assert result.has_failures
        assert [tx.is_saved for tx in result.transactions] == [True, False, True]
        assert result.message == "Saved 2 expenses, failed to save 1"

    def test_second_invocation_writes_nothing(self, make_categorized):
        supabase = Mock()
        first = save_categorized([make_categorized("tx-0")], "user-1", supabase, TODAY)
        second = save_categorized(first.transactions, "user-1", supabase, TODAY)

        assert supabase.create_bank_expense.call_count == 1
        assert second.saved_count == 0
        assert second.nothing_to_save
        assert second.message == "No new categorized transactions to save"

    def test_retry_after_failure(self, make_categorized):
        supabase = Mock()
        supabase.create_bank_expense.side_effect = [RuntimeError("timeout"), {"id": "exp-0"}]

        first = save_categorized([make_categorized("tx-0")], "user-1", supabase, TODAY)
        assert first.saved_count == 0 and not first.nothing_to_save

        second = save_categorized(first.transactions, "user-1", supabase, TODAY)
        assert second.saved_count == 1
        assert second.transactions[0].is_saved

    def test_unparseable_date_uses_today(self, make_categorized):
        supabase = Mock()
        save_categorized([make_categorized("tx-0", date="sometime")], "user-1", supabase, TODAY)

        inserted = supabase.create_bank_expense.call_args.args[0]
        assert inserted["expense_date"] == "2024-06-30"

    def test_empty_working_set(self):
        supabase = Mock()
        result = save_categorized([], "user-1", supabase, TODAY)

        assert result.nothing_to_save
        supabase.create_bank_expense.assert_not_called()
