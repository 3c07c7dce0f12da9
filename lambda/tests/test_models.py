"""
Data Model Tests
================

Usage:
    pytest lambda/tests/test_models.py -v
"""

from datetime import date

import pytest

from models import (
    MatchedTransaction,
    MatchType,
    Confidence,
    TransactionType,
    InvoiceMatch,
    ReceiptMatch,
    Categorized,
    Unmatched,
    Invoice,
    InvoiceStatus,
    Receipt,
    ExpenseCategory,
    BankExpense,
    SaveResult,
    transactions_from_payload,
)


class TestMatchVariants:
    """Illegal match states cannot be constructed."""

    def test_invoice_match_requires_id(self):
        with pytest.raises(ValueError):
            InvoiceMatch(invoice_id="", label="Invoice #1")

    def test_receipt_match_requires_id(self):
        with pytest.raises(ValueError):
            ReceiptMatch(receipt_id=None, label="Lumber")

    def test_categorized_requires_category(self):
        with pytest.raises(ValueError):
            Categorized(category_id="", category_name="Materials")

    def test_labels(self):
        assert Unmatched().label is None
        assert Categorized("cat1", "Materials").label == "Expense: Materials"
        assert InvoiceMatch("inv-1", "Invoice #7").label == "Invoice #7"


class TestMatchedTransactionPayload:

    def test_round_trip_categorized(self):
        row = {
            "id": "tx-4",
            "date": "01/15/2024",
            "description": "Office Depot",
            "amount": 45.99,
            "type": "debit",
            "match_type": "categorized",
            "match_id": None,
            "match_label": "Expense: Materials",
            "confidence": "high",
            "category_id": "cat1",
            "category_name": "Materials",
            "is_saved": True,
        }
        tx = MatchedTransaction.from_dict(row)

        assert isinstance(tx.match, Categorized)
        assert tx.is_saved
        assert tx.to_dict() == row

    def test_unmatched_defaults(self):
        tx = MatchedTransaction.from_dict({"id": "tx-0", "amount": "12.5", "type": "credit"})

        assert tx.match_type == MatchType.NONE
        assert tx.confidence == Confidence.NONE
        assert tx.amount == 12.5
        assert tx.type == TransactionType.CREDIT
        assert tx.match_label is None

    @pytest.mark.parametrize("row", [
        {"id": "tx-0", "type": "debit", "match_type": "categorized"},
        {"id": "tx-0", "type": "credit", "match_type": "invoice", "match_label": "Invoice #1"},
        {"id": "tx-0", "type": "debit", "match_type": "receipt", "match_id": ""},
        {"id": "tx-0", "type": "sideways"},
        {"id": "tx-0", "type": "debit", "match_type": "vendor"},
        {"type": "debit"},
    ])
    def test_invalid_rows_rejected(self, row):
        with pytest.raises(ValueError):
            MatchedTransaction.from_dict(row)

    def test_payload_helper(self):
        assert transactions_from_payload(None) == []
        rows = transactions_from_payload([{"id": "tx-0", "amount": 1, "type": "debit"}])
        assert rows[0].id == "tx-0"


class TestReferenceModels:

    def test_invoice_from_row(self):
        inv = Invoice.from_dict({
            "id": "inv-1",
            "invoice_number": 1042,
            "status": "paid",
            "items": [{"quantity": 2, "unitPrice": 125.5}, {"quantity": 1, "unit_price": 10}],
        })

        assert inv.is_paid
        assert inv.total == 261.0
        assert inv.label == "Invoice #1042"

    def test_invoice_tolerates_bad_items_and_status(self):
        inv = Invoice.from_dict({"id": "inv-2", "status": "void", "items": "not-a-list"})

        assert inv.status == InvoiceStatus.DRAFT
        assert inv.total == 0

    def test_receipt_with_embedded_project(self):
        rec = Receipt.from_dict({
            "id": "rec-1",
            "amount": "45.99",
            "description": "Lumber",
            "projects": {"title": "Deck Repair"},
        })

        assert rec.amount == 45.99
        assert rec.label == "Lumber (Deck Repair)"

    def test_category_from_row(self):
        cat = ExpenseCategory.from_dict({"id": "cat1", "name": "Materials", "irs_code": "200"})
        assert (cat.name, cat.irs_code, cat.is_default) == ("Materials", "200", False)


class TestBankExpense:

    def test_insert_row(self):
        expense = BankExpense(
            user_id="user-1",
            amount=45.99,
            description="Office Depot",
            expense_date=date(2024, 1, 15),
            vendor="",
            category_id="cat1",
            bank_statement_ref="tx-0",
            is_reconciled=True,
        )

        row = expense.to_insert()

        assert row["expense_date"] == "2024-01-15"
        assert row["vendor"] is None
        assert row["is_reconciled"] is True
        assert "id" not in row and "created_at" not in row

    def test_blank_references_become_null(self):
        expense = BankExpense(user_id="user-1", amount=10.0, description="Fee", expense_date=date(2024, 2, 1))

        row = expense.to_insert()

        assert row["category_id"] is None
        assert row["bank_statement_ref"] is None
        assert row["is_reconciled"] is False


class TestSaveResult:

    def test_messages(self):
        assert SaveResult().message == "No new categorized transactions to save"
        assert SaveResult(eligible_count=3, saved_count=3).message == "Saved 3 expenses"
        assert SaveResult(eligible_count=2, saved_count=1, failed_ids=["tx-1"]).message == \
            "Saved 1 expense, failed to save 1"
