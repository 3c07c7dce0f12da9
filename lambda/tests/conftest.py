"""
Shared fixtures for reconciliation tests.

Powertools reads its configuration at import time, so the environment is
set before any handler or tool module is imported.
"""

import os

os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "statement-reconciliation")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "StatementReconciliation")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "true")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")

from dataclasses import dataclass

import pytest

from models import (
    Invoice,
    InvoiceStatus,
    LineItem,
    Receipt,
    ExpenseCategory,
    MatchedTransaction,
    TransactionType,
    Categorized,
    Confidence,
)


@dataclass
class FakeLambdaContext:
    function_name: str = "reconcile-statement"
    memory_limit_in_mb: int = 256
    invoked_function_arn: str = "arn:aws:lambda:us-east-1:123456789012:function:reconcile-statement"
    aws_request_id: str = "52fdfc07-2182-154f-163f-5f0f9a621d72"


@pytest.fixture
def lambda_context():
    return FakeLambdaContext()


@pytest.fixture
def invoices():
    return [
        Invoice(id="inv-draft", invoice_number="1000", status=InvoiceStatus.DRAFT,
                items=[LineItem(quantity=1, unit_price=500.0)]),
        Invoice(id="inv-500", invoice_number="1001", status=InvoiceStatus.PAID,
                items=[LineItem(quantity=2, unit_price=200.0), LineItem(quantity=1, unit_price=100.0)]),
        Invoice(id="inv-1200", invoice_number="1002", status=InvoiceStatus.PAID,
                items=[LineItem(quantity=8, unit_price=150.0)]),
    ]


@pytest.fixture
def receipts():
    return [
        Receipt(id="rec-lumber", amount=45.99, description="Lumber", project_title="Deck Repair"),
        Receipt(id="rec-paint", amount=210.0, description="Paint", project_title="Kitchen Remodel"),
    ]


@pytest.fixture
def categories():
    return [
        ExpenseCategory(id="cat1", name="Materials", irs_code="200"),
        ExpenseCategory(id="cat2", name="Fuel", irs_code="9", is_default=True),
    ]


@pytest.fixture
def make_categorized():
    """Factory for categorized debit rows."""
    def _make(tx_id: str, amount: float = 25.0, date: str = "01/15/2024", saved: bool = False) -> MatchedTransaction:
        return MatchedTransaction(
            id=tx_id,
            date=date,
            description=f"Purchase {tx_id}",
            amount=amount,
            type=TransactionType.DEBIT,
            match=Categorized(category_id="cat1", category_name="Materials"),
            confidence=Confidence.HIGH,
            is_saved=saved,
        )
    return _make
