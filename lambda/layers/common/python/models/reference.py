"""
Reference Data Models
=====================

Read-only records the reconciliation matches statement rows against:
invoices, project receipts, and expense categories.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Any


class InvoiceStatus(str, Enum):
    """Invoice lifecycle status."""
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"


@dataclass
class LineItem:
    """A single invoice line."""
    quantity: float
    unit_price: float

    @property
    def total(self) -> float:
        return self.quantity * self.unit_price

    @classmethod
    def from_dict(cls, data: dict) -> "LineItem":
        # The web app stores items as camelCase JSON
        unit_price = data.get("unitPrice", data.get("unit_price", 0))
        return cls(
            quantity=float(data.get("quantity") or 0),
            unit_price=float(unit_price or 0),
        )


@dataclass
class Invoice:
    """
    Represents a client invoice.

    Maps to the invoices database table.
    """

    id: str
    invoice_number: str
    status: InvoiceStatus = InvoiceStatus.DRAFT
    items: list[LineItem] = field(default_factory=list)
    client_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Invoice":
        """Create Invoice from database row dictionary."""
        raw_items = data.get("items")
        items = raw_items if isinstance(raw_items, list) else []
        return cls(
            id=data.get("id", ""),
            invoice_number=str(data.get("invoice_number") or ""),
            status=cls._parse_status(data.get("status")),
            items=[LineItem.from_dict(item) for item in items if isinstance(item, dict)],
            client_id=data.get("client_id"),
        )

    @staticmethod
    def _parse_status(value: Any) -> InvoiceStatus:
        try:
            return InvoiceStatus(value)
        except ValueError:
            return InvoiceStatus.DRAFT

    @property
    def total(self) -> float:
        """Sum of quantity x unit price over all line items."""
        return sum(item.total for item in self.items)

    @property
    def is_paid(self) -> bool:
        return self.status == InvoiceStatus.PAID

    @property
    def label(self) -> str:
        return f"Invoice #{self.invoice_number}"


@dataclass
class Receipt:
    """
    Represents a receipt attached to a project.

    Maps to the project_receipts table, with the owning project's title.
    """

    id: str
    amount: float
    description: str
    project_title: str = ""
    vendor: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Receipt":
        """Create Receipt from a row carrying project_title or an embedded projects(title)."""
        project = data.get("projects") or {}
        project_title = data.get("project_title") or project.get("title") or ""
        return cls(
            id=data.get("id", ""),
            amount=float(data.get("amount", 0)),
            description=data.get("description", ""),
            project_title=project_title,
            vendor=data.get("vendor"),
        )

    @property
    def label(self) -> str:
        return f"{self.description} ({self.project_title})"


@dataclass
class ExpenseCategory:
    """
    Represents an expense category with its optional IRS code.

    Maps to the expense_categories table.
    """

    id: str
    name: str
    irs_code: Optional[str] = None
    is_default: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "ExpenseCategory":
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            irs_code=data.get("irs_code"),
            is_default=bool(data.get("is_default", False)),
        )
