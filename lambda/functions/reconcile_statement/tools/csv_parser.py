"""
Statement CSV Parsing Tool
==========================

Turns an uploaded bank statement into parsed transactions.

Supported layouts:
    Date, Description, Amount            (signed amount)
    Date, Description, Debit, Credit     (separate columns)

Fields are split naively on commas, so quoted fields containing commas
are not supported. Amounts use plain point-decimal notation with no
currency symbols or thousands separators.
"""

import re
from typing import Optional

from aws_lambda_powertools import Logger

from models import ParsedTransaction, TransactionType

logger = Logger()

HEADER_TOKENS = ("date", "amount", "description")

# Leading numeric prefix, mirroring the browser's parseFloat
_NUMBER_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class StatementError(ValueError):
    """An uploaded statement was rejected as a whole."""


class UnsupportedStatementError(StatementError):
    """The uploaded file type cannot be reconciled."""


class StatementParseError(StatementError):
    """The uploaded file could not be read."""


def read_statement_upload(filename: str, content: bytes | str) -> str:
    """
    Validate an upload and return its text.

    Args:
        filename: Original file name from the browser
        content: Raw bytes or already-decoded text

    Returns:
        Statement text ready for parse_statement_csv

    Raises:
        UnsupportedStatementError: For PDFs and non-CSV files
        StatementParseError: If the content is not valid UTF-8 text
    """
    name = (filename or "").lower()

    if name.endswith(".pdf"):
        raise UnsupportedStatementError("PDF parsing coming soon - please use CSV for now")
    if not name.endswith(".csv"):
        raise UnsupportedStatementError("Please upload a CSV or PDF file")

    if isinstance(content, str):
        return content.lstrip("\ufeff")

    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise StatementParseError(f"Failed to process file: {e.reason}") from e


def parse_amount(value: Optional[str]) -> Optional[float]:
    """Parse the leading number of a field, or None if there is none."""
    if not value:
        return None
    m = _NUMBER_PREFIX.match(value.lstrip())
    if not m:
        return None
    return float(m.group(0))


def split_line(line: str) -> list[str]:
    """Split a CSV line on commas, trimming and dropping double quotes."""
    return [part.strip().replace('"', "") for part in line.split(",")]


def has_header(first_line: str) -> bool:
    header = first_line.lower()
    return any(token in header for token in HEADER_TOKENS)


def _parse_row(parts: list[str]) -> tuple[float, TransactionType]:
    """Interpret amount columns by row width."""
    amount = 0.0
    tx_type = TransactionType.DEBIT

    if len(parts) >= 4:
        debit = parse_amount(parts[2]) or 0.0
        credit = parse_amount(parts[3]) or 0.0
        if credit > 0:
            amount, tx_type = credit, TransactionType.CREDIT
        else:
            amount = debit
    elif len(parts) == 3:
        signed = parse_amount(parts[2]) or 0.0
        amount = abs(signed)
        if signed > 0:
            tx_type = TransactionType.CREDIT

    return amount, tx_type


def parse_statement_csv(text: str) -> list[ParsedTransaction]:
    """
    Parse statement text into transactions.

    The first line is treated as a header when it mentions date, amount
    or description. Rows whose amount is zero or unparseable are dropped.
    Ids are derived from the data-row index, so they may skip numbers
    where rows were dropped.
    """
    stripped = (text or "").strip()
    if not stripped:
        return []

    lines = stripped.split("\n")
    start = 1 if has_header(lines[0]) else 0

    transactions = []
    for idx, line in enumerate(lines[start:]):
        parts = split_line(line)
        amount, tx_type = _parse_row(parts)

        if amount <= 0:
            continue

        transactions.append(ParsedTransaction(
            id=f"tx-{idx}",
            date=parts[0] if parts else "",
            description=parts[1] if len(parts) > 1 else "",
            amount=amount,
            type=tx_type,
        ))

    dropped = len(lines) - start - len(transactions)
    logger.info(f"Parsed {len(transactions)} transactions ({dropped} rows dropped)")
    return transactions
