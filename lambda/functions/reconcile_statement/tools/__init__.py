"""
Statement Reconciliation Tools
==============================

Parsing, matching, manual resolution, and saving for the handler.
"""

from .csv_parser import (
    parse_statement_csv,
    read_statement_upload,
    StatementError,
    StatementParseError,
    UnsupportedStatementError,
)
from .auto_matching import auto_match, match_transaction
from .manual_resolution import manual_match, categorize, ignore, match_candidates, summarize
from .expense_saving import save_categorized, parse_statement_date

__all__ = [
    "parse_statement_csv",
    "read_statement_upload",
    "StatementError",
    "StatementParseError",
    "UnsupportedStatementError",
    "auto_match",
    "match_transaction",
    "manual_match",
    "categorize",
    "ignore",
    "match_candidates",
    "summarize",
    "save_categorized",
    "parse_statement_date",
]
