"""
Statement Reconciliation - Common Utilities
===========================================

Shared utilities for all Lambda functions.
"""

from .supabase_client import SupabaseClient
from .secrets import get_secret

__all__ = [
    "SupabaseClient",
    "get_secret",
]
