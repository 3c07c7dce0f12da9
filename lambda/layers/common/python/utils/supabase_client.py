"""
Supabase Client Utilities
=========================

HTTP-based Supabase client for database operations.
Uses httpx for direct REST API calls to avoid heavy SDK dependencies.
"""

from typing import Optional

import httpx
from aws_lambda_powertools import Logger

from .secrets import get_secret

logger = Logger()

# Cached configuration
_config: Optional[dict] = None


def _get_config() -> dict:
    """Get cached Supabase configuration."""
    global _config
    if _config is None:
        _config = {
            "url": get_secret("SUPABASE_URL"),
            "key": get_secret("SUPABASE_SERVICE_KEY"),
        }
        if not _config["url"] or not _config["key"]:
            _config = None
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_KEY are required")
    return _config


def _get_headers() -> dict:
    """Get headers for Supabase REST API."""
    config = _get_config()
    return {
        "apikey": config["key"],
        "Authorization": f"Bearer {config['key']}",
        "Content-Type": "application/json",
        "Prefer": "return=representation",
    }


def _rest_url(table: str) -> str:
    """Get REST API URL for a table."""
    config = _get_config()
    return f"{config['url']}/rest/v1/{table}"


class SupabaseClient:
    """
    Supabase operations for statement reconciliation.

    Every query is scoped to the acting user, passed in explicitly.
    """

    def __init__(self, transport: Optional[httpx.BaseTransport] = None):
        self._client = httpx.Client(timeout=30.0, headers=_get_headers(), transport=transport)

    def __del__(self):
        if hasattr(self, '_client'):
            self._client.close()

    def _query(self, table: str, params: dict = None) -> list[dict]:
        """Execute a SELECT query."""
        url = _rest_url(table)
        response = self._client.get(url, params=params or {})
        response.raise_for_status()
        return response.json()

    def _insert(self, table: str, data: dict) -> dict:
        """Insert a record."""
        url = _rest_url(table)
        response = self._client.post(url, json=data)
        response.raise_for_status()
        result = response.json()
        return result[0] if isinstance(result, list) and result else result

    # =========================================================================
    # REFERENCE DATA
    # =========================================================================

    def get_invoices(self, user_id: str) -> list[dict]:
        """Fetch the user's invoices, newest first."""
        results = self._query("invoices", {
            "user_id": f"eq.{user_id}",
            "select": "id,invoice_number,status,items,client_id",
            "order": "created_at.desc",
        })
        logger.info(f"Loaded {len(results)} invoices")
        return results

    def get_project_receipts(self, user_id: str) -> list[dict]:
        """
        Fetch the user's project receipts, grouped by project.

        Projects come newest first and each project's receipts follow it,
        so the order matches what the dashboard lists. Each row carries
        its project's title as project_title.
        """
        projects = self._query("projects", {
            "user_id": f"eq.{user_id}",
            "select": "title,project_receipts(id,description,amount,vendor)",
            "order": "created_at.desc",
        })
        results = [
            {**receipt, "project_title": project.get("title") or ""}
            for project in projects
            for receipt in project.get("project_receipts") or []
        ]
        logger.info(f"Loaded {len(results)} receipts from {len(projects)} projects")
        return results

    def get_expense_categories(self, user_id: str) -> list[dict]:
        """Fetch the user's expense categories plus the shared defaults."""
        return self._query("expense_categories", {
            "or": f"(user_id.eq.{user_id},user_id.is.null)",
            "select": "id,name,irs_code,is_default",
            "order": "name.asc",
        })

    # =========================================================================
    # BANK EXPENSE OPERATIONS
    # =========================================================================

    def create_bank_expense(self, data: dict) -> dict:
        """Insert a reconciled expense into bank_expenses."""
        return self._insert("bank_expenses", data)
