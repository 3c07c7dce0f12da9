"""
Reconcile Statement Lambda Handler
==================================

Bank statement reconciliation for the web dashboard.
Triggered by API Gateway; the web app holds the working set and sends
it back with every action.

Actions:
    upload      Parse a CSV statement and auto-match it
    candidates  List invoices/receipts a row can be matched to
    match       Manually match a row to an invoice or receipt
    categorize  Assign an expense category to a debit row
    ignore      Drop a row from the working set
    save        Persist categorized rows as bank expenses
"""

import base64
import binascii
import json
from typing import Any, Callable

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from utils.supabase_client import SupabaseClient
from models import (
    Invoice,
    Receipt,
    ExpenseCategory,
    MatchedTransaction,
    MatchType,
    transactions_from_payload,
)
from tools import (
    parse_statement_csv,
    read_statement_upload,
    StatementError,
    StatementParseError,
    auto_match,
    manual_match,
    categorize,
    ignore,
    match_candidates,
    summarize,
    save_categorized,
)

logger = Logger()
metrics = Metrics()
tracer = Tracer()


MANUAL_MATCH_TYPES = (MatchType.INVOICE.value, MatchType.RECEIPT.value)


class BadRequestError(ValueError):
    """Request body is missing or malformed."""


@logger.inject_lambda_context
@metrics.log_metrics
@tracer.capture_lambda_handler
def lambda_handler(event: dict, context: LambdaContext) -> dict:
    """
    Route a reconciliation action.

    Expected payload from web app:
    {
        "action": "upload",
        "user_id": "uuid",
        "filename": "statement.csv",
        "content": "Date,Description,Amount\\n..."
    }
    """
    # Handle CORS preflight
    http_method = event.get("httpMethod") or event.get("requestContext", {}).get("http", {}).get("method", "")
    if http_method == "OPTIONS":
        return _cors_preflight_response()

    try:
        body = _parse_request_body(event)
        action = body.get("action")
        logger.info("Received reconciliation request", extra={"action": action})

        route = ACTIONS.get(action)
        if route is None:
            return _error_response(400, f"Unknown action: {action}")

        return _success_response(route(body))

    except StatementError as e:
        logger.warning(f"Statement rejected: {e}")
        return _error_response(400, str(e))

    except BadRequestError as e:
        logger.warning(f"Invalid request: {e}")
        return _error_response(400, str(e))

    except Exception as e:
        logger.exception(f"Error processing reconciliation request: {e}")
        return _error_response(500, str(e))


# =============================================================================
# ACTIONS
# =============================================================================


@tracer.capture_method
def handle_upload(body: dict) -> dict:
    """Parse an uploaded statement and auto-match it against the user's records."""
    user_id = _require(body, "user_id")
    text = read_statement_upload(_require(body, "filename"), _upload_content(body))

    parsed = parse_statement_csv(text)

    supabase = SupabaseClient()
    invoices = _load_invoices(supabase, user_id)
    receipts = _load_receipts(supabase, user_id)

    transactions = auto_match(parsed, invoices, receipts)
    summary = summarize(transactions)

    metrics.add_metric(name="TransactionsParsed", unit=MetricUnit.Count, value=len(parsed))
    metrics.add_metric(name="TransactionsAutoMatched", unit=MetricUnit.Count, value=summary.matched_count)

    return {
        "transactions": _serialize(transactions),
        "summary": summary.to_dict(),
        "message": f"Parsed {len(transactions)} transactions from CSV",
    }


@tracer.capture_method
def handle_candidates(body: dict) -> dict:
    """List the invoices or receipts a row can be manually matched to."""
    user_id = _require(body, "user_id")
    transaction_id = _require(body, "transaction_id")
    transactions = _working_set(body)

    tx = next((t for t in transactions if t.id == transaction_id), None)
    if tx is None:
        raise BadRequestError(f"Transaction {transaction_id} not found")

    supabase = SupabaseClient()
    if tx.is_credit:
        candidates = match_candidates(tx, _load_invoices(supabase, user_id), [])
    else:
        candidates = match_candidates(tx, [], _load_receipts(supabase, user_id))

    return {"transaction_id": transaction_id, "candidates": candidates}


@tracer.capture_method
def handle_match(body: dict) -> dict:
    """Manually match a row to an invoice or receipt."""
    user_id = _require(body, "user_id")
    match_type = _require(body, "match_type")
    if match_type not in MANUAL_MATCH_TYPES:
        raise BadRequestError(f"Cannot manually match to {match_type}")
    transactions = _working_set(body)

    supabase = SupabaseClient()
    invoices = _load_invoices(supabase, user_id) if match_type == "invoice" else []
    receipts = _load_receipts(supabase, user_id) if match_type == "receipt" else []

    updated = manual_match(
        transactions,
        transaction_id=body.get("transaction_id"),
        match_type=match_type,
        target_id=body.get("target_id"),
        invoices=invoices,
        receipts=receipts,
    )
    return _working_set_response(updated, "Transaction matched" if updated is not transactions else None)


@tracer.capture_method
def handle_categorize(body: dict) -> dict:
    """Assign an expense category to a debit row."""
    user_id = _require(body, "user_id")
    transactions = _working_set(body)

    supabase = SupabaseClient()
    categories = [ExpenseCategory.from_dict(c) for c in supabase.get_expense_categories(user_id)]

    updated = categorize(
        transactions,
        transaction_id=body.get("transaction_id"),
        category_id=body.get("category_id"),
        categories=categories,
    )
    return _working_set_response(updated, "Transaction categorized" if updated is not transactions else None)


@tracer.capture_method
def handle_ignore(body: dict) -> dict:
    """Drop a row from the working set."""
    transactions = _working_set(body)
    updated = ignore(transactions, body.get("transaction_id"))
    return _working_set_response(updated)


@tracer.capture_method
def handle_save(body: dict) -> dict:
    """Persist categorized rows as reconciled bank expenses."""
    user_id = _require(body, "user_id")
    transactions = _working_set(body)

    result = save_categorized(transactions, user_id, SupabaseClient())

    metrics.add_metric(name="ExpensesSaved", unit=MetricUnit.Count, value=result.saved_count)
    if result.has_failures:
        metrics.add_metric(name="ExpenseSaveFailures", unit=MetricUnit.Count, value=len(result.failed_ids))

    return {
        **result.to_dict(),
        "summary": summarize(result.transactions).to_dict(),
    }


ACTIONS: dict[str, Callable[[dict], dict]] = {
    "upload": handle_upload,
    "candidates": handle_candidates,
    "match": handle_match,
    "categorize": handle_categorize,
    "ignore": handle_ignore,
    "save": handle_save,
}


# =============================================================================
# HELPERS
# =============================================================================


def _load_invoices(supabase: SupabaseClient, user_id: str) -> list[Invoice]:
    return [Invoice.from_dict(row) for row in supabase.get_invoices(user_id)]


def _load_receipts(supabase: SupabaseClient, user_id: str) -> list[Receipt]:
    return [Receipt.from_dict(row) for row in supabase.get_project_receipts(user_id)]


def _require(body: dict, key: str) -> Any:
    value = body.get(key)
    if not value:
        raise BadRequestError(f"Missing {key}")
    return value


def _working_set(body: dict) -> list[MatchedTransaction]:
    """Working set sent back by the web app; malformed rows are a bad request."""
    try:
        return transactions_from_payload(body.get("transactions"))
    except (ValueError, TypeError) as e:
        raise BadRequestError(f"Invalid transactions: {e}") from e


def _upload_content(body: dict) -> bytes | str:
    """Statement content, sent either as text or base64."""
    if body.get("content_base64"):
        try:
            return base64.b64decode(body["content_base64"], validate=True)
        except (binascii.Error, ValueError) as e:
            raise StatementParseError("Failed to process file: invalid base64 content") from e
    if "content" in body:
        return body["content"] or ""
    raise BadRequestError("Missing content")


def _serialize(transactions: list[MatchedTransaction]) -> list[dict]:
    return [tx.to_dict() for tx in transactions]


def _working_set_response(transactions: list[MatchedTransaction], message: str | None = None) -> dict:
    response = {
        "transactions": _serialize(transactions),
        "summary": summarize(transactions).to_dict(),
    }
    if message:
        response["message"] = message
    return response


def _parse_request_body(event: dict) -> dict:
    """Parse request body from API Gateway event."""
    body = event.get("body") or "{}"
    if isinstance(body, str):
        try:
            body = json.loads(body)
        except json.JSONDecodeError as e:
            raise BadRequestError(f"Invalid JSON body: {e.msg}") from e
    if not isinstance(body, dict):
        raise BadRequestError("Request body must be a JSON object")
    return body


CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type, X-Api-Key, x-api-key",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


def _cors_preflight_response() -> dict:
    """Handle CORS preflight OPTIONS request."""
    return {
        "statusCode": 200,
        "headers": CORS_HEADERS,
        "body": ""
    }


def _success_response(data: dict) -> dict:
    """Create success API Gateway response."""
    return {
        "statusCode": 200,
        "headers": CORS_HEADERS,
        "body": json.dumps(data)
    }


def _error_response(status_code: int, message: str) -> dict:
    """Create error API Gateway response."""
    return {
        "statusCode": status_code,
        "headers": CORS_HEADERS,
        "body": json.dumps({"error": message})
    }
