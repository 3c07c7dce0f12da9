"""
Supabase Credentials from Secrets Manager
=========================================

The reconciliation secret is one JSON document holding SUPABASE_URL and
SUPABASE_SERVICE_KEY. It is fetched once per warm container.
"""

import json
import os
from typing import Any
from functools import lru_cache

import boto3
from botocore.exceptions import ClientError
from aws_lambda_powertools import Logger

logger = Logger()

SECRET_NAME = os.environ.get("SECRETS_NAME", "statement-reconciliation-secrets")

_secrets_client = None


def _get_secrets_client():
    global _secrets_client
    if _secrets_client is None:
        _secrets_client = boto3.client("secretsmanager")
    return _secrets_client


@lru_cache(maxsize=1)
def get_all_secrets() -> dict[str, Any]:
    """
    Load the reconciliation secret document.

    Raises:
        ClientError: If Secrets Manager rejects the read
    """
    try:
        response = _get_secrets_client().get_secret_value(SecretId=SECRET_NAME)
    except ClientError as e:
        code = e.response.get("Error", {}).get("Code", "Unknown")
        logger.error(f"Could not read secret {SECRET_NAME}: {code}")
        raise

    secrets = json.loads(response["SecretString"])
    logger.info(f"Loaded {len(secrets)} keys from {SECRET_NAME}")
    return secrets


def get_secret(key: str, default: Any = None) -> Any:
    """Single value from the secret document, or default when absent."""
    return get_all_secrets().get(key, default)
