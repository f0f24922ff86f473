"""Integration test fixtures: LocalStack DynamoDB."""

from __future__ import annotations

import os
import sys

import boto3
import pytest
from botocore.exceptions import BotoCoreError, ClientError

# Default LocalStack endpoint
LOCALSTACK_URL = os.environ.get("LOCALSTACK_URL", "http://localhost:4566")
TABLE_SUFFIX = "-inttest"


def _localstack_available() -> bool:
    """Check if LocalStack is reachable."""
    try:
        client = boto3.client("dynamodb", region_name="us-east-1", endpoint_url=LOCALSTACK_URL)
        client.list_tables()
        return True
    except (BotoCoreError, ClientError):
        return False


skip_no_localstack = pytest.mark.skipif(
    not _localstack_available(),
    reason="LocalStack not available",
)


@pytest.fixture(scope="session")
def localstack_ddb():
    """DynamoDB resource pointing at LocalStack."""
    return boto3.resource("dynamodb", region_name="us-east-1", endpoint_url=LOCALSTACK_URL)


@pytest.fixture(scope="session")
def seeded_table(localstack_ddb):
    """Create and seed the metadata table via the seed script."""
    sys.path.insert(0, str(os.path.join(os.path.dirname(__file__), "..", "..", "scripts")))
    from seed_dynamodb import DEFAULT_SEED_FILE, create_table, load_seed_records, seed_records

    from aionxml.persistence.dynamodb_backend import DynamoDBMetadataStore

    create_table(localstack_ddb, suffix=TABLE_SUFFIX)
    store = DynamoDBMetadataStore(table_suffix=TABLE_SUFFIX, region="us-east-1", endpoint_url=LOCALSTACK_URL)
    seed_records(store, load_seed_records(DEFAULT_SEED_FILE))
    return TABLE_SUFFIX
