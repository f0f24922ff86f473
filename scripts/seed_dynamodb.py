"""Create the encoding metadata table and optionally seed known encodings.

Usage:
    python scripts/seed_dynamodb.py --endpoint-url http://localhost:4566
    python scripts/seed_dynamodb.py --seed-file config/encoding_seed.json
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any

import boto3

from aionxml.models.encoding import EncodingMetadata
from aionxml.persistence.dynamodb_backend import DynamoDBMetadataStore

BASE_TABLE_NAME = "aionxml-encoding-metadata"
DEFAULT_SEED_FILE = Path(__file__).resolve().parent.parent / "config" / "encoding_seed.json"


def create_table(ddb: Any, suffix: str = "", base_name: str = BASE_TABLE_NAME) -> bool:
    """Create the PK/SK metadata table. Returns False if it already exists."""
    client = ddb.meta.client
    table_name = f"{base_name}{suffix}"
    if table_name in client.list_tables().get("TableNames", []):
        print(f"  Table {table_name} already exists, skipping")
        return False
    client.create_table(
        TableName=table_name,
        KeySchema=[
            {"AttributeName": "PK", "KeyType": "HASH"},
            {"AttributeName": "SK", "KeyType": "RANGE"},
        ],
        AttributeDefinitions=[
            {"AttributeName": "PK", "AttributeType": "S"},
            {"AttributeName": "SK", "AttributeType": "S"},
        ],
        BillingMode="PAY_PER_REQUEST",
    )
    print(f"  Created table {table_name}")
    return True


def load_seed_records(seed_path: Path) -> list[EncodingMetadata]:
    """Parse a JSON list of metadata records (table_name, map_variant, encoding, has_bom, ...)."""
    data = json.loads(seed_path.read_text(encoding="utf-8"))
    return [EncodingMetadata.model_validate(entry) for entry in data]


def seed_records(store: DynamoDBMetadataStore, records: list[EncodingMetadata]) -> int:
    for record in records:
        store.put_record(record)
    print(f"  Seeded {len(records)} encoding metadata records")
    return len(records)


def main() -> None:
    parser = argparse.ArgumentParser(description="Create and seed the aionxml DynamoDB table")
    parser.add_argument("--endpoint-url", default=None, help="DynamoDB endpoint (e.g. http://localhost:4566)")
    parser.add_argument("--table-suffix", default="", help="Table name suffix (e.g. -dev)")
    parser.add_argument("--region", default="us-east-1", help="AWS region")
    parser.add_argument("--seed-file", type=Path, default=None, help="JSON list of metadata records")
    args = parser.parse_args()

    kwargs: dict[str, Any] = {"region_name": args.region}
    if args.endpoint_url:
        kwargs["endpoint_url"] = args.endpoint_url

    ddb = boto3.resource("dynamodb", **kwargs)

    print("Creating table...")
    create_table(ddb, suffix=args.table_suffix)

    if args.seed_file is not None:
        print("Seeding data...")
        store = DynamoDBMetadataStore(
            table_suffix=args.table_suffix,
            region=args.region,
            endpoint_url=args.endpoint_url,
        )
        seed_records(store, load_seed_records(args.seed_file))

    print("Done!")


if __name__ == "__main__":
    main()
