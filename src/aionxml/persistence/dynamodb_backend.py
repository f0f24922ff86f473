"""DynamoDB backend implementing IMetadataStore and IBaselineStore.

Single table, one partition per (table_name, map_variant)::

    PK = TABLE#<table_name>#MAP#<map_variant>
    SK = ENCODING | BASELINE
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import boto3
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import BotoCoreError, ClientError

from aionxml.core.exceptions import BaselineStoreError, MetadataStoreError
from aionxml.models.encoding import BaselineRecord, EncodingMetadata

SK_ENCODING = "ENCODING"
SK_BASELINE = "BASELINE"


def partition_key(table_name: str, map_variant: str = "") -> str:
    return f"TABLE#{table_name}#MAP#{map_variant}"


def _decode_decimals(item: dict[str, Any]) -> dict[str, Any]:
    """Convert Decimal values in a DynamoDB item to int/float."""
    out: dict[str, Any] = {}
    for k, v in item.items():
        if isinstance(v, Decimal):
            out[k] = int(v) if v == int(v) else float(v)
        else:
            out[k] = v
    return out


def _to_item(pk: str, sk: str, model: EncodingMetadata | BaselineRecord) -> dict[str, Any]:
    item = {k: v for k, v in model.model_dump(mode="json").items() if v is not None}
    item.update(PK=pk, SK=sk)
    return item


def _strip_keys(item: dict[str, Any]) -> dict[str, Any]:
    item = _decode_decimals(item)
    item.pop("PK", None)
    item.pop("SK", None)
    return item


class DynamoDBMetadataStore:
    """Production metadata and baseline store backed by one DynamoDB table."""

    def __init__(
        self,
        table_name: str = "aionxml-encoding-metadata",
        table_suffix: str = "",
        region: str = "us-east-1",
        endpoint_url: str | None = None,
    ) -> None:
        self._table_name = f"{table_name}{table_suffix}"
        kwargs: dict = {"region_name": region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._ddb = boto3.resource("dynamodb", **kwargs)
        self._table = self._ddb.Table(self._table_name)

    @property
    def table_name(self) -> str:
        return self._table_name

    # ---- IMetadataStore ----

    def get_record(self, table_name: str, map_variant: str) -> EncodingMetadata | None:
        try:
            resp = self._table.get_item(Key={"PK": partition_key(table_name, map_variant), "SK": SK_ENCODING})
        except (BotoCoreError, ClientError) as exc:
            raise MetadataStoreError("get", table_name, map_variant, str(exc)) from exc
        item = resp.get("Item")
        return EncodingMetadata.model_validate(_strip_keys(item)) if item else None

    def put_record(self, record: EncodingMetadata) -> None:
        pk = partition_key(record.table_name, record.map_variant)
        try:
            self._table.put_item(Item=_to_item(pk, SK_ENCODING, record))
        except (BotoCoreError, ClientError) as exc:
            raise MetadataStoreError("put", record.table_name, record.map_variant, str(exc)) from exc

    def delete_record(self, table_name: str, map_variant: str) -> bool:
        try:
            resp = self._table.delete_item(
                Key={"PK": partition_key(table_name, map_variant), "SK": SK_ENCODING},
                ReturnValues="ALL_OLD",
            )
        except (BotoCoreError, ClientError) as exc:
            raise MetadataStoreError("delete", table_name, map_variant, str(exc)) from exc
        return bool(resp.get("Attributes"))

    def list_records(self, table_name: str | None = None) -> list[EncodingMetadata]:
        condition = Attr("SK").eq(SK_ENCODING)
        if table_name is not None:
            condition = condition & Attr("table_name").eq(table_name)

        items: list[dict[str, Any]] = []
        kwargs: dict[str, Any] = {"FilterExpression": condition}
        try:
            while True:
                resp = self._table.scan(**kwargs)
                items.extend(resp.get("Items", []))
                if "LastEvaluatedKey" not in resp:
                    break
                kwargs["ExclusiveStartKey"] = resp["LastEvaluatedKey"]
        except (BotoCoreError, ClientError) as exc:
            raise MetadataStoreError("list", table_name or "*", "*", str(exc)) from exc

        records = [EncodingMetadata.model_validate(_strip_keys(i)) for i in items]
        return sorted(records, key=lambda r: (r.table_name, r.map_variant))

    # ---- IBaselineStore ----

    def get_baseline(self, table_name: str, map_variant: str) -> BaselineRecord | None:
        try:
            resp = self._table.get_item(Key={"PK": partition_key(table_name, map_variant), "SK": SK_BASELINE})
        except (BotoCoreError, ClientError) as exc:
            raise BaselineStoreError(
                f"Baseline get failed for table={table_name!r} map_variant={map_variant!r}: {exc}"
            ) from exc
        item = resp.get("Item")
        return BaselineRecord.model_validate(_strip_keys(item)) if item else None

    def put_baseline(self, record: BaselineRecord) -> None:
        pk = partition_key(record.table_name, record.map_variant)
        try:
            self._table.put_item(Item=_to_item(pk, SK_BASELINE, record))
        except (BotoCoreError, ClientError) as exc:
            raise BaselineStoreError(
                f"Baseline put failed for table={record.table_name!r} "
                f"map_variant={record.map_variant!r}: {exc}"
            ) from exc
