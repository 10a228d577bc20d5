"""DynamoDB keyed table. Imported only when META_BACKEND=dynamodb (avoids boto3 in local mode)."""
from __future__ import annotations

import logging
from typing import Any

from assetstore.errors import BackendError
from assetstore.services.metatoken.base import KeyedTable
from assetstore.services.metatoken.keys import PARTITION_KEY

logger = logging.getLogger(__name__)


def _get_table(table_name: str, region: str, endpoint_url: str | None = None):
    import boto3
    dynamodb = boto3.resource("dynamodb", region_name=region, endpoint_url=endpoint_url)
    return dynamodb.Table(table_name)


def _key_condition(partition_key: str):
    from boto3.dynamodb.conditions import Key
    return Key(PARTITION_KEY).eq(partition_key)


class DynamoDBTable(KeyedTable):
    """Table with ObjID (HASH) and ObjSort (RANGE), both strings. See scripts/create_table.py."""

    def __init__(self, table_name: str | None, region: str = "us-east-1", endpoint_url: str | None = None) -> None:
        if not table_name:
            raise ValueError("DynamoDB meta backend requires dynamodb_table to be set")
        self._table_name = table_name
        self._table = _get_table(table_name, region, endpoint_url)

    def query(self, partition_key: str) -> list[dict[str, Any]]:
        kwargs: dict[str, Any] = {
            "KeyConditionExpression": _key_condition(partition_key),
            # Strongly consistent: a meta/token written by this service is visible on the next read
            "ConsistentRead": True,
        }
        items: list[dict[str, Any]] = []
        try:
            while True:
                resp = self._table.query(**kwargs)
                items.extend(resp.get("Items", []))
                last = resp.get("LastEvaluatedKey")
                if not last:
                    break
                kwargs["ExclusiveStartKey"] = last
        except Exception as e:
            logger.error("DynamoDB query failed table=%s: %s", self._table_name, e)
            raise BackendError(f"query on table {self._table_name} failed: {e}") from e
        return items

    def put_item(self, item: dict[str, Any]) -> None:
        try:
            self._table.put_item(Item=item)
        except Exception as e:
            logger.error("DynamoDB put_item failed table=%s: %s", self._table_name, e)
            raise BackendError(f"put_item on table {self._table_name} failed: {e}") from e
