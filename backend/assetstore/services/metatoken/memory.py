"""In-process keyed table for local development and tests. Same composite-key semantics as DynamoDB."""
import threading
from typing import Any

from assetstore.services.metatoken.base import KeyedTable
from assetstore.services.metatoken.keys import PARTITION_KEY, SORT_KEY


class MemoryTable(KeyedTable):
    """Dict of partition key -> {sort key: item}. Contents are lost on restart."""

    def __init__(self) -> None:
        self._items: dict[str, dict[str, dict[str, Any]]] = {}
        self._lock = threading.Lock()

    def query(self, partition_key: str) -> list[dict[str, Any]]:
        with self._lock:
            rows = self._items.get(partition_key, {})
            return [dict(rows[sk]) for sk in sorted(rows)]

    def put_item(self, item: dict[str, Any]) -> None:
        pk = item[PARTITION_KEY]
        sk = item[SORT_KEY]
        with self._lock:
            self._items.setdefault(pk, {})[sk] = dict(item)
