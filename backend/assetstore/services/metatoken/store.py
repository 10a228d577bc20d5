"""Meta and token persistence over one shared keyed table."""
import logging
import time
from typing import Any, Callable

from assetstore.core.logging_redaction import redact_for_log
from assetstore.errors import (
    AmbiguousStateError,
    InvalidInputError,
    MetaNotFoundError,
    RecordDecodeError,
    TokenExpiredError,
    TokenNotFoundError,
)
from assetstore.models import AssetMeta, AssetToken
from assetstore.services.metatoken import keys
from assetstore.services.metatoken.base import KeyedTable, MetaStore, TokenStore

logger = logging.getLogger(__name__)


class MetaTokenStore(MetaStore, TokenStore):
    """Implements both capabilities against a KeyedTable using the prefix scheme in keys.py."""

    def __init__(self, table: KeyedTable, clock: Callable[[], float] = time.time) -> None:
        self._table = table
        self._clock = clock

    def _query_one(self, partition_key: str) -> dict[str, Any] | None:
        """Exactly one match or None. More than one means the table is corrupt."""
        items = self._table.query(partition_key)
        if not items:
            return None
        if len(items) > 1:
            raise AmbiguousStateError(f"{len(items)} records found for one key; expected exactly one")
        return items[0]

    def get_meta(self, asset_id: str) -> AssetMeta:
        if not asset_id:
            raise InvalidInputError("zero-length id")
        item = self._query_one(keys.meta_key(asset_id))
        if item is None:
            raise MetaNotFoundError(f"could not find result for asset with id {asset_id}")
        try:
            return keys.item_to_meta(item)
        except RecordDecodeError:
            logger.error("undecodable meta record", extra={"context": "MetaTokenStore.get_meta", "id": asset_id})
            raise

    def store_meta(self, meta: AssetMeta) -> None:
        if not meta.valid():
            raise InvalidInputError("meta invalid: id and name are required")
        self._table.put_item(keys.meta_to_item(meta))

    def get_token(self, token: str) -> AssetToken:
        if not token:
            raise InvalidInputError("zero-length token")
        item = self._query_one(keys.token_key(token))
        if item is None:
            raise TokenNotFoundError("could not find result for token")
        try:
            t = keys.item_to_token(item)
        except RecordDecodeError:
            logger.error(
                "undecodable token record",
                extra=redact_for_log({"context": "MetaTokenStore.get_token", "token": token}),
            )
            raise
        if not self._clock() < t.expiry:
            raise TokenExpiredError(f"token expired for asset {t.asset_id}")
        return t

    def store_token(self, token: AssetToken) -> None:
        if not token.valid(now=self._clock()):
            raise InvalidInputError("token invalid: token and asset_id are required and expiry must be in the future")
        self._table.put_item(keys.token_to_item(token))
