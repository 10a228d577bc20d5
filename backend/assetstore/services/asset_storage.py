"""Asset orchestration: one facade over the content, meta and token stores.

Write order in store() is content, then meta, then token. A meta record is
never visible before its content exists, and a token is never visible before
the meta it points to. Nothing is rolled back: if the meta write fails the
content stays orphaned, and if the token write fails the asset is still
reachable by id. Every step is an upsert keyed by the same id, so callers may
retry a failed store() as a whole.

Errors propagate unchanged after being logged with operation context. There
are no retries, locks or caches here; each call goes straight to the backends.
"""
import logging
import time
from typing import BinaryIO, Callable

from assetstore.core.logging_redaction import redact_for_log
from assetstore.models import AssetMeta, AssetToken
from assetstore.services.content.base import ContentStore
from assetstore.services.metatoken.base import MetaStore, TokenStore

logger = logging.getLogger(__name__)


def _log_failure(context: str, err: Exception, **fields) -> None:
    logger.error(
        "%s failed: %s",
        context,
        err,
        extra=redact_for_log({"context": context, "error_type": type(err).__name__, **fields}),
    )


class AssetStorage:
    """Store and retrieve assets by id or by token."""

    def __init__(
        self,
        meta_store: MetaStore,
        token_store: TokenStore,
        content_store: ContentStore,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._meta_store = meta_store
        self._token_store = token_store
        self._content_store = content_store
        self._clock = clock

    def store(self, meta: AssetMeta, token: AssetToken | None, stream: BinaryIO) -> AssetMeta:
        """Persist content, then meta (with the size the backend reported), then the token if valid.

        Returns the meta as stored.
        """
        try:
            n = self._content_store.write(meta.id, stream)
        except Exception as e:
            _log_failure("AssetStorage.store", e, step="content", asset_id=meta.id)
            raise
        stored = meta.model_copy(update={"size": n})
        try:
            self._meta_store.store_meta(stored)
        except Exception as e:
            _log_failure("AssetStorage.store", e, step="meta", asset_id=meta.id, size=n)
            raise
        if token is not None and token.valid(now=self._clock()):
            try:
                self._token_store.store_token(token)
            except Exception as e:
                _log_failure("AssetStorage.store", e, step="token", asset_id=meta.id, token=token.token)
                raise
        return stored

    def get_by_id(self, asset_id: str) -> tuple[AssetMeta, BinaryIO]:
        try:
            meta = self._meta_store.get_meta(asset_id)
        except Exception as e:
            _log_failure("AssetStorage.get_by_id", e, step="meta", asset_id=asset_id)
            raise
        try:
            stream = self._content_store.read(meta.id)
        except Exception as e:
            _log_failure("AssetStorage.get_by_id", e, step="content", asset_id=meta.id)
            raise
        return meta, stream

    def get_by_token(self, token: str) -> tuple[AssetMeta, BinaryIO]:
        """token -> asset id -> meta -> content. Tokens never embed meta or content."""
        try:
            t = self._token_store.get_token(token)
        except Exception as e:
            _log_failure("AssetStorage.get_by_token", e, step="token", token=token)
            raise
        try:
            meta = self._meta_store.get_meta(t.asset_id)
        except Exception as e:
            _log_failure("AssetStorage.get_by_token", e, step="meta", asset_id=t.asset_id, token=token)
            raise
        try:
            stream = self._content_store.read(meta.id)
        except Exception as e:
            _log_failure("AssetStorage.get_by_token", e, step="content", asset_id=meta.id, token=token)
            raise
        return meta, stream
