"""AssetStorage: store/get round trips, token lookups, write ordering and failure propagation."""
import io
from unittest.mock import MagicMock

import pytest

from assetstore.errors import (
    BackendError,
    ContentNotFoundError,
    InvalidInputError,
    MetaNotFoundError,
    TokenExpiredError,
    TokenNotFoundError,
)
from assetstore.models import AssetMeta, AssetToken
from assetstore.services.asset_storage import AssetStorage
from assetstore.services.content.base import ContentStore
from assetstore.services.metatoken.base import MetaStore, TokenStore


def _read_all(stream) -> bytes:
    with stream:
        return stream.read()


def test_store_without_token_then_get_by_id(asset_storage):
    stored = asset_storage.store(AssetMeta(id="a1", name="file.txt"), None, io.BytesIO(b"hello"))
    assert stored == AssetMeta(id="a1", name="file.txt", size=5, version=0)
    meta, stream = asset_storage.get_by_id("a1")
    assert meta == AssetMeta(id="a1", name="file.txt", size=5)
    assert _read_all(stream) == b"hello"


def test_caller_declared_size_is_replaced(asset_storage):
    asset_storage.store(AssetMeta(id="a1", name="file.txt", size=999), None, io.BytesIO(b"hello"))
    meta, stream = asset_storage.get_by_id("a1")
    stream.close()
    assert meta.size == 5


def test_zero_token_is_not_stored(asset_storage, table):
    asset_storage.store(AssetMeta(id="a1", name="file.txt"), AssetToken(), io.BytesIO(b"hello"))
    assert table.query("TOKEN_") == []
    assert len(table.query("ASSET_a1")) == 1


def test_invalid_meta_id_fails_before_any_write(asset_storage, table):
    with pytest.raises(InvalidInputError):
        asset_storage.store(AssetMeta(id="", name="file.txt"), None, io.BytesIO(b"hello"))
    assert table.query("ASSET_") == []


def test_token_without_expiry_is_not_stored(asset_storage):
    token = AssetToken(token="t1", asset_id="a1", expiry=0)
    asset_storage.store(AssetMeta(id="a1", name="file.txt"), token, io.BytesIO(b"hello"))
    with pytest.raises(TokenNotFoundError):
        asset_storage.get_by_token("t1")


def test_get_by_token_matches_get_by_id(asset_storage, clock):
    token = AssetToken(token="t1", asset_id="a1", expiry=int(clock.now) + 300)
    asset_storage.store(AssetMeta(id="a1", name="file.txt"), token, io.BytesIO(b"hello"))

    by_token_meta, by_token_stream = asset_storage.get_by_token("t1")
    by_id_meta, by_id_stream = asset_storage.get_by_id("a1")
    assert by_token_meta == by_id_meta == AssetMeta(id="a1", name="file.txt", size=5)
    assert _read_all(by_token_stream) == _read_all(by_id_stream) == b"hello"


def test_token_expires_but_id_still_works(asset_storage, clock):
    token = AssetToken(token="t1", asset_id="a1", expiry=int(clock.now) + 300)
    asset_storage.store(AssetMeta(id="a1", name="file.txt"), token, io.BytesIO(b"hello"))

    clock.advance(301)
    with pytest.raises(TokenExpiredError):
        asset_storage.get_by_token("t1")
    meta, stream = asset_storage.get_by_id("a1")
    assert meta.name == "file.txt"
    assert _read_all(stream) == b"hello"


def test_get_by_id_never_stored(asset_storage):
    with pytest.raises(MetaNotFoundError):
        asset_storage.get_by_id("never-stored")


def test_get_by_token_unknown(asset_storage):
    with pytest.raises(TokenNotFoundError):
        asset_storage.get_by_token("nope")


def test_second_store_replaces_first(asset_storage):
    asset_storage.store(AssetMeta(id="a1", name="file.txt"), None, io.BytesIO(b"the first, longer content"))
    asset_storage.store(AssetMeta(id="a1", name="file.txt"), None, io.BytesIO(b"second"))
    meta, stream = asset_storage.get_by_id("a1")
    assert meta.size == 6
    assert _read_all(stream) == b"second"


def test_token_whose_asset_meta_is_missing(asset_storage, meta_token_store, clock):
    meta_token_store.store_token(AssetToken(token="t1", asset_id="ghost", expiry=int(clock.now) + 60))
    with pytest.raises(MetaNotFoundError):
        asset_storage.get_by_token("t1")


def test_meta_without_content(asset_storage, meta_token_store):
    meta_token_store.store_meta(AssetMeta(id="a1", name="file.txt", size=5))
    with pytest.raises(ContentNotFoundError):
        asset_storage.get_by_id("a1")


# ----- ordering and partial failures (mocked stores) -----


@pytest.fixture
def mocks():
    meta_store = MagicMock(spec=MetaStore)
    token_store = MagicMock(spec=TokenStore)
    content_store = MagicMock(spec=ContentStore)
    content_store.write.return_value = 5
    parent = MagicMock()
    parent.attach_mock(meta_store, "meta")
    parent.attach_mock(token_store, "token")
    parent.attach_mock(content_store, "content")
    return parent, meta_store, token_store, content_store


def _storage(mocks, now=1000):
    _, meta_store, token_store, content_store = mocks
    return AssetStorage(meta_store, token_store, content_store, clock=lambda: now)


def test_store_writes_content_then_meta_then_token(mocks):
    parent, _, _, _ = mocks
    stream = io.BytesIO(b"hello")
    token = AssetToken(token="t1", asset_id="a1", expiry=2000)
    _storage(mocks).store(AssetMeta(id="a1", name="file.txt"), token, stream)
    assert [c[0] for c in parent.mock_calls] == ["content.write", "meta.store_meta", "token.store_token"]
    parent.content.write.assert_called_once_with("a1", stream)
    parent.meta.store_meta.assert_called_once_with(AssetMeta(id="a1", name="file.txt", size=5))
    parent.token.store_token.assert_called_once_with(token)


def test_content_failure_writes_nothing_else(mocks):
    _, meta_store, token_store, content_store = mocks
    content_store.write.side_effect = BackendError("s3 down")
    with pytest.raises(BackendError, match="s3 down"):
        _storage(mocks).store(AssetMeta(id="a1", name="f"), AssetToken(token="t1", asset_id="a1", expiry=2000), io.BytesIO(b"x"))
    meta_store.store_meta.assert_not_called()
    token_store.store_token.assert_not_called()


def test_meta_failure_skips_token_and_keeps_content(mocks):
    _, meta_store, token_store, content_store = mocks
    err = BackendError("table down")
    meta_store.store_meta.side_effect = err
    with pytest.raises(BackendError) as exc_info:
        _storage(mocks).store(AssetMeta(id="a1", name="f"), AssetToken(token="t1", asset_id="a1", expiry=2000), io.BytesIO(b"x"))
    # Passed through unchanged
    assert exc_info.value is err
    content_store.write.assert_called_once()
    token_store.store_token.assert_not_called()


def test_token_failure_is_reported_after_meta_is_stored(mocks):
    _, meta_store, token_store, _ = mocks
    token_store.store_token.side_effect = BackendError("throttled")
    with pytest.raises(BackendError, match="throttled"):
        _storage(mocks).store(AssetMeta(id="a1", name="f"), AssetToken(token="t1", asset_id="a1", expiry=2000), io.BytesIO(b"x"))
    meta_store.store_meta.assert_called_once()


def test_expired_token_is_skipped_at_store_time(mocks):
    _, _, token_store, _ = mocks
    _storage(mocks, now=3000).store(AssetMeta(id="a1", name="f"), AssetToken(token="t1", asset_id="a1", expiry=2000), io.BytesIO(b"x"))
    token_store.store_token.assert_not_called()


def test_get_by_id_reads_content_with_meta_id(mocks):
    _, meta_store, _, content_store = mocks
    meta_store.get_meta.return_value = AssetMeta(id="a1", name="f", size=1)
    stream = io.BytesIO(b"x")
    content_store.read.return_value = stream
    assert _storage(mocks).get_by_id("a1") == (AssetMeta(id="a1", name="f", size=1), stream)
    content_store.read.assert_called_once_with("a1")


def test_get_by_id_meta_failure_never_opens_content(mocks):
    _, meta_store, _, content_store = mocks
    meta_store.get_meta.side_effect = MetaNotFoundError("missing")
    with pytest.raises(MetaNotFoundError):
        _storage(mocks).get_by_id("a1")
    content_store.read.assert_not_called()


def test_get_by_token_hops_token_meta_content(mocks):
    parent, meta_store, token_store, content_store = mocks
    token_store.get_token.return_value = AssetToken(token="t1", asset_id="a1", expiry=2000)
    meta_store.get_meta.return_value = AssetMeta(id="a1", name="f", size=1)
    content_store.read.return_value = io.BytesIO(b"x")
    meta, _ = _storage(mocks).get_by_token("t1")
    assert meta.id == "a1"
    assert [c[0] for c in parent.mock_calls] == ["token.get_token", "meta.get_meta", "content.read"]
    meta_store.get_meta.assert_called_once_with("a1")


def test_get_by_token_expired_stops_early(mocks):
    _, meta_store, token_store, content_store = mocks
    token_store.get_token.side_effect = TokenExpiredError("token expired")
    with pytest.raises(TokenExpiredError):
        _storage(mocks).get_by_token("t1")
    meta_store.get_meta.assert_not_called()
    content_store.read.assert_not_called()


def test_failure_log_redacts_token(mocks, caplog):
    _, _, token_store, _ = mocks
    token_store.get_token.side_effect = TokenNotFoundError("could not find result for token")
    with pytest.raises(TokenNotFoundError):
        _storage(mocks).get_by_token("secret-token-value")
    record = next(r for r in caplog.records if r.name == "assetstore.services.asset_storage")
    assert record.context == "AssetStorage.get_by_token"
    assert record.token == "[REDACTED]"
    assert "secret-token-value" not in caplog.text
