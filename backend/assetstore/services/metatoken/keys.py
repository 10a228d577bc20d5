"""Single-table key scheme for asset meta and token records.

Both record kinds share one keyed table. The partition key is namespaced
with a per-kind prefix so an asset id and a token that happen to be the same
string never collide:

    meta:  ObjID = ASSET_<asset id>   ObjSort = <version>   AssetName, Size
    token: ObjID = TOKEN_<token>      ObjSort = <expiry>    AssetID

Every attribute is stored as a string.
"""
from typing import Any

from assetstore.errors import RecordDecodeError
from assetstore.models import AssetMeta, AssetToken

ASSET_KEY_PREFIX = "ASSET_"
TOKEN_KEY_PREFIX = "TOKEN_"

PARTITION_KEY = "ObjID"
SORT_KEY = "ObjSort"


def meta_key(asset_id: str) -> str:
    return ASSET_KEY_PREFIX + asset_id


def token_key(token: str) -> str:
    return TOKEN_KEY_PREFIX + token


def strip_prefix(key: str, prefix: str) -> str:
    """Remove exactly one leading prefix. "ASSET_ASSET_x" decodes to "ASSET_x"."""
    if not isinstance(key, str) or not key.startswith(prefix):
        raise RecordDecodeError(f"key {key!r} is not in the {prefix!r} namespace")
    return key[len(prefix):]


def meta_to_item(meta: AssetMeta) -> dict[str, str]:
    return {
        PARTITION_KEY: meta_key(meta.id),
        SORT_KEY: str(meta.version),
        "AssetName": meta.name,
        "Size": str(meta.size),
    }


def token_to_item(token: AssetToken) -> dict[str, str]:
    return {
        PARTITION_KEY: token_key(token.token),
        SORT_KEY: str(token.expiry),
        "AssetID": token.asset_id,
    }


def _int_attr(item: dict[str, Any], name: str) -> int:
    try:
        return int(item[name])
    except KeyError as e:
        raise RecordDecodeError(f"record missing attribute {name}") from e
    except (TypeError, ValueError) as e:
        raise RecordDecodeError(f"attribute {name}={item[name]!r} is not an integer") from e


def _str_attr(item: dict[str, Any], name: str) -> str:
    value = item.get(name)
    if not isinstance(value, str):
        raise RecordDecodeError(f"record attribute {name} missing or not a string")
    return value


def item_to_meta(item: dict[str, Any]) -> AssetMeta:
    """Decode a meta record. Raises RecordDecodeError instead of returning a partial value."""
    return AssetMeta(
        id=strip_prefix(_str_attr(item, PARTITION_KEY), ASSET_KEY_PREFIX),
        name=_str_attr(item, "AssetName"),
        size=_int_attr(item, "Size"),
        version=_int_attr(item, SORT_KEY),
    )


def item_to_token(item: dict[str, Any]) -> AssetToken:
    """Decode a token record. Raises RecordDecodeError instead of returning a partial value."""
    return AssetToken(
        token=strip_prefix(_str_attr(item, PARTITION_KEY), TOKEN_KEY_PREFIX),
        expiry=_int_attr(item, SORT_KEY),
        asset_id=_str_attr(item, "AssetID"),
    )
