"""Meta/token capability interfaces and the keyed-table contract backends implement."""
from abc import ABC, abstractmethod
from typing import Any

from assetstore.models import AssetMeta, AssetToken


class MetaStore(ABC):
    """Persistence and lookup of AssetMeta records."""

    @abstractmethod
    def get_meta(self, asset_id: str) -> AssetMeta:
        ...

    @abstractmethod
    def store_meta(self, meta: AssetMeta) -> None:
        ...


class TokenStore(ABC):
    """Persistence and lookup of AssetToken records. get_token enforces expiry."""

    @abstractmethod
    def get_token(self, token: str) -> AssetToken:
        ...

    @abstractmethod
    def store_token(self, token: AssetToken) -> None:
        ...


class KeyedTable(ABC):
    """One flat table keyed by (ObjID, ObjSort). Items are plain dicts of string attributes."""

    @abstractmethod
    def query(self, partition_key: str) -> list[dict[str, Any]]:
        """Return every item whose ObjID equals partition_key (any ObjSort)."""
        ...

    @abstractmethod
    def put_item(self, item: dict[str, Any]) -> None:
        """Upsert: replace any item with the same (ObjID, ObjSort), no merge."""
        ...
