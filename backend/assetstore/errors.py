"""Storage error taxonomy. Backend SDK errors are wrapped in BackendError at the adapter boundary."""


class AssetStoreError(Exception):
    """Base class for every error raised by the storage core."""


class InvalidInputError(AssetStoreError):
    """Empty or malformed id, token or record; raised before any backend call."""


class NotFoundError(AssetStoreError):
    """Lookup matched nothing."""


class MetaNotFoundError(NotFoundError):
    pass


class TokenNotFoundError(NotFoundError):
    pass


class ContentNotFoundError(NotFoundError):
    pass


class AmbiguousStateError(AssetStoreError):
    """Lookup for a unique key matched more than one record."""


class TokenExpiredError(AssetStoreError):
    """Token record exists and decodes, but its expiry has passed."""


class RecordDecodeError(AssetStoreError):
    """Stored attributes do not decode into the expected record shape."""


class BackendError(AssetStoreError):
    """The underlying table or blob store failed (network, permission, throttling)."""
