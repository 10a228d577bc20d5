"""Meta/token store factory: in-memory table (dev) or DynamoDB. boto3 is imported only for META_BACKEND=dynamodb."""
from assetstore.core.config import Settings, get_settings
from assetstore.services.metatoken.base import KeyedTable, MetaStore, TokenStore
from assetstore.services.metatoken.memory import MemoryTable
from assetstore.services.metatoken.store import MetaTokenStore

__all__ = ["KeyedTable", "MemoryTable", "MetaStore", "MetaTokenStore", "TokenStore", "get_meta_token_store"]


def get_meta_token_store(settings: Settings | None = None) -> MetaTokenStore:
    """Return a MetaTokenStore over the configured table backend."""
    settings = settings or get_settings()
    if settings.meta_backend == "dynamodb":
        from assetstore.services.metatoken.dynamodb import DynamoDBTable
        table: KeyedTable = DynamoDBTable(
            settings.dynamodb_table,
            region=settings.aws_region,
            endpoint_url=settings.aws_endpoint_url,
        )
    elif settings.meta_backend == "memory":
        table = MemoryTable()
    else:
        raise ValueError(f"Unknown meta_backend: {settings.meta_backend!r} (use 'memory' or 'dynamodb')")
    return MetaTokenStore(table)
