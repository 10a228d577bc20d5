"""Wire the configured backends into an AssetStorage."""
from assetstore.core.config import Settings, get_settings
from assetstore.services.asset_storage import AssetStorage
from assetstore.services.content import get_content_store
from assetstore.services.metatoken import get_meta_token_store


def build_asset_storage(settings: Settings | None = None) -> AssetStorage:
    """One MetaTokenStore serves both the meta and token capabilities (single table)."""
    settings = settings or get_settings()
    meta_token_store = get_meta_token_store(settings)
    return AssetStorage(
        meta_store=meta_token_store,
        token_store=meta_token_store,
        content_store=get_content_store(settings),
    )
