from .client import AssetClient

__all__ = ["AssetClient"]
