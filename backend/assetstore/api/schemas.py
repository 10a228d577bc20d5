"""Pydantic response schemas for the asset API."""
from pydantic import BaseModel, ConfigDict

from assetstore.models import AssetMeta, AssetToken


def _config_forbid(**kwargs):
    return ConfigDict(extra="forbid", **kwargs)


class AddAssetResponse(BaseModel):
    """Result of POST /asset. token is null unless one was requested with a non-zero expiry."""

    model_config = _config_forbid()
    asset: AssetMeta
    token: AssetToken | None = None
    error: str = ""
