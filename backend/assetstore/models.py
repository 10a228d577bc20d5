"""Asset metadata and access token records shared by every storage layer."""
import time

from pydantic import BaseModel


class AssetMeta(BaseModel):
    """One record per stored asset. Size is authoritative only after the content write."""

    id: str
    # File or asset name
    name: str
    # Size in bytes
    size: int = 0
    # Reserved for revisioning; always 0
    version: int = 0

    def valid(self) -> bool:
        return bool(self.id) and bool(self.name)


class AssetToken(BaseModel):
    """Short-lived credential mapping to exactly one asset id.

    Validity depends on the clock, so callers must re-check it at every use.
    """

    token: str = ""
    # Expiry unix timestamp (seconds)
    expiry: int = 0
    asset_id: str = ""

    def valid(self, now: float | None = None) -> bool:
        if now is None:
            now = time.time()
        return bool(self.asset_id) and bool(self.token) and now < self.expiry
