"""FastAPI dependencies: the asset orchestrator and the /metrics guard."""
import hmac

from fastapi import Header, HTTPException, Request, status

from assetstore.core.config import Settings
from assetstore.services.asset_storage import AssetStorage


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_asset_storage(request: Request) -> AssetStorage:
    """The orchestrator injected at app construction (create_app)."""
    return request.app.state.asset_storage


def require_metrics_access(
    request: Request,
    x_metrics_secret: str | None = Header(None, alias="X-Metrics-Secret"),
) -> None:
    """Allow /metrics when no secret is configured, else require a matching X-Metrics-Secret."""
    secret = request.app.state.settings.metrics_secret
    if secret and not hmac.compare_digest(x_metrics_secret or "", secret):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing X-Metrics-Secret",
        )
