"""FastAPI app: logging, CORS, request logging, asset routes, health and metrics."""
import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from assetstore.api.assets import router as assets_router
from assetstore.core.config import Settings, get_settings
from assetstore.core.deps import require_metrics_access
from assetstore.core.metrics import get_metrics
from assetstore.core.request_logging import RequestLoggingMiddleware
from assetstore.services.asset_storage import AssetStorage
from assetstore.services.factory import build_asset_storage


def configure_logging(settings: Settings) -> None:
    """Root level from LOG_LEVEL (INFO if unknown); LOG_JSON=1 makes request lines bare JSON."""
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level)
    logging.getLogger().setLevel(level)
    if settings.log_json:
        request_logger = logging.getLogger("assetstore.request")
        for h in request_logger.handlers[:]:
            request_logger.removeHandler(h)
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("%(message)s"))
        request_logger.addHandler(h)
        request_logger.setLevel(logging.INFO)
        request_logger.propagate = False


def create_app(asset_storage: AssetStorage | None = None, settings: Settings | None = None) -> FastAPI:
    """Build the app around an explicitly supplied orchestrator (or the configured backends)."""
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(title=settings.app_name, debug=settings.debug)
    app.state.settings = settings
    app.state.asset_storage = asset_storage or build_asset_storage(settings)

    app.add_middleware(RequestLoggingMiddleware)
    origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["GET", "POST", "HEAD"],
        # Auth is not implemented; these are let through for fronting gateways
        allow_headers=["Content-Type", "Authorization", "X-API-Key"],
    )

    app.include_router(assets_router, prefix=settings.base_path.rstrip("/"))

    @app.get("/healthz")
    async def healthz():
        """Liveness: no backend calls."""
        return {"status": "ok"}

    @app.get("/metrics", response_class=Response)
    async def metrics(_: None = Depends(require_metrics_access)):
        """Prometheus metrics. Set METRICS_SECRET to require the X-Metrics-Secret header."""
        body, content_type = get_metrics()
        return Response(content=body, media_type=content_type)

    return app


app = create_app()
