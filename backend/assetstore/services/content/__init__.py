"""Content store factory: local (dev disk) or S3. S3 backend is loaded only when STORAGE_BACKEND=s3 (no boto3 in local)."""
from assetstore.core.config import Settings, get_settings
from assetstore.services.content.base import ContentStore
from assetstore.services.content.local import LocalContentStore


def get_content_store(settings: Settings | None = None) -> ContentStore:
    """Return the configured content store. Avoids importing boto3 when backend is local."""
    settings = settings or get_settings()
    if settings.storage_backend == "s3":
        from assetstore.services.content.s3 import S3ContentStore
        return S3ContentStore(
            bucket=settings.s3_bucket,
            region=settings.aws_region,
            endpoint_url=settings.aws_endpoint_url,
        )
    if settings.storage_backend != "local":
        raise ValueError(f"Unknown storage_backend: {settings.storage_backend!r} (use 'local' or 's3')")
    return LocalContentStore(settings.dev_assets_dir)
