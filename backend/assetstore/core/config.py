"""Application settings."""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """App config from env."""

    app_name: str = "Asset Store"
    debug: bool = False
    # Root log level (DEBUG, INFO, WARNING, ...). Unknown names fall back to INFO.
    log_level: str = "INFO"
    # Structured logging: set LOG_JSON=1 for one-JSON-object-per-line (CloudWatch, etc.)
    log_json: bool = False
    # If set, /metrics requires the X-Metrics-Secret header to match
    metrics_secret: str | None = None

    # All asset routes are mounted under this prefix (e.g. /v1). Empty = root.
    base_path: str = ""
    # CORS: "*" allows every origin; otherwise a comma-separated allowlist
    cors_origins: str = "*"

    # Content: local (dev disk) or s3 (AWS). Default local so no AWS required.
    storage_backend: str = "local"  # local | s3
    dev_assets_dir: str = "./dev_assets"
    s3_bucket: str | None = None

    # Meta/token table: memory (in-process, dev/tests) or dynamodb
    meta_backend: str = "memory"  # memory | dynamodb
    dynamodb_table: str | None = None

    aws_region: str = "us-east-1"
    # Optional endpoint override (localstack, dynamodb-local, minio)
    aws_endpoint_url: str | None = None

    # Raw upload bodies are spooled to memory up to this size, then to a temp file
    upload_spool_max_bytes: int = 1024 * 1024

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    return Settings()
