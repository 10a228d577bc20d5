"""S3 content store: upload_fileobj + HeadObject for the durable size, GetObject for streaming reads. Imported only when STORAGE_BACKEND=s3."""
from __future__ import annotations

from typing import BinaryIO

from assetstore.errors import BackendError, ContentNotFoundError, InvalidInputError
from assetstore.services.content.base import ContentStore

_MISSING_CODES = ("404", "NoSuchKey", "NotFound")


def _get_client(region: str, endpoint_url: str | None = None):
    import boto3
    return boto3.client("s3", region_name=region, endpoint_url=endpoint_url)


def _error_code(e: Exception) -> str | None:
    resp = getattr(e, "response", None)
    return resp.get("Error", {}).get("Code") if isinstance(resp, dict) else None


class S3ContentStore(ContentStore):
    """S3 backend. Object key is the asset id."""

    def __init__(self, bucket: str | None, region: str = "us-east-1", endpoint_url: str | None = None) -> None:
        if not bucket:
            raise ValueError("S3 content store requires s3_bucket to be set")
        self._bucket = bucket
        self._client = _get_client(region, endpoint_url)

    def write(self, asset_id: str, stream: BinaryIO) -> int:
        try:
            if not asset_id:
                raise InvalidInputError("zero-length id")
            try:
                self._client.upload_fileobj(stream, self._bucket, asset_id)
            except Exception as e:
                raise BackendError(f"upload of asset {asset_id} to s3://{self._bucket} failed: {e}") from e
            # Trust the stored object's length, not what we read from the input side
            try:
                head = self._client.head_object(Bucket=self._bucket, Key=asset_id)
            except Exception as e:
                raise BackendError(f"head of asset {asset_id} after upload failed: {e}") from e
            return int(head.get("ContentLength") or 0)
        finally:
            stream.close()

    def read(self, asset_id: str) -> BinaryIO:
        if not asset_id:
            raise InvalidInputError("zero-length id")
        try:
            resp = self._client.get_object(Bucket=self._bucket, Key=asset_id)
        except Exception as e:
            if _error_code(e) in _MISSING_CODES:
                raise ContentNotFoundError(f"content not found for asset {asset_id}") from e
            raise BackendError(f"get of asset {asset_id} from s3://{self._bucket} failed: {e}") from e
        body = resp.get("Body")
        if body is None:
            raise BackendError(f"s3 returned no body for asset {asset_id}")
        return body
