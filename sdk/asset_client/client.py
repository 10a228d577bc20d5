"""
Python client for the asset API: upload a file or bytes, fetch by id, fetch by token.
Uploads retry transport errors with exponential backoff; downloads stream to disk.
"""
import time
from pathlib import Path
from urllib.parse import unquote

import httpx


class AssetClient:
    """Client for the asset store HTTP API."""

    def __init__(self, base_url: str, timeout: float = 60.0, max_retries: int = 5):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self._session: httpx.Client | None = None

    def _get_session(self) -> httpx.Client:
        if self._session is None:
            self._session = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                follow_redirects=True,
            )
        return self._session

    def ping(self) -> bool:
        r = self._get_session().get("/ping")
        return r.status_code == 200 and r.text == "OK"

    def upload(self, path: str | Path, token_minutes: int = 0) -> dict:
        """Upload a local file (multipart). Returns { asset, token, error }; token is set when token_minutes > 0."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(path)
        return self.upload_bytes(path.name, path.read_bytes(), token_minutes=token_minutes)

    def upload_bytes(self, name: str, data: bytes, token_minutes: int = 0) -> dict:
        form = {"token": "true" if token_minutes else "false", "expiry": str(token_minutes)}
        return self._post_with_retry(
            "/asset",
            files={"file": (name, data, "application/octet-stream")},
            data=form,
        )

    def _post_with_retry(self, url: str, **kwargs) -> dict:
        """Retry only transport failures; an HTTP error response is the server's answer."""
        last_err: Exception | None = None
        for attempt in range(self.max_retries):
            try:
                r = self._get_session().post(url, **kwargs)
            except httpx.TransportError as e:
                last_err = e
                if attempt == self.max_retries - 1:
                    raise
                backoff = (2**attempt) + (time.time() % 1)  # exponential backoff + jitter
                time.sleep(backoff)
                continue
            r.raise_for_status()
            return r.json()
        if last_err:
            raise last_err
        raise RuntimeError("max_retries must be at least 1")

    def get_by_id(self, asset_id: str) -> tuple[str, bytes]:
        """Return (filename, content)."""
        return self._get(f"/asset/{asset_id}")

    def get_by_token(self, token: str) -> tuple[str, bytes]:
        return self._get(f"/asset-token/{token}")

    def _get(self, url: str) -> tuple[str, bytes]:
        r = self._get_session().get(url)
        r.raise_for_status()
        return _filename(r.headers.get("content-disposition", "")), r.content

    def download(self, dest_dir: str | Path, asset_id: str | None = None, token: str | None = None) -> Path:
        """Stream an asset (by id or token) into dest_dir under its stored name. Returns the written path."""
        if bool(asset_id) == bool(token):
            raise ValueError("pass exactly one of asset_id or token")
        url = f"/asset/{asset_id}" if asset_id else f"/asset-token/{token}"
        dest_dir = Path(dest_dir)
        dest_dir.mkdir(parents=True, exist_ok=True)
        with self._get_session().stream("GET", url) as r:
            r.raise_for_status()
            name = _filename(r.headers.get("content-disposition", "")) or (asset_id or "asset")
            out = dest_dir / Path(name).name
            with out.open("wb") as f:
                for chunk in r.iter_bytes():
                    f.write(chunk)
        return out

    def close(self) -> None:
        if self._session:
            self._session.close()
            self._session = None

    def __enter__(self) -> "AssetClient":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


def _filename(disposition: str) -> str:
    """Filename from Content-Disposition (filename*=UTF-8'' or plain filename=)."""
    for part in disposition.split(";"):
        part = part.strip()
        if part.lower().startswith("filename*="):
            value = part.split("=", 1)[1]
            if "''" in value:
                value = value.split("''", 1)[1]
            return unquote(value)
    for part in disposition.split(";"):
        part = part.strip()
        if part.lower().startswith("filename="):
            return part.split("=", 1)[1].strip('"')
    return ""
