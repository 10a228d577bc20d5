"""Local (dev disk) content store: one file per asset id under dev_assets_dir."""
import os
import shutil
import tempfile
from pathlib import Path
from typing import BinaryIO

from assetstore.errors import BackendError, ContentNotFoundError, InvalidInputError
from assetstore.services.content.base import ContentStore


def _check_asset_id(asset_id: str) -> None:
    """Ids become file names, so anything that could escape the root is rejected."""
    if not asset_id:
        raise InvalidInputError("zero-length id")
    if "/" in asset_id or "\\" in asset_id or asset_id in (".", "..") or "\x00" in asset_id:
        raise InvalidInputError(f"asset id not usable as a storage key: {asset_id!r}")


class LocalContentStore(ContentStore):
    """Dev disk storage. Writes go to a temp file first and are renamed into place."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    def _path(self, asset_id: str) -> Path:
        return self._root / asset_id

    def write(self, asset_id: str, stream: BinaryIO) -> int:
        try:
            _check_asset_id(asset_id)
            path = self._path(asset_id)
            try:
                self._root.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(dir=self._root, prefix=".upload-")
                try:
                    with os.fdopen(fd, "wb") as out:
                        shutil.copyfileobj(stream, out)
                    os.replace(tmp_name, path)
                except BaseException:
                    Path(tmp_name).unlink(missing_ok=True)
                    raise
                return path.stat().st_size
            except OSError as e:
                raise BackendError(f"could not write content for asset {asset_id}: {e}") from e
        finally:
            stream.close()

    def read(self, asset_id: str) -> BinaryIO:
        _check_asset_id(asset_id)
        path = self._path(asset_id)
        try:
            return path.open("rb")
        except FileNotFoundError as e:
            raise ContentNotFoundError(f"content not found for asset {asset_id}") from e
        except OSError as e:
            raise BackendError(f"could not read content for asset {asset_id}: {e}") from e
