"""Assets: upload (multipart or raw body), download by id, download by token."""
import tempfile
import time
import uuid
from typing import BinaryIO, Iterator
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile, status
from fastapi.responses import PlainTextResponse, StreamingResponse
from starlette.concurrency import run_in_threadpool

from assetstore.api.schemas import AddAssetResponse
from assetstore.core.config import Settings
from assetstore.core.deps import get_asset_storage, get_settings_dep
from assetstore.core.metrics import record_fetch, record_store
from assetstore.errors import (
    AssetStoreError,
    BackendError,
    InvalidInputError,
    NotFoundError,
    TokenExpiredError,
)
from assetstore.models import AssetMeta, AssetToken
from assetstore.services.asset_storage import AssetStorage

router = APIRouter(tags=["assets"])

CHUNK_SIZE = 64 * 1024

# First match wins; anything else (ambiguous or undecodable records) is a server error
_ERROR_STATUS: tuple[tuple[type[AssetStoreError], int], ...] = (
    (InvalidInputError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (TokenExpiredError, status.HTTP_410_GONE),
    (BackendError, status.HTTP_502_BAD_GATEWAY),
)


def _http_error(e: AssetStoreError) -> HTTPException:
    for cls, code in _ERROR_STATUS:
        if isinstance(e, cls):
            return HTTPException(status_code=code, detail=str(e))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


def _new_asset(name: str, want_token: bool, expiry_minutes: int) -> tuple[AssetMeta, AssetToken | None]:
    """Fresh id; a token only when one is requested with a non-zero lifetime."""
    meta = AssetMeta(id=str(uuid.uuid4()), name=name, version=0)
    token = None
    if want_token and expiry_minutes:
        token = AssetToken(
            token=str(uuid.uuid4()),
            expiry=int(time.time()) + expiry_minutes * 60,
            asset_id=meta.id,
        )
    return meta, token


async def _store(storage: AssetStorage, meta: AssetMeta, token: AssetToken | None, stream: BinaryIO) -> AddAssetResponse:
    try:
        stored = await run_in_threadpool(storage.store, meta, token, stream)
    except AssetStoreError as e:
        record_store(success=False)
        raise _http_error(e) from e
    record_store(success=True, token_issued=token is not None)
    return AddAssetResponse(asset=stored, token=token)


@router.get("/ping", response_class=PlainTextResponse)
async def ping():
    """For uptime watchers."""
    return "OK"


@router.post("/asset", response_model=AddAssetResponse)
async def add_asset_form(
    file: UploadFile = File(...),
    token: bool = Form(False),
    expiry: int = Form(0, ge=0, description="Token lifetime in minutes"),
    storage: AssetStorage = Depends(get_asset_storage),
):
    """Multipart upload: the part's filename becomes the asset name."""
    if not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="asset name not specified")
    meta, asset_token = _new_asset(file.filename, token, expiry)
    return await _store(storage, meta, asset_token, file.file)


@router.post("/asset/{assetname}", response_model=AddAssetResponse)
async def add_asset_raw(
    assetname: str,
    request: Request,
    token: bool = Query(False),
    expiry: int = Query(0, ge=0, description="Token lifetime in minutes"),
    storage: AssetStorage = Depends(get_asset_storage),
    settings: Settings = Depends(get_settings_dep),
):
    """Raw body upload. The body is spooled (memory, then disk) and handed to the store as a file."""
    meta, asset_token = _new_asset(assetname, token, expiry)
    spool = tempfile.SpooledTemporaryFile(max_size=settings.upload_spool_max_bytes)
    try:
        async for chunk in request.stream():
            await run_in_threadpool(spool.write, chunk)
        spool.seek(0)
    except BaseException:
        spool.close()
        raise
    return await _store(storage, meta, asset_token, spool)


def _iter_stream(stream: BinaryIO) -> Iterator[bytes]:
    try:
        while True:
            chunk = stream.read(CHUNK_SIZE)
            if not chunk:
                break
            yield chunk
    finally:
        stream.close()


def _send_asset(meta: AssetMeta, stream: BinaryIO) -> StreamingResponse:
    """Transfer the asset to the client as a download; the stream is closed when iteration ends."""
    return StreamingResponse(
        _iter_stream(stream),
        media_type="application/octet-stream",
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(meta.name)}",
            "Content-Length": str(meta.size),
        },
    )


@router.get("/asset/{asset_id}")
async def get_asset_by_id(asset_id: str, storage: AssetStorage = Depends(get_asset_storage)):
    try:
        meta, stream = await run_in_threadpool(storage.get_by_id, asset_id)
    except AssetStoreError as e:
        record_fetch("id", type(e).__name__)
        raise _http_error(e) from e
    record_fetch("id", "success")
    return _send_asset(meta, stream)


@router.get("/asset-token/{token}")
async def get_asset_by_token(token: str, storage: AssetStorage = Depends(get_asset_storage)):
    try:
        meta, stream = await run_in_threadpool(storage.get_by_token, token)
    except AssetStoreError as e:
        record_fetch("token", type(e).__name__)
        raise _http_error(e) from e
    record_fetch("token", "success")
    return _send_asset(meta, stream)
