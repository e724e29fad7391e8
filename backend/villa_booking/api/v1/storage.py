"""Contract file downloads."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response

from villa_booking.api.deps import get_contracts_store, get_signed_contracts_store
from villa_booking.domain.errors import UnsupportedFileType
from villa_booking.integrations.blob_store import BlobStore, BlobStoreError
from villa_booking.services.contract_files import resolve_content_type

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/storage", tags=["storage"])


def _file_response(store: BlobStore, key: str) -> Response:
    try:
        data = store.read(key)
    except BlobStoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="File not found"
        ) from exc
    try:
        meta = store.metadata(key)
    except BlobStoreError:
        logger.warning("Unreadable metadata for %s in %s", key, store.bucket)
        meta = None
    if meta is not None:
        content_type = meta.content_type
    else:
        try:
            content_type = resolve_content_type(key, None)
        except UnsupportedFileType:
            content_type = "application/octet-stream"
    return Response(content=data, media_type=content_type)


@router.get("/signed/{token}", summary="Download through a signed URL")
async def download_signed(
    token: str,
    store: Annotated[BlobStore, Depends(get_signed_contracts_store)],
) -> Response:
    try:
        key = store.resolve_signed_token(token)
    except BlobStoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)
        ) from exc
    return _file_response(store, key)


@router.get("/{bucket}/{key:path}", summary="Download a public contract")
async def download_public(
    bucket: str,
    key: str,
    store: Annotated[BlobStore, Depends(get_contracts_store)],
) -> Response:
    if bucket != store.bucket:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    return _file_response(store, key)
