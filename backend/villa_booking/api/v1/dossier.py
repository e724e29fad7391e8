"""Token-addressed dossier endpoints for guests."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from villa_booking.api.deps import (
    DEFAULT_RATE_DEP,
    get_contracts_store,
    get_db_session,
    get_optional_caller,
    get_signed_contracts_store,
    read_upload,
)
from villa_booking.domain.access import Caller, DossierAction, require
from villa_booking.integrations.blob_store import BlobStore
from villa_booking.schemas.booking import DossierRead, ReviewCreate
from villa_booking.services import booking_service, dossier_service, settings_service

router = APIRouter(prefix="/dossier", tags=["dossier"])


async def _render(
    session: AsyncSession, token: str, caller: Caller, contracts: BlobStore
) -> DossierRead:
    booking = await booking_service.get_booking_by_token(session, token)
    require(caller, DossierAction.VIEW, holds_token=True)
    site = await settings_service.get_settings_view(session)
    return dossier_service.build_dossier(
        booking, caller=caller, holds_token=True, site=site, contracts=contracts
    )


@router.get("/{token}", response_model=DossierRead, summary="View a booking dossier")
async def read_dossier(
    token: str,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    caller: Annotated[Caller, Depends(get_optional_caller)],
    contracts: Annotated[BlobStore, Depends(get_contracts_store)],
) -> DossierRead:
    return await _render(session, token, caller, contracts)


@router.post(
    "/{token}/signed-contract",
    response_model=DossierRead,
    summary="Upload the signed contract",
    dependencies=[DEFAULT_RATE_DEP],
)
async def upload_signed_contract(
    token: str,
    file: Annotated[UploadFile, File()],
    session: Annotated[AsyncSession, Depends(get_db_session)],
    caller: Annotated[Caller, Depends(get_optional_caller)],
    contracts: Annotated[BlobStore, Depends(get_contracts_store)],
    signed_contracts: Annotated[BlobStore, Depends(get_signed_contracts_store)],
    signer_name: Annotated[str | None, Form(max_length=200)] = None,
) -> DossierRead:
    data = await read_upload(file)
    await booking_service.upload_guest_signed_contract(
        session,
        token=token,
        filename=file.filename,
        content_type=file.content_type,
        data=data,
        signer_name=signer_name,
        store=signed_contracts,
        caller=caller,
    )
    return await _render(session, token, caller, contracts)


@router.post(
    "/{token}/review",
    response_model=DossierRead,
    summary="Leave a review after the stay",
    dependencies=[DEFAULT_RATE_DEP],
)
async def submit_review(
    token: str,
    payload: ReviewCreate,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    caller: Annotated[Caller, Depends(get_optional_caller)],
    contracts: Annotated[BlobStore, Depends(get_contracts_store)],
) -> DossierRead:
    await booking_service.submit_review(
        session, token=token, payload=payload, caller=caller
    )
    return await _render(session, token, caller, contracts)
