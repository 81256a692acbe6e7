from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from community_registry.api.v1.dependencies import require_admin
from community_registry.api.v1.schemas.photo import PhotoUrlResponse
from community_registry.api.v1.schemas.registration import (
    RegistrationListResponse,
    VerificationResponse,
    VerificationUpdate,
)
from community_registry.api.v1.services.photo import PhotoAccessService, resolve_expires_in
from community_registry.api.v1.services.registration import RegistrationService
from community_registry.api.v1.services.registration_query import parse_list_params
from community_registry.api.v1.validators.registration import ensure_verification_fields
from community_registry.core.db.session import get_db
from community_registry.core.storage import ObjectStorage, get_storage

router = APIRouter(prefix="", tags=["Admin Registrations"])

# Query values are taken as raw strings: malformed filters degrade to defaults
@router.get("/", response_model=RegistrationListResponse)
async def read_registrations(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    gender: Optional[str] = Query(None),
    verified: Optional[str] = Query(None),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    db: AsyncSession = Depends(get_db),
    current_admin=Depends(require_admin)
):
    params = parse_list_params(
        page=page,
        limit=limit,
        search=search,
        gender=gender,
        verified=verified,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return await RegistrationService.list_registrations(db, params)

@router.patch("/", response_model=VerificationResponse)
async def update_verification(
    payload: VerificationUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin=Depends(require_admin)
):
    ensure_verification_fields(payload)
    registration = await RegistrationService.set_verified(db, payload.id, payload.verified)
    return VerificationResponse(registration=registration)

@router.get("/{registration_id}/photo", response_model=PhotoUrlResponse)
async def read_registration_photo(
    registration_id: str,
    expires_in: Optional[str] = Query(None, alias="expiresIn"),
    db: AsyncSession = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
    current_admin=Depends(require_admin)
):
    service = PhotoAccessService(db, storage)
    return await service.signed_url(registration_id, resolve_expires_in(expires_in))
