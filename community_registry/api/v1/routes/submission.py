from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from community_registry.api.v1.dependencies.auth import require_registrations_token
from community_registry.api.v1.schemas.photo import PhotoUrlResponse
from community_registry.api.v1.schemas.registration import SubmissionResponse
from community_registry.api.v1.services.photo import PhotoAccessService, resolve_expires_in
from community_registry.api.v1.services.submission import SubmissionService
from community_registry.core.db.session import get_db
from community_registry.core.storage import ObjectStorage, get_storage

router = APIRouter(prefix="", tags=["Registrations"])

@router.post("/", response_model=SubmissionResponse)
async def submit_registration(
    request: Request,
    db: AsyncSession = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage)
):
    form = await request.form()
    registration_id = await SubmissionService(db, storage).submit(form, form.get("photo"))
    return SubmissionResponse(id=registration_id)

@router.get("/{registration_id}/photo", response_model=PhotoUrlResponse)
async def read_photo(
    registration_id: str,
    expires_in: Optional[str] = Query(None, alias="expiresIn"),
    db: AsyncSession = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
    _=Depends(require_registrations_token)
):
    service = PhotoAccessService(db, storage)
    return await service.signed_url(registration_id, resolve_expires_in(expires_in))
