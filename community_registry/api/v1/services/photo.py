import math
from typing import Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from community_registry.api.v1.schemas.photo import PhotoUrlResponse
from community_registry.api.v1.services.registration import RegistrationService
from community_registry.core.config import (
    PHOTO_URL_DEFAULT_EXPIRES,
    PHOTO_URL_MAX_EXPIRES,
    PHOTO_URL_MIN_EXPIRES,
)
from community_registry.core.errors import UpstreamFailure
from community_registry.core.storage import ObjectStorage


def resolve_expires_in(raw: Optional[str]) -> int:
    """
    Parses the ``expiresIn`` query value.

    Absent or non-numeric input gives the default; numbers are floored and
    clamped to ``[PHOTO_URL_MIN_EXPIRES, PHOTO_URL_MAX_EXPIRES]``.
    """
    if not raw:
        return PHOTO_URL_DEFAULT_EXPIRES
    try:
        seconds = float(raw)
    except ValueError:
        return PHOTO_URL_DEFAULT_EXPIRES
    if not math.isfinite(seconds):
        return PHOTO_URL_DEFAULT_EXPIRES
    return max(PHOTO_URL_MIN_EXPIRES, min(PHOTO_URL_MAX_EXPIRES, math.floor(seconds)))


class PhotoAccessService:
    """
    Issues a fresh signed URL for a registration's photo on every call.
    Nothing is cached.
    """

    def __init__(self, db: AsyncSession, storage: ObjectStorage):
        self.db = db
        self.storage = storage

    async def signed_url(self, registration_id: str, expires_in: int) -> PhotoUrlResponse:
        bucket, path = await RegistrationService.get_photo_locator(self.db, registration_id)
        try:
            url = await self.storage.signed_url(bucket, path, expires_in)
        except UpstreamFailure as e:
            logger.warning(f"Signed URL for registration {registration_id} failed: {e.detail}")
            raise
        logger.info(f"Issued photo URL for registration {registration_id} valid {expires_in}s")
        return PhotoUrlResponse(url=url, expires_in=expires_in)
