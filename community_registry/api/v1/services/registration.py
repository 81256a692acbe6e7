from typing import Tuple

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from community_registry.api.v1.models.registration import Registration
from community_registry.api.v1.schemas.registration import (
    Pagination,
    Registration as RegistrationSchema,
    RegistrationListResponse,
    VerificationState,
)
from community_registry.api.v1.services.registration_query import (
    ListParams,
    RegistrationQuery,
    total_pages,
)
from community_registry.core.errors import NotFoundError, UpstreamFailure


def shape_registration(reg: Registration) -> RegistrationSchema:
    return RegistrationSchema(
        id=str(reg.id),
        serial_number=reg.serial_number if reg.serial_number is not None else "",
        first_name=reg.first_name or "",
        middle_name=reg.middle_name or "",
        last_name=reg.last_name or "",
        name=reg.name or None,
        gender=reg.gender or None,
        marital_status=reg.marital_status or None,
        birthday=reg.birthday,
        street=reg.street,
        city=reg.city,
        state=reg.state,
        zip_code=reg.zip_code,
        phone=reg.phone,
        relative_phone=reg.relative_phone or None,
        native_place=reg.native_place,
        photo_bucket=reg.photo_bucket,
        photo_path=reg.photo_path,
        verified=bool(reg.verified),
        created_at=reg.created_at,
    )


class RegistrationService:

    @staticmethod
    async def list_registrations(db: AsyncSession, params: ListParams) -> RegistrationListResponse:
        try:
            result = await RegistrationQuery(db).run(params)
        except SQLAlchemyError as e:
            logger.exception("Listing registrations failed")
            raise UpstreamFailure(str(e))

        return RegistrationListResponse(
            registrations=[shape_registration(reg) for reg in result.rows],
            pagination=Pagination(
                page=params.page,
                limit=params.limit,
                total=result.total_count,
                total_pages=total_pages(result.total_count, params.limit),
            ),
        )

    @staticmethod
    async def set_verified(db: AsyncSession, registration_id: str, verified: bool) -> VerificationState:
        """
        Sets the moderation flag of one registration. No other field is touched.
        """
        try:
            result = await db.execute(select(Registration).where(Registration.id == registration_id))
            registration = result.scalar_one_or_none()
            if not registration:
                raise NotFoundError()

            registration.verified = verified
            await db.commit()
            await db.refresh(registration)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.exception(f"Updating verification for {registration_id} failed")
            raise UpstreamFailure(str(e))

        logger.info(f"Registration {registration_id} verified={registration.verified}")
        return VerificationState(id=str(registration.id), verified=bool(registration.verified))

    @staticmethod
    async def get_photo_locator(db: AsyncSession, registration_id: str) -> Tuple[str, str]:
        try:
            result = await db.execute(
                select(Registration.photo_bucket, Registration.photo_path).where(Registration.id == registration_id)
            )
            row = result.first()
        except SQLAlchemyError as e:
            logger.exception(f"Looking up photo for {registration_id} failed")
            raise UpstreamFailure(str(e))

        if row is None:
            raise NotFoundError()
        return row[0], row[1]
