import os
import uuid
from typing import Any, Mapping

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from community_registry.api.v1.models.registration import Registration
from community_registry.api.v1.services.dropdown_options import DropdownOptionService
from community_registry.api.v1.validators.registration import (
    ensure_relative_phone,
    ensure_valid_gender,
    ensure_valid_marital_status,
    optional_string,
    parse_birthday,
    required_string,
)
from community_registry.core.config import PHOTOS_BUCKET
from community_registry.core.errors import UpstreamFailure, ValidationError
from community_registry.core.storage import ObjectStorage


def capitalize_first_letter(value: str) -> str:
    if not value:
        return value
    return value[0].upper() + value[1:].lower()


def photo_object_name(filename: str) -> str:
    extension = os.path.splitext(filename or "")[1].lstrip(".") or "jpg"
    return f"{uuid.uuid4()}.{extension}"


class SubmissionService:
    """Public registration flow: validate, upload the photo, insert the row."""

    def __init__(self, db: AsyncSession, storage: ObjectStorage):
        self.db = db
        self.storage = storage

    @staticmethod
    def build_registration(form: Mapping[str, Any]) -> Registration:
        gender = required_string(form, "gender")
        ensure_valid_gender(gender)
        marital_status = required_string(form, "maritalStatus")
        ensure_valid_marital_status(marital_status)
        relative_phone = optional_string(form, "relativePhone")
        ensure_relative_phone(gender, relative_phone)

        return Registration(
            first_name=capitalize_first_letter(required_string(form, "firstName")),
            middle_name=capitalize_first_letter(required_string(form, "middleName")),
            last_name=capitalize_first_letter(required_string(form, "lastName")),
            gender=gender,
            marital_status=marital_status,
            birthday=parse_birthday(required_string(form, "birthday")),
            street=required_string(form, "street"),
            city=required_string(form, "city"),
            state=required_string(form, "state"),
            zip_code=required_string(form, "zipCode"),
            phone=required_string(form, "phone"),
            relative_phone=relative_phone,
            native_place=required_string(form, "nativePlace"),
            verified=False,
        )

    async def submit(self, form: Mapping[str, Any], photo) -> str:
        registration = self.build_registration(form)
        if photo is None or not hasattr(photo, "read"):
            raise ValidationError("Photo is required")

        contents = await photo.read()
        if not contents:
            raise ValidationError("Photo is required")

        photo_path = photo_object_name(photo.filename)
        await self.storage.upload(PHOTOS_BUCKET, photo_path, contents, photo.content_type)
        registration.photo_bucket = PHOTOS_BUCKET
        registration.photo_path = photo_path

        try:
            self.db.add(registration)
            await self.db.commit()
            await self.db.refresh(registration)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception("Inserting registration failed")
            raise UpstreamFailure(str(e))

        registration_id = str(registration.id)
        for option_type, value in (
            ("cities", registration.city),
            ("states", registration.state),
            ("native_places", registration.native_place),
        ):
            # the registration is already stored; catalog upkeep must not fail it
            try:
                await DropdownOptionService.add_option(self.db, option_type, value)
            except UpstreamFailure as e:
                logger.warning(f"Recording {option_type} option {value!r} failed: {e.detail}")

        logger.info(f"Stored registration {registration_id}")
        return registration_id
