# community_registry/api/v1/validators/registration.py
from datetime import date
from typing import Any, Mapping, Optional

from community_registry.api.v1.schemas.registration import VerificationUpdate
from community_registry.core.errors import ValidationError

GENDERS = ("male", "female")
MARITAL_STATUSES = ("married", "unmarried")


def ensure_verification_fields(payload: VerificationUpdate) -> None:
    if payload.id is None or payload.verified is None:
        raise ValidationError("Missing required fields: id and verified are required")


def required_string(form: Mapping[str, Any], key: str) -> str:
    """
    Returns the trimmed value of a required text field.
    Raises ValidationError if it is absent, not text, or blank.
    """
    value = form.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Missing field: {key}")
    return value.strip()


def optional_string(form: Mapping[str, Any], key: str) -> Optional[str]:
    value = form.get(key)
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


def ensure_valid_gender(gender: str) -> None:
    if gender not in GENDERS:
        raise ValidationError("Invalid gender value")


def ensure_valid_marital_status(marital_status: str) -> None:
    if marital_status not in MARITAL_STATUSES:
        raise ValidationError("Invalid marital status value")


def ensure_relative_phone(gender: str, relative_phone: Optional[str]) -> None:
    if gender == "female" and not relative_phone:
        raise ValidationError("Missing field: relativePhone")


def parse_birthday(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError("Invalid birthday, expected YYYY-MM-DD")
