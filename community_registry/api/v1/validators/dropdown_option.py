from typing import Any, Optional

from community_registry.api.v1.models.dropdown_option import OPTION_MODELS
from community_registry.core.errors import ValidationError


def ensure_option_type(option_type: Optional[str]) -> str:
    if not option_type or option_type not in OPTION_MODELS:
        raise ValidationError("Invalid type. Must be 'cities', 'states', or 'native_places'")
    return option_type


def ensure_option_name(name: Any) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Name is required and must be a non-empty string")
    return name.strip()
