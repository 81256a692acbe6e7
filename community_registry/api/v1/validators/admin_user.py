from community_registry.api.v1.schemas.admin_user import AdminCredentials
from community_registry.core.errors import ValidationError


def ensure_credentials_present(credentials: AdminCredentials) -> None:
    if not credentials.username or not credentials.password:
        raise ValidationError("Username and password are required")


def ensure_username_length(username: str) -> None:
    """
    Ensures the username is at least 3 characters long.
    """
    if len(username) < 3:
        raise ValidationError("Username must be at least 3 characters")


def ensure_password_strength(password: str) -> None:
    """
    Ensures the password is at least 8 characters long.
    """
    if len(password) < 8:
        raise ValidationError("Password must be at least 8 characters")
