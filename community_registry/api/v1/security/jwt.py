from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, ExpiredSignatureError, jwt

from community_registry.core.config import ACCESS_TOKEN_EXPIRE_MINUTES, ALGORITHM, SECRET_KEY
from community_registry.core.errors import UnauthorizedError


def decode_jwt(token: str) -> dict:
    """
    Decodes a session token.
    Raises UnauthorizedError for expired or invalid tokens.
    """
    try:
        return jwt.decode(token, str(SECRET_KEY), algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise UnauthorizedError("Session expired")
    except JWTError:
        raise UnauthorizedError("Invalid session token")


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Creates a signed session token with optional custom expiry.
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": int(expire.timestamp())})
    return jwt.encode(to_encode, str(SECRET_KEY), algorithm=ALGORITHM)
