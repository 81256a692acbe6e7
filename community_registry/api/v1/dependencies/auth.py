import hmac
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from community_registry.api.v1.models.admin_user import AdminUser
from community_registry.api.v1.security.jwt import decode_jwt
from community_registry.api.v1.services.auth import AuthService
from community_registry.core.config import REGISTRATIONS_ADMIN_TOKEN, SESSION_COOKIE_NAME
from community_registry.core.db.session import get_db
from community_registry.core.errors import UnauthorizedError

session_cookie = APIKeyCookie(name=SESSION_COOKIE_NAME, auto_error=False)
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_admin(
    session: Optional[str] = Depends(session_cookie),
    bearer: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Optional[AdminUser]:
    """
    Resolves the admin behind the session cookie (or a Bearer header).
    Returns None when there is no valid session.
    """
    token = session or (bearer.credentials if bearer and bearer.scheme.lower() == "bearer" else None)
    if not token:
        return None

    try:
        payload = decode_jwt(token)
    except UnauthorizedError:
        return None

    admin_id = payload.get("sub")
    if not admin_id:
        return None
    return await AuthService(db).get_admin(admin_id)


async def require_admin(admin: Optional[AdminUser] = Depends(get_current_admin)) -> AdminUser:
    if admin is None:
        raise UnauthorizedError("Unauthorized")
    return admin


def require_registrations_token(request: Request) -> None:
    """
    Guards the public photo endpoint when REGISTRATIONS_ADMIN_TOKEN is set.
    """
    expected_token = str(REGISTRATIONS_ADMIN_TOKEN)
    if not expected_token:
        return
    header = request.headers.get("authorization", "")
    if not hmac.compare_digest(header, f"Bearer {expected_token}"):
        raise UnauthorizedError("Unauthorized")
