from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from community_registry.api.v1.dependencies.auth import get_current_admin, require_admin
from community_registry.api.v1.models.admin_user import AdminUser as AdminUserModel
from community_registry.api.v1.schemas.admin_user import (
    AdminCredentials,
    AdminUser,
    AdminUserResponse,
    OkResponse,
    SessionUserResponse,
)
from community_registry.api.v1.services.auth import AuthService
from community_registry.api.v1.validators.admin_user import ensure_credentials_present
from community_registry.core.config import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    SESSION_COOKIE_NAME,
    SESSION_COOKIE_SECURE,
)
from community_registry.core.db.session import get_db

router = APIRouter(prefix="", tags=["Admin Auth"])

@router.post("/login", response_model=AdminUserResponse, response_model_exclude_none=True)
async def login(
    credentials: AdminCredentials,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    ensure_credentials_present(credentials)
    auth_service = AuthService(db=db)
    user = await auth_service.authenticate(credentials.username, credentials.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )
    response.set_cookie(
        SESSION_COOKIE_NAME,
        auth_service.create_session_token(user),
        httponly=True,
        secure=SESSION_COOKIE_SECURE,
        samesite="lax",
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        path="/",
    )
    return AdminUserResponse(user=AdminUser(id=str(user.id), username=user.username))

@router.post("/logout", response_model=OkResponse)
async def logout(response: Response):
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
    return OkResponse()

@router.get("/me", response_model=SessionUserResponse)
async def me(admin: AdminUserModel = Depends(get_current_admin)):
    if admin is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return SessionUserResponse(user=AdminUser.model_validate(admin))

@router.post("/users", response_model=AdminUserResponse)
async def create_admin_user(
    credentials: AdminCredentials,
    db: AsyncSession = Depends(get_db),
    current_admin=Depends(require_admin)
):
    user = await AuthService(db=db).create_admin(credentials)
    return AdminUserResponse(user=AdminUser.model_validate(user))
