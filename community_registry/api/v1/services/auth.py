from datetime import timedelta
from typing import Optional

from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from community_registry.api.v1.models.admin_user import AdminUser
from community_registry.api.v1.schemas.admin_user import AdminCredentials
from community_registry.api.v1.security.jwt import create_access_token
from community_registry.api.v1.security.passwords import hash_password, verify_password
from community_registry.api.v1.validators.admin_user import (
    ensure_credentials_present,
    ensure_password_strength,
    ensure_username_length,
)
from community_registry.core.config import ACCESS_TOKEN_EXPIRE_MINUTES
from community_registry.core.errors import ConflictError, UpstreamFailure


class AuthService:
    def __init__(self, db: AsyncSession):
        if db is None:
            raise ValueError("Database session cannot be None")
        self.db = db

    async def get_admin(self, admin_id: str) -> Optional[AdminUser]:
        result = await self.db.execute(select(AdminUser).where(AdminUser.id == admin_id))
        return result.scalar_one_or_none()

    async def get_admin_by_username(self, username: str) -> Optional[AdminUser]:
        result = await self.db.execute(select(AdminUser).where(AdminUser.username == username))
        return result.scalar_one_or_none()

    async def authenticate(self, username: str, password: str) -> Optional[AdminUser]:
        user = await self.get_admin_by_username(username)
        if not user:
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user

    @staticmethod
    def create_session_token(user: AdminUser) -> str:
        return create_access_token(
            data={"sub": str(user.id)},
            expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
        )

    async def create_admin(self, credentials: AdminCredentials) -> AdminUser:
        """
        Creates a new admin account after validating the credentials.
        """
        ensure_credentials_present(credentials)
        ensure_username_length(credentials.username)
        ensure_password_strength(credentials.password)

        if await self.get_admin_by_username(credentials.username):
            raise ConflictError("Username already exists")

        user = AdminUser(
            username=credentials.username,
            password_hash=hash_password(credentials.password),
        )
        try:
            self.db.add(user)
            await self.db.commit()
            await self.db.refresh(user)
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Username already exists")
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise UpstreamFailure(str(e))

        logger.info(f"Created admin user {user.username}")
        return user
