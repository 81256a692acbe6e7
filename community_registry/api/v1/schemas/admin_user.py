from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class AdminCredentials(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class AdminUser(BaseModel):
    id: str
    username: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AdminUserResponse(BaseModel):
    ok: bool = True
    user: AdminUser


class SessionUserResponse(BaseModel):
    user: AdminUser


class OkResponse(BaseModel):
    ok: bool = True
