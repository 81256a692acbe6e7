import uuid

from sqlalchemy import Column, String, TIMESTAMP, Text, func

from community_registry.core.config import ADMIN_USERS_TABLE
from community_registry.core.db import Base


class AdminUser(Base):
    __tablename__ = ADMIN_USERS_TABLE

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username = Column(Text, nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
