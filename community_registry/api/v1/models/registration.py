import uuid

from sqlalchemy import Boolean, Column, Date, Integer, Sequence, String, TIMESTAMP, Text, false
from sqlalchemy.sql import func

from community_registry.core.config import REGISTRATIONS_TABLE
from community_registry.core.db import Base


class Registration(Base):
    __tablename__ = REGISTRATIONS_TABLE

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    serial_number = Column(Integer, Sequence(f"{REGISTRATIONS_TABLE}_serial_number_seq"), nullable=True, index=True)
    first_name = Column(Text, nullable=True)
    middle_name = Column(Text, nullable=True)
    last_name = Column(Text, nullable=True)
    name = Column(Text, nullable=True)  # legacy single-field name
    gender = Column(String(16), nullable=True)
    marital_status = Column(String(16), nullable=True)
    birthday = Column(Date, nullable=True)
    street = Column(Text, nullable=True)
    city = Column(Text, nullable=True)
    state = Column(Text, nullable=True)
    zip_code = Column(String(20), nullable=True)
    phone = Column(String(32), nullable=True)
    relative_phone = Column(String(32), nullable=True)
    native_place = Column(Text, nullable=True)
    photo_bucket = Column(Text, nullable=False)
    photo_path = Column(Text, nullable=False)
    verified = Column(Boolean, nullable=False, default=False, server_default=false())
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
