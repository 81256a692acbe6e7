from datetime import date, datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# Shape returned to admin clients; optional text fields are never undefined
class Registration(BaseModel):
    id: str
    serial_number: Union[int, str] = ""
    first_name: str = ""
    middle_name: str = ""
    last_name: str = ""
    name: Optional[str] = None
    gender: Optional[str] = None
    marital_status: Optional[str] = None
    birthday: Optional[date] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    phone: Optional[str] = None
    relative_phone: Optional[str] = None
    native_place: Optional[str] = None
    photo_bucket: Optional[str] = None
    photo_path: Optional[str] = None
    verified: bool = False
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegistrationListResponse(BaseModel):
    registrations: List[Registration]
    pagination: Pagination


# Both fields are optional here so a missing one surfaces as a 400, not a 422
class VerificationUpdate(BaseModel):
    id: Optional[str] = None
    verified: Optional[bool] = None


class VerificationState(BaseModel):
    id: str
    verified: bool


class VerificationResponse(BaseModel):
    success: bool = True
    registration: VerificationState


class SubmissionResponse(BaseModel):
    ok: bool = True
    id: str
