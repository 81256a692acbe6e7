from typing import Any, List, Optional

from pydantic import BaseModel


class DropdownOptions(BaseModel):
    options: List[str]


class DropdownOptionCreate(BaseModel):
    type: Optional[str] = None
    name: Optional[Any] = None


class DropdownOptionResult(BaseModel):
    success: bool = True
    option: str
    message: Optional[str] = None
