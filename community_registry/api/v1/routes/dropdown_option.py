from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from community_registry.api.v1.schemas.dropdown_option import (
    DropdownOptionCreate,
    DropdownOptionResult,
    DropdownOptions,
)
from community_registry.api.v1.services.dropdown_options import DropdownOptionService
from community_registry.api.v1.validators.dropdown_option import ensure_option_name, ensure_option_type
from community_registry.core.db.session import get_db

router = APIRouter(prefix="", tags=["Dropdown Options"])

@router.get("/", response_model=DropdownOptions)
async def read_options(
    type: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    option_type = ensure_option_type(type)
    return DropdownOptions(options=await DropdownOptionService.list_options(db, option_type))

@router.post("/", response_model=DropdownOptionResult, response_model_exclude_none=True)
async def create_option(
    option_in: DropdownOptionCreate,
    db: AsyncSession = Depends(get_db)
):
    option_type = ensure_option_type(option_in.type)
    name = ensure_option_name(option_in.name)
    return await DropdownOptionService.add_option(db, option_type, name)
