from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from community_registry.api.v1.dependencies import require_admin
from community_registry.api.v1.schemas.statistics import CitySummaryResponse, StatisticsResponse
from community_registry.api.v1.services.statistics import StatisticsService
from community_registry.core.db.session import get_db

router = APIRouter(prefix="", tags=["Admin Statistics"])

@router.get("/stats", response_model=StatisticsResponse)
async def read_statistics(
    gender: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_admin=Depends(require_admin)
):
    return await StatisticsService(db).compute(gender)

@router.get("/statistics", response_model=CitySummaryResponse)
async def read_city_summary(
    city: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_admin=Depends(require_admin)
):
    return await StatisticsService(db).city_summary(city)
