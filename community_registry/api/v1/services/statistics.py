from datetime import date
from typing import Dict, Iterable, Optional

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from community_registry.api.v1.models.registration import Registration
from community_registry.api.v1.schemas.statistics import (
    CitySummaryResponse,
    StatisticsResponse,
    VerificationStats,
)
from community_registry.core.errors import UpstreamFailure

# (exclusive upper age, label); anything older is "65+"
AGE_BUCKETS = (
    (18, "Under 18"),
    (25, "18-24"),
    (35, "25-34"),
    (45, "35-44"),
    (55, "45-54"),
    (65, "55-64"),
)
OLDEST_BUCKET = "65+"


def calculate_age(birthday: date, today: Optional[date] = None) -> int:
    """
    Exact calendar age: the year difference, minus one when this year's
    birthday has not been reached yet.
    """
    today = today or date.today()
    age = today.year - birthday.year
    if (today.month, today.day) < (birthday.month, birthday.day):
        age -= 1
    return age


def age_bucket(age: int) -> str:
    for upper, label in AGE_BUCKETS:
        if age < upper:
            return label
    return OLDEST_BUCKET


def age_distribution(birthdays: Iterable[date], today: Optional[date] = None) -> Dict[str, int]:
    today = today or date.today()
    distribution: Dict[str, int] = {}
    for birthday in birthdays:
        label = age_bucket(calculate_age(birthday, today))
        distribution[label] = distribution.get(label, 0) + 1
    return distribution


class StatisticsService:
    """Grouped counts over registrations, optionally narrowed to one gender."""

    def __init__(self, db: AsyncSession, today: Optional[date] = None):
        if db is None:
            raise ValueError("Database session cannot be None")
        self.db = db
        self.today = today

    @staticmethod
    def gender_filters(gender: Optional[str]) -> list:
        gender = (gender or "").strip()
        if not gender:
            return []
        # case-insensitive exact match, "Male" == "male"
        return [func.lower(Registration.gender) == gender.lower()]

    async def _count(self, *filters) -> int:
        result = await self.db.execute(select(func.count()).select_from(Registration).where(*filters))
        return result.scalar_one() or 0

    async def _grouped_counts(self, column, filters: list, empty_label: str) -> Dict[str, int]:
        result = await self.db.execute(
            select(column, func.count())
            .select_from(Registration)
            .where(column.isnot(None), *filters)
            .group_by(column)
        )
        counts: Dict[str, int] = {}
        for value, count in result.all():
            key = value or empty_label
            counts[key] = counts.get(key, 0) + count
        return counts

    async def compute(self, gender: Optional[str] = None) -> StatisticsResponse:
        filters = self.gender_filters(gender)
        try:
            total = await self._count(*filters)
            verified = await self._count(Registration.verified.is_(True), *filters)
            # the gender breakdown always covers every registration
            genders = await self._grouped_counts(func.lower(Registration.gender), [], "unknown")
            cities = await self._grouped_counts(Registration.city, filters, "Unknown")
            marital = await self._grouped_counts(Registration.marital_status, filters, "Unknown")
            native_places = await self._grouped_counts(Registration.native_place, filters, "Unknown")
            birthdays = await self.db.execute(
                select(Registration.birthday).where(Registration.birthday.isnot(None), *filters)
            )
            ages = age_distribution(birthdays.scalars().all(), self.today)
        except SQLAlchemyError as e:
            logger.exception("Computing registration statistics failed")
            raise UpstreamFailure(str(e))

        return StatisticsResponse(
            total_registrations=total,
            verification_stats=VerificationStats(verified=verified, unverified=total - verified),
            gender_distribution=genders,
            cities_by_registrations=cities,
            marital_status_distribution=marital,
            native_place_distribution=native_places,
            age_distribution=ages,
        )

    async def city_summary(self, city: Optional[str] = None) -> CitySummaryResponse:
        city = city or None
        try:
            total = await self._count(*([Registration.city == city] if city else []))
            counts = await self._grouped_counts(Registration.city, [Registration.city != ""], "")
        except SQLAlchemyError as e:
            logger.exception("Computing city summary failed")
            raise UpstreamFailure(str(e))

        return CitySummaryResponse(
            total_entries=total,
            city_count=counts.get(city, 0) if city else None,
            city_counts=counts,
        )
