from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class VerificationStats(BaseModel):
    verified: int
    unverified: int


class StatisticsResponse(BaseModel):
    total_registrations: int
    verification_stats: VerificationStats
    gender_distribution: Dict[str, int]
    cities_by_registrations: Dict[str, int]
    marital_status_distribution: Dict[str, int]
    native_place_distribution: Dict[str, int]
    age_distribution: Dict[str, int]

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CitySummaryResponse(BaseModel):
    total_entries: int
    city_count: Optional[int] = None
    city_counts: Dict[str, int]

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
