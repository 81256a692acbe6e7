import pytest
from datetime import date
from fastapi import status
from sqlalchemy.exc import SQLAlchemyError
from unittest.mock import AsyncMock

from community_registry.api.v1.services.statistics import (
    StatisticsService,
    age_bucket,
    age_distribution,
    calculate_age,
)
from community_registry.core.errors import UpstreamFailure
from tests.conftest import make_registration, seed

TODAY = date(2024, 6, 15)


# --- Age helpers ---

@pytest.mark.parametrize(
    "birthday, expected",
    [
        (date(2006, 6, 15), 18),   # birthday today
        (date(2006, 6, 16), 17),   # birthday tomorrow
        (date(2006, 6, 14), 18),
        (date(1959, 6, 15), 65),
        (date(1959, 12, 31), 64),
        (date(2000, 2, 29), 24),
    ],
)
def test_calculate_age(birthday, expected):
    assert calculate_age(birthday, TODAY) == expected


@pytest.mark.parametrize(
    "age, label",
    [
        (0, "Under 18"), (17, "Under 18"), (18, "18-24"), (24, "18-24"),
        (25, "25-34"), (34, "25-34"), (35, "35-44"), (45, "45-54"),
        (55, "55-64"), (64, "55-64"), (65, "65+"), (99, "65+"),
    ],
)
def test_age_bucket_boundaries(age, label):
    assert age_bucket(age) == label


def test_age_distribution_on_eighteenth_birthday():
    distribution = age_distribution([date(2006, 6, 15), date(2006, 6, 16)], TODAY)
    assert distribution == {"18-24": 1, "Under 18": 1}


def test_statistics_service_requires_session():
    with pytest.raises(ValueError):
        StatisticsService(None)


# --- Aggregation against a real database ---

async def seed_population(session):
    await seed(session, [
        make_registration(id="r1", gender="male", city="Pune", marital_status="married",
                          native_place="Surat", birthday=date(1990, 1, 1), verified=True),
        make_registration(id="r2", gender="Male", city="Pune", marital_status="unmarried",
                          native_place="Surat", birthday=date(2010, 1, 1), verified=False),
        make_registration(id="r3", gender="female", city="Mumbai", marital_status="unmarried",
                          native_place="Rajkot", birthday=date(1950, 1, 1), verified=True),
        make_registration(id="r4", gender="female", city="", marital_status=None,
                          native_place=None, birthday=None, verified=False),
    ])


@pytest.mark.asyncio
async def test_compute_over_whole_population(db_session):
    await seed_population(db_session)

    stats = await StatisticsService(db_session, today=TODAY).compute()

    assert stats.total_registrations == 4
    assert stats.verification_stats.verified == 2
    assert stats.verification_stats.unverified == 2
    assert stats.gender_distribution == {"male": 2, "female": 2}
    assert stats.cities_by_registrations == {"Pune": 2, "Mumbai": 1, "Unknown": 1}
    assert stats.marital_status_distribution == {"married": 1, "unmarried": 2}
    assert stats.native_place_distribution == {"Surat": 2, "Rajkot": 1}
    assert stats.age_distribution == {"25-34": 1, "Under 18": 1, "65+": 1}


@pytest.mark.asyncio
async def test_compute_gender_filter_is_case_insensitive(db_session):
    await seed_population(db_session)

    stats = await StatisticsService(db_session, today=TODAY).compute("MALE")

    assert stats.total_registrations == 2
    assert stats.verification_stats.verified == 1
    assert stats.cities_by_registrations == {"Pune": 2}
    assert stats.age_distribution == {"25-34": 1, "Under 18": 1}
    # the gender breakdown always covers every registration
    assert stats.gender_distribution == {"male": 2, "female": 2}


@pytest.mark.asyncio
async def test_compute_empty_table(db_session):
    stats = await StatisticsService(db_session, today=TODAY).compute()
    assert stats.total_registrations == 0
    assert stats.verification_stats.verified == 0
    assert stats.verification_stats.unverified == 0
    assert stats.gender_distribution == {}
    assert stats.age_distribution == {}


@pytest.mark.asyncio
async def test_compute_database_failure():
    db = AsyncMock()
    db.execute.side_effect = SQLAlchemyError("timeout")
    with pytest.raises(UpstreamFailure, match="timeout"):
        await StatisticsService(db).compute()


@pytest.mark.asyncio
async def test_city_summary(db_session):
    await seed_population(db_session)
    service = StatisticsService(db_session)

    summary = await service.city_summary()
    assert summary.total_entries == 4
    assert summary.city_count is None
    assert summary.city_counts == {"Pune": 2, "Mumbai": 1}

    summary = await service.city_summary("Pune")
    assert summary.total_entries == 2
    assert summary.city_count == 2

    summary = await service.city_summary("Goa")
    assert summary.total_entries == 0
    assert summary.city_count == 0


# --- Routes ---

@pytest.mark.asyncio
async def test_stats_route_uses_camel_case_keys(async_client, db_session):
    await seed_population(db_session)

    response = await async_client.get("/api/v1/admin/stats")
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert set(body) == {
        "totalRegistrations",
        "verificationStats",
        "genderDistribution",
        "citiesByRegistrations",
        "maritalStatusDistribution",
        "nativePlaceDistribution",
        "ageDistribution",
    }
    assert body["totalRegistrations"] == 4
    assert body["verificationStats"] == {"verified": 2, "unverified": 2}


@pytest.mark.asyncio
async def test_stats_route_gender_query(async_client, db_session):
    await seed_population(db_session)

    response = await async_client.get("/api/v1/admin/stats", params={"gender": "female"})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["totalRegistrations"] == 2


@pytest.mark.asyncio
async def test_stats_route_failure_is_500(async_client, monkeypatch):
    monkeypatch.setattr(StatisticsService, "compute", AsyncMock(side_effect=UpstreamFailure("boom")))
    response = await async_client.get("/api/v1/admin/stats")
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"detail": "boom"}


@pytest.mark.asyncio
async def test_city_summary_route(async_client, db_session):
    await seed_population(db_session)

    response = await async_client.get("/api/v1/admin/statistics", params={"city": "Mumbai"})
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "totalEntries": 1,
        "cityCount": 1,
        "cityCounts": {"Pune": 2, "Mumbai": 1},
    }


@pytest.mark.asyncio
async def test_statistics_routes_require_session(anonymous_client):
    assert (await anonymous_client.get("/api/v1/admin/stats")).status_code == status.HTTP_401_UNAUTHORIZED
    assert (await anonymous_client.get("/api/v1/admin/statistics")).status_code == status.HTTP_401_UNAUTHORIZED
