"""
Search, filter, sort and paginate the registrations table.

Caller input never reaches the SQL text: sort keys are resolved through
``SORTABLE_COLUMNS`` and every value is bound as a parameter.
"""
import math
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from loguru import logger
from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from community_registry.api.v1.models.registration import Registration
from community_registry.core.config import LIST_DEFAULT_LIMIT, LIST_MAX_LIMIT

DEFAULT_SORT_COLUMN = "id"
DEFAULT_SORT_ORDER = "desc"
SORT_ORDERS = ("asc", "desc")

SORTABLE_COLUMNS = {
    name: getattr(Registration, name)
    for name in (
        "id",
        "serial_number",
        "first_name",
        "middle_name",
        "last_name",
        "gender",
        "marital_status",
        "birthday",
        "city",
        "state",
        "zip_code",
        "phone",
        "native_place",
        "verified",
        "created_at",
    )
}

SEARCHABLE_COLUMNS = (
    cast(Registration.id, String),
    Registration.first_name,
    Registration.middle_name,
    Registration.last_name,
    Registration.phone,
    Registration.city,
    Registration.state,
    Registration.native_place,
    Registration.zip_code,
)

VERIFIED_FILTERS = {"verified": True, "unverified": False}

SERIAL_MIN = -(2 ** 31)
SERIAL_MAX = 2 ** 31 - 1


@dataclass
class ListParams:
    page: int = 1
    limit: int = LIST_DEFAULT_LIMIT
    search: str = ""
    gender: str = ""
    verified: Optional[bool] = None
    sort_by: str = DEFAULT_SORT_COLUMN
    sort_order: str = DEFAULT_SORT_ORDER

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class ListResult:
    rows: List[Registration] = field(default_factory=list)
    total_count: int = 0


def parse_int(raw: Any, default: int) -> int:
    """Lenient integer parsing: anything unparseable yields ``default``."""
    if raw is None:
        return default
    try:
        return int(str(raw).strip())
    except ValueError:
        return default


def resolve_sort(sort_by: Optional[str], sort_order: Optional[str]) -> Tuple[str, str]:
    column = sort_by if sort_by in SORTABLE_COLUMNS else DEFAULT_SORT_COLUMN
    order = sort_order if sort_order in SORT_ORDERS else DEFAULT_SORT_ORDER
    return column, order


def parse_list_params(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    search: Optional[str] = None,
    gender: Optional[str] = None,
    verified: Optional[str] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
) -> ListParams:
    """
    Turns raw query-string values into ``ListParams``.

    Malformed values are treated as absent rather than rejected. ``limit`` is
    clamped to ``[1, LIST_MAX_LIMIT]`` and ``page`` to at least 1.
    """
    column, order = resolve_sort(sort_by, sort_order)
    return ListParams(
        page=max(1, parse_int(page, 1)),
        limit=min(LIST_MAX_LIMIT, max(1, parse_int(limit, LIST_DEFAULT_LIMIT))),
        search=(search or "").strip(),
        gender=gender or "",
        verified=VERIFIED_FILTERS.get(verified or ""),
        sort_by=column,
        sort_order=order,
    )


def search_condition(term: str):
    conditions = [column.icontains(term, autoescape=True) for column in SEARCHABLE_COLUMNS]
    try:
        serial = int(term)
    except ValueError:
        serial = None
    # serial_number is int4; longer numbers (phone searches) only match as text
    if serial is not None and SERIAL_MIN <= serial <= SERIAL_MAX:
        conditions.append(Registration.serial_number == serial)
    return or_(*conditions)


def build_filters(params: ListParams) -> list:
    """Conjunctive filter list; empty when no filter is active."""
    filters = []
    if params.search:
        filters.append(search_condition(params.search))
    if params.gender:
        filters.append(Registration.gender == params.gender)
    if params.verified is not None:
        filters.append(Registration.verified == params.verified)
    return filters


def build_order_by(params: ListParams) -> list:
    column = SORTABLE_COLUMNS[params.sort_by]
    primary = column.asc() if params.sort_order == "asc" else column.desc()
    if params.sort_by == DEFAULT_SORT_COLUMN:
        return [primary]
    # id keeps ties in a stable order across pages
    return [primary, Registration.id.asc()]


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit > 0 else 0


class RegistrationQuery:
    """
    Runs the count and page queries for one ``ListParams`` against a session.

    The count is an independent query; the two reads may observe slightly
    different snapshots under concurrent writes.
    """

    def __init__(self, db: AsyncSession):
        if db is None:
            raise ValueError("Database session cannot be None")
        self.db = db

    def count_statement(self, params: ListParams):
        return select(func.count()).select_from(Registration).where(*build_filters(params))

    def page_statement(self, params: ListParams):
        return (
            select(Registration)
            .where(*build_filters(params))
            .order_by(*build_order_by(params))
            .offset(params.offset)
            .limit(params.limit)
        )

    async def count(self, params: ListParams) -> int:
        result = await self.db.execute(self.count_statement(params))
        return result.scalar_one() or 0

    async def page(self, params: ListParams) -> List[Registration]:
        result = await self.db.execute(self.page_statement(params))
        return list(result.scalars().all())

    async def run(self, params: ListParams) -> ListResult:
        total = await self.count(params)
        rows = await self.page(params)
        logger.debug(
            f"Listed registrations page={params.page} limit={params.limit} "
            f"sort={params.sort_by} {params.sort_order} total={total} returned={len(rows)}"
        )
        return ListResult(rows=rows, total_count=total)
