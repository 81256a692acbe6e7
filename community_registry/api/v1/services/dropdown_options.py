from typing import List

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from community_registry.api.v1.models.dropdown_option import OPTION_MODELS
from community_registry.api.v1.schemas.dropdown_option import DropdownOptionResult
from community_registry.core.errors import UpstreamFailure


class DropdownOptionService:
    """Append-only catalogs of cities, states and native places."""

    @staticmethod
    async def list_options(db: AsyncSession, option_type: str) -> List[str]:
        model = OPTION_MODELS[option_type]
        try:
            result = await db.execute(select(model.name).order_by(model.name.asc()))
        except SQLAlchemyError as e:
            raise UpstreamFailure(str(e))
        return list(result.scalars().all())

    @staticmethod
    async def add_option(db: AsyncSession, option_type: str, name: str) -> DropdownOptionResult:
        """
        Inserts ``name`` into the catalog. An existing name is reported as success.
        """
        model = OPTION_MODELS[option_type]
        try:
            db.add(model(name=name))
            await db.commit()
        except IntegrityError:
            await db.rollback()
            return DropdownOptionResult(option=name, message="Option already exists")
        except SQLAlchemyError as e:
            await db.rollback()
            raise UpstreamFailure(str(e))

        logger.debug(f"Added {option_type} option {name!r}")
        return DropdownOptionResult(option=name)
