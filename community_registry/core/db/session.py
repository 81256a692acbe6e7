from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from typing import AsyncGenerator

from community_registry.core.config import (
    DATABASE_URL,
    DEBUG,
    MAX_CONNECTIONS_COUNT,
    MIN_CONNECTIONS_COUNT,
)

engine = create_async_engine(
    DATABASE_URL,
    echo=DEBUG,
    pool_size=MIN_CONNECTIONS_COUNT,
    max_overflow=max(MAX_CONNECTIONS_COUNT - MIN_CONNECTIONS_COUNT, 0),
    pool_pre_ping=True,
)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def dispose_engine() -> None:
    await engine.dispose()
