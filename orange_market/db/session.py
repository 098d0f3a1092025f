from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker

from orange_market.core.config import settings
from orange_market.db.models import Base

engine = create_async_engine(settings.db_url, echo=False)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False)


async def create_tables() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose() -> None:
    await engine.dispose()
