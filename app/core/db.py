from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from app.core.config import settings


class Base(DeclarativeBase):
    pass


engine = create_async_engine(settings.DATABASE_URL, future=True)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def get_db() -> AsyncIterator[AsyncSession]:
    async with SessionLocal() as db:
        yield db


def import_models() -> None:
    """Register every mapped class on Base.metadata."""
    from app.models import (  # noqa: F401
        assessment,
        exercise,
        progression_profile,
        user,
        workout_session,
        workout_template,
    )


async def init_models() -> None:
    """Create all tables (dev only; deployments run the alembic migrations)."""
    import_models()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
