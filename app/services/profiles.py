from collections.abc import Callable, Iterable

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConcurrentUpdate
from app.models.progression_profile import ProgressionProfile


async def get_progression_profiles(
    db: AsyncSession,
    user_id: int | None,
    exercise_ids: Iterable[int],
) -> dict[int, ProgressionProfile]:
    """Stored profile per exercise id; exercises without one are omitted."""
    ids = set(exercise_ids)
    if user_id is None or not ids:
        return {}
    res = await db.execute(
        select(ProgressionProfile).where(
            ProgressionProfile.user_id == user_id,
            ProgressionProfile.exercise_id.in_(ids),
        )
    )
    return {p.exercise_id: p for p in res.scalars().all()}


async def upsert_progression_profile(
    db: AsyncSession,
    user_id: int,
    exercise_id: int,
    update: Callable[[ProgressionProfile], None],
) -> ProgressionProfile:
    """Apply ``update`` to the (user, exercise) profile, creating it if needed.

    Flushes but does not commit. If another transaction inserts the same
    profile first, the unit of work is rolled back and ConcurrentUpdate is
    raised.
    """
    res = await db.execute(
        select(ProgressionProfile).where(
            ProgressionProfile.user_id == user_id,
            ProgressionProfile.exercise_id == exercise_id,
        )
    )
    profile = res.scalar_one_or_none()
    if profile is None:
        profile = ProgressionProfile(user_id=user_id, exercise_id=exercise_id)
        db.add(profile)
    update(profile)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        logger.warning(f"Progression profile user={user_id} exercise={exercise_id} was created concurrently")
        raise ConcurrentUpdate("Progression profile was modified concurrently, reload and retry")
    return profile
