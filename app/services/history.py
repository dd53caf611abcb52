"""Read-side lookups over past sessions and assessments."""

from collections.abc import Iterable

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFound, Unresolvable
from app.models.assessment import Assessment
from app.models.exercise import Exercise
from app.services.identity import AuthPrincipal, Identity, resolve_user_id
from app.services.progression import last_logged_weight
from app.services.session_engine import session_exercises, sessions_for_identity, utcnow


async def record_assessment(
    db: AsyncSession,
    identity: Identity,
    exercise_id: int,
    type: str,
    value: float,
    unit: str,
    principal: AuthPrincipal | None = None,
) -> Assessment:
    user_id = await resolve_user_id(db, identity.user_id, principal)
    if user_id is None and not identity.anon_key:
        raise Unresolvable("An assessment needs a user or an anonymous key")
    if await db.get(Exercise, exercise_id) is None:
        raise NotFound("Exercise not found")

    a = Assessment(
        user_id=user_id,
        anon_key=identity.anon_key,
        exercise_id=exercise_id,
        type=type,
        value=value,
        unit=unit,
        created_at=utcnow(),
    )
    db.add(a)
    await db.commit()
    await db.refresh(a)
    logger.info(f"Assessment recorded: exercise={exercise_id} type={type} value={value}{unit} user={user_id}")
    return a


async def get_latest_assessments(
    db: AsyncSession,
    identity: Identity,
    exercise_ids: Iterable[int],
    principal: AuthPrincipal | None = None,
) -> dict[int, Assessment]:
    """Newest assessment per exercise for the user, else for the anon key."""
    ids = set(exercise_ids)
    user_id = identity.user_id
    if identity.is_empty:
        user_id = await resolve_user_id(db, None, principal, create=False)

    if user_id is not None:
        cond = Assessment.user_id == user_id
    elif identity.anon_key:
        cond = Assessment.anon_key == identity.anon_key
    else:
        return {}
    if not ids:
        return {}

    res = await db.execute(
        select(Assessment)
        .where(cond, Assessment.exercise_id.in_(ids))
        .order_by(Assessment.created_at.asc(), Assessment.id.asc())
    )
    latest: dict[int, Assessment] = {}
    for a in res.scalars().all():
        latest[a.exercise_id] = a
    return latest


async def get_latest_completed_weights(
    db: AsyncSession,
    identity: Identity,
    exercise_ids: Iterable[int],
    principal: AuthPrincipal | None = None,
) -> dict[int, float]:
    """Last logged weight per exercise from the newest session containing it.

    A session that has the exercise but no weight on any of its sets is
    skipped and the search moves on to older sessions.
    """
    user_id = identity.user_id
    if user_id is None:
        user_id = await resolve_user_id(db, None, principal, create=False)
    sessions = await sessions_for_identity(db, user_id, identity.anon_key)

    parsed = [session_exercises(s) for s in sessions]
    result: dict[int, float] = {}
    for exercise_id in dict.fromkeys(exercise_ids):
        for exercises in parsed:
            match = next((e for e in exercises if e.exercise_id == exercise_id), None)
            if match is None:
                continue
            weight = last_logged_weight(match.sets)
            if weight is not None:
                result[exercise_id] = weight
                break
    return result
