from collections.abc import Iterable

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFound
from app.models.exercise import Exercise
from app.schemas.exercises import ExerciseIn, ExerciseUpdate

BASIC_EXERCISES: list[dict] = [
    {"name": "Back Squat", "body_part": "legs", "is_weighted": True, "equipment": "barbell", "loading_mode": "bar", "rounding_increment_kg": 2.5, "rounding_increment_lbs": 2.5},
    {"name": "Front Squat", "body_part": "legs", "is_weighted": True, "equipment": "barbell", "loading_mode": "bar", "rounding_increment_kg": 2.5, "rounding_increment_lbs": 2.5},
    {"name": "Leg Press", "body_part": "legs", "is_weighted": True, "equipment": "machine", "loading_mode": "bar", "rounding_increment_kg": 2.5, "rounding_increment_lbs": 5},
    {"name": "Walking Lunge", "body_part": "legs", "is_weighted": True, "equipment": "dumbbell", "loading_mode": "pair", "rounding_increment_kg": 2.5, "rounding_increment_lbs": 5},
    {"name": "Romanian Deadlift", "body_part": "legs", "is_weighted": True, "equipment": "barbell", "loading_mode": "bar", "rounding_increment_kg": 2.5, "rounding_increment_lbs": 2.5},
    {"name": "Push-up", "body_part": "chest", "is_weighted": False, "equipment": "bodyweight", "loading_mode": "bar", "rounding_increment_kg": 2.5, "rounding_increment_lbs": 5},
    {"name": "Pull-up", "body_part": "back", "is_weighted": False, "equipment": "bodyweight", "loading_mode": "bar", "rounding_increment_kg": 2.5, "rounding_increment_lbs": 5},
]


# columns an explicit null must not clear
_REQUIRED_FIELDS = {"name", "body_part", "is_weighted"}


async def create_exercise(db: AsyncSession, payload: ExerciseIn) -> Exercise:
    ex = Exercise(**payload.model_dump())
    db.add(ex)
    await db.commit()
    await db.refresh(ex)
    return ex


async def get_exercise(db: AsyncSession, exercise_id: int) -> Exercise:
    ex = await db.get(Exercise, exercise_id)
    if ex is None:
        raise NotFound("Exercise not found")
    return ex


async def update_exercise(db: AsyncSession, exercise_id: int, payload: ExerciseUpdate) -> Exercise:
    """Patch catalog fields. Sessions keep the name they were started with."""
    ex = await get_exercise(db, exercise_id)
    changes = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or field not in _REQUIRED_FIELDS
    }
    for field, value in changes.items():
        setattr(ex, field, value)
    await db.commit()
    await db.refresh(ex)
    logger.info(f"Exercise updated: id={ex.id} fields={sorted(changes)}")
    return ex


async def delete_exercise(db: AsyncSession, exercise_id: int) -> bool:
    ex = await db.get(Exercise, exercise_id)
    if ex is None:
        return False
    await db.delete(ex)
    await db.commit()
    return True


async def list_exercises(db: AsyncSession, body_part: str | None = None) -> list[Exercise]:
    stmt = select(Exercise).order_by(Exercise.name.asc(), Exercise.id.asc())
    if body_part:
        stmt = stmt.where(Exercise.body_part == body_part)
    res = await db.execute(stmt)
    return list(res.scalars().all())


async def existing_exercise_ids(db: AsyncSession, exercise_ids: Iterable[int]) -> set[int]:
    ids = set(exercise_ids)
    if not ids:
        return set()
    res = await db.execute(select(Exercise.id).where(Exercise.id.in_(ids)))
    return {r[0] for r in res.all()}


async def exercises_by_id(db: AsyncSession, exercise_ids: Iterable[int]) -> dict[int, Exercise]:
    ids = set(exercise_ids)
    if not ids:
        return {}
    res = await db.execute(select(Exercise).where(Exercise.id.in_(ids)))
    return {e.id: e for e in res.scalars().all()}


async def seed_basics(db: AsyncSession) -> int:
    """Insert the basic catalog, skipping names that already exist."""
    res = await db.execute(select(Exercise.name))
    existing = {r[0] for r in res.all()}
    created = 0
    for data in BASIC_EXERCISES:
        if data["name"] in existing:
            continue
        db.add(Exercise(**data))
        created += 1
    await db.commit()
    logger.info(f"Seeded {created} exercises")
    return created
