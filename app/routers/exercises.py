from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.exercises import ExerciseIn, ExerciseOut, ExerciseUpdate
from app.services import exercises as exercise_service


router = APIRouter(prefix="/exercises", tags=["exercises"])


@router.get("")
async def list_exercises(
    body_part: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    items = await exercise_service.list_exercises(db, body_part)
    return {"items": [ExerciseOut.model_validate(e) for e in items]}


@router.post("", status_code=201)
async def create_exercise(
    payload: ExerciseIn,
    db: AsyncSession = Depends(get_db),
):
    ex = await exercise_service.create_exercise(db, payload)
    return {"created": True, "exercise": ExerciseOut.model_validate(ex)}


@router.post("/seed")
async def seed_exercises(db: AsyncSession = Depends(get_db)):
    created = await exercise_service.seed_basics(db)
    return {"created": created}


@router.get("/{exercise_id}", response_model=ExerciseOut)
async def get_exercise(
    exercise_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await exercise_service.get_exercise(db, exercise_id)


@router.patch("/{exercise_id}")
async def update_exercise(
    exercise_id: int,
    payload: ExerciseUpdate,
    db: AsyncSession = Depends(get_db),
):
    ex = await exercise_service.update_exercise(db, exercise_id, payload)
    return {"updated": True, "exercise": ExerciseOut.model_validate(ex)}


@router.delete("/{exercise_id}")
async def delete_exercise(
    exercise_id: int,
    db: AsyncSession = Depends(get_db),
):
    deleted = await exercise_service.delete_exercise(db, exercise_id)
    if not deleted:
        return {"deleted": False, "detail": "Exercise not found"}
    return {"deleted": True, "exercise_id": exercise_id}
