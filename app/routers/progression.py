from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.deps import get_principal
from app.schemas.progression import AssessmentIn, AssessmentOut, ProgressionProfileOut
from app.services import history
from app.services.identity import AuthPrincipal, Identity, resolve_user_id
from app.services.profiles import get_progression_profiles


router = APIRouter(tags=["progression"])


@router.post("/assessments", status_code=201)
async def record_assessment(
    payload: AssessmentIn,
    principal: AuthPrincipal | None = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    a = await history.record_assessment(
        db,
        Identity(user_id=payload.user_id, anon_key=payload.anon_key),
        payload.exercise_id,
        payload.type,
        payload.value,
        payload.unit,
        principal=principal,
    )
    return {"created": True, "assessment": AssessmentOut.model_validate(a)}


@router.get("/assessments/latest", response_model=dict[int, AssessmentOut])
async def latest_assessments(
    exercise_ids: list[int] = Query(default=[]),
    user_id: int | None = None,
    anon_key: str | None = None,
    principal: AuthPrincipal | None = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    return await history.get_latest_assessments(
        db, Identity(user_id=user_id, anon_key=anon_key), exercise_ids, principal
    )


@router.get("/progression/latest-weights", response_model=dict[int, float])
async def latest_completed_weights(
    exercise_ids: list[int] = Query(default=[]),
    user_id: int | None = None,
    anon_key: str | None = None,
    principal: AuthPrincipal | None = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    return await history.get_latest_completed_weights(
        db, Identity(user_id=user_id, anon_key=anon_key), exercise_ids, principal
    )


@router.get("/progression/profiles", response_model=dict[int, ProgressionProfileOut])
async def progression_profiles(
    exercise_ids: list[int] = Query(default=[]),
    user_id: int | None = None,
    principal: AuthPrincipal | None = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    resolved = await resolve_user_id(db, user_id, principal, create=False)
    return await get_progression_profiles(db, resolved, exercise_ids)
