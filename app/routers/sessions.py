from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.deps import get_principal
from app.schemas.progression import ProgressionProfileOut
from app.schemas.workouts import (
    MarkSetDoneIn,
    RecordEffortIn,
    SessionOut,
    SessionSummary,
    StartSessionIn,
    UpdatePlannedWeightIn,
)
from app.services import session_engine
from app.services.identity import AuthPrincipal, Identity, resolve_user_id


router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("/start", status_code=201)
async def start_session(
    payload: StartSessionIn,
    principal: AuthPrincipal | None = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    session = await session_engine.start_session(
        db,
        payload.template_id,
        identity=Identity(user_id=payload.user_id, anon_key=payload.anon_key),
        principal=principal,
        planned_weights=payload.planned_weights,
    )
    return {
        "started": True,
        "session_id": session.id,
        "session": SessionOut.model_validate(session),
    }


@router.get("/active")
async def get_active_session(
    user_id: int | None = None,
    anon_key: str | None = None,
    principal: AuthPrincipal | None = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    session = await session_engine.get_latest_active_session(
        db, Identity(user_id=user_id, anon_key=anon_key), principal
    )
    if not session:
        return {"active": False, "session": None}
    return {"active": True, "session": SessionOut.model_validate(session)}


@router.get("/history", response_model=list[SessionSummary])
async def session_history(
    user_id: int | None = None,
    principal: AuthPrincipal | None = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    resolved = await resolve_user_id(db, user_id, principal, create=False)
    if resolved is None:
        return []
    return await session_engine.list_sessions_for_user(db, resolved)


@router.get("/{session_id}", response_model=SessionOut)
async def get_session(
    session_id: int,
    db: AsyncSession = Depends(get_db),
):
    session = await session_engine.get_session(db, session_id)
    if not session:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    return session


@router.post("/{session_id}/exercises/{exercise_index}/sets/{set_index}/done")
async def mark_set_done(
    session_id: int,
    exercise_index: int,
    set_index: int,
    payload: MarkSetDoneIn | None = None,
    db: AsyncSession = Depends(get_db),
):
    payload = payload or MarkSetDoneIn()
    session = await session_engine.mark_set_done(
        db,
        session_id,
        exercise_index,
        set_index,
        reps=payload.reps,
        weight_kg=payload.weight_kg,
    )
    return {"updated": True, "session": SessionOut.model_validate(session)}


@router.patch("/{session_id}/exercises/{exercise_index}/planned-weight")
async def update_planned_weight(
    session_id: int,
    exercise_index: int,
    payload: UpdatePlannedWeightIn,
    db: AsyncSession = Depends(get_db),
):
    session = await session_engine.update_planned_weight(
        db,
        session_id,
        exercise_index,
        payload.weight_kg,
        from_set_index=payload.from_set_index,
    )
    return {"updated": True, "session": SessionOut.model_validate(session)}


@router.post("/{session_id}/exercises/{exercise_index}/rir")
async def record_effort(
    session_id: int,
    exercise_index: int,
    payload: RecordEffortIn,
    principal: AuthPrincipal | None = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    profile = await session_engine.record_effort(
        db,
        session_id,
        exercise_index,
        payload.rir,
        user_id=payload.user_id,
        principal=principal,
    )
    return {
        "recorded": True,
        "progression": ProgressionProfileOut.model_validate(profile) if profile else None,
    }


@router.post("/{session_id}/complete")
async def complete_session(
    session_id: int,
    db: AsyncSession = Depends(get_db),
):
    session = await session_engine.complete_session(db, session_id)
    return {
        "completed": True,
        "session": {
            "id": session.id,
            "template_id": session.template_id,
            "status": session.status,
            "started_at": session.started_at,
            "completed_at": session.completed_at,
        },
    }
