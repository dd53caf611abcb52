"""Lifecycle of one workout attempt.

A session is a document: its exercises and sets live in one JSON column and
every mutation reads the whole document, changes it in memory and writes it
back. Two things keep concurrent writers from losing each other's changes:

* calls against the same session id are serialised by an in-process lock;
* the row's ``version`` column is checked on write, so a writer from another
  process that read a stale copy fails with ConcurrentUpdate.

State machine: active -> completed. Completed sessions reject every mutation.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from weakref import WeakValueDictionary

from loguru import logger
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.core.errors import ConcurrentUpdate, NotFound, SessionClosed
from app.models.progression_profile import ProgressionProfile
from app.models.workout_session import WorkoutSession
from app.models.workout_template import WorkoutTemplate
from app.schemas.workouts import SessionExercise, SessionSet, TemplateItem
from app.services.exercises import exercises_by_id
from app.services.identity import AuthPrincipal, Identity, resolve_user_id
from app.services.profiles import get_progression_profiles, upsert_progression_profile
from app.services.progression import last_logged_weight, next_weight

ACTIVE = "active"
COMPLETED = "completed"

_locks: WeakValueDictionary[int, asyncio.Lock] = WeakValueDictionary()


def _session_lock(session_id: int) -> asyncio.Lock:
    lock = _locks.get(session_id)
    if lock is None:
        lock = asyncio.Lock()
        _locks[session_id] = lock
    return lock


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


async def _load(db: AsyncSession, session_id: int) -> WorkoutSession:
    session = await db.get(WorkoutSession, session_id, populate_existing=True)
    if session is None:
        raise NotFound("Session not found")
    return session


def _ensure_active(session: WorkoutSession) -> None:
    if session.status == COMPLETED:
        logger.warning(f"Rejected mutation of completed session id={session.id}")
        raise SessionClosed("Session already completed")


def session_exercises(session: WorkoutSession) -> list[SessionExercise]:
    return [SessionExercise.model_validate(e) for e in session.exercises or []]


def _pick_exercise(exercises: list[SessionExercise], exercise_index: int) -> SessionExercise:
    if not 0 <= exercise_index < len(exercises):
        raise NotFound("Exercise not found")
    return exercises[exercise_index]


async def _save(db: AsyncSession, session: WorkoutSession, exercises: list[SessionExercise] | None = None) -> None:
    if exercises is not None:
        session.exercises = [e.model_dump(mode="json") for e in exercises]
    session_id = session.id
    try:
        await db.commit()
    except StaleDataError:
        await db.rollback()
        logger.warning(f"Session id={session_id} changed underneath this write")
        raise ConcurrentUpdate("Session was modified concurrently, reload and retry")


async def start_session(
    db: AsyncSession,
    template_id: int,
    *,
    identity: Identity = Identity(),
    principal: AuthPrincipal | None = None,
    planned_weights: dict[int, float] | None = None,
) -> WorkoutSession:
    """Materialise a template into a new active session.

    Planned weight per exercise: explicit override, else the stored
    progression profile's suggestion, else each set's own weight.
    """
    planned_weights = planned_weights or {}

    template = await db.get(WorkoutTemplate, template_id)
    if template is None:
        raise NotFound("Template not found")

    user_id = await resolve_user_id(db, identity.user_id, principal)

    items = sorted(
        (TemplateItem.model_validate(i) for i in template.items),
        key=lambda item: item.order,
    )
    exercise_ids = [item.exercise_id for item in items]
    catalog = await exercises_by_id(db, exercise_ids)
    profiles = await get_progression_profiles(db, user_id, exercise_ids)

    exercises: list[SessionExercise] = []
    for item in items:
        planned = planned_weights.get(item.exercise_id)
        if planned is None:
            profile = profiles.get(item.exercise_id)
            if profile is not None and profile.next_planned_weight_kg is not None:
                planned = profile.next_planned_weight_kg

        ex = catalog.get(item.exercise_id)
        exercises.append(
            SessionExercise(
                exercise_id=item.exercise_id,
                exercise_name=ex.name if ex else "",
                equipment=ex.equipment if ex else None,
                loading_mode=ex.loading_mode if ex else None,
                load_basis="bodyweight" if ex is not None and ex.is_weighted is False else "external",
                order=item.order,
                group_id=item.group_id,
                group_order=item.group_order,
                rest_sec=item.sets[0].rest_sec if item.sets else None,
                sets=[
                    SessionSet(reps=s.reps, weight_kg=planned if planned is not None else s.weight_kg)
                    for s in item.sets
                ],
            )
        )

    session = WorkoutSession(
        user_id=user_id,
        anon_key=identity.anon_key,
        template_id=template.id,
        status=ACTIVE,
        started_at=utcnow(),
        exercises=[e.model_dump(mode="json") for e in exercises],
    )
    db.add(session)
    await db.commit()
    await db.refresh(session)
    logger.info(f"Session started: id={session.id} template={template.id} user={user_id} exercises={len(exercises)}")
    return session


async def mark_set_done(
    db: AsyncSession,
    session_id: int,
    exercise_index: int,
    set_index: int,
    reps: int | None = None,
    weight_kg: float | None = None,
) -> WorkoutSession:
    async with _session_lock(session_id):
        session = await _load(db, session_id)
        _ensure_active(session)
        exercises = session_exercises(session)
        ex = _pick_exercise(exercises, exercise_index)
        if not 0 <= set_index < len(ex.sets):
            raise NotFound("Set not found")

        st = ex.sets[set_index]
        st.done = True
        st.completed_at = utcnow()
        if reps is not None:
            st.completed_reps = reps
        if weight_kg is not None:
            st.completed_weight_kg = weight_kg

        await _save(db, session, exercises)
    logger.debug(f"Set done: session={session_id} exercise={exercise_index} set={set_index}")
    return session


async def update_planned_weight(
    db: AsyncSession,
    session_id: int,
    exercise_index: int,
    weight_kg: float,
    from_set_index: int = 0,
) -> WorkoutSession:
    """Re-plan the remaining sets of one exercise; done sets keep their history."""
    async with _session_lock(session_id):
        session = await _load(db, session_id)
        _ensure_active(session)
        exercises = session_exercises(session)
        ex = _pick_exercise(exercises, exercise_index)

        for st in ex.sets[max(from_set_index, 0):]:
            if st.done:
                continue
            st.weight_kg = weight_kg

        await _save(db, session, exercises)
    return session


async def record_effort(
    db: AsyncSession,
    session_id: int,
    exercise_index: int,
    rir: float,
    *,
    user_id: int | None = None,
    principal: AuthPrincipal | None = None,
) -> ProgressionProfile | None:
    """Store the exercise's reps-in-reserve and refresh its progression profile.

    Returns the upserted profile, or None when there was no weight to
    progress from or no user to attach the profile to.
    """
    async with _session_lock(session_id):
        session = await _load(db, session_id)
        _ensure_active(session)
        exercises = session_exercises(session)
        ex = _pick_exercise(exercises, exercise_index)
        ex.rir = rir

        last_weight = last_logged_weight(ex.sets)

        if session.user_id is None:
            new_user_id = await resolve_user_id(db, user_id, principal)
            if new_user_id is not None:
                session.user_id = new_user_id
        resolved_user_id = user_id if user_id is not None else session.user_id

        profile = None
        if last_weight is not None and resolved_user_id is not None:
            now = utcnow()
            planned = next_weight(last_weight, rir)

            def apply(p: ProgressionProfile) -> None:
                p.last_completed_weight_kg = last_weight
                p.last_rir = rir
                p.next_planned_weight_kg = planned
                p.last_updated_at = now

            profile = await upsert_progression_profile(db, resolved_user_id, ex.exercise_id, apply)
            logger.info(
                f"Progression: user={resolved_user_id} exercise={ex.exercise_id} "
                f"last={last_weight} rir={rir} next={planned}"
            )
        else:
            logger.debug(
                f"Skipped progression for session={session_id} exercise={ex.exercise_id}: "
                f"weight={last_weight} user={resolved_user_id}"
            )

        await _save(db, session, exercises)
    return profile


async def complete_session(db: AsyncSession, session_id: int) -> WorkoutSession:
    async with _session_lock(session_id):
        session = await _load(db, session_id)
        _ensure_active(session)
        session.status = COMPLETED
        session.completed_at = utcnow()
        await _save(db, session)
    logger.info(f"Session completed: id={session_id}")
    return session


async def get_session(db: AsyncSession, session_id: int) -> WorkoutSession | None:
    return await db.get(WorkoutSession, session_id, populate_existing=True)


def _identity_filter(user_id: int | None, anon_key: str | None):
    conds = []
    if user_id is not None:
        conds.append(WorkoutSession.user_id == user_id)
    if anon_key:
        conds.append(WorkoutSession.anon_key == anon_key)
    return or_(*conds) if conds else None


async def sessions_for_identity(
    db: AsyncSession,
    user_id: int | None,
    anon_key: str | None,
    status: str | None = None,
) -> list[WorkoutSession]:
    """Sessions keyed by the user id and/or the anon key, newest first."""
    cond = _identity_filter(user_id, anon_key)
    if cond is None:
        return []
    stmt = (
        select(WorkoutSession)
        .where(cond)
        .order_by(WorkoutSession.started_at.desc(), WorkoutSession.id.desc())
    )
    if status:
        stmt = stmt.where(WorkoutSession.status == status)
    res = await db.execute(stmt)
    return list(res.scalars().all())


async def get_latest_active_session(
    db: AsyncSession,
    identity: Identity,
    principal: AuthPrincipal | None = None,
) -> WorkoutSession | None:
    user_id = identity.user_id
    if identity.is_empty:
        user_id = await resolve_user_id(db, None, principal, create=False)
    sessions = await sessions_for_identity(db, user_id, identity.anon_key, status=ACTIVE)
    return sessions[0] if sessions else None


async def list_sessions_for_user(db: AsyncSession, user_id: int) -> list[WorkoutSession]:
    return await sessions_for_identity(db, user_id, None)
