from datetime import datetime, timedelta, timezone

import pytest

from app.core.errors import NotFound, Unresolvable
from app.services import history, session_engine
from app.services.identity import AuthPrincipal, Identity, get_or_create_user
from app.services.profiles import get_progression_profiles


class TestLatestCompletedWeights:
    @pytest.mark.asyncio
    async def test_newest_session_wins(self, db, catalog, template):
        anon = Identity(anon_key="device-1")
        squat = catalog["squat"].id

        old = await session_engine.start_session(db, template.id, identity=anon)
        await session_engine.mark_set_done(db, old.id, 0, 0, reps=10, weight_kg=60)
        new = await session_engine.start_session(db, template.id, identity=anon)
        await session_engine.mark_set_done(db, new.id, 0, 0, reps=10, weight_kg=65)
        # creation order is the reverse of started_at
        old.started_at = datetime(2026, 5, 2, 18, 0)
        new.started_at = datetime(2026, 5, 1, 18, 0)
        await db.commit()

        weights = await history.get_latest_completed_weights(db, anon, [squat])
        assert weights == {squat: 60}

    @pytest.mark.asyncio
    async def test_skips_sessions_without_weight(self, db, catalog, template):
        anon = Identity(anon_key="device-1")
        squat, lunge, pull_up = catalog["squat"].id, catalog["lunge"].id, catalog["pull_up"].id

        older = await session_engine.start_session(db, template.id, identity=anon)
        await session_engine.mark_set_done(db, older.id, 0, 1, reps=8, weight_kg=70)
        newer = await session_engine.start_session(db, template.id, identity=anon)
        older.started_at = datetime(2026, 5, 1, 18, 0)
        newer.started_at = datetime(2026, 5, 3, 18, 0)
        await db.commit()

        weights = await history.get_latest_completed_weights(db, anon, [squat, lunge, pull_up, 999])
        # the newer session has no squat weight; lunge carries its planned 20 kg
        assert weights == {squat: 70, lunge: 20.0}

    @pytest.mark.asyncio
    async def test_unions_user_and_anon_sessions(self, db, catalog, template):
        user = await get_or_create_user(db, "sub-1")
        await db.commit()
        squat = catalog["squat"].id

        as_user = await session_engine.start_session(db, template.id, identity=Identity(user_id=user.id))
        await session_engine.mark_set_done(db, as_user.id, 0, 0, weight_kg=50)
        as_anon = await session_engine.start_session(db, template.id, identity=Identity(anon_key="device-1"))
        await session_engine.mark_set_done(db, as_anon.id, 0, 0, weight_kg=55)
        as_user.started_at = datetime(2026, 5, 1)
        as_anon.started_at = datetime(2026, 5, 2)
        await db.commit()

        both = Identity(anon_key="device-1")
        weights = await history.get_latest_completed_weights(db, both, [squat], AuthPrincipal("sub-1"))
        assert weights == {squat: 55}

        weights = await history.get_latest_completed_weights(db, Identity(user_id=user.id), [squat])
        assert weights == {squat: 50}

    @pytest.mark.asyncio
    async def test_no_identity(self, db, catalog, template):
        await session_engine.start_session(db, template.id, planned_weights={catalog["squat"].id: 40})
        assert await history.get_latest_completed_weights(db, Identity(), [catalog["squat"].id]) == {}


class TestAssessments:
    @pytest.mark.asyncio
    async def test_latest_per_exercise(self, db, catalog):
        anon = Identity(anon_key="device-1")
        squat, lunge = catalog["squat"].id, catalog["lunge"].id

        first = await history.record_assessment(db, anon, squat, "1rm", 100, "kg")
        second = await history.record_assessment(db, anon, squat, "working", 80, "kg")
        await history.record_assessment(db, anon, lunge, "working", 45, "lbs")
        await history.record_assessment(db, Identity(anon_key="device-2"), squat, "1rm", 200, "kg")
        first.created_at = datetime.now(timezone.utc) - timedelta(days=2)
        second.created_at = datetime.now(timezone.utc) - timedelta(days=1)
        await db.commit()

        latest = await history.get_latest_assessments(db, anon, [squat, lunge, catalog["pull_up"].id])
        assert set(latest) == {squat, lunge}
        assert latest[squat].type == "working"
        assert latest[squat].value == 80
        assert latest[lunge].unit == "lbs"

    @pytest.mark.asyncio
    async def test_user_scope_beats_anon_key(self, db, catalog):
        user = await get_or_create_user(db, "sub-1")
        await db.commit()
        squat = catalog["squat"].id
        await history.record_assessment(db, Identity(user_id=user.id), squat, "1rm", 120, "kg")
        await history.record_assessment(db, Identity(anon_key="device-1"), squat, "1rm", 90, "kg")

        latest = await history.get_latest_assessments(
            db, Identity(user_id=user.id, anon_key="device-1"), [squat]
        )
        assert latest[squat].value == 120

    @pytest.mark.asyncio
    async def test_no_identity_returns_nothing(self, db, catalog):
        squat = catalog["squat"].id
        await history.record_assessment(db, Identity(anon_key="device-1"), squat, "1rm", 100, "kg")
        assert await history.get_latest_assessments(db, Identity(), [squat]) == {}

    @pytest.mark.asyncio
    async def test_principal_becomes_owner(self, db, catalog):
        a = await history.record_assessment(
            db, Identity(), catalog["squat"].id, "1rm", 100, "kg", principal=AuthPrincipal("sub-5")
        )
        assert a.user_id is not None
        assert a.anon_key is None

    @pytest.mark.asyncio
    async def test_unresolvable(self, db, catalog):
        with pytest.raises(Unresolvable):
            await history.record_assessment(db, Identity(), catalog["squat"].id, "1rm", 100, "kg")

    @pytest.mark.asyncio
    async def test_unknown_exercise(self, db, catalog):
        with pytest.raises(NotFound):
            await history.record_assessment(db, Identity(anon_key="device-1"), 999, "1rm", 100, "kg")


@pytest.mark.asyncio
async def test_profiles_batch(db, catalog, template):
    user = await get_or_create_user(db, "sub-1")
    await db.commit()
    s = await session_engine.start_session(db, template.id, identity=Identity(user_id=user.id))
    await session_engine.mark_set_done(db, s.id, 0, 0, weight_kg=100)
    await session_engine.record_effort(db, s.id, 0, 3)

    ids = [catalog["squat"].id, catalog["lunge"].id]
    profiles = await get_progression_profiles(db, user.id, ids)
    assert list(profiles) == [catalog["squat"].id]
    assert profiles[catalog["squat"].id].next_planned_weight_kg == 102.5

    assert await get_progression_profiles(db, None, ids) == {}
    assert await get_progression_profiles(db, user.id, []) == {}
