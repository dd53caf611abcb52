"""Shared fixtures: a throwaway SQLite database per test, a small exercise
catalog, a template built on it, and an HTTP client bound to the app."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.db import Base, get_db, import_models
from app.models.exercise import Exercise
from app.models.workout_template import WorkoutTemplate


@pytest_asyncio.fixture
async def engine(tmp_path):
    import_models()
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def catalog(db) -> dict[str, Exercise]:
    squat = Exercise(name="Back Squat", body_part="legs", is_weighted=True, equipment="barbell", loading_mode="bar")
    lunge = Exercise(name="Walking Lunge", body_part="legs", is_weighted=True, equipment="dumbbell", loading_mode="pair")
    pull_up = Exercise(name="Pull-up", body_part="back", is_weighted=False, equipment="bodyweight", loading_mode="bar")
    db.add_all([squat, lunge, pull_up])
    await db.commit()
    return {"squat": squat, "lunge": lunge, "pull_up": pull_up}


@pytest_asyncio.fixture
async def template(db, catalog) -> WorkoutTemplate:
    # Items deliberately stored out of order
    t = WorkoutTemplate(
        name="Legs 1",
        body_part="legs",
        variation="legs1",
        items=[
            {
                "exercise_id": catalog["pull_up"].id,
                "order": 3,
                "sets": [{"reps": 8}, {"reps": 8}],
            },
            {
                "exercise_id": catalog["squat"].id,
                "order": 1,
                "sets": [
                    {"reps": 10, "rest_sec": 120},
                    {"reps": 8, "rest_sec": 150},
                    {"reps": 6, "rest_sec": 150},
                    {"reps": 4, "rest_sec": 180},
                ],
            },
            {
                "exercise_id": catalog["lunge"].id,
                "order": 2,
                "sets": [{"reps": 12, "weight_kg": 20.0}, {"reps": 12, "weight_kg": 20.0}],
            },
        ],
    )
    db.add(t)
    await db.commit()
    return t


@pytest_asyncio.fixture
async def client(session_factory):
    from app.main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
