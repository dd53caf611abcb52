import pytest
from sqlalchemy import func, select

from app.models.user import User
from app.services.identity import AuthPrincipal, Identity, get_or_create_user, resolve_user_id


async def user_count(db) -> int:
    res = await db.execute(select(func.count(User.id)))
    return int(res.scalar() or 0)


@pytest.mark.asyncio
async def test_get_or_create_is_idempotent(db):
    first = await get_or_create_user(db, "sub-1", "Alex")
    second = await get_or_create_user(db, "sub-1", "Someone Else")
    await db.commit()

    assert first.id == second.id
    assert second.display_name == "Alex"
    assert await user_count(db) == 1


@pytest.mark.asyncio
async def test_explicit_user_id_wins(db):
    await get_or_create_user(db, "sub-1")
    assert await resolve_user_id(db, 42, AuthPrincipal("sub-1")) == 42


@pytest.mark.asyncio
async def test_principal_creates_user(db):
    user_id = await resolve_user_id(db, None, AuthPrincipal("sub-2", "Kim"))
    user = await db.get(User, user_id)
    assert user.auth_subject == "sub-2"
    assert user.display_name == "Kim"


@pytest.mark.asyncio
async def test_lookup_only_never_inserts(db):
    assert await resolve_user_id(db, None, AuthPrincipal("sub-3"), create=False) is None
    assert await user_count(db) == 0

    user = await get_or_create_user(db, "sub-3")
    assert await resolve_user_id(db, None, AuthPrincipal("sub-3"), create=False) == user.id


@pytest.mark.asyncio
async def test_nothing_to_resolve(db):
    assert await resolve_user_id(db, None, None) is None
    assert await resolve_user_id(db, None, AuthPrincipal("")) is None


def test_identity_is_empty():
    assert Identity().is_empty
    assert Identity(anon_key="").is_empty
    assert not Identity(anon_key="device-1").is_empty
    assert not Identity(user_id=0).is_empty
