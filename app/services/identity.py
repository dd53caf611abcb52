"""Identity resolution.

A session, assessment or progression profile is scoped either to a user row
or to an opaque anonymous key supplied by the client. The user row is found
from an explicit id, or from the authenticated principal carried by the
request; this module never looks at the anonymous key.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User


@dataclass(frozen=True)
class AuthPrincipal:
    """Authenticated caller as decoded from the bearer token."""

    subject: str
    name: str | None = None


@dataclass(frozen=True)
class Identity:
    """Identity channels a caller supplied explicitly."""

    user_id: int | None = None
    anon_key: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.user_id is None and not self.anon_key


async def get_user_by_subject(db: AsyncSession, subject: str) -> User | None:
    res = await db.execute(select(User).where(User.auth_subject == subject))
    return res.scalar_one_or_none()


async def get_or_create_user(db: AsyncSession, subject: str, display_name: str | None = None) -> User:
    """Look up the user for a subject claim, inserting it on first sight.

    The display name is only copied on insert; later calls never overwrite it.
    Flushes but does not commit, so the caller's unit of work decides.
    """
    existing = await get_user_by_subject(db, subject)
    if existing:
        return existing

    user = User(auth_subject=subject, display_name=display_name)
    db.add(user)
    await db.flush()
    logger.info(f"Created user id={user.id} for subject={subject}")
    return user


async def resolve_user_id(
    db: AsyncSession,
    explicit_user_id: int | None,
    principal: AuthPrincipal | None,
    *,
    create: bool = True,
) -> int | None:
    """Explicit id, else the principal's user, else None.

    Read paths pass ``create=False`` so that a query never inserts a user.
    """
    if explicit_user_id is not None:
        return explicit_user_id
    if principal is None or not principal.subject:
        return None
    if not create:
        user = await get_user_by_subject(db, principal.subject)
        return user.id if user else None
    user = await get_or_create_user(db, principal.subject, principal.name)
    return user.id
