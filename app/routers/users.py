from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.deps import get_principal
from app.schemas.user import GetOrCreateUserIn, UserOut
from app.services.identity import AuthPrincipal, get_or_create_user, get_user_by_subject


router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserOut)
async def get_or_create(
    payload: GetOrCreateUserIn,
    db: AsyncSession = Depends(get_db),
):
    user = await get_or_create_user(db, payload.auth_subject, payload.display_name)
    await db.commit()
    return user


@router.get("/me", response_model=UserOut)
async def me(
    principal: AuthPrincipal | None = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    if principal is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    user = await get_user_by_subject(db, principal.subject)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user
