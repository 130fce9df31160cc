# app/users/router.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import current_user_id
from app.db.session import get_session
from app.profile.repository import get_by_user_id
from app.users.repository import get_by_id
from app.users.schemas import UserOut

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/me/", response_model=UserOut)
async def me(
    db: AsyncSession = Depends(get_session),
    user_id: str = Depends(current_user_id),
):
    user = await get_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="user not found")
    prof = await get_by_user_id(db, user_id)
    return {
        "id": user.id,
        "email": user.email,
        "created_at": user.created_at,
        # el front usa esto para mandar al onboarding
        "has_profile": prof is not None,
    }
