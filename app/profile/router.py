# app/profile/router.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import current_user_id
from app.db.session import get_session
from app.profile.repository import get_full_by_user_id, list_active_prompts
from app.profile.schemas import ProfileOut, PromptOut
from app.profile.service import profile_out

router = APIRouter(prefix="/api/profile", tags=["profile"])
prompts_router = APIRouter(prefix="/api/prompts", tags=["prompts"])


# ---------------------------
# GET /api/profile/me/
# ---------------------------
@router.get("/me/", response_model=ProfileOut)
async def my_profile(
    db: AsyncSession = Depends(get_session),
    user_id: str = Depends(current_user_id),
):
    prof = await get_full_by_user_id(db, user_id)
    if not prof:
        raise HTTPException(status_code=404, detail="profile not found")
    return profile_out(prof)


# ---------------------------
# GET /api/prompts/
# (catálogo activo, ordenado por texto)
# ---------------------------
@prompts_router.get("/", response_model=List[PromptOut])
async def prompts(
    db: AsyncSession = Depends(get_session),
    _: str = Depends(current_user_id),
):
    return await list_active_prompts(db)
