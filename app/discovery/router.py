# app/discovery/router.py
from typing import Union

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import DomainError, http_error
from app.core.security import current_user_id
from app.db.session import get_session
from app.discovery.service import get_next_candidate
from app.profile.schemas import ProfileOut
from app.profile.service import profile_out

router = APIRouter(prefix="/api/discover", tags=["discovery"])


@router.get("/", response_model=Union[ProfileOut, dict])
async def next_profile(
    db: AsyncSession = Depends(get_session),
    user_id: str = Depends(current_user_id),
):
    """Siguiente candidato o {"message": "No more profiles available"}."""
    try:
        prof = await get_next_candidate(db, user_id)
    except DomainError as e:
        raise http_error(e)
    if prof is None:
        return {"message": "No more profiles available"}
    return profile_out(prof)
