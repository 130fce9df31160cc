# app/matches/router.py
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import DomainError, http_error
from app.core.security import current_user_id
from app.db.session import get_session
from app.matches import service as svc
from app.matches.schemas import MatchListItem

router = APIRouter(prefix="/api/matches", tags=["matches"])


@router.get("/", response_model=List[MatchListItem])
async def my_matches(
    db: AsyncSession = Depends(get_session),
    user_id: str = Depends(current_user_id),
):
    return await svc.list_matches(db, user_id)


@router.delete("/{match_id}/", status_code=204)
async def unmatch(
    match_id: str,
    db: AsyncSession = Depends(get_session),
    user_id: str = Depends(current_user_id),
):
    try:
        await svc.delete_match(db, user_id, match_id)
    except DomainError as e:
        await db.rollback()
        raise http_error(e)
    await db.commit()
    return Response(status_code=204)
