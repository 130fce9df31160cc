# app/likes/router.py
from typing import List

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import DomainError, http_error
from app.core.security import current_user_id
from app.db.session import get_session
from app.likes import service as svc
from app.likes.schemas import LikeCreate, LikeResult, ReceivedLikeOut, SentLikeOut

router = APIRouter(prefix="/api/likes", tags=["likes"])


@router.post("/", response_model=LikeResult, status_code=201)
async def create_like(
    payload: LikeCreate,
    request: Request,
    db: AsyncSession = Depends(get_session),
    user_id: str = Depends(current_user_id),
):
    try:
        like, match, new_match = await svc.create_like(db, user_id, payload)
    except DomainError as e:
        await db.rollback()
        raise http_error(e)

    result = await svc.hydrate_like_result(db, like, match, new_match)
    if new_match:
        # 💘 aviso en vivo a los dos (canal user:<id>)
        await request.app.state.realtime.publish_match(result["match"])
    return result


@router.delete("/{like_id}/", status_code=204)
async def delete_like(
    like_id: str,
    db: AsyncSession = Depends(get_session),
    user_id: str = Depends(current_user_id),
):
    try:
        await svc.delete_like(db, user_id, like_id)
    except DomainError as e:
        await db.rollback()
        raise http_error(e)
    await db.commit()
    return Response(status_code=204)


@router.get("/sent/", response_model=List[SentLikeOut])
async def sent_likes(
    db: AsyncSession = Depends(get_session),
    user_id: str = Depends(current_user_id),
):
    return await svc.get_sent_likes(db, user_id)


@router.get("/received/", response_model=List[ReceivedLikeOut])
async def received_likes(
    db: AsyncSession = Depends(get_session),
    user_id: str = Depends(current_user_id),
):
    return await svc.get_received_likes(db, user_id)
