# app/messages/router.py
from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import DomainError, http_error
from app.core.security import current_user_id
from app.db.session import get_session
from app.messages import service as svc
from app.messages.schemas import MarkReadOut, MessageCreate, MessageOut

router = APIRouter(prefix="/api/messages", tags=["messages"])


@router.get("/{match_id}/", response_model=List[MessageOut])
async def list_messages(
    match_id: str,
    db: AsyncSession = Depends(get_session),
    user_id: str = Depends(current_user_id),
):
    try:
        msgs = await svc.get_messages(db, user_id, match_id)
    except DomainError as e:
        raise http_error(e)
    return [svc.message_out(m) for m in msgs]


@router.post("/", response_model=MessageOut, status_code=201)
async def send_message(
    payload: MessageCreate,
    request: Request,
    db: AsyncSession = Depends(get_session),
    user_id: str = Depends(current_user_id),
):
    try:
        msg = await svc.send_message(db, user_id, payload.match_id, payload.content)
        await db.commit()
    except DomainError as e:
        await db.rollback()
        raise http_error(e)

    out = svc.message_out(msg)
    # lo que entra por HTTP también se reparte en vivo
    await request.app.state.realtime.publish_message(out)
    return out


@router.put("/{match_id}/read/", response_model=MarkReadOut)
async def mark_read(
    match_id: str,
    db: AsyncSession = Depends(get_session),
    user_id: str = Depends(current_user_id),
):
    try:
        updated = await svc.mark_messages_as_read(db, user_id, match_id)
        await db.commit()
    except DomainError as e:
        await db.rollback()
        raise http_error(e)
    return {"match_id": match_id, "updated": updated}
