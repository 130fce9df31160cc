# app/messages/repository.py
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.messages.models import Message
from app.users.models import User
from app.profile.models import Profile


def _sender_options():
    return (
        selectinload(Message.sender).selectinload(User.profile).selectinload(Profile.photos),
    )


async def create_message(db: AsyncSession, *, match_id: str, sender_id: str, content: str) -> Message:
    msg = Message(match_id=match_id, sender_id=sender_id, content=content, read=False)
    db.add(msg)
    await db.flush()
    return msg


async def get_message(db: AsyncSession, message_id: str) -> Message | None:
    res = await db.execute(
        select(Message)
        .where(Message.id == message_id)
        .options(*_sender_options())
        .execution_options(populate_existing=True)
    )
    return res.scalar_one_or_none()


async def list_for_match(db: AsyncSession, match_id: str) -> list[Message]:
    """Mensajes del match en orden de envío (ascendente)."""
    res = await db.execute(
        select(Message)
        .where(Message.match_id == match_id)
        .options(*_sender_options())
        .order_by(Message.created_at.asc(), Message.id.asc())
        .execution_options(populate_existing=True)
    )
    return list(res.scalars())


async def mark_read(db: AsyncSession, *, match_id: str, reader_id: str) -> int:
    """
    Marca como leídos los mensajes NO enviados por reader_id.
    Devuelve cuántos cambiaron de estado (0 si ya estaban todos leídos).
    """
    res = await db.execute(
        update(Message)
        .where(
            Message.match_id == match_id,
            Message.sender_id != reader_id,
            Message.read.is_(False),
        )
        .values(read=True)
        .execution_options(synchronize_session=False)
    )
    await db.flush()
    return int(res.rowcount or 0)
