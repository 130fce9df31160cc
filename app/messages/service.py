# app/messages/service.py
from __future__ import annotations

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import InvalidInput
from app.matches.service import get_match_for_participant
from app.messages.models import Message
from app.messages import repository as repo
from app.profile.service import photo_out


async def send_message(db: AsyncSession, sender_id: str, match_id: str, content: str) -> Message:
    """
    Agrega un mensaje (read=False) al match.
    sender_id tiene que ser participante → si no, UnauthorizedOrNotFound.
    No hace commit (lo hace el caller).
    """
    await get_match_for_participant(db, sender_id, match_id)
    text = (content or "").strip()
    if not text:
        raise InvalidInput("empty message")
    msg = await repo.create_message(db, match_id=match_id, sender_id=sender_id, content=text)
    # recargamos con el remitente (perfil + foto) para devolverlo hidratado
    return await repo.get_message(db, msg.id) or msg


async def get_messages(db: AsyncSession, user_id: str, match_id: str) -> list[Message]:
    await get_match_for_participant(db, user_id, match_id)
    return await repo.list_for_match(db, match_id)


async def mark_messages_as_read(db: AsyncSession, user_id: str, match_id: str) -> int:
    """
    unread → read para todo lo que NO mandó user_id. Idempotente:
    la segunda llamada seguida devuelve 0.
    """
    await get_match_for_participant(db, user_id, match_id)
    return await repo.mark_read(db, match_id=match_id, reader_id=user_id)


def message_out(msg: Message) -> dict:
    sender = None
    if "sender" not in inspect(msg).unloaded and msg.sender is not None:
        prof = msg.sender.profile
        sender = {
            "id": msg.sender.id,
            "first_name": prof.first_name if prof else None,
            "photo": photo_out(prof.photos[0]) if prof and prof.photos else None,
        }
    return {
        "id": msg.id,
        "match_id": msg.match_id,
        "sender_id": msg.sender_id,
        "content": msg.content,
        "read": msg.read,
        "created_at": msg.created_at,
        "sender": sender,
    }
