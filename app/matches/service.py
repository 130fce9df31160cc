# app/matches/service.py
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import UnauthorizedOrNotFound
from app.matches.models import Match
from app.matches import repository as repo
from app.profile.service import profile_summary


def match_out(match: Match) -> dict:
    return {
        "id": match.id,
        "user1_id": match.user1_id,
        "user2_id": match.user2_id,
        "created_at": match.created_at,
    }


async def get_match_for_participant(db: AsyncSession, user_id: str, match_id: str) -> Match:
    """
    Devuelve el match solo si user_id es uno de los dos participantes.
    Para cualquier otro usuario el match "no existe".
    """
    match = await repo.get_for_participant(db, match_id, user_id)
    if not match:
        raise UnauthorizedOrNotFound()
    return match


async def list_matches(db: AsyncSession, user_id: str) -> list[dict]:
    """Matches del usuario (más nuevos primero) mostrando siempre al otro + último mensaje."""
    matches = await repo.list_for_user(db, user_id)
    items: list[dict] = []
    for m in matches:
        other = m.user2 if m.user1_id == user_id else m.user1
        last = await repo.get_last_message(db, m.id)
        items.append(
            {
                "id": m.id,
                "user_id": other.id,
                "user": profile_summary(other.profile),
                "created_at": m.created_at,
                "last_message": (
                    {
                        "id": last.id,
                        "sender_id": last.sender_id,
                        "content": last.content,
                        "read": last.read,
                        "created_at": last.created_at,
                    }
                    if last
                    else None
                ),
            }
        )
    return items


async def delete_match(db: AsyncSession, user_id: str, match_id: str) -> None:
    """Unmatch: cualquiera de los dos puede borrarlo (se van también los mensajes)."""
    match = await get_match_for_participant(db, user_id, match_id)
    await repo.delete_match(db, match)
