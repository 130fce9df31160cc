# app/matches/repository.py
import logging

from sqlalchemy import select, desc, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.matches.models import Match
from app.messages.models import Message
from app.users.models import User
from app.profile.models import Profile

log = logging.getLogger("uvicorn")


def canonical_pair(user_a: str, user_b: str) -> tuple[str, str]:
    """El id menor (lexicográfico) siempre va como user1."""
    return (user_a, user_b) if user_a < user_b else (user_b, user_a)


async def get_by_pair(db: AsyncSession, user_a: str, user_b: str) -> Match | None:
    user1_id, user2_id = canonical_pair(user_a, user_b)
    res = await db.execute(
        select(Match).where(Match.user1_id == user1_id, Match.user2_id == user2_id)
    )
    return res.scalar_one_or_none()


async def get_or_create_match(db: AsyncSession, user_a: str, user_b: str) -> tuple[Match, bool]:
    """
    Create-or-fetch estilo CAS sobre el par canónico.
    Devuelve (match, created).

    Se intenta el INSERT dentro de un SAVEPOINT: si otro writer ya creó la
    fila para el mismo par, el UNIQUE uq_match_pair hace fallar el nuestro,
    se deshace solo el SAVEPOINT y se relee la fila ganadora. El conflicto
    nunca sale de aquí como error.
    """
    user1_id, user2_id = canonical_pair(user_a, user_b)

    existing = await get_by_pair(db, user1_id, user2_id)
    if existing:
        return existing, False

    match = Match(user1_id=user1_id, user2_id=user2_id)
    try:
        async with db.begin_nested():
            db.add(match)
    except IntegrityError:
        log.info(f"🤝 match {user1_id}/{user2_id} ya creado por otro writer, lo releemos")
        existing = await get_by_pair(db, user1_id, user2_id)
        if existing is None:
            # el IntegrityError no era del par (p.ej. FK): que suba
            raise
        return existing, False

    return match, True


async def get_for_participant(db: AsyncSession, match_id: str, user_id: str) -> Match | None:
    res = await db.execute(
        select(Match).where(
            Match.id == match_id,
            or_(Match.user1_id == user_id, Match.user2_id == user_id),
        )
    )
    return res.scalar_one_or_none()


async def list_for_user(db: AsyncSession, user_id: str) -> list[Match]:
    """Matches del usuario, más recientes primero, con ambos perfiles + 1a foto."""
    q = (
        select(Match)
        .where(or_(Match.user1_id == user_id, Match.user2_id == user_id))
        .options(
            selectinload(Match.user1).selectinload(User.profile).selectinload(Profile.photos),
            selectinload(Match.user2).selectinload(User.profile).selectinload(Profile.photos),
        )
        .order_by(desc(Match.created_at), desc(Match.id))
        .execution_options(populate_existing=True)
    )
    res = await db.execute(q)
    return list(res.scalars())


async def get_last_message(db: AsyncSession, match_id: str) -> Message | None:
    res = await db.execute(
        select(Message)
        .where(Message.match_id == match_id)
        .order_by(desc(Message.created_at), desc(Message.id))
        .limit(1)
    )
    return res.scalar_one_or_none()


async def delete_match(db: AsyncSession, match: Match) -> None:
    await db.delete(match)
    await db.flush()
