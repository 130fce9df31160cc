# app/likes/service.py
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import AlreadyLiked, InvalidLikeTarget, LikeNotFound, UserNotFound
from app.likes.models import Like, LikeKind
from app.likes.schemas import LikeCreate
from app.likes import repository as repo
from app.matches.models import Match
from app.matches.repository import get_or_create_match
from app.matches.service import match_out
from app.profile import repository as profiles
from app.profile.service import photo_out, profile_summary, prompt_answer_out
from app.users.repository import exists as user_exists

log = logging.getLogger("uvicorn")


def validate_target(data: LikeCreate) -> None:
    """PHOTO ⇒ photo_id, PROMPT ⇒ prompt_answer_id, PROFILE ⇒ ninguno."""
    if data.kind == LikeKind.PHOTO:
        if not data.photo_id or data.prompt_answer_id:
            raise InvalidLikeTarget("photo like requires photo_id (and only photo_id)")
    elif data.kind == LikeKind.PROMPT:
        if not data.prompt_answer_id or data.photo_id:
            raise InvalidLikeTarget(
                "prompt like requires prompt_answer_id (and only prompt_answer_id)"
            )
    elif data.photo_id or data.prompt_answer_id:
        raise InvalidLikeTarget("profile like takes no photo_id / prompt_answer_id")


async def _check_target_owner(db: AsyncSession, data: LikeCreate) -> None:
    # la foto / respuesta tiene que ser del perfil al que se le da like
    if data.kind == LikeKind.PHOTO:
        photo = await profiles.get_photo(db, data.photo_id)
        if not photo or photo.profile.user_id != data.to_user_id:
            raise InvalidLikeTarget("photo does not belong to liked user")
    elif data.kind == LikeKind.PROMPT:
        pa = await profiles.get_prompt_answer(db, data.prompt_answer_id)
        if not pa or pa.profile.user_id != data.to_user_id:
            raise InvalidLikeTarget("prompt answer does not belong to liked user")


async def create_like(
    db: AsyncSession, from_user_id: str, data: LikeCreate
) -> tuple[Like, Match | None, bool]:
    """
    Registra el like y, si hay reciprocidad, materializa el match.
    Devuelve (like, match | None, new_match).

    ⚠️ Este service SÍ hace commit: el like tiene que quedar confirmado antes
    de mirar si hay like de vuelta. Si dos likes cruzados llegan a la vez,
    al menos uno de los dos ve al otro y el UNIQUE del par hace el resto.
    """
    validate_target(data)
    if data.to_user_id == from_user_id:
        raise InvalidLikeTarget("cannot like yourself")
    if not await user_exists(db, data.to_user_id):
        raise UserNotFound()
    await _check_target_owner(db, data)

    key = dict(
        from_user_id=from_user_id,
        to_user_id=data.to_user_id,
        kind=data.kind,
        photo_id=data.photo_id,
        prompt_answer_id=data.prompt_answer_id,
    )
    if await repo.find_like(db, **key):
        raise AlreadyLiked()

    try:
        like = await repo.create_like(db, comment=data.comment, **key)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        # carrera con un like idéntico que entró entre el check y el insert
        if await repo.find_like(db, **key):
            raise AlreadyLiked()
        # otra cosa (p.ej. FK: la foto se borró entre medio): que suba
        raise

    # 1) ¿hay like de vuelta (de cualquier tipo)?
    if not await repo.has_liked(db, data.to_user_id, from_user_id):
        return like, None, False

    # 2) create-or-fetch sobre el par canónico
    match, created = await get_or_create_match(db, from_user_id, data.to_user_id)
    await db.commit()
    if created:
        log.info(f"💘 nuevo match {match.id} ({match.user1_id} ↔ {match.user2_id})")
    return like, match, created


async def delete_like(db: AsyncSession, user_id: str, like_id: str) -> None:
    """
    Solo quien dio el like puede borrarlo.
    Un match ya creado NO se toca: los matches son permanentes.
    No hace commit (lo hace el caller).
    """
    like = await repo.get_owned_like(db, like_id, user_id)
    if not like:
        raise LikeNotFound()
    await repo.delete_like(db, like.id)


async def get_sent_likes(db: AsyncSession, user_id: str) -> list[dict]:
    likes = await repo.list_sent_likes(db, user_id)
    return [
        {**like_out(lk), "to_user": profile_summary(lk.to_user.profile)}
        for lk in likes
    ]


async def get_received_likes(db: AsyncSession, user_id: str) -> list[dict]:
    likes = await repo.list_received_likes(db, user_id)
    return [
        {**like_out(lk), "from_user": profile_summary(lk.from_user.profile, with_prompts=True)}
        for lk in likes
    ]


async def hydrate_like_result(
    db: AsyncSession, like: Like, match: Match | None, new_match: bool
) -> dict:
    detail = await repo.get_like(db, like.id)
    return {
        "like": like_out(detail or like, with_targets=detail is not None),
        "match": match_out(match) if match else None,
        "new_match": new_match,
    }


def like_out(like: Like, *, with_targets: bool = True) -> dict:
    return {
        "id": like.id,
        "from_user_id": like.from_user_id,
        "to_user_id": like.to_user_id,
        "kind": like.kind,
        "photo_id": like.photo_id,
        "prompt_answer_id": like.prompt_answer_id,
        "comment": like.comment,
        "created_at": like.created_at,
        "photo": photo_out(like.photo) if with_targets else None,
        "prompt_answer": prompt_answer_out(like.prompt_answer) if with_targets else None,
    }
