# app/likes/repository.py
from sqlalchemy import select, desc, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.likes.models import Like, LikeKind
from app.users.models import User
from app.profile.models import Profile, PromptAnswer


def _target_options():
    return (
        selectinload(Like.photo),
        selectinload(Like.prompt_answer).joinedload(PromptAnswer.prompt),
    )


async def find_like(
    db: AsyncSession,
    *,
    from_user_id: str,
    to_user_id: str,
    kind: LikeKind,
    photo_id: str | None = None,
    prompt_answer_id: str | None = None,
) -> Like | None:
    """Busca por la tupla única (los NULL se comparan con IS NULL)."""
    q = select(Like).where(
        Like.from_user_id == from_user_id,
        Like.to_user_id == to_user_id,
        Like.kind == kind,
        Like.photo_id.is_(None) if photo_id is None else Like.photo_id == photo_id,
        (
            Like.prompt_answer_id.is_(None)
            if prompt_answer_id is None
            else Like.prompt_answer_id == prompt_answer_id
        ),
    )
    res = await db.execute(q)
    return res.scalars().first()


async def create_like(
    db: AsyncSession,
    *,
    from_user_id: str,
    to_user_id: str,
    kind: LikeKind,
    photo_id: str | None = None,
    prompt_answer_id: str | None = None,
    comment: str | None = None,
) -> Like:
    like = Like(
        from_user_id=from_user_id,
        to_user_id=to_user_id,
        kind=kind,
        photo_id=photo_id,
        prompt_answer_id=prompt_answer_id,
        comment=comment,
    )
    db.add(like)
    await db.flush()
    return like


async def get_like(db: AsyncSession, like_id: str) -> Like | None:
    res = await db.execute(
        select(Like)
        .where(Like.id == like_id)
        .options(*_target_options())
        .execution_options(populate_existing=True)
    )
    return res.scalar_one_or_none()


async def get_owned_like(db: AsyncSession, like_id: str, user_id: str) -> Like | None:
    res = await db.execute(
        select(Like).where(Like.id == like_id, Like.from_user_id == user_id)
    )
    return res.scalar_one_or_none()


async def delete_like(db: AsyncSession, like_id: str) -> None:
    await db.execute(delete(Like).where(Like.id == like_id))
    await db.flush()


async def has_liked(db: AsyncSession, from_user_id: str, to_user_id: str) -> bool:
    """¿from_user ya le dio like (de cualquier tipo) a to_user?"""
    q = (
        select(Like.id)
        .where(Like.from_user_id == from_user_id, Like.to_user_id == to_user_id)
        .limit(1)
    )
    res = await db.execute(q)
    return res.scalar_one_or_none() is not None


async def list_liked_user_ids(db: AsyncSession, user_id: str) -> set[str]:
    res = await db.execute(
        select(Like.to_user_id).where(Like.from_user_id == user_id).distinct()
    )
    return {row[0] for row in res.all()}


async def list_sent_likes(db: AsyncSession, user_id: str) -> list[Like]:
    """Likes enviados, más recientes primero, con el perfil del destinatario."""
    q = (
        select(Like)
        .where(Like.from_user_id == user_id)
        .options(
            *_target_options(),
            selectinload(Like.to_user)
            .selectinload(User.profile)
            .selectinload(Profile.photos),
        )
        .order_by(desc(Like.created_at), desc(Like.id))
        .execution_options(populate_existing=True)
    )
    res = await db.execute(q)
    return list(res.scalars())


async def list_received_likes(db: AsyncSession, user_id: str) -> list[Like]:
    """Likes recibidos, más recientes primero; el perfil incluye prompts."""
    q = (
        select(Like)
        .where(Like.to_user_id == user_id)
        .options(
            *_target_options(),
            selectinload(Like.from_user)
            .selectinload(User.profile)
            .selectinload(Profile.photos),
            selectinload(Like.from_user)
            .selectinload(User.profile)
            .selectinload(Profile.prompt_answers)
            .joinedload(PromptAnswer.prompt),
        )
        .order_by(desc(Like.created_at), desc(Like.id))
        .execution_options(populate_existing=True)
    )
    res = await db.execute(q)
    return list(res.scalars())
