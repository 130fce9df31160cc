# app/profile/repository.py
from typing import Iterable

from sqlalchemy import select, desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.profile.models import Profile, Photo, Prompt, PromptAnswer


def _full_profile_options():
    # fotos y prompts ya ordenados por la relación (order asc)
    return (
        selectinload(Profile.photos),
        selectinload(Profile.prompt_answers).joinedload(PromptAnswer.prompt),
    )


async def get_by_user_id(db: AsyncSession, user_id: str) -> Profile | None:
    res = await db.execute(select(Profile).where(Profile.user_id == user_id))
    return res.scalar_one_or_none()


async def get_full_by_user_id(db: AsyncSession, user_id: str) -> Profile | None:
    res = await db.execute(
        select(Profile)
        .where(Profile.user_id == user_id)
        .options(*_full_profile_options())
        .execution_options(populate_existing=True)
    )
    return res.scalar_one_or_none()


async def list_profiles(
    db: AsyncSession,
    *,
    exclude_ids: Iterable[str],
    min_age: int,
    max_age: int,
    genders: Iterable[str] | None = None,
    limit: int = 50,
) -> list[Profile]:
    """
    Lote de candidatos para discovery: fuera exclude_ids, edad en
    [min_age, max_age] y, si genders trae algo, género dentro de ese set.
    Más recientes primero; cada perfil con fotos y prompts (ordenados).
    """
    q = (
        select(Profile)
        .where(Profile.age >= min_age, Profile.age <= max_age)
        .options(*_full_profile_options())
        .order_by(desc(Profile.created_at), Profile.id)
        .limit(limit)
        .execution_options(populate_existing=True)
    )
    exclude = list(exclude_ids)
    if exclude:
        q = q.where(Profile.user_id.not_in(exclude))
    genders = list(genders or [])
    if genders:
        q = q.where(Profile.gender.in_(genders))

    res = await db.execute(q)
    return list(res.scalars().unique())


async def create_profile(db: AsyncSession, user_id: str, **fields) -> Profile:
    prof = Profile(user_id=user_id, **fields)
    db.add(prof)
    await db.flush()
    await db.refresh(prof)
    return prof


async def add_photo(db: AsyncSession, profile_id: str, url: str, order: int) -> Photo:
    photo = Photo(profile_id=profile_id, url=url, order=order)
    db.add(photo)
    await db.flush()
    return photo


async def add_prompt_answer(
    db: AsyncSession, profile_id: str, prompt_id: str, answer: str, order: int
) -> PromptAnswer:
    pa = PromptAnswer(profile_id=profile_id, prompt_id=prompt_id, answer=answer, order=order)
    db.add(pa)
    await db.flush()
    return pa


async def get_photo(db: AsyncSession, photo_id: str) -> Photo | None:
    res = await db.execute(
        select(Photo)
        .where(Photo.id == photo_id)
        .options(selectinload(Photo.profile))
    )
    return res.scalar_one_or_none()


async def get_prompt_answer(db: AsyncSession, prompt_answer_id: str) -> PromptAnswer | None:
    res = await db.execute(
        select(PromptAnswer)
        .where(PromptAnswer.id == prompt_answer_id)
        .options(selectinload(PromptAnswer.profile))
    )
    return res.scalar_one_or_none()


async def create_prompt(db: AsyncSession, text: str, category: str = "general", active: bool = True) -> Prompt:
    prompt = Prompt(text=text, category=category, active=active)
    db.add(prompt)
    await db.flush()
    return prompt


async def list_active_prompts(db: AsyncSession) -> list[Prompt]:
    res = await db.execute(
        select(Prompt).where(Prompt.active.is_(True)).order_by(Prompt.text.asc())
    )
    return list(res.scalars())
