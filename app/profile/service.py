# app/profile/service.py
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import (
    DEFAULT_MAX_AGE,
    DEFAULT_MAX_DISTANCE,
    DEFAULT_MIN_AGE,
    MAX_AGE,
    MIN_AGE,
)
from app.core.errors import InvalidInput
from app.profile.models import Photo, Profile, PromptAnswer
from app.profile.repository import create_profile as repo_create_profile


def validate_preferences(
    *,
    age: int,
    min_age: int,
    max_age: int,
    max_distance: float,
) -> None:
    if not (MIN_AGE <= age <= MAX_AGE):
        raise InvalidInput(f"age must be between {MIN_AGE} and {MAX_AGE}")
    if not (MIN_AGE <= min_age <= MAX_AGE) or not (MIN_AGE <= max_age <= MAX_AGE):
        raise InvalidInput(f"age preferences must be between {MIN_AGE} and {MAX_AGE}")
    if min_age > max_age:
        raise InvalidInput("min_age must be <= max_age")
    if max_distance <= 0:
        raise InvalidInput("max_distance must be positive")


async def create_profile(
    db: AsyncSession,
    user_id: str,
    *,
    first_name: str,
    age: int,
    gender: str,
    interested_in: list[str] | None = None,
    min_age: int = DEFAULT_MIN_AGE,
    max_age: int = DEFAULT_MAX_AGE,
    max_distance: float = DEFAULT_MAX_DISTANCE,
    latitude: float | None = None,
    longitude: float | None = None,
    bio: str | None = None,
    location: str | None = None,
) -> Profile:
    """
    Alta de perfil validando preferencias (onboarding).
    No hace commit (lo hace el caller).
    """
    validate_preferences(age=age, min_age=min_age, max_age=max_age, max_distance=max_distance)
    return await repo_create_profile(
        db,
        user_id,
        first_name=first_name,
        age=age,
        gender=gender,
        interested_in=list(interested_in or []),
        min_age=min_age,
        max_age=max_age,
        max_distance=max_distance,
        latitude=latitude,
        longitude=longitude,
        bio=bio,
        location=location,
    )


# ---------------------------
# Hidratación → dicts para el front
# (solo tocamos relaciones que ya vienen cargadas)
# ---------------------------
def photo_out(photo: Photo | None) -> dict | None:
    if photo is None:
        return None
    return {"id": photo.id, "url": photo.url, "order": photo.order}


def prompt_answer_out(pa: PromptAnswer | None) -> dict | None:
    if pa is None:
        return None
    return {
        "id": pa.id,
        "prompt_id": pa.prompt_id,
        "answer": pa.answer,
        "order": pa.order,
        "prompt": (
            {"id": pa.prompt.id, "text": pa.prompt.text, "category": pa.prompt.category}
            if pa.prompt
            else None
        ),
    }


def profile_summary(prof: Profile | None, *, with_prompts: bool = False) -> dict | None:
    if prof is None:
        return None
    return {
        "user_id": prof.user_id,
        "first_name": prof.first_name,
        "age": prof.age,
        "photos": [photo_out(p) for p in prof.photos[:1]],
        "prompt_answers": (
            [prompt_answer_out(pa) for pa in prof.prompt_answers] if with_prompts else []
        ),
    }


def profile_out(prof: Profile) -> dict:
    return {
        "id": prof.id,
        "user_id": prof.user_id,
        "first_name": prof.first_name,
        "age": prof.age,
        "gender": prof.gender,
        "bio": prof.bio,
        "location": prof.location,
        "interested_in": list(prof.interested_in or []),
        "min_age": prof.min_age,
        "max_age": prof.max_age,
        "max_distance": prof.max_distance,
        "latitude": prof.latitude,
        "longitude": prof.longitude,
        "photos": [photo_out(p) for p in prof.photos],
        "prompt_answers": [prompt_answer_out(pa) for pa in prof.prompt_answers],
    }
