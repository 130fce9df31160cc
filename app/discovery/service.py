# app/discovery/service.py
from __future__ import annotations

import random
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import ProfileNotFound
from app.discovery.distance import haversine_miles
from app.likes.repository import list_liked_user_ids
from app.profile.models import Profile
from app.profile import repository as profiles


def within_distance(viewer: Profile, candidate: Profile) -> bool:
    """
    Sin ubicación (viewer o candidato) → siempre pasa:
    que falten coordenadas nunca saca a nadie del pool.
    """
    if not viewer.has_location or not candidate.has_location:
        return True
    distance = haversine_miles(
        viewer.latitude, viewer.longitude, candidate.latitude, candidate.longitude
    )
    return distance <= viewer.max_distance


def filter_by_distance(viewer: Profile, candidates: Sequence[Profile]) -> list[Profile]:
    if not viewer.has_location:
        return list(candidates)
    return [c for c in candidates if within_distance(viewer, c)]


def pick_candidate(
    candidates: Sequence[Profile],
    *,
    top: int | None = None,
    rng: random.Random | None = None,
) -> Profile | None:
    """Sorteo uniforme entre los primeros `top` del lote (orden natural = más nuevos)."""
    if not candidates:
        return None
    top = top or settings.DISCOVERY_RANDOMIZE_TOP
    pool = candidates[: min(top, len(candidates))]
    return (rng or random).choice(pool)


async def get_next_candidate(
    db: AsyncSession,
    viewer_id: str,
    *,
    rng: random.Random | None = None,
) -> Profile | None:
    """
    Siguiente perfil para que viewer evalúe, o None si no quedan.

    1. perfil del viewer (ProfileNotFound si no terminó el onboarding)
    2. excluye a quien ya le dio like (cualquier tipo) y a sí mismo
    3. filtra edad [min_age, max_age] y género ∈ interested_in (vacío = todos)
    4. lote de DISCOVERY_BATCH_SIZE, luego filtro de distancia en memoria
    5. sorteo entre los primeros DISCOVERY_RANDOMIZE_TOP
    """
    viewer = await profiles.get_by_user_id(db, viewer_id)
    if not viewer:
        raise ProfileNotFound("profile not found, complete onboarding first")

    exclude = await list_liked_user_ids(db, viewer_id)
    exclude.add(viewer_id)

    batch = await profiles.list_profiles(
        db,
        exclude_ids=exclude,
        min_age=viewer.min_age,
        max_age=viewer.max_age,
        genders=viewer.interested_in or None,
        limit=settings.DISCOVERY_BATCH_SIZE,
    )

    candidates = filter_by_distance(viewer, batch)
    return pick_candidate(candidates, rng=rng)
