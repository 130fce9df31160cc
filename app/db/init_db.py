import logging
from sqlalchemy.ext.asyncio import AsyncEngine

from app.db.session import engine as default_engine
from app.db.base import Base

# 👇 importa todos los modelos que deben existir en la DB
from app.users.models import User  # noqa: F401
from app.profile.models import Profile, Photo, Prompt, PromptAnswer  # noqa: F401
from app.likes.models import Like  # noqa: F401
from app.matches.models import Match  # noqa: F401
from app.messages.models import Message  # noqa: F401

log = logging.getLogger("uvicorn")


async def init_models(engine: AsyncEngine | None = None):
    """
    Crea/verifica todas las tablas declaradas en Base.metadata
    """
    engine = engine or default_engine
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        log.info("✅ DB init: tablas creadas/verificadas.")
    except Exception as e:
        log.error(f"❌ DB init falló: {e!r}")
        raise
