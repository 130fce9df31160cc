# app/users/repository.py
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from app.users.models import User


async def get_by_id(db: AsyncSession, user_id: str) -> User | None:
    res = await db.execute(select(User).where(User.id == user_id))
    return res.scalar_one_or_none()


async def exists(db: AsyncSession, user_id: str) -> bool:
    res = await db.execute(select(User.id).where(User.id == user_id))
    return res.scalar_one_or_none() is not None


async def create_user(db: AsyncSession, email: str, credential_ref: str | None = None) -> User:
    user = User(email=email, credential_ref=credential_ref)
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user
