# app/db/session.py
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.config import settings


def _engine_kwargs(db_url: str) -> dict:
    # Timeouts cortos: si la DB no responde → falla rápido (5s)
    if db_url.startswith("postgresql+psycopg"):
        return {
            "pool_pre_ping": True,
            "pool_recycle": 300,
            "pool_size": 5,
            "max_overflow": 10,
            "connect_args": {"connect_timeout": 5},
        }
    if db_url.startswith("postgresql+asyncpg"):
        return {
            "pool_pre_ping": True,
            "pool_recycle": 300,
            "pool_size": 5,
            "max_overflow": 10,
            "connect_args": {
                "timeout": 5,
                "server_settings": {"client_encoding": "UTF8"},
            },
        }
    # sqlite+aiosqlite (dev / tests): sin parámetros de pool
    return {}


def setup_sqlite(engine: AsyncEngine) -> None:
    """
    SQLite necesita dos ajustes para comportarse como Postgres aquí:
    - foreign_keys=ON para que funcionen los ON DELETE CASCADE
    - BEGIN explícito para que los SAVEPOINT (create-or-fetch de matches)
      no hagan commit por su cuenta
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def build_engine(db_url: str, **kwargs) -> AsyncEngine:
    engine = create_async_engine(db_url, **{**_engine_kwargs(db_url), **kwargs})
    if db_url.startswith("sqlite"):
        setup_sqlite(engine)
    return engine


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


engine = build_engine(settings.DATABASE_URL)
AsyncSessionLocal = build_sessionmaker(engine)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Fábrica de sesiones para código que vive más que una request (websocket)."""
    return AsyncSessionLocal
