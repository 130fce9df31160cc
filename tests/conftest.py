import os

# antes de importar app.*: DB de tests y secreto fijo
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./.pytest-sparks.db")
os.environ.setdefault("SECRET_KEY", "test-secret")

import httpx
import pytest
from sqlalchemy.pool import NullPool

from app.core.security import create_access_token
from app.db.init_db import init_models
from app.db.session import build_engine, build_sessionmaker, get_session, get_sessionmaker
from app.main import create_app


@pytest.fixture
async def engine(tmp_path):
    eng = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    await init_models(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return build_sessionmaker(engine)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def app(session_factory):
    application = create_app(init_db=False)

    async def _session():
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_session] = _session
    application.dependency_overrides[get_sessionmaker] = lambda: session_factory
    return application


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


def auth(user_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}
