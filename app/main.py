# app/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.core.json import UTF8JSONResponse
from app.core.config import settings
from app.db.init_db import init_models
from app.realtime.gateway import RealtimeGateway

# routers
from app.users.router import router as users_router
from app.profile.router import router as profile_router, prompts_router
from app.discovery.router import router as discovery_router
from app.likes.router import router as likes_router
from app.matches.router import router as matches_router
from app.messages.router import router as messages_router
from app.realtime.router import router as realtime_router

log = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("🚀 Iniciando servicio…")
    if app.state.init_db:
        await init_models()
    log.info("✅ Startup listo.")
    yield
    log.info("🛑 Servicio detenido.")


def create_app(*, init_db: bool = True) -> FastAPI:
    app = FastAPI(
        title="Sparks API",
        default_response_class=UTF8JSONResponse,
        lifespan=lifespan,
    )
    app.state.init_db = init_db
    # registro pub/sub del proceso (un solo worker)
    app.state.realtime = RealtimeGateway()

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allow_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def force_utf8_json(request: Request, call_next):
        response = await call_next(request)
        # si otra response quitó el charset, lo restauramos
        ct = response.headers.get("content-type", "")
        if ct.startswith("application/json") and "charset=" not in ct:
            response.headers["content-type"] = "application/json; charset=utf-8"
        return response

    @app.get("/api/health/")
    async def health():
        return {"ok": True, "service": "fastapi", "msg": "healthy 💘"}

    app.include_router(users_router)      # /api/users/...
    app.include_router(profile_router)    # /api/profile/...
    app.include_router(prompts_router)    # /api/prompts/...
    app.include_router(discovery_router)  # /api/discover/...
    app.include_router(likes_router)      # /api/likes/...
    app.include_router(matches_router)    # /api/matches/...
    app.include_router(messages_router)   # /api/messages/...
    app.include_router(realtime_router)   # /ws/
    return app


app = create_app()
