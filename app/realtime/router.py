# app/realtime/router.py
from fastapi import APIRouter, Depends, Header, Query, WebSocket
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.security import extract_token
from app.db.session import get_sessionmaker
from app.realtime.gateway import RealtimeGateway

router = APIRouter(tags=["realtime"])


def get_gateway(websocket: WebSocket) -> RealtimeGateway:
    return websocket.app.state.realtime


@router.websocket("/ws/")
async def realtime_socket(
    websocket: WebSocket,
    token: str | None = Query(None),
    authorization: str | None = Header(None),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_sessionmaker),
    gateway: RealtimeGateway = Depends(get_gateway),
):
    """
    WS /ws/?token=XXX (o Authorization: Bearer XXX)

    Frames de texto JSON: {"event": "...", "data": {...}}
    Entrantes: joinMatch, leaveMatch, sendMessage, typing, stopTyping
    Salientes: joinedMatch, newMessage, userTyping, userStoppedTyping, newMatch, error
    """
    await gateway.serve(websocket, extract_token(token, authorization), session_factory)
