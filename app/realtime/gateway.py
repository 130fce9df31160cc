# app/realtime/gateway.py
from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect, status
from pydantic import AliasChoices, BaseModel, Field, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.errors import AuthenticationError, DomainError
from app.core.security import authenticate_token
from app.matches.service import get_match_for_participant
from app.messages import service as messages
from app.realtime.pubsub import ChannelRegistry, Connection, match_channel, user_channel

log = logging.getLogger("uvicorn")


class MatchRef(BaseModel):
    match_id: str = Field(validation_alias=AliasChoices("match_id", "matchId"))


class SendMessageIn(MatchRef):
    content: str = Field(..., min_length=1, max_length=1000)


def _match_ref(data: Any) -> MatchRef:
    # joinMatch / leaveMatch pueden mandar el id pelado ("abc") o {"matchId": "abc"}
    if isinstance(data, str):
        return MatchRef(match_id=data)
    return MatchRef.model_validate(data or {})


class RealtimeGateway:
    """
    Autentica la conexión, la mete en su canal de usuario y enruta eventos.
    La lógica de negocio vive en messages/matches services; aquí solo hay
    registro de canales + delegación.
    """

    def __init__(self, registry: ChannelRegistry | None = None):
        self.registry = registry or ChannelRegistry()

    # ---------- publicación desde fuera (routers HTTP) ----------
    async def publish_message(self, message: dict) -> int:
        return await self.registry.publish(
            match_channel(message["match_id"]), "newMessage", message
        )

    async def publish_match(self, match: dict) -> None:
        for uid in (match["user1_id"], match["user2_id"]):
            await self.registry.publish(user_channel(uid), "newMatch", match)

    # ---------- ciclo de vida de la conexión ----------
    async def serve(
        self,
        websocket: WebSocket,
        token: str | None,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        try:
            user_id = authenticate_token(token)
        except AuthenticationError as e:
            log.info(f"🔒 realtime: conexión rechazada ({e.detail})")
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=e.detail)
            return

        await websocket.accept()
        conn = Connection(user_id, websocket)
        self.registry.subscribe(conn, user_channel(user_id))
        log.info(f"🔌 realtime: conectado {user_id} ({conn.id})")

        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
                # frames binarios no traen "text": handle_frame responde invalid frame
                await self.handle_frame(conn, message.get("text"), session_factory)
        except WebSocketDisconnect:
            pass
        finally:
            self.registry.unsubscribe_all(conn)
            log.info(f"👋 realtime: desconectado {user_id} ({conn.id})")

    async def handle_frame(
        self,
        conn: Connection,
        raw: str | None,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        if raw is None:
            await conn.send("error", {"message": "invalid frame"})
            return
        try:
            frame = json.loads(raw)
        except ValueError:
            await conn.send("error", {"message": "invalid frame"})
            return
        if not isinstance(frame, dict) or not isinstance(frame.get("event"), str):
            await conn.send("error", {"message": "invalid frame"})
            return
        await self.dispatch(conn, frame["event"], frame.get("data"), session_factory)

    async def dispatch(
        self,
        conn: Connection,
        event: str,
        data: Any,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        if event == "sendMessage":
            await self.on_send_message(conn, data, session_factory)
        elif event == "joinMatch":
            await self.on_join_match(conn, data, session_factory)
        elif event == "leaveMatch":
            await self.on_leave_match(conn, data)
        elif event in ("typing", "stopTyping"):
            await self.on_typing(conn, event, data)
        else:
            await conn.send("error", {"message": f"unknown event {event}"})

    # ---------- handlers ----------
    async def on_join_match(self, conn: Connection, data: Any, session_factory) -> None:
        try:
            ref = _match_ref(data)
            async with session_factory() as db:
                await get_match_for_participant(db, conn.user_id, ref.match_id)
        except (ValidationError, DomainError):
            await conn.send("error", {"message": "Failed to join match"})
            return
        self.registry.subscribe(conn, match_channel(ref.match_id))
        await conn.send("joinedMatch", {"match_id": ref.match_id})

    async def on_leave_match(self, conn: Connection, data: Any) -> None:
        try:
            ref = _match_ref(data)
        except ValidationError:
            await conn.send("error", {"message": "Failed to leave match"})
            return
        self.registry.unsubscribe(conn, match_channel(ref.match_id))

    async def on_send_message(self, conn: Connection, data: Any, session_factory) -> None:
        try:
            payload = SendMessageIn.model_validate(data or {})
            async with session_factory() as db:
                msg = await messages.send_message(
                    db, conn.user_id, payload.match_id, payload.content
                )
                await db.commit()
                out = messages.message_out(msg)
        except (ValidationError, DomainError) as e:
            log.info(f"realtime: sendMessage rechazado para {conn.user_id}: {e}")
            await conn.send("error", {"message": "Failed to send message"})
            return
        except Exception:
            log.exception(f"❌ realtime: sendMessage falló para {conn.user_id}")
            await conn.send("error", {"message": "Failed to send message"})
            return

        # a todos los del canal del match, incluidas las otras conexiones del remitente
        await self.publish_message(out)

    async def on_typing(self, conn: Connection, event: str, data: Any) -> None:
        try:
            ref = _match_ref(data)
        except ValidationError:
            await conn.send("error", {"message": "invalid typing event"})
            return
        channel = match_channel(ref.match_id)
        # solo quien ya hizo joinMatch (participante verificado) puede avisar
        if not self.registry.is_subscribed(conn, channel):
            await conn.send("error", {"message": "join the match first"})
            return
        out_event = "userTyping" if event == "typing" else "userStoppedTyping"
        await self.registry.publish(
            channel,
            out_event,
            {"user_id": conn.user_id, "match_id": ref.match_id},
            exclude_user_id=conn.user_id,
        )
