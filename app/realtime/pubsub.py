# app/realtime/pubsub.py
"""
Registro pub/sub en memoria (un solo proceso).

Cada conexión websocket se suscribe a canales lógicos:
- ``user:<id>``  → todas las conexiones (dispositivos) de un usuario
- ``match:<id>`` → conexiones que hicieron joinMatch en ese match

La entrega es best-effort / at-most-once: si un send falla se loguea y
se sigue con el resto; no hay cola ni reintentos. Quien se perdió algo
reconcilia con GET /api/messages/{match_id}/ al reconectar.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any, Protocol

from app.core.json import encode_event

log = logging.getLogger("uvicorn")


def user_channel(user_id: str) -> str:
    return f"user:{user_id}"


def match_channel(match_id: str) -> str:
    return f"match:{match_id}"


class Transport(Protocol):
    async def send_text(self, data: str) -> None: ...


class Connection:
    """Una conexión autenticada: id opaco + user_id verificado + transporte."""

    def __init__(self, user_id: str, transport: Transport, conn_id: str | None = None):
        self.id = conn_id or uuid.uuid4().hex
        self.user_id = user_id
        self.transport = transport

    async def send(self, event: str, data: Any) -> None:
        await self.transport.send_text(encode_event(event, data))

    def __repr__(self) -> str:
        return f"<Connection {self.id} user={self.user_id}>"


class ChannelRegistry:
    def __init__(self) -> None:
        self._channels: dict[str, dict[str, Connection]] = {}
        self._memberships: dict[str, set[str]] = {}

    def subscribe(self, conn: Connection, channel: str) -> None:
        self._channels.setdefault(channel, {})[conn.id] = conn
        self._memberships.setdefault(conn.id, set()).add(channel)

    def unsubscribe(self, conn: Connection, channel: str) -> None:
        members = self._channels.get(channel)
        if members is not None:
            members.pop(conn.id, None)
            if not members:
                del self._channels[channel]
        joined = self._memberships.get(conn.id)
        if joined is not None:
            joined.discard(channel)

    def unsubscribe_all(self, conn: Connection) -> None:
        for channel in list(self._memberships.get(conn.id, ())):
            self.unsubscribe(conn, channel)
        self._memberships.pop(conn.id, None)

    def is_subscribed(self, conn: Connection, channel: str) -> bool:
        return channel in self._memberships.get(conn.id, ())

    def members(self, channel: str) -> list[Connection]:
        return list(self._channels.get(channel, {}).values())

    async def publish(
        self,
        channel: str,
        event: str,
        data: Any,
        *,
        exclude_user_id: str | None = None,
    ) -> int:
        """Manda el evento a cada conexión del canal. Devuelve cuántas lo recibieron."""
        delivered = 0
        # snapshot: una conexión puede irse mientras mandamos
        for conn in self.members(channel):
            if exclude_user_id is not None and conn.user_id == exclude_user_id:
                continue
            try:
                await conn.send(event, data)
                delivered += 1
            except Exception as e:
                log.warning(f"⚠️ realtime: no se pudo entregar {event} a {conn!r}: {e!r}")
        return delivered
