# app/db/base.py
import uuid
from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def new_id() -> str:
    """Ids opacos (texto) → el orden canónico de un match es comparar strings."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    # lo ponemos del lado de Python (microsegundos) para que el orden
    # de mensajes/likes no dependa de la resolución de now() del motor
    return datetime.now(timezone.utc)
