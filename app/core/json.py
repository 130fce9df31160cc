# app/core/json.py
from typing import Any
import json
from fastapi.encoders import jsonable_encoder
from starlette.responses import JSONResponse


def dumps_utf8(content: Any) -> str:
    """
    Serializa a JSON sin escapes ASCII (emojis y acentos viajan tal cual),
    pasando antes por jsonable_encoder (datetime, modelos pydantic, etc.).
    """
    payload = jsonable_encoder(content, exclude_none=False)
    return json.dumps(
        payload,
        ensure_ascii=False,
        allow_nan=False,
        separators=(",", ":"),
    )


def encode_event(event: str, data: Any) -> str:
    """Frame de texto para el websocket: {"event": ..., "data": ...}."""
    return dumps_utf8({"event": event, "data": data})


class UTF8JSONResponse(JSONResponse):
    media_type = "application/json; charset=utf-8"

    def render(self, content: Any) -> bytes:
        return dumps_utf8(content).encode("utf-8")
