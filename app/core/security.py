# app/core/security.py
from datetime import datetime, timedelta, timezone

from fastapi import Header, HTTPException, Query
from jose import jwt, JWTError

from app.core.config import settings
from app.core.errors import AuthenticationError

ALGORITHM = "HS256"


def create_access_token(sub: str, expires_minutes: int | None = None) -> str:
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MIN
    )
    payload = {"sub": sub, "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> str:
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    sub = payload.get("sub")
    if not sub:
        raise JWTError("missing sub")
    return sub


def extract_token(token: str | None, authorization: str | None) -> str | None:
    """Token por query (?token=) o por header Authorization: Bearer XXX."""
    if not token and authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1]
    return token or None


def authenticate_token(token: str | None) -> str:
    """
    Devuelve el user_id del token o lanza AuthenticationError.
    Lo usa el gateway realtime (las rutas HTTP usan current_user_id).
    """
    if not token:
        raise AuthenticationError("missing token")
    try:
        return decode_access_token(token)
    except JWTError:
        raise AuthenticationError("invalid token")


async def current_user_id(
    token: str | None = Query(None),
    authorization: str | None = Header(None),
) -> str:
    tok = extract_token(token, authorization)
    if not tok:
        raise HTTPException(status_code=401, detail="missing token")
    try:
        return decode_access_token(tok)
    except JWTError:
        raise HTTPException(status_code=401, detail="invalid token")
