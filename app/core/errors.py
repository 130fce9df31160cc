# app/core/errors.py
"""
Errores de dominio del motor de discovery/likes/matches/chat.

Los services los lanzan tal cual; los routers los traducen a HTTPException
y el gateway realtime a eventos ``error``.
"""


class DomainError(Exception):
    detail = "domain error"

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.detail)
        self.detail = detail or self.detail


# ---------- 404 ----------
class NotFound(DomainError):
    detail = "not found"


class ProfileNotFound(NotFound):
    detail = "profile not found"


class UserNotFound(NotFound):
    detail = "user not found"


class LikeNotFound(NotFound):
    detail = "like not found"


class UnauthorizedOrNotFound(NotFound):
    # "no existe" y "no es tuyo" son indistinguibles a propósito
    detail = "match not found or unauthorized"


# ---------- 400 ----------
class InvalidInput(DomainError):
    detail = "invalid input"


class InvalidLikeTarget(InvalidInput):
    detail = "invalid like target"


# ---------- 409 ----------
class Conflict(DomainError):
    detail = "conflict"


class AlreadyLiked(Conflict):
    detail = "already liked"


# ---------- 401 ----------
class AuthenticationError(DomainError):
    detail = "authentication error"


def http_error(exc: DomainError):
    """DomainError → HTTPException con el status que le toca."""
    from fastapi import HTTPException

    if isinstance(exc, NotFound):
        code = 404
    elif isinstance(exc, Conflict):
        code = 409
    elif isinstance(exc, AuthenticationError):
        code = 401
    else:
        code = 400
    return HTTPException(status_code=code, detail=exc.detail)
