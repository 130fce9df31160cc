# app/matches/schemas.py
from datetime import datetime

from pydantic import BaseModel

from app.profile.schemas import ProfileSummary


class MatchOut(BaseModel):
    id: str
    user1_id: str
    user2_id: str
    created_at: datetime


class LastMessageOut(BaseModel):
    id: str
    sender_id: str
    content: str
    read: bool
    created_at: datetime


class MatchListItem(BaseModel):
    """Un match visto desde el usuario: siempre se muestra "el otro"."""
    id: str
    user_id: str
    user: ProfileSummary | None = None
    created_at: datetime
    last_message: LastMessageOut | None = None
