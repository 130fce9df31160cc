# app/messages/schemas.py
from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field

from app.profile.schemas import PhotoOut


class MessageCreate(BaseModel):
    match_id: str = Field(validation_alias=AliasChoices("match_id", "matchId"))
    content: str = Field(..., min_length=1, max_length=1000)


class SenderMini(BaseModel):
    id: str
    first_name: str | None = None
    photo: PhotoOut | None = None


class MessageOut(BaseModel):
    id: str
    match_id: str
    sender_id: str
    content: str
    read: bool
    created_at: datetime
    sender: SenderMini | None = None


class MarkReadOut(BaseModel):
    match_id: str
    updated: int
