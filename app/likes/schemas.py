# app/likes/schemas.py
from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field, model_validator

from app.likes.models import LikeKind
from app.profile.schemas import PhotoOut, ProfileSummary, PromptAnswerOut
from app.matches.schemas import MatchOut


class LikeCreate(BaseModel):
    # acepta snake_case (web) y camelCase (mobile)
    to_user_id: str = Field(validation_alias=AliasChoices("to_user_id", "toUserId"))
    kind: LikeKind = Field(
        default=LikeKind.PROFILE,
        validation_alias=AliasChoices("kind", "type"),
    )
    photo_id: str | None = Field(
        default=None, validation_alias=AliasChoices("photo_id", "photoId")
    )
    prompt_answer_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("prompt_answer_id", "promptAnswerId"),
    )
    comment: str | None = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def _strip_comment(self):
        if self.comment is not None:
            self.comment = self.comment.strip() or None
        return self


class LikeOut(BaseModel):
    id: str
    from_user_id: str
    to_user_id: str
    kind: LikeKind
    photo_id: str | None = None
    prompt_answer_id: str | None = None
    comment: str | None = None
    created_at: datetime
    photo: PhotoOut | None = None
    prompt_answer: PromptAnswerOut | None = None


class SentLikeOut(LikeOut):
    to_user: ProfileSummary | None = None


class ReceivedLikeOut(LikeOut):
    from_user: ProfileSummary | None = None


class LikeResult(BaseModel):
    like: LikeOut
    match: MatchOut | None = None
    # True solo si ESTE like creó el match
    new_match: bool = False
