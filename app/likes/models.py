# app/likes/models.py
import enum
from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    DateTime,
    Enum,
    ForeignKey,
    Index,
    String,
    Text,
    text,
)
from app.db.base import Base, new_id, utcnow


class LikeKind(str, enum.Enum):
    PROFILE = "PROFILE"
    PHOTO = "PHOTO"
    PROMPT = "PROMPT"


class Like(Base):
    """
    Arista dirigida from_user → to_user.
    Un usuario puede dar like al perfil, a una foto y a un prompt del mismo
    usuario (filas distintas), pero a cada objetivo solo una vez.
    """
    __tablename__ = "likes"
    __table_args__ = (
        # NULL != NULL en los UNIQUE: cada tipo lleva su índice parcial
        # sobre las columnas que sí usa (photo_id / prompt_answer_id)
        Index(
            "uq_like_profile",
            "from_user_id",
            "to_user_id",
            unique=True,
            postgresql_where=text("kind = 'PROFILE'"),
            sqlite_where=text("kind = 'PROFILE'"),
        ),
        Index(
            "uq_like_photo",
            "from_user_id",
            "to_user_id",
            "photo_id",
            unique=True,
            postgresql_where=text("kind = 'PHOTO'"),
            sqlite_where=text("kind = 'PHOTO'"),
        ),
        Index(
            "uq_like_prompt",
            "from_user_id",
            "to_user_id",
            "prompt_answer_id",
            unique=True,
            postgresql_where=text("kind = 'PROMPT'"),
            sqlite_where=text("kind = 'PROMPT'"),
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    from_user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    to_user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    kind: Mapped[LikeKind] = mapped_column(
        Enum(LikeKind, name="like_kind", native_enum=False, length=16),
        nullable=False,
        default=LikeKind.PROFILE,
    )
    photo_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("photos.id", ondelete="CASCADE"), nullable=True
    )
    prompt_answer_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("prompt_answers.id", ondelete="CASCADE"), nullable=True
    )
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, index=True)

    from_user: Mapped["User"] = relationship("User", foreign_keys=[from_user_id])
    to_user: Mapped["User"] = relationship("User", foreign_keys=[to_user_id])
    photo: Mapped["Photo"] = relationship("Photo")
    prompt_answer: Mapped["PromptAnswer"] = relationship("PromptAnswer")
