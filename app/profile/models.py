# app/profile/models.py
from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from app.db.base import Base, new_id, utcnow
from app.core.config import DEFAULT_MIN_AGE, DEFAULT_MAX_AGE, DEFAULT_MAX_DISTANCE

# JSONB en Postgres, JSON genérico en SQLite (dev/tests)
JSONList = JSON().with_variant(JSONB(), "postgresql")


class Profile(Base):
    __tablename__ = "profiles"
    __table_args__ = (
        CheckConstraint("age >= 18 AND age <= 100", name="ck_profile_age"),
        CheckConstraint("min_age <= max_age", name="ck_profile_age_range"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
    )
    first_name: Mapped[str] = mapped_column(String(80), nullable=False)
    age: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    gender: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(String(120), nullable=True)

    # 👇 preferencias de discovery
    # lista vacía = sin filtro de género ("mostrar a todos")
    interested_in: Mapped[list[str]] = mapped_column(JSONList, nullable=False, default=list)
    min_age: Mapped[int] = mapped_column(Integer, nullable=False, default=DEFAULT_MIN_AGE)
    max_age: Mapped[int] = mapped_column(Integer, nullable=False, default=DEFAULT_MAX_AGE)
    max_distance: Mapped[float] = mapped_column(Float, nullable=False, default=DEFAULT_MAX_DISTANCE)

    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, index=True)

    user: Mapped["User"] = relationship("User", back_populates="profile")
    photos: Mapped[list["Photo"]] = relationship(
        back_populates="profile",
        order_by="Photo.order",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    prompt_answers: Mapped[list["PromptAnswer"]] = relationship(
        back_populates="profile",
        order_by="PromptAnswer.order",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class Photo(Base):
    __tablename__ = "photos"
    __table_args__ = (
        UniqueConstraint("profile_id", "order", name="uq_photo_profile_order"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    profile_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("profiles.id", ondelete="CASCADE"), index=True
    )
    # ruta/URL del archivo (el storage vive fuera de este servicio)
    url: Mapped[str] = mapped_column(String(255), nullable=False)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    profile: Mapped["Profile"] = relationship(back_populates="photos")


class Prompt(Base):
    """Catálogo de preguntas (reutilizable entre perfiles)."""
    __tablename__ = "prompts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    text: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(64), nullable=False, default="general")
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class PromptAnswer(Base):
    __tablename__ = "prompt_answers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    profile_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("profiles.id", ondelete="CASCADE"), index=True
    )
    prompt_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("prompts.id", ondelete="CASCADE"), index=True
    )
    answer: Mapped[str] = mapped_column(Text, nullable=False)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    profile: Mapped["Profile"] = relationship(back_populates="prompt_answers")
    prompt: Mapped["Prompt"] = relationship(lazy="joined")
