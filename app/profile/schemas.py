# app/profile/schemas.py
from pydantic import BaseModel
from typing import List, Optional


class PhotoOut(BaseModel):
    id: str
    url: str
    order: int

    class Config:
        from_attributes = True


class PromptOut(BaseModel):
    id: str
    text: str
    category: str

    class Config:
        from_attributes = True


class PromptAnswerOut(BaseModel):
    id: str
    prompt_id: str
    answer: str
    order: int
    prompt: Optional[PromptOut] = None

    class Config:
        from_attributes = True


class ProfileSummary(BaseModel):
    """Lo mínimo para pintar una tarjeta: nombre, edad, 1a foto (y prompts si aplica)."""
    user_id: str
    first_name: str
    age: int
    photos: List[PhotoOut] = []
    prompt_answers: List[PromptAnswerOut] = []


class ProfileOut(BaseModel):
    id: str
    user_id: str
    first_name: str
    age: int
    gender: str
    bio: Optional[str] = None
    location: Optional[str] = None
    interested_in: List[str] = []
    min_age: int
    max_age: int
    max_distance: float
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    photos: List[PhotoOut] = []
    prompt_answers: List[PromptAnswerOut] = []

    class Config:
        from_attributes = True
