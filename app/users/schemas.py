# app/users/schemas.py
from datetime import datetime

from pydantic import BaseModel, EmailStr


class UserOut(BaseModel):
    id: str
    email: EmailStr
    created_at: datetime
    has_profile: bool = False
