from datetime import datetime

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    email: str = Field(min_length=3, max_length=255)


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    created_at: datetime
