from pydantic import EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime

from ..models import CustomModel
from .models import Role

class UserBase(CustomModel):
    email: EmailStr = Field(..., json_schema_extra={"example": "reporter@example.com"})
    username: str = Field(..., min_length=1, max_length=100, json_schema_extra={"example": "reporter"})

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v):
        return v.strip() if isinstance(v, str) else v

class UserCreate(UserBase):
    password: str = Field(..., min_length=6, json_schema_extra={"example": "secret123"})
    role: Optional[Role] = Field(None, json_schema_extra={"example": "JOURNALIST"})

class UserPublic(UserBase):
    id: int = Field(..., json_schema_extra={"example": 1})
    role: Role

class UserMe(UserPublic):
    created_at: datetime
    updated_at: datetime
