from pydantic import BaseModel, field_validator
from datetime import datetime
from typing import Literal

Role = Literal["owner", "mint_burn"]

class UserCreate(BaseModel):
    username: str
    password: str

    @field_validator("username")
    @classmethod
    def username_trim(cls, v: str):
        v = v.strip()
        if not v:
            raise ValueError("username is required")
        if len(v) > 64:
            raise ValueError("username too long")
        return v

    @field_validator("password")
    @classmethod
    def password_min(cls, v: str):
        v = str(v)
        if len(v) < 6:
            raise ValueError("password must be at least 6 characters")
        return v

class RoleGrantIn(BaseModel):
    role: Role

class UserOut(BaseModel):
    id: int
    username: str
    roles: list[str] = []
    created_at: datetime

    class Config:
        from_attributes = True
