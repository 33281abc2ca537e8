# user.py
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


RegisterRole = Literal["student", "alumni", "employer"]


def _clean_skills(v):
    if v is None:
        return []
    if isinstance(v, str):
        v = v.split(",")
    return [str(item).strip() for item in v if item is not None and str(item).strip()]


class UserBase(BaseModel):
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @field_validator("email")
    @classmethod
    def _validate_email_like(cls, v: str) -> str:
        value = (v or "").strip()
        if "@" not in value:
            raise ValueError("email must contain '@'")
        left, right = value.split("@", 1)
        if not left or not right:
            raise ValueError("email must have text before and after '@'")
        return value


class UserCreate(UserBase):
    password: str = Field(min_length=8)
    # Admins come from the ADMIN_EMAILS allowlist, never from self-registration.
    role: RegisterRole = "student"
    skills: list[str] = Field(default_factory=list)

    @field_validator("skills", mode="before")
    @classmethod
    def _validate_skills(cls, v):
        return _clean_skills(v)


class UserLogin(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _validate_email_like(cls, v: str) -> str:
        value = (v or "").strip()
        if "@" not in value:
            raise ValueError("email must contain '@'")
        return value


class UserRead(UserBase):
    id: int
    role: str
    is_admin: bool = False
    skills: list[str] = Field(default_factory=list)
    bio: Optional[str] = None
    position: Optional[str] = None
    university: Optional[str] = None
    location: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("skills", mode="before")
    @classmethod
    def _validate_skills(cls, v):
        return _clean_skills(v)


class UserUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    skills: Optional[list[str]] = None
    bio: Optional[str] = None
    position: Optional[str] = None
    university: Optional[str] = None
    location: Optional[str] = None

    @field_validator("skills", mode="before")
    @classmethod
    def _validate_skills(cls, v):
        return None if v is None else _clean_skills(v)


class Token(BaseModel):
    access_token: str
    token_type: str
