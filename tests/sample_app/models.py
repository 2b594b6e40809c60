"""Pydantic models standing in for persisted records."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator


class Post(BaseModel):
    id: int
    title: str


class Profile(BaseModel):
    bio: str = ""


class User(BaseModel):
    __tablename__ = "accounts"
    __connection__ = "primary"

    id: int = Field(frozen=True)
    email: str
    password: str = Field(default="", exclude=True)
    posts: List[Post] = []
    profile: Optional[Profile] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def display_name(self) -> str:
        return self.email.split("@")[0]

    @property
    def initials(self) -> str:
        return self.email[:2].upper()

    @field_validator("email")
    @classmethod
    def normalise_email(cls, value: str) -> str:
        return value.lower()

    @model_validator(mode="after")
    def check_posts(self) -> "User":
        return self


class Category(BaseModel):
    name: str
    deleted_at: Optional[datetime] = None


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    theme: str = "light"
