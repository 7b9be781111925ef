"""Request bodies accepted by the feature routers."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class JoinForm(BaseModel):
    email: str = Field(min_length=3, max_length=40, pattern=r"^[^@\s]+@[^@\s]+$")
    nick: str = Field(min_length=1, max_length=15)
    password: str = Field(min_length=4, max_length=200)


class LoginForm(BaseModel):
    email: str
    password: str


class PostForm(BaseModel):
    content: str = Field(min_length=1, max_length=140)


class AuthorOut(BaseModel):
    id: int
    nick: str


class PostOut(BaseModel):
    id: int
    content: str
    created_at: datetime
    user: AuthorOut


class UserOut(BaseModel):
    id: int
    nick: str
    post_count: int
