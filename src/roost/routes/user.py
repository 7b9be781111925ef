"""Public user profiles."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from roost.dependencies import get_db
from roost.errors import NotFound
from roost.models import Post, User
from roost.schemas import UserOut

router = APIRouter()


@router.get("/{user_id}")
def get_user(user_id: int, db: Session = Depends(get_db)) -> UserOut:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound(f"User {user_id} not found")
    post_count = db.scalar(select(func.count(Post.id)).where(Post.user_id == user.id)) or 0
    return UserOut(id=user.id, nick=user.nick, post_count=post_count)
