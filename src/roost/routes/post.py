"""Post creation and lookup."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from roost.dependencies import get_db, login_required, parse_body
from roost.errors import NotFound
from roost.models import Post, User
from roost.schemas import AuthorOut, PostForm, PostOut

router = APIRouter()


@router.post("")
def create_post(
    request: Request,
    user: User = Depends(login_required),
    db: Session = Depends(get_db),
) -> RedirectResponse:
    form = parse_body(request, PostForm)
    db.add(Post(content=form.content, user_id=user.id))
    db.commit()
    return RedirectResponse("/", status_code=303)


@router.get("/{post_id}")
def get_post(post_id: int, db: Session = Depends(get_db)) -> PostOut:
    post = db.get(Post, post_id)
    if post is None:
        raise NotFound(f"Post {post_id} not found")
    return PostOut(
        id=post.id,
        content=post.content,
        created_at=post.created_at,
        user=AuthorOut(id=post.user.id, nick=post.user.nick),
    )
