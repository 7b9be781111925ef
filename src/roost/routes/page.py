"""Server-rendered pages."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload
from starlette.responses import Response

from roost.dependencies import current_user, get_db, login_required
from roost.models import Post, User
from roost.templating import render

router = APIRouter()

FEED_SIZE = 50


@router.get("/")
def main(request: Request, db: Session = Depends(get_db)) -> Response:
    posts = db.scalars(
        select(Post).options(joinedload(Post.user)).order_by(Post.created_at.desc(), Post.id.desc()).limit(FEED_SIZE)
    ).all()
    return render(request, "main.html", {
        "title": "Roost",
        "posts": posts,
        "login_error": request.query_params.get("loginError"),
    })


@router.get("/profile")
def profile(request: Request, user: User = Depends(login_required), db: Session = Depends(get_db)) -> Response:
    post_count = db.scalar(select(func.count(Post.id)).where(Post.user_id == user.id))
    return render(request, "profile.html", {"title": "My profile - Roost", "post_count": post_count})


@router.get("/join")
def join(request: Request, user: User | None = Depends(current_user)) -> Response:
    if user is not None:
        return RedirectResponse("/?error=already-logged-in", status_code=303)
    return render(request, "join.html", {
        "title": "Join - Roost",
        "join_error": request.query_params.get("error"),
    })
