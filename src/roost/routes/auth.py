"""Local account join, login and logout."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from roost.auth.manager import AuthContext
from roost.auth.passwords import hash_password, verify_password
from roost.dependencies import get_auth, get_db, login_required, parse_body
from roost.models import User
from roost.schemas import JoinForm, LoginForm

logger = logging.getLogger("roost.auth")

router = APIRouter()


def _already_logged_in(request: Request) -> RedirectResponse | None:
    if getattr(request.state, "user", None) is not None:
        return RedirectResponse("/?error=already-logged-in", status_code=303)
    return None


@router.post("/join")
def join(request: Request, db: Session = Depends(get_db)) -> RedirectResponse:
    redirect = _already_logged_in(request)
    if redirect is not None:
        return redirect
    form = parse_body(request, JoinForm)

    if db.scalar(select(User).where(User.email == form.email)) is not None:
        return RedirectResponse("/join?error=exist", status_code=303)

    db.add(User(email=form.email, nick=form.nick, password_hash=hash_password(form.password)))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return RedirectResponse("/join?error=exist", status_code=303)
    logger.info("User %s joined", form.email)
    return RedirectResponse("/", status_code=303)


@router.post("/login")
def login(
    request: Request,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(get_auth),
) -> RedirectResponse:
    redirect = _already_logged_in(request)
    if redirect is not None:
        return redirect
    form = parse_body(request, LoginForm)

    user = db.scalar(select(User).where(User.email == form.email))
    if user is None:
        return RedirectResponse("/?loginError=unknown-user", status_code=303)
    if not verify_password(form.password, user.password_hash):
        return RedirectResponse("/?loginError=wrong-password", status_code=303)

    auth.login(user)
    return RedirectResponse("/", status_code=303)


@router.get("/logout")
def logout(
    _user: User = Depends(login_required),
    auth: AuthContext = Depends(get_auth),
) -> RedirectResponse:
    auth.logout()
    return RedirectResponse("/", status_code=303)
