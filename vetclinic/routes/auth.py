"""Credentials login: JSON session API and the sign-in page"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.orm import Session

from .. import config
from ..auth import authenticate_user, create_session_token, get_session
from ..database import get_db
from ..shared.responses import failure
from ..templating import templates

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])
pages_router = APIRouter(prefix="/auth", tags=["Authentication"])

INVALID_CREDENTIALS_MESSAGE = "Tên đăng nhập hoặc mật khẩu không đúng"


async def _read_credentials(request: Request) -> tuple[str, str]:
    """Accept either a JSON body or a submitted form"""
    if request.headers.get("content-type", "").startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
    else:
        body = await request.form()
    return str(body.get("username") or "").strip(), str(body.get("password") or "")


def _user_payload(user) -> dict:
    return {"id": str(user.id), "name": user.name or user.username, "email": user.email}


def _set_session_cookie(response, token: str) -> None:
    response.set_cookie(
        config.SESSION_COOKIE_NAME,
        token,
        max_age=config.SESSION_MAX_AGE,
        httponly=True,
        samesite="lax",
        secure=config.APP_ENV == "production",
        path="/",
    )


def _safe_next(next_url: Optional[str]) -> str:
    # Only same-site relative redirects
    if next_url and next_url.startswith("/") and not next_url.startswith("//"):
        return next_url
    return "/admin"


@router.post("/callback/credentials")
async def sign_in(request: Request, db: Session = Depends(get_db)):
    """Verify username/password and issue the session cookie"""
    username, password = await _read_credentials(request)
    user = authenticate_user(db, username, password)
    if not user:
        return failure(401, INVALID_CREDENTIALS_MESSAGE)

    token, expires = create_session_token(user)
    response = JSONResponse(
        {
            "success": True,
            "data": {"user": _user_payload(user), "expires": expires.isoformat(), "token": token},
        }
    )
    _set_session_cookie(response, token)
    logger.info(f"🔓 User '{user.username}' signed in")
    return response


@router.get("/session")
async def read_session(request: Request, db: Session = Depends(get_db)):
    """Current session, or an empty object when signed out"""
    session = get_session(request, db)
    if not session:
        return {}
    user, expires = session
    return {"user": _user_payload(user), "expires": expires.isoformat()}


@router.post("/signout")
async def sign_out():
    response = JSONResponse({"success": True, "data": None, "message": "Đã đăng xuất"})
    response.delete_cookie(config.SESSION_COOKIE_NAME, path="/")
    return response


@pages_router.get("/signin")
async def sign_in_page(request: Request, next: Optional[str] = None, db: Session = Depends(get_db)):
    if get_session(request, db):
        return RedirectResponse(_safe_next(next), status_code=303)
    return templates.TemplateResponse(
        request, "auth/signin.html", {"next": _safe_next(next), "error": None}
    )


@pages_router.post("/signin")
async def sign_in_form(request: Request, db: Session = Depends(get_db)):
    form = await request.form()
    next_url = _safe_next(form.get("next"))
    user = authenticate_user(db, str(form.get("username") or "").strip(), str(form.get("password") or ""))
    if not user:
        return templates.TemplateResponse(
            request,
            "auth/signin.html",
            {"next": next_url, "error": INVALID_CREDENTIALS_MESSAGE},
            status_code=401,
        )

    token, _ = create_session_token(user)
    response = RedirectResponse(next_url, status_code=303)
    _set_session_cookie(response, token)
    logger.info(f"🔓 User '{user.username}' signed in")
    return response


@pages_router.get("/signout")
async def sign_out_page():
    response = RedirectResponse("/auth/signin", status_code=303)
    response.delete_cookie(config.SESSION_COOKIE_NAME, path="/")
    return response
