"""
Credentials authentication.

A single username/password login backed by the ``users`` table. A successful
login issues a signed JWT (claim ``id`` = user id) stored in an HTTP-only
cookie; pages read it back through ``require_page_user``.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi import Depends, HTTPException, Request
from jose import JWTError
from jose import jwt as jose_jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from . import config
from .database import get_db
from .errors import LoginRequiredError
from .models import User

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

# pbkdf2_sha256 is pure Python; passlib's bcrypt backend breaks on bcrypt>=4.1
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against its stored hash"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        logger.error(f"Password verification error: {e}")
        return False


def create_session_token(user: User, max_age: Optional[int] = None) -> tuple[str, datetime]:
    """
    Create a session JWT for ``user``

    Returns:
        (token, expiry) - the expiry is also embedded as the ``exp`` claim
    """
    expires = datetime.now(timezone.utc) + timedelta(seconds=max_age or config.SESSION_MAX_AGE)
    claims = {"id": user.id, "sub": user.username, "exp": expires}
    return jose_jwt.encode(claims, config.SECRET_KEY, algorithm=ALGORITHM), expires


def decode_session_token(token: str) -> Optional[dict[str, Any]]:
    """Decoded claims of a valid token, None if invalid or expired"""
    try:
        return jose_jwt.decode(token, config.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.warning(f"⚠️ Session token rejected: {e}")
        return None


def authenticate_user(db: Session, username: str, password: str) -> Optional[User]:
    if not username or not password:
        return None
    user = db.query(User).filter(User.username == username).first()
    if not user or not verify_password(password, user.password_hash):
        logger.info(f"🔒 Failed login for username '{username}'")
        return None
    return user


def seed_admin(db: Session) -> Optional[User]:
    """Create the configured administrator if that username does not exist yet"""
    if not config.ADMIN_USERNAME or not config.ADMIN_PASSWORD:
        return None
    existing = db.query(User).filter(User.username == config.ADMIN_USERNAME).first()
    if existing:
        return existing

    user = User(
        username=config.ADMIN_USERNAME,
        password_hash=hash_password(config.ADMIN_PASSWORD),
        name=config.ADMIN_NAME,
        email=config.ADMIN_EMAIL,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"👤 Seeded administrator '{user.username}'")
    return user


def _token_from_request(request: Request) -> Optional[str]:
    token = request.cookies.get(config.SESSION_COOKIE_NAME)
    if token:
        return token
    authorization = request.headers.get("Authorization", "")
    if authorization.lower().startswith("bearer "):
        return authorization[7:].strip() or None
    return None


def get_session(request: Request, db: Session) -> Optional[tuple[User, datetime]]:
    """The signed-in user and session expiry, or None"""
    token = _token_from_request(request)
    if not token:
        return None
    claims = decode_session_token(token)
    if not claims or "id" not in claims:
        return None

    user = db.query(User).filter(User.id == claims["id"]).first()
    if not user:
        return None
    return user, datetime.fromtimestamp(claims["exp"], tz=timezone.utc)


async def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """API dependency: 401 without a valid session"""
    session = get_session(request, db)
    if not session:
        raise HTTPException(status_code=401, detail="Chưa đăng nhập")
    return session[0]


async def require_page_user(request: Request, db: Session = Depends(get_db)) -> User:
    """Page dependency: redirect to the sign-in page without a valid session"""
    session = get_session(request, db)
    if not session:
        next_url = request.url.path
        if request.url.query:
            next_url = f"{next_url}?{request.url.query}"
        raise LoginRequiredError(next_url)
    return session[0]
