"""Admin authentication: one password-protected account, bearer-token sessions."""
import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Header, HTTPException

import database
from config import settings
from database import create_document, get_documents
from schemas import Session, User

logger = logging.getLogger(__name__)

_ITERATIONS = 200_000


def hash_password(password: str, salt: Optional[str] = None) -> str:
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), bytes.fromhex(salt), _ITERATIONS)
    return f"pbkdf2_sha256${_ITERATIONS}${salt}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    try:
        _, iterations, salt, expected = encoded.split("$")
        digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), bytes.fromhex(salt), int(iterations))
    except (ValueError, AttributeError):
        return False
    return hmac.compare_digest(digest.hex(), expected)


def _require_db():
    if database.db is None:
        raise HTTPException(status_code=503, detail="Authentication service unavailable")
    return database.db


def create_admin(email: str, password: str, display_name: Optional[str] = None) -> str:
    _require_db()
    if get_documents("user", limit=1):
        raise HTTPException(status_code=400, detail="Admin account already exists")
    user = User(email=email, password_hash=hash_password(password), display_name=display_name or email)
    user_id = create_document("user", user)
    logger.info("Created admin account %s", email)
    return user_id


def login(email: str, password: str) -> Session:
    _require_db()
    users = get_documents("user", {"email": email}, limit=1)
    if not users or not verify_password(password, users[0].get("password_hash", "")):
        logger.warning("Failed login for %s", email)
        raise HTTPException(status_code=401, detail="Invalid credentials")
    session = Session(
        token=secrets.token_urlsafe(32),
        email=email,
        expires_at=datetime.now(timezone.utc) + timedelta(hours=settings.session_ttl_hours),
    )
    create_document("session", session)
    return session


def logout(token: str) -> None:
    _require_db()["session"].delete_one({"token": token})


def _bearer(authorization: Optional[str]) -> str:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Not authenticated")
    return authorization.split(" ", 1)[1].strip()


def require_admin(authorization: Optional[str] = Header(None)) -> dict:
    token = _bearer(authorization)
    session = _require_db()["session"].find_one({"token": token})
    if not session:
        raise HTTPException(status_code=401, detail="Session expired, please log in again")
    expires_at = session.get("expires_at")
    if expires_at is not None:
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        if expires_at < datetime.now(timezone.utc):
            raise HTTPException(status_code=401, detail="Session expired, please log in again")
    return session
