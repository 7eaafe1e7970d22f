# blog/dependencies.py

import hashlib
import secrets
from fastapi import HTTPException, Request

from blog.services.content_cache import ContentCache
from blog.services.store import DataStore

ADMIN_COOKIE = "admin_auth"


def get_store(request: Request) -> DataStore:
    return request.app.state.store


def get_content_cache(request: Request) -> ContentCache:
    return request.app.state.content_cache


def admin_token(password: str) -> str:
    """Cookie value proving the shared password was entered. Not a security boundary."""
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def check_admin_password(request: Request, candidate: str) -> bool:
    expected = request.app.state.admin_password
    if not expected:
        return False
    return secrets.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


def is_admin(request: Request) -> bool:
    expected = request.app.state.admin_password
    cookie = request.cookies.get(ADMIN_COOKIE)
    if not expected or not cookie:
        return False
    return secrets.compare_digest(cookie, admin_token(expected))


def require_admin(request: Request) -> None:
    if not is_admin(request):
        raise HTTPException(status_code=401, detail="Admin login required")
