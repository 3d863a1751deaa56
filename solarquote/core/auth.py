"""
Login gate.

Two ways in: a user record's own username/password, or the shared admin
password, which always signs in as the built-in administrator (even on a
database whose user list lost its admin row).
"""

import hmac
import logging
import uuid
from typing import Optional

from .models import AppState, User

log = logging.getLogger("solarquote.auth")

LOGIN_HINT = "Invalid password! Hint: admin123"

BUILTIN_ADMIN = User(id="admin", name="Administrator", username="admin",
                     password="", role="admin")


def create_user(name: str = "New User") -> User:
    return User(id=uuid.uuid4().hex[:12], name=name, username="", password="", role="user")


def _same(a: str, b: str) -> bool:
    return hmac.compare_digest((a or "").encode(), (b or "").encode())


def authenticate(state: AppState, username: str, password: str,
                 admin_password: str = "admin123") -> Optional[User]:
    """User for the credentials, or None."""
    if not password:
        return None
    for user in state.users:
        if user.username and user.username == (username or "") and user.password \
                and _same(user.password, password):
            return user

    if admin_password and _same(admin_password, password):
        admin = next((u for u in state.users if u.role == "admin"
                      and u.username == (username or "admin")), None)
        return admin or state.find_user("admin") or BUILTIN_ADMIN

    log.info("Failed login for %r", username)
    return None
