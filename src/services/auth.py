# login/logout, session snapshot and role checks
from __future__ import annotations

import enum
from typing import Optional

import aiosqlite

from db import store
from db.database import delete_value, read_value, transaction, write_value
from db.models import User
from utils.errors import InvalidCredentials, NotAuthenticated, WrongRole
from utils.logger import get_logger

_logger = get_logger(__name__)

SESSION_KEY = "currentSession"


class AuthDecision(enum.Enum):
    ALLOWED = "allowed"
    NOT_AUTHENTICATED = "not_authenticated"
    WRONG_ROLE = "wrong_role"


def check_role(user: Optional[User], role: Optional[str]) -> AuthDecision:
    """Pure authorization decision; `role=None` accepts any logged-in user."""
    if user is None:
        return AuthDecision.NOT_AUTHENTICATED
    if role is not None and user.role != role:
        return AuthDecision.WRONG_ROLE
    return AuthDecision.ALLOWED


async def login(username: str, password: str, role: str) -> User:
    """
    Return the first user matching all three fields exactly and store it as
    the session snapshot. Raises InvalidCredentials otherwise, whatever the
    mismatch was.
    """
    for user in await store.users.list():
        if (
            user.username == username
            and user.password == password
            and user.role == role
        ):
            await refresh_session(user)
            _logger.info(f"User {user.id} ({user.username}) logged in as {role}.")
            return user
    _logger.warning(f"Failed login for {username!r} as {role}.")
    raise InvalidCredentials()


async def logout() -> None:
    async with transaction() as conn:
        await delete_value(conn, SESSION_KEY)
    _logger.info("Session cleared.")


async def current_user() -> Optional[User]:
    async with transaction() as conn:
        rec = await read_value(conn, SESSION_KEY)
    return User.from_record(rec) if rec else None


async def refresh_session(
    user: User, conn: Optional[aiosqlite.Connection] = None
) -> None:
    """Overwrite the session snapshot, e.g. after the user edited their own record."""
    async with transaction(conn) as c:
        await write_value(c, SESSION_KEY, user.to_record())


async def require_role(role: Optional[str], user: Optional[User] = None) -> User:
    """
    Return the acting user if allowed to act as `role`.
    Falls back to the stored session when `user` is not given.
    """
    if user is None:
        user = await current_user()
    decision = check_role(user, role)
    if decision is AuthDecision.NOT_AUTHENTICATED:
        raise NotAuthenticated()
    if decision is AuthDecision.WRONG_ROLE:
        raise WrongRole(role, user.role)
    return user
