from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from db.models import User
from services import auth


@dataclass
class GlobalState:
    """
    Application state shared by screens.

    Holds the acting user explicitly; screens pass `state.user` into the
    services instead of the services reading the session on their own.
    """

    user: Optional[User] = None

    @property
    def uid(self) -> Optional[int]:
        return self.user.id if self.user else None

    @property
    def role(self) -> Optional[str]:
        return self.user.role if self.user else None

    async def restore(self) -> Optional[User]:
        """Pick up the session snapshot left by a previous run, if any."""
        self.user = await auth.current_user()
        return self.user

    async def login(self, username: str, password: str, role: str) -> User:
        self.user = await auth.login(username, password, role)
        return self.user

    async def logout(self) -> None:
        await auth.logout()
        self.user = None

    def decide(self, role: Optional[str]) -> auth.AuthDecision:
        return auth.check_role(self.user, role)
