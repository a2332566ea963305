"""
Signed-in session value passed to every authenticated client call.
"""

from dataclasses import dataclass, replace
from typing import Dict

from app.schemas.user import UserResponse


@dataclass(frozen=True)
class Session:
    """Token plus the user it was issued for."""

    token: str
    user: UserResponse

    @property
    def user_id(self):
        return self.user.id

    def headers(self) -> Dict[str, str]:
        """Headers that authenticate a request."""
        return {"auth-token": self.token}

    def with_user(self, user: UserResponse) -> "Session":
        """Same token, refreshed profile."""
        return replace(self, user=user)
