"""Explicit user identity passed into every persistence call"""

from dataclasses import dataclass
from typing import Optional

from cipherstudio.exceptions import UnauthenticatedError


@dataclass(frozen=True)
class SessionContext:
    user_id: Optional[str] = None
    access_token: Optional[str] = None
    email: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)

    def require_user(self) -> str:
        """Owner id for scoped queries, or UnauthenticatedError"""
        if not self.user_id:
            raise UnauthenticatedError("No authenticated user bound to this operation")
        return self.user_id


ANONYMOUS = SessionContext()
