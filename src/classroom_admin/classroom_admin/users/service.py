from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """The authenticated caller, as seen by services and the permission gate."""

    user_id: int
    full_name: str
    role: Role
    cohort_id: Optional[int]
    is_monitor: bool = False

    @classmethod
    def from_user(cls, user: User) -> "SessionUser":
        return cls(
            user_id=user.user_id,
            full_name=user.full_name,
            role=user.role,
            cohort_id=user.cohort_id,
            is_monitor=user.is_monitor,
        )


class AuthService:
    """Use case: authenticate user (login) and reload the caller per request."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = require_non_empty(email, "Email").lower()
        user = self._users.get_by_email(email)
        if not user or not user.is_active:
            raise AuthenticationError("Wrong email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.warning("Failed login for %s", email)
            raise AuthenticationError("Wrong email or password")

        return SessionUser.from_user(user)

    def resolve(self, user_id: Optional[int]) -> Optional[SessionUser]:
        """Fresh profile for the session's user id.

        Monitor flag and cohort are re-read on every request so a revoked
        monitor cannot keep writing with an old session.
        """
        if not user_id:
            return None
        user = self._users.get_by_id(int(user_id))
        if not user or not user.is_active:
            return None
        return SessionUser.from_user(user)
