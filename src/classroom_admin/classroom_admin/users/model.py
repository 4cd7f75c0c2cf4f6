from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: plain data object (no database access code).
    """

    user_id: int
    full_name: str
    email: str
    password_hash: str
    role: Role
    cohort_id: Optional[int]
    is_monitor: bool = False
    is_active: bool = True
