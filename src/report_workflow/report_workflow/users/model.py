from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a console user (approver, team leader or member).

    Note: Plain data object, no DB access.
    """

    user_id: str
    name: str
    email: str
    role: Role
    department_id: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True)
class Actor:
    """Who is performing a workflow action."""

    user_id: str
    role: Role
