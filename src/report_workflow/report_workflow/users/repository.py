from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    def list_active_ids_by_role(self, role: Role) -> Sequence[str]:
        """Ids of active users holding `role`, used for notification routing."""

        raise NotImplementedError
