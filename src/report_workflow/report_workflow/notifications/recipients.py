from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ..core.enums import ReportStatus, Role
from ..users.repository import UserRepository
from .model import ApprovalTransition


class RecipientRule(ABC):
    """Strategy Pattern: decide who hears about a transition."""

    @abstractmethod
    def resolve(self, transition: ApprovalTransition, users: UserRepository) -> Sequence[str]:
        raise NotImplementedError


class RoleHolders(RecipientRule):
    """Every active user holding the approver role of the next stage."""

    def __init__(self, role: Role):
        self.role = role

    def resolve(self, transition: ApprovalTransition, users: UserRepository) -> Sequence[str]:
        return list(users.list_active_ids_by_role(self.role))

    def __repr__(self) -> str:
        return f"RoleHolders({self.role.value})"


class ReportAuthor(RecipientRule):
    def resolve(self, transition: ApprovalTransition, users: UserRepository) -> Sequence[str]:
        return [transition.author_id]

    def __repr__(self) -> str:
        return "ReportAuthor()"


ROUTES: dict[ReportStatus, RecipientRule] = {
    ReportStatus.SUBMITTED: RoleHolders(Role.PRESIDENT),
    ReportStatus.COORDINATOR_REVIEWED: RoleHolders(Role.ACCOUNTANT),
    ReportStatus.MANAGER_APPROVED: RoleHolders(Role.SUPER_ADMIN),
    ReportStatus.FINAL_APPROVED: ReportAuthor(),
    ReportStatus.REJECTED: ReportAuthor(),
}


def rule_for(status: ReportStatus) -> Optional[RecipientRule]:
    return ROUTES.get(status)


def unique_in_order(ids: Sequence[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for i in ids:
        i = str(i)
        if i and i not in seen:
            seen.add(i)
            out.append(i)
    return out
