"""Target specifications accepted by the recipient resolver."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TargetKind(str, Enum):
    ALL = "all"
    USERS = "users"
    GROUPS = "groups"


@dataclass(frozen=True)
class RecipientTarget:
    """Who a notification request is addressed to."""

    kind: TargetKind
    ids: tuple[int, ...] = ()

    @classmethod
    def all_users(cls) -> "RecipientTarget":
        return cls(kind=TargetKind.ALL)

    @classmethod
    def users(cls, user_ids) -> "RecipientTarget":
        return cls(kind=TargetKind.USERS, ids=tuple(user_ids))

    @classmethod
    def groups(cls, group_ids) -> "RecipientTarget":
        return cls(kind=TargetKind.GROUPS, ids=tuple(group_ids))


__all__ = ["RecipientTarget", "TargetKind"]
