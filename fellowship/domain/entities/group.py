"""Domain entities describing user groups and their membership."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from .user import User


@dataclass(frozen=True)
class MemberReference:
    """Membership known only by the member's user identifier."""

    user_id: int


@dataclass(frozen=True)
class PopulatedMember:
    """Membership carrying the full member record."""

    user: User


GroupMember = Union[MemberReference, PopulatedMember]


def member_user_id(member: GroupMember) -> int | None:
    """Return the user identifier behind either membership form."""

    if isinstance(member, PopulatedMember):
        return member.user.id
    return member.user_id


@dataclass
class Group:
    """Named collection of users, e.g. a home fellowship or a ministry team."""

    id: int | None
    name: str
    members: list[GroupMember] = field(default_factory=list)
    created_by: int | None = None

    def member_ids(self) -> set[int]:
        """Return the plain user identifiers of every member."""

        ids = (member_user_id(member) for member in self.members)
        return {user_id for user_id in ids if user_id is not None}


__all__ = [
    "Group",
    "GroupMember",
    "MemberReference",
    "PopulatedMember",
    "member_user_id",
]
