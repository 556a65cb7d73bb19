"""Persistence helpers for groups."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy.orm import Session

from fellowship.domain.entities import Group, MemberReference
from fellowship.infrastructure.models import GroupModel, UserModel


class GroupRepository:
    """Read groups and their membership lists."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_map_by_ids(self, group_ids: Iterable[int]) -> dict[int, Group]:
        unique_ids = {int(group_id) for group_id in group_ids}
        if not unique_ids:
            return {}
        query = self.session.query(GroupModel).filter(GroupModel.id.in_(unique_ids))
        return {model.id: self._to_entity(model) for model in query.all()}

    def create(
        self, *, name: str, member_ids: Iterable[int], created_by: int | None = None
    ) -> Group:
        ids = {int(user_id) for user_id in member_ids}
        members = (
            self.session.query(UserModel).filter(UserModel.id.in_(ids)).all() if ids else []
        )
        model = GroupModel(name=name, created_by=created_by, members=members)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: GroupModel) -> Group:
        return Group(
            id=model.id,
            name=model.name,
            members=[MemberReference(user_id=member.id) for member in model.members],
            created_by=model.created_by,
        )


__all__ = ["GroupRepository"]
