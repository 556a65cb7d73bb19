"""Use case expanding a notification target into user identifiers."""

from sqlalchemy.orm import Session

from fellowship.domain.entities import RecipientTarget, TargetKind
from fellowship.infrastructure.repositories import GroupRepository, UserRepository


def resolve_recipients(session: Session, target: RecipientTarget) -> set[int]:
    """Return the deduplicated set of user ids addressed by ``target``.

    Unknown user ids and unknown group ids contribute nothing. An empty
    result is returned as is; rejecting it is up to the caller.
    """

    users = UserRepository(session)

    if target.kind is TargetKind.ALL:
        return users.list_active_ids()

    if target.kind is TargetKind.USERS:
        return users.filter_existing_ids(target.ids)

    groups = GroupRepository(session).get_map_by_ids(target.ids)
    member_ids: set[int] = set()
    for group in groups.values():
        member_ids |= group.member_ids()
    return users.filter_existing_ids(member_ids)


__all__ = ["resolve_recipients"]
