"""Tests for expanding notification targets into user ids."""

from __future__ import annotations

from fellowship.application.use_cases.notifications import resolve_recipients
from fellowship.domain.entities import (
    Group,
    MemberReference,
    PopulatedMember,
    RecipientTarget,
)
from fellowship.infrastructure.repositories import GroupRepository


def test_groups_with_overlapping_members_are_deduplicated(session, make_user) -> None:
    first, second, third = make_user(), make_user(), make_user()
    groups = GroupRepository(session)
    youth = groups.create(name="Youth", member_ids=[first.id, second.id])
    choir = groups.create(name="Choir", member_ids=[second.id, third.id])

    resolved = resolve_recipients(session, RecipientTarget.groups([youth.id, choir.id]))

    assert resolved == {first.id, second.id, third.id}


def test_unknown_group_contributes_nothing(session, make_user) -> None:
    member = make_user()
    group = GroupRepository(session).create(name="Ushers", member_ids=[member.id])

    resolved = resolve_recipients(session, RecipientTarget.groups([group.id, 9999]))

    assert resolved == {member.id}


def test_only_unknown_groups_resolve_to_empty_set(session, make_user) -> None:
    make_user()

    assert resolve_recipients(session, RecipientTarget.groups([404])) == set()


def test_explicit_users_drop_unknown_ids_and_duplicates(session, make_user) -> None:
    first, second = make_user(), make_user()

    resolved = resolve_recipients(
        session, RecipientTarget.users([first.id, second.id, first.id, 777])
    )

    assert resolved == {first.id, second.id}


def test_all_users_excludes_inactive_accounts(session, make_user) -> None:
    active = make_user()
    make_user(is_active=False)

    assert resolve_recipients(session, RecipientTarget.all_users()) == {active.id}


def test_group_member_ids_accept_both_membership_forms(make_user) -> None:
    populated = make_user()
    group = Group(
        id=1,
        name="Mixed",
        members=[MemberReference(user_id=42), PopulatedMember(user=populated)],
    )

    assert group.member_ids() == {42, populated.id}
