"""
Tests for group management: creation, membership index, joining.
"""

import pytest

from splitledger.core.errors import AlreadyMember, GroupNotFound, InvalidIdentity
from splitledger.schemas.events import GroupCreated, UserJoinedGroup

ALICE, BOB, CHARLIE, OWNER = "alice", "bob", "charlie", "owner"


class TestCreateGroup:
    def test_creator_is_first_member(self, ledger, run):
        group_id = run(ledger.create_group(ALICE, [BOB, CHARLIE]))

        assert group_id == 0
        assert run(ledger.get_group_members(group_id)) == [ALICE, BOB, CHARLIE]
        assert run(ledger.get_group(group_id)).owner == ALICE

    def test_ids_are_sequential(self, ledger, run):
        first = run(ledger.create_group(ALICE))
        second = run(ledger.create_group(BOB))
        assert (first, second) == (0, 1)

    def test_skips_null_and_duplicates(self, ledger, run):
        group_id = run(ledger.create_group(ALICE, [BOB, None, "", ALICE, BOB, CHARLIE]))
        assert run(ledger.get_group_members(group_id)) == [ALICE, BOB, CHARLIE]

    def test_empty_initial_members(self, ledger, run):
        group_id = run(ledger.create_group(CHARLIE, []))
        assert run(ledger.get_group_members(group_id)) == [CHARLIE]

    def test_null_creator_rejected(self, ledger, run):
        with pytest.raises(InvalidIdentity):
            run(ledger.create_group(""))

    def test_membership_index(self, ledger, run):
        g0 = run(ledger.create_group(ALICE, [BOB]))
        g1 = run(ledger.create_group(BOB, [CHARLIE]))

        assert run(ledger.get_user_groups(ALICE)) == {g0}
        assert run(ledger.get_user_groups(BOB)) == {g0, g1}
        assert run(ledger.get_user_groups(CHARLIE)) == {g1}
        assert run(ledger.get_user_groups(OWNER)) == set()

    def test_emits_group_created(self, ledger, events, run):
        run(ledger.create_group(ALICE, [BOB, CHARLIE]))

        [event] = events.of_type(GroupCreated)
        assert event.group_id == 0
        assert event.owner == ALICE
        assert event.members == [ALICE, BOB, CHARLIE]


class TestJoinGroup:
    def test_join_appends_member(self, ledger, events, run):
        group_id = run(ledger.create_group(ALICE, [BOB]))
        run(ledger.join_group(group_id, CHARLIE))

        assert run(ledger.get_group_members(group_id)) == [ALICE, BOB, CHARLIE]
        assert run(ledger.get_user_groups(CHARLIE)) == {group_id}

        [event] = events.of_type(UserJoinedGroup)
        assert (event.group_id, event.user) == (group_id, CHARLIE)

    def test_join_twice(self, ledger, run):
        group_id = run(ledger.create_group(ALICE, [BOB]))
        with pytest.raises(AlreadyMember):
            run(ledger.join_group(group_id, BOB))

    def test_owner_cannot_rejoin(self, ledger, run):
        group_id = run(ledger.create_group(ALICE))
        with pytest.raises(AlreadyMember):
            run(ledger.join_group(group_id, ALICE))

    def test_join_missing_group(self, ledger, run):
        with pytest.raises(GroupNotFound):
            run(ledger.join_group(999, ALICE))

    def test_failed_join_changes_nothing(self, ledger, events, run):
        group_id = run(ledger.create_group(ALICE, [BOB]))
        events.clear()

        with pytest.raises(AlreadyMember):
            run(ledger.join_group(group_id, BOB))

        assert run(ledger.get_group_members(group_id)) == [ALICE, BOB]
        assert events.events == []


class TestQueries:
    def test_is_member(self, ledger, run):
        group_id = run(ledger.create_group(ALICE, [BOB]))
        assert run(ledger.is_member(group_id, BOB))
        assert not run(ledger.is_member(group_id, CHARLIE))

    def test_members_of_missing_group(self, ledger, run):
        with pytest.raises(GroupNotFound):
            run(ledger.get_group_members(42))

    def test_balance_defaults_to_zero(self, ledger, run):
        group_id = run(ledger.create_group(ALICE))
        assert run(ledger.get_balance(group_id, ALICE)) == 0
        assert run(ledger.get_balance(group_id, OWNER)) == 0
        assert run(ledger.get_balance(77, OWNER)) == 0
