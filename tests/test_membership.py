import pytest

from services.membership import MembershipManager
from shared.exceptions import NotFound


@pytest.fixture
def manager(store):
    return MembershipManager(store)


@pytest.fixture
def team(store):
    return store.create_team("Core")


@pytest.fixture
def alice(store):
    return store.create_member("Alice", "a@x.com")


class TestAssign:
    def test_assign_returns_updated_roster(self, manager, team, alice):
        roster = manager.assign(team.id, alice.id)
        assert roster.id == team.id
        assert [m.name for m in roster.members] == ["Alice"]

    def test_assign_is_idempotent(self, manager, store, team, alice):
        once = manager.assign(team.id, alice.id).member_ids
        twice = manager.assign(team.id, alice.id).member_ids
        assert once == twice == [alice.id]
        assert store.get_team(team.id).member_ids == [alice.id]

    def test_roster_keeps_assignment_order(self, manager, store, team):
        carol = store.create_member("Carol", "c@x.com")
        bob = store.create_member("Bob", "b@x.com")
        manager.assign(team.id, carol.id)
        roster = manager.assign(team.id, bob.id)
        assert [m.name for m in roster.members] == ["Carol", "Bob"]

    def test_member_may_join_several_teams(self, manager, store, team, alice):
        edge = store.create_team("Edge")
        manager.assign(team.id, alice.id)
        manager.assign(edge.id, alice.id)
        assert store.get_team(team.id).member_ids == [alice.id]
        assert store.get_team(edge.id).member_ids == [alice.id]

    def test_assign_unknown_team(self, manager, alice):
        with pytest.raises(NotFound):
            manager.assign(99, alice.id)

    def test_assign_unknown_member(self, manager, store, team):
        with pytest.raises(NotFound):
            manager.assign(team.id, 99)
        assert store.get_team(team.id).member_ids == []


class TestRemove:
    def test_remove_member(self, manager, team, alice):
        manager.assign(team.id, alice.id)
        assert manager.remove(team.id, alice.id).members == []

    def test_remove_non_member_is_silent(self, manager, store, team, alice):
        bob = store.create_member("Bob", "b@x.com")
        manager.assign(team.id, alice.id)
        roster = manager.remove(team.id, bob.id)
        assert roster.member_ids == [alice.id]

    def test_remove_unknown_member_id_is_silent(self, manager, team):
        assert manager.remove(team.id, 12345).member_ids == []

    def test_remove_from_unknown_team(self, manager, alice):
        with pytest.raises(NotFound):
            manager.remove(99, alice.id)

    def test_reassign_after_remove_goes_to_end(self, manager, store, team, alice):
        bob = store.create_member("Bob", "b@x.com")
        manager.assign(team.id, alice.id)
        manager.assign(team.id, bob.id)
        manager.remove(team.id, alice.id)
        roster = manager.assign(team.id, alice.id)
        assert roster.member_ids == [bob.id, alice.id]
