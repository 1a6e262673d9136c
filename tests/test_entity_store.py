from datetime import timezone

import pytest
from sqlalchemy.exc import IntegrityError

from feedback.models import FeedbackTarget, TargetTypeEnum
from services.entity_store import EntityStore
from shared.exceptions import Conflict, NotFound, ValidationFailed
from teams.models import TeamMember


class TestMembers:
    def test_create_member_assigns_ids(self, store):
        alice = store.create_member("Alice", "a@x.com")
        bob = store.create_member("Bob", "b@x.com", picture_url="https://img/b.png")
        assert alice.id != bob.id
        assert bob.picture_url == "https://img/b.png"

    def test_member_ids_unique_across_many_creations(self, store):
        ids = [store.create_member(f"M{i}", f"m{i}@x.com").id for i in range(20)]
        assert len(set(ids)) == 20

    def test_name_is_trimmed(self, store):
        member = store.create_member("  Alice  ", "a@x.com")
        assert member.name == "Alice"

    def test_email_is_normalised(self, store):
        member = store.create_member("Alice", "  Alice@Example.COM ")
        assert member.email == "alice@example.com"

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_empty_name_rejected(self, store, name):
        with pytest.raises(ValidationFailed):
            store.create_member(name, "a@x.com")

    @pytest.mark.parametrize("email", ["", "alice", "alice@", "@x.com", "a b@x.com", "alice@x"])
    def test_malformed_email_rejected(self, store, email):
        with pytest.raises(ValidationFailed):
            store.create_member("Alice", email)
        assert store.list_members() == []

    def test_duplicate_email_conflicts(self, store):
        store.create_member("Alice", "a@x.com")
        with pytest.raises(Conflict):
            store.create_member("Alicia", "A@X.com")
        assert len(store.list_members()) == 1

    def test_get_member_missing(self, store):
        with pytest.raises(NotFound) as exc:
            store.get_member(42)
        assert exc.value.kind == "not_found"

    def test_list_members_in_creation_order(self, store):
        store.create_member("Zed", "z@x.com")
        store.create_member("Amy", "amy@x.com")
        assert [m.name for m in store.list_members()] == ["Zed", "Amy"]

    def test_list_members_empty(self, store):
        assert store.list_members() == []

    def test_update_member(self, store):
        member = store.create_member("Alice", "a@x.com", picture_url="https://img/a.png")
        updated = store.update_member(member.id, name="Alice Smith", picture_url="")
        assert updated.name == "Alice Smith"
        assert updated.email == "a@x.com"
        assert updated.picture_url is None

    def test_update_member_email_conflict(self, store):
        store.create_member("Alice", "a@x.com")
        bob = store.create_member("Bob", "b@x.com")
        with pytest.raises(Conflict):
            store.update_member(bob.id, email="a@x.com")
        assert store.get_member(bob.id).email == "b@x.com"

    def test_update_member_keeps_own_email(self, store):
        alice = store.create_member("Alice", "a@x.com")
        assert store.update_member(alice.id, email="A@x.com").email == "a@x.com"

    def test_delete_member_removes_memberships_and_keeps_feedback(self, store):
        alice = store.create_member("Alice", "a@x.com")
        team = store.create_team("Core")
        store.add_membership(team.id, alice.id)
        store.add_feedback("Nice", FeedbackTarget.member(alice.id))

        store.delete_member(alice.id)

        assert store.find_member(alice.id) is None
        assert store.get_team(team.id).member_ids == []
        assert len(store.list_feedback()) == 1

    def test_deleted_member_id_never_reused(self, store):
        alice = store.create_member("Alice", "a@x.com")
        store.delete_member(alice.id)
        bob = store.create_member("Bob", "b@x.com")
        assert bob.id > alice.id

    def test_delete_missing_member(self, store):
        with pytest.raises(NotFound):
            store.delete_member(7)


class TestTeams:
    def test_create_team_is_empty(self, store):
        team = store.create_team("Core", logo_url="https://img/core.svg")
        assert team.member_ids == []
        assert team.logo_url == "https://img/core.svg"

    def test_empty_team_name_rejected(self, store):
        with pytest.raises(ValidationFailed):
            store.create_team("  ")

    def test_duplicate_team_name_conflicts(self, store):
        store.create_team("Core")
        with pytest.raises(Conflict):
            store.create_team("Core")

    def test_get_team_missing(self, store):
        with pytest.raises(NotFound):
            store.get_team(1)

    def test_list_teams_in_creation_order(self, store):
        store.create_team("B")
        store.create_team("A")
        assert [t.name for t in store.list_teams()] == ["B", "A"]

    def test_update_team_rename_conflict(self, store):
        store.create_team("Core")
        other = store.create_team("Edge")
        with pytest.raises(Conflict):
            store.update_team(other.id, name="Core")

    def test_update_team_logo(self, store):
        team = store.create_team("Core")
        assert store.update_team(team.id, logo_url="https://img/new.svg").logo_url == "https://img/new.svg"

    def test_delete_team_cascades_memberships(self, store, db):
        alice = store.create_member("Alice", "a@x.com")
        team = store.create_team("Core")
        store.add_membership(team.id, alice.id)

        store.delete_team(team.id)

        assert store.list_teams() == []
        assert db.query(TeamMember).count() == 0
        assert store.get_member(alice.id).name == "Alice"

    def test_delete_team_missing(self, store):
        with pytest.raises(NotFound):
            store.delete_team(3)

    def test_ids_beyond_integer_range_are_missing(self, store):
        assert store.find_team(2 ** 64) is None
        assert store.find_member(-(2 ** 64)) is None
        with pytest.raises(NotFound):
            store.get_team(2 ** 64)


class TestFeedbackStorage:
    def test_add_feedback_requires_existing_target(self, store):
        with pytest.raises(NotFound):
            store.add_feedback("Hello", FeedbackTarget.team(5))
        assert store.list_feedback() == []

    def test_list_feedback_newest_first(self, store):
        team = store.create_team("Core")
        first = store.add_feedback("first", FeedbackTarget.team(team.id))
        second = store.add_feedback("second", FeedbackTarget.team(team.id))
        assert [f.id for f in store.list_feedback()] == [second.id, first.id]

    def test_created_at_is_utc_after_reload(self, store, session_factory):
        team = store.create_team("Core")
        feedback = store.add_feedback("first", FeedbackTarget.team(team.id))

        other = session_factory()
        try:
            reloaded = EntityStore(other).list_feedback()[0]
            assert reloaded.created_at.tzinfo == timezone.utc
            assert reloaded.created_at == feedback.created_at
            assert EntityStore(other).get_team(team.id).created_at.tzinfo == timezone.utc
        finally:
            other.close()

    def test_list_feedback_for_out_of_range_id(self, store):
        team = store.create_team("Core")
        store.add_feedback("first", FeedbackTarget.team(team.id))
        assert store.list_feedback(TargetTypeEnum.team, 2 ** 63) == []


class TestMembershipStorage:
    def test_failed_insert_for_vanished_member_is_not_found(self, store, monkeypatch):
        team = store.create_team("Core")
        alice = store.create_member("Alice", "a@x.com")

        def commit_after_member_deleted():
            # The member disappears between the existence check and the insert.
            monkeypatch.setattr(store, "find_member", lambda member_id: None)
            raise IntegrityError("INSERT INTO team_members", {}, Exception("FOREIGN KEY constraint failed"))

        monkeypatch.setattr(store.db, "commit", commit_after_member_deleted)

        with pytest.raises(NotFound):
            store.add_membership(team.id, alice.id)

        monkeypatch.undo()
        assert store.get_team(team.id).member_ids == []

    def test_failed_insert_for_existing_pair_is_success(self, store, db, monkeypatch):
        team = store.create_team("Core")
        alice = store.create_member("Alice", "a@x.com")
        real_commit = db.commit

        def commit_after_other_process_linked():
            db.rollback()
            db.add(TeamMember(team_id=team.id, member_id=alice.id))
            real_commit()
            raise IntegrityError("INSERT INTO team_members", {}, Exception("UNIQUE constraint failed"))

        monkeypatch.setattr(db, "commit", commit_after_other_process_linked)

        assert store.add_membership(team.id, alice.id).member_ids == [alice.id]
