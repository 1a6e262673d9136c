import pytest

from services.feedback_service import FeedbackService
from services.membership import MembershipManager
from services.projections import (get_team_with_members, list_feedback_with_labels, list_teams_with_members,
                                  resolve_feedback_target)
from shared.exceptions import NotFound


class TestTeamWithMembers:
    def test_resolves_full_member_records(self, store):
        alice = store.create_member("Alice", "a@x.com", picture_url="https://img/a.png")
        team = store.create_team("Core")
        MembershipManager(store).assign(team.id, alice.id)

        roster = get_team_with_members(store, team.id)

        assert roster.name == "Core"
        assert len(roster.members) == 1
        assert roster.members[0].email == "a@x.com"
        assert roster.members[0].picture_url == "https://img/a.png"

    def test_missing_team(self, store):
        with pytest.raises(NotFound):
            get_team_with_members(store, 10)

    def test_list_teams_with_members(self, store):
        alice = store.create_member("Alice", "a@x.com")
        core = store.create_team("Core")
        store.create_team("Edge")
        MembershipManager(store).assign(core.id, alice.id)

        rosters = list_teams_with_members(store)
        assert [(r.name, r.member_ids) for r in rosters] == [("Core", [alice.id]), ("Edge", [])]


class TestFeedbackLabels:
    def test_member_label(self, store):
        alice = store.create_member("Alice", "a@x.com")
        feedback = FeedbackService(store).create("Great work", "member", alice.id)
        assert resolve_feedback_target(store, feedback) == "Alice (a@x.com)"

    def test_team_label(self, store):
        team = store.create_team("Core")
        feedback = FeedbackService(store).create("Ship it", "team", team.id)
        assert resolve_feedback_target(store, feedback) == "Core"

    def test_deleted_team_falls_back(self, store):
        team = store.create_team("Core")
        feedback = FeedbackService(store).create("Ship it", "team", team.id)
        store.delete_team(team.id)
        assert resolve_feedback_target(store, feedback) == f"team id {team.id}"

    def test_deleted_member_falls_back(self, store):
        alice = store.create_member("Alice", "a@x.com")
        feedback = FeedbackService(store).create("Great work", "member", alice.id)
        store.delete_member(alice.id)
        assert resolve_feedback_target(store, feedback) == f"member id {alice.id}"

    def test_list_with_labels(self, store):
        alice = store.create_member("Alice", "a@x.com")
        team = store.create_team("Core")
        service = FeedbackService(store)
        service.create("one", "member", alice.id)
        service.create("two", "team", team.id)
        service.create("three", "member", alice.id)

        labelled = list_feedback_with_labels(store, service.list())
        assert [(f.content, f.target_label) for f in labelled] == [
            ("three", "Alice (a@x.com)"),
            ("two", "Core"),
            ("one", "Alice (a@x.com)"),
        ]
