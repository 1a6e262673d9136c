import logging

from services.entity_store import EntityStore
from services.projections import TeamRoster, project_team

logger = logging.getLogger(__name__)


class MembershipManager:
    """Assign and remove team members. Holds no state beyond the store."""

    def __init__(self, store: EntityStore):
        self.store = store

    def assign(self, team_id: int, member_id: int) -> TeamRoster:
        """Add the member to the team; assigning an existing pair is a no-op."""
        team = self.store.add_membership(team_id, member_id)
        return project_team(team)

    def remove(self, team_id: int, member_id: int) -> TeamRoster:
        """Drop the member from the team; a non-member succeeds unchanged."""
        team = self.store.delete_membership(team_id, member_id)
        return project_team(team)
