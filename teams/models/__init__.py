from teams.models.team_member import TeamMember
from teams.models.teams import Team

__all__ = ["Team", "TeamMember"]
