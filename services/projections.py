"""
Read-side views composed from store reads: a team with its resolved roster,
and feedback entries with a human-readable target label.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from feedback.models import Feedback, FeedbackTarget, TargetTypeEnum
from members.models import Member
from services.entity_store import EntityStore
from teams.models import Team


@dataclass
class MemberView:
    id: int
    name: str
    email: str
    picture_url: Optional[str]


@dataclass
class TeamRoster:
    id: int
    name: str
    logo_url: Optional[str]
    created_at: datetime
    members: List[MemberView] = field(default_factory=list)

    @property
    def member_ids(self) -> List[int]:
        return [m.id for m in self.members]


@dataclass
class LabelledFeedback:
    id: int
    content: str
    target_type: str
    target_id: int
    created_at: datetime
    target_label: str


def member_view(member: Member) -> MemberView:
    return MemberView(id=member.id, name=member.name, email=member.email, picture_url=member.picture_url)


def project_team(team: Team) -> TeamRoster:
    return TeamRoster(
        id=team.id,
        name=team.name,
        logo_url=team.logo_url,
        created_at=team.created_at,
        members=[member_view(m) for m in team.members],
    )


def get_team_with_members(store: EntityStore, team_id: int) -> TeamRoster:
    return project_team(store.get_team(team_id))


def list_teams_with_members(store: EntityStore) -> List[TeamRoster]:
    return [project_team(team) for team in store.list_teams()]


def orphan_label(feedback: Feedback) -> str:
    return f"{feedback.target_type} id {feedback.target_id}"


def resolve_feedback_target(store: EntityStore, feedback: Feedback) -> str:
    """Label the feedback's target; a deleted target gets the fallback label."""
    target = FeedbackTarget.of(feedback)
    entity = store.find_target(target)
    if entity is None:
        return orphan_label(feedback)
    if target.kind == TargetTypeEnum.member:
        return f"{entity.name} ({entity.email})"
    return entity.name


def label_feedback(store: EntityStore, feedback: Feedback, label: Optional[str] = None) -> LabelledFeedback:
    return LabelledFeedback(
        id=feedback.id,
        content=feedback.content,
        target_type=feedback.target_type,
        target_id=feedback.target_id,
        created_at=feedback.created_at,
        target_label=label if label is not None else resolve_feedback_target(store, feedback),
    )


def list_feedback_with_labels(store: EntityStore, entries: List[Feedback]) -> List[LabelledFeedback]:
    # One lookup per distinct target rather than per entry.
    labels: dict = {}
    result = []
    for entry in entries:
        key = (entry.target_type, entry.target_id)
        if key not in labels:
            labels[key] = resolve_feedback_target(store, entry)
        result.append(label_feedback(store, entry, labels[key]))
    return result
