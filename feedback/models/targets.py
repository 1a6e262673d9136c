from dataclasses import dataclass

from feedback.models.feedback import TargetTypeEnum
from shared.database import storable_id
from shared.exceptions import ValidationFailed


@dataclass(frozen=True)
class FeedbackTarget:
    """The member-or-team a feedback entry is attached to."""

    kind: TargetTypeEnum
    id: int

    @classmethod
    def parse(cls, target_type, target_id) -> "FeedbackTarget":
        return cls(parse_target_type(target_type), parse_target_id(target_id))

    @classmethod
    def member(cls, member_id: int) -> "FeedbackTarget":
        return cls(TargetTypeEnum.member, member_id)

    @classmethod
    def team(cls, team_id: int) -> "FeedbackTarget":
        return cls(TargetTypeEnum.team, team_id)

    @classmethod
    def of(cls, feedback) -> "FeedbackTarget":
        return cls(TargetTypeEnum(feedback.target_type), feedback.target_id)


def parse_target_type(value) -> TargetTypeEnum:
    if isinstance(value, TargetTypeEnum):
        return value
    try:
        return TargetTypeEnum(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(t.value for t in TargetTypeEnum)
        raise ValidationFailed(f"Invalid targetType '{value}'. Must be one of: {allowed}.")


def parse_target_id(value) -> int:
    if isinstance(value, bool):
        raise ValidationFailed(f"Invalid targetId '{value}'.")
    try:
        target_id = int(value)
    except (TypeError, ValueError):
        raise ValidationFailed(f"Invalid targetId '{value}'.")
    if not storable_id(target_id):
        raise ValidationFailed(f"targetId {target_id} is out of range.")
    return target_id
