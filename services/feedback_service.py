import logging
from typing import List, Optional

from feedback.models import Feedback, FeedbackTarget
from feedback.models.targets import parse_target_id, parse_target_type
from services.entity_store import EntityStore
from shared.exceptions import ValidationFailed

logger = logging.getLogger(__name__)


class FeedbackService:
    """Create and query immutable feedback on members and teams."""

    def __init__(self, store: EntityStore):
        self.store = store

    def create(self, content: str, target_type, target_id) -> Feedback:
        if not (content or "").strip():
            raise ValidationFailed("Feedback content must not be empty.")

        target = FeedbackTarget.parse(target_type, target_id)
        return self.store.add_feedback(content, target)

    def list(self, target_type=None, target_id=None) -> List[Feedback]:
        """
        All feedback, newest first.

        ``target_type`` alone narrows to one kind; together with
        ``target_id`` it narrows to one target. ``target_id`` alone is
        rejected, since the same id can name both a member and a team.
        """
        if target_id is not None and target_type is None:
            raise ValidationFailed("targetId requires targetType.")

        kind = parse_target_type(target_type) if target_type is not None else None
        entity_id: Optional[int] = parse_target_id(target_id) if target_id is not None else None
        return self.store.list_feedback(kind, entity_id)
