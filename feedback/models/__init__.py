from feedback.models.feedback import Feedback, TargetTypeEnum
from feedback.models.targets import FeedbackTarget

__all__ = ["Feedback", "FeedbackTarget", "TargetTypeEnum"]
