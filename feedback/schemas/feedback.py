from datetime import datetime

from pydantic import AliasChoices, Field

from shared.schemas import CamelModel


class FeedbackResponse(CamelModel):
    id: int
    content: str
    target_type: str
    target_id: int
    created_at: datetime


class FeedbackListItem(FeedbackResponse):
    target_label: str


class FeedbackCreateRequest(CamelModel):
    content: str
    # The original web client posted all-lowercase keys.
    target_type: str = Field(validation_alias=AliasChoices("targetType", "target_type", "targettype"))
    target_id: int = Field(validation_alias=AliasChoices("targetId", "target_id", "targetid"))
