from enum import Enum

from sqlalchemy import Column, Integer, String, Text, Index

from datetime import datetime

from shared.database import Base, UTCDateTime, utc_now


class TargetTypeEnum(str, Enum):
    member = 'member'
    team = 'team'


class Feedback(Base):
    """Immutable note on a member or a team.

    ``target_id`` is not a foreign key: it points into ``members`` or
    ``teams`` depending on ``target_type`` and may outlive its target.
    """

    __tablename__ = "feedback"
    __table_args__ = (
        Index("ix_feedback_target", "target_type", "target_id"),
        {"sqlite_autoincrement": True},
    )

    id: int = Column(Integer, primary_key=True, autoincrement=True)
    content: str = Column(Text, nullable=False)
    target_type: str = Column(String(20), nullable=False)
    target_id: int = Column(Integer, nullable=False)
    created_at: datetime = Column(
        UTCDateTime,
        default=utc_now,
        nullable=False
    )
