from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from datetime import datetime

from shared.database import Base, UTCDateTime, utc_now


class TeamMember(Base):
    """Membership link; the surrogate id records assignment order."""

    __tablename__ = 'team_members'
    __table_args__ = (
        UniqueConstraint("team_id", "member_id", name="uq_team_members_team_member"),
        {"sqlite_autoincrement": True},
    )

    id: int = Column(Integer, primary_key=True, autoincrement=True)
    team_id: int = Column(Integer, ForeignKey('teams.id', ondelete="CASCADE"), nullable=False, index=True)
    member_id: int = Column(Integer, ForeignKey('members.id', ondelete="CASCADE"), nullable=False, index=True)
    assigned_at: datetime = Column(
        UTCDateTime,
        default=utc_now,
        nullable=False
    )

    team = relationship("Team", back_populates="memberships")
    member = relationship("Member", back_populates="memberships")
