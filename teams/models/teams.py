from sqlalchemy import Column, Integer, String

from datetime import datetime

from sqlalchemy.orm import relationship

from shared.database import Base, UTCDateTime, utc_now

from teams.models.team_member import TeamMember


class Team(Base):
    __tablename__ = "teams"
    __table_args__ = {"sqlite_autoincrement": True}

    id: int = Column(Integer, primary_key=True, autoincrement=True)
    name: str = Column(String(255), nullable=False, unique=True)
    logo_url: str = Column(String(2048), nullable=True)
    created_at: datetime = Column(
        UTCDateTime,
        default=utc_now,
        nullable=False
    )

    memberships = relationship(
        "TeamMember",
        back_populates="team",
        cascade="all, delete-orphan",
        order_by=TeamMember.id,
    )

    @property
    def member_ids(self) -> list[int]:
        return [link.member_id for link in self.memberships]

    @property
    def members(self) -> list:
        return [link.member for link in self.memberships]
