from sqlalchemy import Column, Integer, String

from datetime import datetime

from sqlalchemy.orm import relationship

from shared.database import Base, UTCDateTime, utc_now


class Member(Base):
    __tablename__ = "members"
    __table_args__ = {"sqlite_autoincrement": True}

    id: int = Column(Integer, primary_key=True, autoincrement=True)
    name: str = Column(String(255), nullable=False)
    email: str = Column(String(320), nullable=False, unique=True, index=True)
    picture_url: str = Column(String(2048), nullable=True)
    created_at: datetime = Column(
        UTCDateTime,
        default=utc_now,
        nullable=False
    )

    memberships = relationship("TeamMember", back_populates="member", cascade="all, delete-orphan")
