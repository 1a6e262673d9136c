import logging
import re
import threading
from contextlib import contextmanager
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from feedback.models import Feedback, TargetTypeEnum
from feedback.models.targets import FeedbackTarget
from members.models import Member
from shared.database import storable_id
from shared.exceptions import CoachingError, Conflict, InternalError, NotFound, ValidationFailed
from teams.models import Team, TeamMember

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# Held for the whole of every mutation, across all stores in the process.
_write_lock = threading.RLock()


def clean_name(value: Optional[str], label: str) -> str:
    name = (value or "").strip()
    if not name:
        raise ValidationFailed(f"{label} must not be empty.")
    return name


def clean_email(value: Optional[str]) -> str:
    email = (value or "").strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise ValidationFailed(f"'{value}' is not a valid email address.")
    return email


def clean_url(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    url = value.strip()
    return url or None


class EntityStore:
    """
    Owns the members, teams, team_members and feedback tables.

    Every mutation commits before returning and hands back the updated
    entity. Reads run without the write lock.
    """

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _writing(self, action: str, conflict_message: Optional[str] = None):
        with _write_lock:
            try:
                yield
                self.db.commit()
            except CoachingError:
                self.db.rollback()
                raise
            except IntegrityError as e:
                self.db.rollback()
                if conflict_message:
                    raise Conflict(conflict_message) from e
                logger.exception("Integrity failure while %s", action)
                raise InternalError(f"Storage failure while {action}.") from e
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.exception("Storage failure while %s", action)
                raise InternalError(f"Storage failure while {action}.") from e

    @contextmanager
    def _reading(self, action: str):
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Storage failure while %s", action)
            raise InternalError(f"Storage failure while {action}.") from e

    # Members

    def create_member(self, name: str, email: str, picture_url: Optional[str] = None) -> Member:
        name = clean_name(name, "Member name")
        email = clean_email(email)
        member = Member(name=name, email=email, picture_url=clean_url(picture_url))

        with self._writing("creating member", conflict_message=f"Email '{email}' is already in use."):
            if self.db.query(Member).filter(Member.email == email).first():
                raise Conflict(f"Email '{email}' is already in use.")
            self.db.add(member)

        logger.info("Member created: id=%s email=%s", member.id, member.email)
        return member

    def find_member(self, member_id: int) -> Optional[Member]:
        if not storable_id(member_id):
            return None
        with self._reading("loading member"):
            return self.db.query(Member).filter(Member.id == member_id).first()

    def get_member(self, member_id: int) -> Member:
        member = self.find_member(member_id)
        if not member:
            raise NotFound("Member", member_id)
        return member

    def member_exists(self, member_id: int) -> bool:
        return self.find_member(member_id) is not None

    def list_members(self) -> List[Member]:
        with self._reading("listing members"):
            return self.db.query(Member).order_by(Member.id).all()

    def update_member(self,
                      member_id: int,
                      name: Optional[str] = None,
                      email: Optional[str] = None,
                      picture_url: Optional[str] = None) -> Member:
        with self._writing("updating member", conflict_message="Email is already in use."):
            member = self.get_member(member_id)

            if name is not None:
                member.name = clean_name(name, "Member name")

            if email is not None:
                email = clean_email(email)
                taken = self.db.query(Member).filter(Member.email == email, Member.id != member_id).first()
                if taken:
                    raise Conflict(f"Email '{email}' is already in use.")
                member.email = email

            if picture_url is not None:
                member.picture_url = clean_url(picture_url)

        logger.info("Member updated: id=%s", member_id)
        return member

    def delete_member(self, member_id: int) -> Member:
        """Delete a member and its membership links; its feedback is kept."""
        with self._writing("deleting member"):
            member = self.get_member(member_id)
            links = len(member.memberships)
            self.db.delete(member)

        self.db.expire_all()

        logger.info("Member deleted: id=%s, membership links removed=%d", member_id, links)
        return member

    # Teams

    def create_team(self, name: str, logo_url: Optional[str] = None) -> Team:
        name = clean_name(name, "Team name")
        team = Team(name=name, logo_url=clean_url(logo_url))

        with self._writing("creating team", conflict_message=f"Team name '{name}' is already in use."):
            if self.db.query(Team).filter(Team.name == name).first():
                raise Conflict(f"Team name '{name}' is already in use.")
            self.db.add(team)

        logger.info("Team created: id=%s name=%s", team.id, team.name)
        return team

    def find_team(self, team_id: int) -> Optional[Team]:
        if not storable_id(team_id):
            return None
        with self._reading("loading team"):
            return self.db.query(Team).filter(Team.id == team_id).first()

    def get_team(self, team_id: int) -> Team:
        team = self.find_team(team_id)
        if not team:
            raise NotFound("Team", team_id)
        return team

    def team_exists(self, team_id: int) -> bool:
        return self.find_team(team_id) is not None

    def list_teams(self) -> List[Team]:
        with self._reading("listing teams"):
            return self.db.query(Team).order_by(Team.id).all()

    def update_team(self, team_id: int, name: Optional[str] = None, logo_url: Optional[str] = None) -> Team:
        with self._writing("updating team", conflict_message="Team name is already in use."):
            team = self.get_team(team_id)

            if name is not None:
                name = clean_name(name, "Team name")
                taken = self.db.query(Team).filter(Team.name == name, Team.id != team_id).first()
                if taken:
                    raise Conflict(f"Team name '{name}' is already in use.")
                team.name = name

            if logo_url is not None:
                team.logo_url = clean_url(logo_url)

        logger.info("Team updated: id=%s", team_id)
        return team

    def delete_team(self, team_id: int) -> Team:
        """Delete a team and all of its membership links in one transaction."""
        with self._writing("deleting team"):
            team = self.get_team(team_id)
            links = len(team.memberships)
            self.db.delete(team)

        self.db.expire_all()

        logger.info("Team deleted: id=%s, membership links removed=%d", team_id, links)
        return team

    # Memberships

    def find_membership(self, team_id: int, member_id: int) -> Optional[TeamMember]:
        if not (storable_id(team_id) and storable_id(member_id)):
            return None
        with self._reading("loading membership"):
            return self.db.query(TeamMember).filter(TeamMember.team_id == team_id,
                                                    TeamMember.member_id == member_id).first()

    def add_membership(self, team_id: int, member_id: int) -> Team:
        with _write_lock:
            team = self.get_team(team_id)
            self.get_member(member_id)

            if self.find_membership(team_id, member_id) is not None:
                self.db.expire_all()
                return team

            try:
                self.db.add(TeamMember(team_id=team_id, member_id=member_id))
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                if self.find_membership(team_id, member_id) is None:
                    # Not a duplicate: the team or member went away before the insert.
                    self.get_team(team_id)
                    self.get_member(member_id)
                    logger.exception("Integrity failure while assigning member")
                    raise InternalError("Storage failure while assigning member.") from e
                # Another process linked the same pair first.
                logger.info("Membership already present: team=%s member=%s", team_id, member_id)
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.exception("Storage failure while assigning member")
                raise InternalError("Storage failure while assigning member.") from e
            else:
                logger.info("Member assigned: team=%s member=%s", team_id, member_id)

            self.db.expire_all()
            return team

    def delete_membership(self, team_id: int, member_id: int) -> Team:
        with self._writing("removing member from team"):
            team = self.get_team(team_id)
            link = self.find_membership(team_id, member_id)
            if link is not None:
                self.db.delete(link)
                logger.info("Member removed: team=%s member=%s", team_id, member_id)

        self.db.expire_all()
        return team

    # Feedback

    def find_target(self, target: FeedbackTarget):
        if target.kind == TargetTypeEnum.member:
            return self.find_member(target.id)
        return self.find_team(target.id)

    def add_feedback(self, content: str, target: FeedbackTarget) -> Feedback:
        with self._writing("creating feedback"):
            if self.find_target(target) is None:
                raise NotFound(target.kind.value.capitalize(), target.id)
            feedback = Feedback(content=content, target_type=target.kind.value, target_id=target.id)
            self.db.add(feedback)

        logger.info("Feedback created: id=%s target=%s:%s", feedback.id, feedback.target_type, feedback.target_id)
        return feedback

    def list_feedback(self,
                      target_type: Optional[TargetTypeEnum] = None,
                      target_id: Optional[int] = None) -> List[Feedback]:
        """Newest first."""
        if target_id is not None and not storable_id(target_id):
            return []
        with self._reading("listing feedback"):
            query = self.db.query(Feedback)
            if target_type is not None:
                query = query.filter(Feedback.target_type == target_type.value)
            if target_id is not None:
                query = query.filter(Feedback.target_id == target_id)
            return query.order_by(Feedback.created_at.desc(), Feedback.id.desc()).all()
