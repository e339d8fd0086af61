"""
Coach to member assignments.
"""
import logging

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError

from gym_api.errors import ConflictError, NotFoundError, ValidationError
from gym_api.models.coach_member import CoachMember
from gym_api.models.user import User, UserRole
from gym_api.utils.validation import parse_int, parse_str

logger = logging.getLogger(__name__)


class CoachAssignments:
    """Maintains the coach-member relation used by coach-scoped access checks."""

    def __init__(self, session):
        self.session = session

    def is_assigned(self, coach_id, member_id):
        """Whether ``member_id`` is assigned to ``coach_id``."""
        if coach_id is None or member_id is None:
            return False
        return bool(self.session.scalar(
            select(exists().where(CoachMember.coach_id == coach_id,
                                  CoachMember.member_id == member_id))
        ))

    def assign(self, coach_id, member_id, notes=None):
        """
        Assign a member to a coach.

        Raises:
            NotFoundError: Unknown coach or member
            ValidationError: Users do not have the coach and member roles
            ConflictError: The pair is already assigned
        """
        coach = self._user(parse_int(coach_id, 'coach_id'), UserRole.COACH)
        member = self._user(parse_int(member_id, 'member_id'), UserRole.MEMBER)
        if self.is_assigned(coach.id, member.id):
            raise ConflictError("Member is already assigned to this coach")

        assignment = CoachMember(coach_id=coach.id, member_id=member.id,
                                 notes=parse_str(notes, 'notes'))
        self.session.add(assignment)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise ConflictError("Member is already assigned to this coach")
        logger.info("Assigned member %s to coach %s", member.id, coach.id)
        return assignment

    def unassign(self, assignment_id):
        assignment = self.session.get(CoachMember, parse_int(assignment_id, 'assignment_id'))
        if assignment is None:
            raise NotFoundError(f"Assignment {assignment_id} not found")
        self.session.delete(assignment)
        self.session.commit()
        logger.info("Removed assignment %s", assignment_id)

    def list(self, coach_id=None):
        stmt = select(CoachMember).order_by(CoachMember.assigned_at.desc(), CoachMember.id.desc())
        if coach_id is not None:
            stmt = stmt.where(CoachMember.coach_id == coach_id)
        return list(self.session.scalars(stmt))

    def members_of(self, coach_id):
        """Members assigned to a coach, ordered by name."""
        coach = self._user(parse_int(coach_id, 'coach_id'), UserRole.COACH)
        stmt = (
            select(User)
            .join(CoachMember, CoachMember.member_id == User.id)
            .where(CoachMember.coach_id == coach.id)
            .order_by(User.name)
        )
        return list(self.session.scalars(stmt))

    def _user(self, user_id, role):
        user = self.session.get(User, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        if user.role != role.value:
            raise ValidationError(f"User {user_id} is not a {role.value}")
        return user
