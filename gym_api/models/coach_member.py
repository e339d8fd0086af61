"""
Coach to member assignment model.
"""
from sqlalchemy import UniqueConstraint

from gym_api import db
from .base import BaseModel, utcnow


class CoachMember(BaseModel):
    """
    Assignment of a member to a coach.

    Coach-scoped access to a member's data requires one of these rows.
    """
    __tablename__ = 'coach_members'

    coach_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    member_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    assigned_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    notes = db.Column(db.Text, nullable=True)

    coach = db.relationship('User', foreign_keys=[coach_id])
    member = db.relationship('User', foreign_keys=[member_id])

    __table_args__ = (
        UniqueConstraint('coach_id', 'member_id', name='uq_coach_members_pair'),
    )

    def __init__(self, coach_id, member_id, notes=None):
        self.coach_id = coach_id
        self.member_id = member_id
        self.notes = notes

    def __repr__(self):
        return f"<CoachMember Coach:{self.coach_id} Member:{self.member_id}>"
