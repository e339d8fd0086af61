"""
User model for admins, coaches and members.
"""
from enum import Enum

from gym_api import db
from .base import BaseModel


class UserRole(Enum):
    """Enum for user role values."""
    ADMIN = "admin"
    COACH = "coach"
    MEMBER = "member"


class User(BaseModel):
    """
    User model shared by every role of the club.
    
    Attributes:
        name (str): Display name
        email (str): User's email address (unique)
        role (str): One of admin, coach, member
        is_active (bool): Whether the account is enabled
    """
    __tablename__ = 'users'
    
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(100), unique=True, nullable=False, index=True)
    role = db.Column(db.String(20), nullable=False, default=UserRole.MEMBER.value, index=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    
    # Relationships
    subscriptions = db.relationship('Subscription', back_populates='member', lazy='dynamic')
    
    def __init__(self, name, email, role=UserRole.MEMBER.value, is_active=True):
        """
        Initialize a new User instance.
        
        Args:
            name (str): User's display name
            email (str): User's email
            role (str, optional): User's role
            is_active (bool, optional): Whether the account is enabled
        """
        self.name = name
        self.email = email
        self.role = role
        self.is_active = is_active

    @property
    def is_member(self):
        return self.role == UserRole.MEMBER.value

    @property
    def is_coach(self):
        return self.role == UserRole.COACH.value
    
    def __repr__(self):
        """String representation of the User model."""
        return f"<User {self.email} ({self.role})>"
