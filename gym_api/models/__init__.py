"""
Models package for SQLAlchemy database models.
"""
from .base import BaseModel
from .user import User, UserRole
from .membership import Membership
from .subscription import Subscription, SubscriptionStatus, subscription_status
from .coach_member import CoachMember

__all__ = [
    'BaseModel',
    'User',
    'UserRole',
    'Membership',
    'Subscription',
    'SubscriptionStatus',
    'subscription_status',
    'CoachMember'
]
