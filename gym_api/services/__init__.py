"""
Service objects bound to the request's database session.
"""
from flask import current_app

from gym_api import db

from .coaching import CoachAssignments
from .memberships import MembershipCatalog
from .subscriptions import SubscriptionManager


def subscription_manager():
    """SubscriptionManager using the app's clock and reporting windows."""
    return SubscriptionManager(
        db.session,
        today=current_app.config['CLOCK'],
        expiring_soon_days=current_app.config['EXPIRING_SOON_DAYS'],
        upcoming_renewal_days=current_app.config['UPCOMING_RENEWAL_DAYS'],
    )


def membership_catalog():
    return MembershipCatalog(db.session)


def coach_assignments():
    return CoachAssignments(db.session)


__all__ = [
    'CoachAssignments',
    'MembershipCatalog',
    'SubscriptionManager',
    'coach_assignments',
    'membership_catalog',
    'subscription_manager'
]
