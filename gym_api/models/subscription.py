"""
Subscription model for a member's purchased instance of a membership.
"""
from datetime import timedelta
from enum import Enum

from sqlalchemy import CheckConstraint, Index, and_
from sqlalchemy.ext.hybrid import hybrid_method

from gym_api import db

from .base import BaseModel

# User-facing "expiring soon" window for status classification
EXPIRING_SOON_DAYS = 7
# Wider window used only by renewal reporting
UPCOMING_RENEWAL_DAYS = 30


class SubscriptionStatus(Enum):
    """Enum for derived subscription status values."""
    ACTIVE = "active"
    EXPIRING_SOON = "expiring_soon"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


def subscription_status(subscription, today, expiring_soon_days=EXPIRING_SOON_DAYS):
    """
    Derive the status of a subscription on a given day.

    An inactive row is cancelled when it carries an explicit cancellation,
    otherwise it was deactivated after running out and counts as expired.
    The expiring-soon window is inclusive at both ends.

    Args:
        subscription: Object with is_active, cancelled_at and end_date
        today (date): Reference day
        expiring_soon_days (int): Size of the expiring-soon window

    Returns:
        SubscriptionStatus: Exactly one of the four statuses
    """
    if not subscription.is_active:
        if subscription.cancelled_at is not None:
            return SubscriptionStatus.CANCELLED
        return SubscriptionStatus.EXPIRED
    if subscription.end_date < today:
        return SubscriptionStatus.EXPIRED
    if subscription.end_date <= today + timedelta(days=expiring_soon_days):
        return SubscriptionStatus.EXPIRING_SOON
    return SubscriptionStatus.ACTIVE


class Subscription(BaseModel):
    """
    Subscription of a member to a membership plan.

    Attributes:
        member_id (int): Foreign key to the member (User with role member)
        membership_id (int): Foreign key to Membership
        start_date (date): First day of the subscription
        end_date (date): Last day of the subscription, strictly after start_date
        is_active (bool): False once cancelled or swept after expiry
        cancelled_at (datetime): When the subscription was explicitly cancelled
        price (Decimal): Membership price recorded at creation
        duration_days (int): Membership duration recorded at creation
        notes (str): Free-text notes
    """
    __tablename__ = 'subscriptions'

    member_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    membership_id = db.Column(db.Integer, db.ForeignKey('memberships.id'), nullable=False)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    cancelled_at = db.Column(db.DateTime, nullable=True)
    price = db.Column(db.Numeric(10, 2), nullable=True)
    duration_days = db.Column(db.Integer, nullable=True)
    notes = db.Column(db.Text, nullable=True)

    # Relationships
    member = db.relationship('User', back_populates='subscriptions')
    membership = db.relationship('Membership', back_populates='subscriptions')

    __table_args__ = (
        CheckConstraint('start_date < end_date', name='ck_subscriptions_date_range'),

        # Current subscription lookup per member
        Index('idx_subscriptions_member_active', 'member_id', 'is_active'),

        # Date range and expiry reporting
        Index('idx_subscriptions_dates', 'start_date', 'end_date'),
        Index('idx_subscriptions_active_end_date', 'is_active', 'end_date'),

        Index('idx_subscriptions_membership_id', 'membership_id'),
    )

    def __init__(self, member_id, membership_id, start_date, end_date,
                 is_active=True, price=None, duration_days=None, notes=None):
        """
        Initialize a new Subscription instance.

        Args:
            member_id (int): Member user ID
            membership_id (int): Membership ID
            start_date (date): Subscription start date
            end_date (date): Subscription end date
            is_active (bool, optional): Whether the subscription is active
            price (Decimal, optional): Price snapshot
            duration_days (int, optional): Duration snapshot
            notes (str, optional): Free-text notes
        """
        self.member_id = member_id
        self.membership_id = membership_id
        self.start_date = start_date
        self.end_date = end_date
        self.is_active = is_active
        self.price = price
        self.duration_days = duration_days
        self.notes = notes

    @hybrid_method
    def is_current(self, today):
        """
        Check whether the subscription is current on a given day.

        Args:
            today (date): Reference day

        Returns:
            bool: True if active and not yet past its end date
        """
        return self.is_active and self.end_date >= today

    @is_current.expression
    def is_current(cls, today):
        return and_(cls.is_active.is_(True), cls.end_date >= today)

    def status_on(self, today, expiring_soon_days=EXPIRING_SOON_DAYS):
        """Derived status of this subscription on ``today``."""
        return subscription_status(self, today, expiring_soon_days)

    def __repr__(self):
        """String representation of the Subscription model."""
        return (f"<Subscription Member:{self.member_id} Membership:{self.membership_id} "
                f"{self.start_date}..{self.end_date}>")
