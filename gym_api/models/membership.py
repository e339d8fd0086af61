"""
Membership model for the club's catalog of plans.
"""
from sqlalchemy import CheckConstraint, Index

from gym_api import db
from .base import BaseModel


class Membership(BaseModel):
    """
    Membership plan offered by the club.
    
    Attributes:
        name (str): Plan name (e.g., "Basic", "Premium")
        description (str): Plan description
        price (Decimal): Price of the plan
        duration_days (int): Length of one subscription period in days
        has_coach (bool): Plan includes a personal coach
        has_workout_plan (bool): Plan includes a workout plan
        has_nutrition_plan (bool): Plan includes a nutrition plan
        is_active (bool): Whether the plan can be sold
    """
    __tablename__ = 'memberships'
    
    name = db.Column(db.String(100), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    duration_days = db.Column(db.Integer, nullable=False)
    has_coach = db.Column(db.Boolean, nullable=False, default=False)
    has_workout_plan = db.Column(db.Boolean, nullable=False, default=False)
    has_nutrition_plan = db.Column(db.Boolean, nullable=False, default=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    
    # Relationships
    subscriptions = db.relationship('Subscription', back_populates='membership', lazy='dynamic')

    __table_args__ = (
        CheckConstraint('price >= 0', name='ck_memberships_price_non_negative'),
        CheckConstraint('duration_days > 0', name='ck_memberships_duration_positive'),
        # Catalog listing filters on is_active and sorts by price
        Index('idx_memberships_active_price', 'is_active', 'price'),
    )
    
    def __init__(self, name, price, duration_days, description=None,
                 has_coach=False, has_workout_plan=False, has_nutrition_plan=False,
                 is_active=True):
        """
        Initialize a new Membership instance.
        
        Args:
            name (str): Plan name
            price (Decimal): Plan price
            duration_days (int): Period length in days
            description (str, optional): Plan description
            has_coach (bool, optional): Coach included
            has_workout_plan (bool, optional): Workout plan included
            has_nutrition_plan (bool, optional): Nutrition plan included
            is_active (bool, optional): Whether the plan is on sale
        """
        self.name = name
        self.description = description
        self.price = price
        self.duration_days = duration_days
        self.has_coach = has_coach
        self.has_workout_plan = has_workout_plan
        self.has_nutrition_plan = has_nutrition_plan
        self.is_active = is_active
    
    def __repr__(self):
        """String representation of the Membership model."""
        return f"<Membership {self.name} - ${self.price}>"
