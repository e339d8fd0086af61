#!/usr/bin/env python
"""
Script to seed the membership catalog.
"""
from gym_api import create_app, db
from gym_api.models import Membership

SAMPLE_MEMBERSHIPS = [
    {
        "name": "Basic",
        "description": "Gym floor access",
        "price": 100,
        "duration_days": 30,
    },
    {
        "name": "Standard",
        "description": "Gym floor access with a workout plan",
        "price": 150,
        "duration_days": 30,
        "has_workout_plan": True,
    },
    {
        "name": "Premium",
        "description": "Personal coach, workout and nutrition plans",
        "price": 250,
        "duration_days": 30,
        "has_coach": True,
        "has_workout_plan": True,
        "has_nutrition_plan": True,
    },
    {
        "name": "Premium (Quarterly)",
        "description": "Premium for three months",
        "price": 650,
        "duration_days": 90,
        "has_coach": True,
        "has_workout_plan": True,
        "has_nutrition_plan": True,
    },
]


def create_sample_memberships():
    """Create sample memberships if they don't already exist."""
    existing = {m.name for m in Membership.query.all()}
    print(f"Found existing memberships: {sorted(existing)}")

    to_create = [Membership(**data) for data in SAMPLE_MEMBERSHIPS if data["name"] not in existing]
    if not to_create:
        print("All sample memberships already exist.")
        return

    db.session.add_all(to_create)
    db.session.commit()
    print(f"Created {len(to_create)} memberships: {[m.name for m in to_create]}")


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        create_sample_memberships()
