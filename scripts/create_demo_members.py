#!/usr/bin/env python
"""
Script to create demo members with subscriptions in various states:
- current subscriptions
- subscriptions expiring within a week
- expired subscriptions
- cancelled subscriptions
"""
import random
import sys
from datetime import UTC, date, datetime, timedelta

from faker import Faker

from gym_api import create_app, db
from gym_api.models import Membership, Subscription, User, UserRole

fake = Faker()

DEFAULT_MEMBERS = 200


def create_demo_members(total=DEFAULT_MEMBERS):
    """Create ``total`` members, each with one subscription."""
    memberships = Membership.query.filter_by(is_active=True).all()
    if not memberships:
        print("Error: no active memberships. Run create_sample_memberships.py first.")
        return

    today = date.today()
    created = 0
    for i in range(total):
        member = User(
            name=fake.name(),
            email=f"{fake.user_name()}_{i}@{fake.domain_name()}",
            role=UserRole.MEMBER.value,
        )
        db.session.add(member)
        db.session.flush()

        membership = random.choice(memberships)
        scenario = random.choice(('current', 'expiring', 'expired', 'cancelled'))
        if scenario == 'expiring':
            end_date = today + timedelta(days=random.randint(0, 7))
        elif scenario == 'expired':
            end_date = today - timedelta(days=random.randint(1, 60))
        else:
            end_date = today + timedelta(days=random.randint(8, membership.duration_days + 8))
        start_date = end_date - timedelta(days=membership.duration_days)

        subscription = Subscription(
            member_id=member.id,
            membership_id=membership.id,
            start_date=start_date,
            end_date=end_date,
            price=membership.price,
            duration_days=membership.duration_days,
        )
        if scenario == 'cancelled':
            subscription.is_active = False
            subscription.cancelled_at = datetime.now(UTC)
        db.session.add(subscription)
        created += 1

        if created % 100 == 0:
            db.session.commit()
            print(f"Created {created}/{total} members")

    db.session.commit()
    print(f"Done: {created} members with subscriptions")


if __name__ == "__main__":
    count = int(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_MEMBERS
    app = create_app()
    with app.app_context():
        create_demo_members(count)
