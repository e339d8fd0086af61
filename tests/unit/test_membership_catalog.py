"""
Unit tests for the membership catalog service.
"""
from datetime import date
from decimal import Decimal

import pytest

from gym_api.errors import ConflictError, NotFoundError, ValidationError
from gym_api.services.memberships import MembershipCatalog


@pytest.fixture
def catalog(db_session):
    return MembershipCatalog(db_session)


def test_create_membership(catalog):
    membership = catalog.create(name="Premium", price=89.99, duration_days=30,
                                has_coach=True, description="Coach included")

    assert membership.id is not None
    assert membership.price == Decimal("89.99")
    assert membership.has_coach is True
    assert membership.has_workout_plan is False
    assert membership.is_active is True


@pytest.mark.parametrize("fields", [
    {"price": 10, "duration_days": 30},
    {"name": "Basic", "duration_days": 30},
    {"name": "Basic", "price": 10},
    {"name": "Basic", "price": -1, "duration_days": 30},
    {"name": "Basic", "price": 10, "duration_days": 0},
    {"name": "Basic", "price": "ten", "duration_days": 30},
    {"name": "  ", "price": 10, "duration_days": 30},
    {"name": "Basic", "price": 10, "duration_days": 30, "colour": "red"},
])
def test_create_rejects_invalid_fields(catalog, fields):
    with pytest.raises(ValidationError):
        catalog.create(**fields)


def test_list_ordered_by_price(catalog, make_membership):
    premium = make_membership(name="Premium", price=Decimal("89.99"))
    basic = make_membership(name="Basic", price=Decimal("29.99"))
    retired = make_membership(name="Legacy", price=Decimal("19.99"), is_active=False)

    assert [m.id for m in catalog.list()] == [retired.id, basic.id, premium.id]
    assert [m.id for m in catalog.list(active_only=True)] == [basic.id, premium.id]


def test_list_search(catalog, make_membership):
    make_membership(name="Basic", description="Gym floor only")
    premium = make_membership(name="Premium", description="Personal coach and nutrition")

    assert [m.id for m in catalog.list(search="coach")] == [premium.id]
    assert [m.id for m in catalog.list(search="prem")] == [premium.id]


def test_update_membership(catalog, membership):
    updated = catalog.update(membership.id, price="59.00", is_active=False)
    assert updated.price == Decimal("59.00")
    assert updated.is_active is False
    assert updated.name == "Standard"


def test_update_unknown(catalog):
    with pytest.raises(NotFoundError):
        catalog.update(9999, price=10)


def test_delete_unreferenced(catalog, membership):
    catalog.delete(membership.id)
    with pytest.raises(NotFoundError):
        catalog.get(membership.id)


def test_delete_referenced_conflicts(catalog, manager, member, membership):
    manager.create(member.id, membership.id, date(2024, 1, 1), date(2024, 1, 31))

    with pytest.raises(ConflictError):
        catalog.delete(membership.id)
    assert catalog.get(membership.id) is not None


def test_stats(catalog, manager, make_user, make_membership):
    basic = make_membership(name="Basic", price=Decimal("20.00"))
    premium = make_membership(name="Premium", price=Decimal("80.00"))
    make_membership(name="Legacy", price=Decimal("10.00"), is_active=False)
    for _ in range(2):
        manager.create(make_user().id, basic.id, date(2024, 1, 1), date(2024, 1, 31))
    manager.create(make_user().id, premium.id, date(2024, 1, 1), date(2024, 1, 31))

    stats = catalog.stats()
    assert stats['total'] == 3
    assert stats['active'] == 2
    assert stats['inactive'] == 1

    revenue = {row['name']: row for row in stats['revenue_by_membership']}
    assert revenue['Basic']['subscriptions_count'] == 2
    assert revenue['Basic']['total_revenue'] == 40.0
    assert revenue['Premium']['total_revenue'] == 80.0
    assert revenue['Legacy']['subscriptions_count'] == 0


def test_stats_revenue_uses_recorded_prices(catalog, manager, make_user, membership):
    manager.create(make_user().id, membership.id, date(2024, 1, 1), date(2024, 1, 31))
    catalog.update(membership.id, price="99.00")
    manager.create(make_user().id, membership.id, date(2024, 1, 1), date(2024, 1, 31))

    row = catalog.stats()['revenue_by_membership'][0]
    assert row['subscriptions_count'] == 2
    assert row['total_revenue'] == pytest.approx(148.99)
