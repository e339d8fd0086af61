"""
Pytest configuration and fixtures.
"""
import itertools
import os
from datetime import date
from decimal import Decimal

import pytest
from flask_jwt_extended import create_access_token

from gym_api import create_app
from gym_api import db as _db
from gym_api.models.membership import Membership
from gym_api.models.user import User, UserRole
from gym_api.services.subscriptions import SubscriptionManager

# Fixed "today" so date-window behaviour is deterministic
TODAY = date(2024, 1, 10)


@pytest.fixture(scope="session")
def app():
    """
    Create a Flask application configured for testing.

    Returns:
        Flask: The Flask application instance with a frozen clock.
    """
    os.environ["FLASK_ENV"] = "testing"
    app = create_app('testing')
    app.config['CLOCK'] = lambda: TODAY

    with app.app_context():
        yield app


@pytest.fixture(scope="function")
def client(app):
    """
    Create a test client for the Flask application.

    Args:
        app: The Flask application fixture.

    Returns:
        FlaskClient: A test client for the Flask application.
    """
    return app.test_client()


# NOTE: services commit on every write, so tables are rebuilt per test
# instead of rolling back an outer transaction.
@pytest.fixture(scope="function", autouse=True)
def db_session(app):
    """
    Create a fresh schema and session for a test.

    Returns:
        SQLAlchemy session: A database session for testing.
    """
    _db.create_all()
    yield _db.session
    _db.session.remove()
    _db.drop_all()


@pytest.fixture(scope="function")
def db(app):
    """The SQLAlchemy database object."""
    return _db


@pytest.fixture
def manager(db_session):
    """SubscriptionManager pinned to the test clock."""
    return SubscriptionManager(db_session, today=lambda: TODAY)


@pytest.fixture
def make_user(db_session):
    """Factory creating committed users with unique emails."""
    counter = itertools.count(1)

    def _make(role=UserRole.MEMBER.value, name=None, is_active=True):
        n = next(counter)
        user = User(
            name=name or f"{role.title()} {n}",
            email=f"{role}{n}@example.com",
            role=role,
            is_active=is_active
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make


@pytest.fixture
def make_membership(db_session):
    """Factory creating committed catalog entries."""
    def _make(name="Standard", price=Decimal("49.99"), duration_days=30, **kwargs):
        membership = Membership(name=name, price=price, duration_days=duration_days, **kwargs)
        db_session.add(membership)
        db_session.commit()
        return membership

    return _make


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.ADMIN.value, name="Admin")


@pytest.fixture
def coach(make_user):
    return make_user(UserRole.COACH.value, name="Coach")


@pytest.fixture
def member(make_user):
    return make_user(UserRole.MEMBER.value, name="Member")


@pytest.fixture
def membership(make_membership):
    return make_membership()


@pytest.fixture
def auth_headers(app):
    """Build an Authorization header carrying the user's role claim."""
    def _headers(user):
        token = create_access_token(
            identity=str(user.id),
            additional_claims={'role': user.role}
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers
