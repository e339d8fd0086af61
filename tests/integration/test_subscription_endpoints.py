"""
Integration tests for subscription API endpoints.
"""
import json
from datetime import date

import pytest

from gym_api.models.subscription import Subscription, SubscriptionStatus
from gym_api.services.coaching import CoachAssignments

BASE = '/api/subscriptions'


def _post(client, url, payload, headers):
    return client.post(
        url,
        data=json.dumps(payload),
        content_type='application/json',
        headers=headers
    )


@pytest.fixture
def subscription(manager, member, membership):
    """A current subscription for ``member`` covering January 2024."""
    return manager.create(member.id, membership.id, date(2024, 1, 1), date(2024, 1, 31))


def test_create_subscription(client, admin, member, membership, auth_headers):
    payload = {
        "member_id": member.id,
        "membership_id": membership.id,
        "start_date": "2024-01-01",
        "end_date": "2024-01-31",
        "notes": "Front desk signup"
    }
    response = _post(client, f'{BASE}/', payload, auth_headers(admin))
    data = json.loads(response.data)

    assert response.status_code == 201
    assert data['success'] is True
    assert data['message'] == 'Subscription created successfully'
    sub = data['data']
    assert sub['member_id'] == member.id
    assert sub['start_date'] == '2024-01-01'
    assert sub['end_date'] == '2024-01-31'
    assert sub['status'] == SubscriptionStatus.ACTIVE.value
    assert sub['price'] == 49.99
    assert sub['membership']['name'] == 'Standard'
    assert sub['member']['email'] == member.email
    assert sub['cancelled_at'] is None


def test_create_duplicate_current_subscription(client, admin, member, membership, subscription,
                                               auth_headers, db_session):
    payload = {
        "member_id": member.id,
        "membership_id": membership.id,
        "start_date": "2024-01-05",
        "end_date": "2024-02-05"
    }
    response = _post(client, f'{BASE}/', payload, auth_headers(admin))
    data = json.loads(response.data)

    assert response.status_code == 409
    assert data['success'] is False
    assert data['message'] == 'Member already has an active subscription'
    assert db_session.query(Subscription).count() == 1


@pytest.mark.parametrize("override, status", [
    ({"end_date": "2023-12-31"}, 400),
    ({"start_date": "not-a-date"}, 400),
    ({"member_id": None}, 400),
    ({"member_id": 9999}, 404),
    ({"membership_id": 9999}, 404),
])
def test_create_subscription_errors(client, admin, member, membership, auth_headers, override, status):
    payload = {
        "member_id": member.id,
        "membership_id": membership.id,
        "start_date": "2024-01-01",
        "end_date": "2024-01-31",
        **override
    }
    response = _post(client, f'{BASE}/', payload, auth_headers(admin))

    assert response.status_code == status
    assert json.loads(response.data)['success'] is False


def test_create_requires_json_body(client, admin, auth_headers):
    response = client.post(f'{BASE}/', data='nope', content_type='text/plain',
                           headers=auth_headers(admin))
    assert response.status_code == 400


def test_member_cannot_create(client, member, membership, auth_headers):
    payload = {
        "member_id": member.id,
        "membership_id": membership.id,
        "start_date": "2024-01-01",
        "end_date": "2024-01-31"
    }
    response = _post(client, f'{BASE}/', payload, auth_headers(member))
    assert response.status_code == 403


def test_create_requires_token(client):
    response = _post(client, f'{BASE}/', {}, {})
    assert response.status_code == 401


def test_admin_lists_all(client, admin, manager, make_user, membership, auth_headers):
    for _ in range(3):
        manager.create(make_user().id, membership.id, date(2024, 1, 1), date(2024, 1, 31))

    response = client.get(f'{BASE}/?per_page=2', headers=auth_headers(admin))
    data = json.loads(response.data)['data']

    assert response.status_code == 200
    assert data['total'] == 3
    assert data['pages'] == 2
    assert len(data['items']) == 2


def test_list_filters_by_status(client, admin, manager, make_user, membership, auth_headers):
    cancelled = manager.create(make_user().id, membership.id, date(2024, 1, 1), date(2024, 1, 31))
    manager.cancel(cancelled.id)
    manager.create(make_user().id, membership.id, date(2024, 1, 1), date(2024, 1, 31))

    response = client.get(f'{BASE}/?status=cancelled', headers=auth_headers(admin))
    items = json.loads(response.data)['data']['items']

    assert [item['id'] for item in items] == [cancelled.id]
    assert items[0]['status'] == 'cancelled'

    response = client.get(f'{BASE}/?status=paused', headers=auth_headers(admin))
    assert response.status_code == 400


def test_member_lists_only_own(client, member, make_user, manager, membership, subscription, auth_headers):
    other = make_user()
    manager.create(other.id, membership.id, date(2024, 1, 1), date(2024, 1, 31))

    response = client.get(f'{BASE}/?member_id={other.id}', headers=auth_headers(member))
    data = json.loads(response.data)['data']

    assert response.status_code == 200
    assert [item['id'] for item in data['items']] == [subscription.id]


def test_coach_cannot_list(client, coach, auth_headers):
    assert client.get(f'{BASE}/', headers=auth_headers(coach)).status_code == 403


def test_get_subscription_access(client, admin, member, coach, make_user, subscription, auth_headers, db_session):
    url = f'{BASE}/{subscription.id}'

    assert client.get(url, headers=auth_headers(admin)).status_code == 200
    assert client.get(url, headers=auth_headers(member)).status_code == 200
    assert client.get(url, headers=auth_headers(make_user())).status_code == 403
    assert client.get(url, headers=auth_headers(coach)).status_code == 403

    CoachAssignments(db_session).assign(coach.id, member.id)
    assert client.get(url, headers=auth_headers(coach)).status_code == 200


def test_get_unknown_subscription(client, admin, auth_headers):
    response = client.get(f'{BASE}/9999', headers=auth_headers(admin))
    data = json.loads(response.data)

    assert response.status_code == 404
    assert data['success'] is False


def test_update_subscription(client, admin, subscription, auth_headers):
    response = client.put(
        f'{BASE}/{subscription.id}',
        data=json.dumps({"end_date": "2024-02-29", "notes": "Extended by manager"}),
        content_type='application/json',
        headers=auth_headers(admin)
    )
    data = json.loads(response.data)['data']

    assert response.status_code == 200
    assert data['end_date'] == '2024-02-29'
    assert data['notes'] == 'Extended by manager'


def test_delete_subscription(client, admin, member, subscription, auth_headers):
    url = f'{BASE}/{subscription.id}'
    assert client.delete(url, headers=auth_headers(member)).status_code == 403

    response = client.delete(url, headers=auth_headers(admin))
    assert response.status_code == 200
    assert json.loads(response.data)['message'] == 'Subscription deleted successfully'
    assert client.get(url, headers=auth_headers(admin)).status_code == 404


def test_renew_subscription(client, admin, subscription, auth_headers):
    response = _post(client, f'{BASE}/{subscription.id}/renew', {"extension_days": 15}, auth_headers(admin))
    data = json.loads(response.data)

    assert response.status_code == 200
    assert data['data']['end_date'] == '2024-02-15'
    assert data['data']['status'] == 'active'


def test_renew_validation(client, admin, subscription, auth_headers):
    url = f'{BASE}/{subscription.id}/renew'
    assert _post(client, url, {}, auth_headers(admin)).status_code == 400
    assert _post(client, url, {"extension_days": 0}, auth_headers(admin)).status_code == 400
    assert _post(client, f'{BASE}/9999/renew', {"extension_days": 5}, auth_headers(admin)).status_code == 404


def test_cancel_subscription(client, admin, member, subscription, auth_headers):
    url = f'{BASE}/{subscription.id}/cancel'
    assert _post(client, url, {}, auth_headers(member)).status_code == 403

    response = _post(client, url, {}, auth_headers(admin))
    data = json.loads(response.data)['data']
    assert response.status_code == 200
    assert data['status'] == 'cancelled'
    assert data['is_active'] is False
    assert data['end_date'] == '2024-01-10'
    assert data['cancelled_at'] is not None

    again = json.loads(_post(client, url, {}, auth_headers(admin)).data)['data']
    assert again['end_date'] == data['end_date']
    assert again['cancelled_at'] == data['cancelled_at']


def test_stats(client, admin, member, subscription, auth_headers):
    assert client.get(f'{BASE}/stats', headers=auth_headers(member)).status_code == 403

    response = client.get(f'{BASE}/stats', headers=auth_headers(admin))
    data = json.loads(response.data)['data']

    assert response.status_code == 200
    assert data['total'] == 1
    assert data['active'] == 1
    assert data['expiring_soon'] == 0
    assert data['upcoming_renewals'] == 1


def test_expiring(client, admin, manager, make_user, membership, auth_headers):
    later = manager.create(make_user().id, membership.id, date(2024, 1, 1), date(2024, 1, 16))
    sooner = manager.create(make_user().id, membership.id, date(2024, 1, 1), date(2024, 1, 12))
    manager.create(make_user().id, membership.id, date(2024, 1, 1), date(2024, 3, 1))

    response = client.get(f'{BASE}/expiring?days=7', headers=auth_headers(admin))
    items = json.loads(response.data)['data']

    assert response.status_code == 200
    assert [item['id'] for item in items] == [sooner.id, later.id]
    assert all(item['status'] == 'expiring_soon' for item in items)

    response = client.get(f'{BASE}/expiring?days=-1', headers=auth_headers(admin))
    assert response.status_code == 400


def test_current_subscription(client, member, subscription, make_user, auth_headers):
    response = client.get(f'{BASE}/current', headers=auth_headers(member))
    data = json.loads(response.data)
    assert response.status_code == 200
    assert data['data']['id'] == subscription.id

    response = client.get(f'{BASE}/current', headers=auth_headers(make_user()))
    data = json.loads(response.data)
    assert response.status_code == 200
    assert data.get('data') is None
    assert data['message'] == 'No active subscription found.'


def test_history(client, member, manager, membership, subscription, auth_headers):
    manager.cancel(subscription.id)
    newer = manager.create(member.id, membership.id, date(2024, 1, 10), date(2024, 2, 10))

    response = client.get(f'{BASE}/history', headers=auth_headers(member))
    items = json.loads(response.data)['data']

    assert response.status_code == 200
    assert [item['id'] for item in items] == [newer.id, subscription.id]
    assert [item['status'] for item in items] == ['active', 'cancelled']


def test_member_subscriptions_for_coach(client, coach, member, subscription, auth_headers, db_session):
    url = f'{BASE}/member/{member.id}'
    assert client.get(url, headers=auth_headers(coach)).status_code == 403

    CoachAssignments(db_session).assign(coach.id, member.id)
    response = client.get(url, headers=auth_headers(coach))
    assert response.status_code == 200
    assert [item['id'] for item in json.loads(response.data)['data']] == [subscription.id]


def test_member_subscriptions_for_other_member(client, member, make_user, subscription, auth_headers):
    other = make_user()
    assert client.get(f'{BASE}/member/{member.id}', headers=auth_headers(other)).status_code == 403
    assert client.get(f'{BASE}/member/{member.id}', headers=auth_headers(member)).status_code == 200
