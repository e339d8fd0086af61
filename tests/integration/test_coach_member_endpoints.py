"""
Integration tests for coach assignment API endpoints.
"""
import json

BASE = '/api/coach-members'


def _assign(client, headers, coach_id, member_id):
    return client.post(
        f'{BASE}/',
        data=json.dumps({"coach_id": coach_id, "member_id": member_id}),
        content_type='application/json',
        headers=headers
    )


def test_assign_member(client, admin, coach, member, auth_headers):
    response = _assign(client, auth_headers(admin), coach.id, member.id)
    data = json.loads(response.data)

    assert response.status_code == 201
    assert data['data']['coach_id'] == coach.id
    assert data['data']['member_id'] == member.id

    response = _assign(client, auth_headers(admin), coach.id, member.id)
    assert response.status_code == 409


def test_assign_requires_roles(client, admin, coach, member, auth_headers):
    assert _assign(client, auth_headers(admin), member.id, coach.id).status_code == 400
    assert _assign(client, auth_headers(admin), coach.id, 9999).status_code == 404


def test_only_admin_manages_assignments(client, coach, member, auth_headers):
    assert _assign(client, auth_headers(coach), coach.id, member.id).status_code == 403
    assert client.get(f'{BASE}/', headers=auth_headers(member)).status_code == 403


def test_list_and_remove_assignments(client, admin, coach, member, auth_headers):
    assignment_id = json.loads(_assign(client, auth_headers(admin), coach.id, member.id).data)['data']['id']

    response = client.get(f'{BASE}/?coach_id={coach.id}', headers=auth_headers(admin))
    assert [a['id'] for a in json.loads(response.data)['data']] == [assignment_id]

    response = client.get(f'{BASE}/coach/{coach.id}/members', headers=auth_headers(admin))
    assert [m['id'] for m in json.loads(response.data)['data']] == [member.id]

    response = client.delete(f'{BASE}/{assignment_id}', headers=auth_headers(admin))
    assert response.status_code == 200
    assert client.delete(f'{BASE}/{assignment_id}', headers=auth_headers(admin)).status_code == 404
