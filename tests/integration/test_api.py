"""
Integration tests for application-wide behaviour.
"""
import json
from datetime import date

from flask_jwt_extended import create_access_token


def test_health_check(client):
    """Test the health check endpoint."""
    response = client.get('/health')
    data = json.loads(response.data)

    assert response.status_code == 200
    assert data['status'] == 'healthy'
    assert data['environment'] == 'testing'
    assert data['database_connected'] is True


def test_swagger_docs(client):
    """The Swagger UI and its JSON document are served."""
    assert client.get('/api/docs').status_code == 200

    response = client.get('/swagger.json')
    paths = json.loads(response.data)['paths']
    assert response.status_code == 200
    assert '/api/subscriptions/' in paths
    assert '/api/memberships/' in paths
    assert '/api/coach-members/' in paths


def test_missing_token_is_unauthorized(client):
    response = client.get('/api/memberships/')
    assert response.status_code == 401


def test_invalid_token_is_rejected(client):
    response = client.get('/api/memberships/', headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 422


def test_token_without_role_is_forbidden(client, member):
    token = create_access_token(identity=str(member.id))
    response = client.get('/api/memberships/', headers={"Authorization": f"Bearer {token}"})
    data = json.loads(response.data)

    assert response.status_code == 403
    assert data == {'success': False, 'message': 'Access denied'}


def test_deactivate_expired_command(app, manager, member, membership):
    expired = manager.create(member.id, membership.id, date(2023, 12, 1), date(2024, 1, 5))

    result = app.test_cli_runner().invoke(args=['deactivate-expired'])

    assert result.exit_code == 0
    assert 'Deactivated 1 expired subscription(s)' in result.output
    manager.session.refresh(expired)
    assert expired.is_active is False
