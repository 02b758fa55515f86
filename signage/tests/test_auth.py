"""
Integration tests for authentication.

Tests:
- POST /api/v1/auth/login - Session login with email/password
- POST /api/v1/auth/logout - Logout
- GET /api/v1/auth/me - Current user
- Bearer token authentication with OAuth access tokens
"""

import time

from signage.models import OAuthToken
from signage.tests.conftest import TEST_PASSWORD, create_test_user, create_test_oauth_client


def _add_token(db_session, user, access_token='valid-token', **kwargs):
    create_test_oauth_client(db_session, 'Token Client', 'http://localhost:8000/callback')
    token = OAuthToken(
        client_id='token-client',
        user_id=user.id,
        token_type='Bearer',
        access_token=access_token,
        expires_in=kwargs.pop('expires_in', 3600),
        **kwargs
    )
    db_session.add(token)
    db_session.commit()
    return token


# =============================================================================
# Login API Tests (POST /api/v1/auth/login)
# =============================================================================

class TestLoginAPI:
    """Tests for POST /api/v1/auth/login endpoint."""

    def test_login_success(self, client, sample_user):
        response = client.post('/api/v1/auth/login', json={
            'email': 'owner@test.com',
            'password': TEST_PASSWORD
        })

        assert response.status_code == 200
        data = response.get_json()
        assert data['message'] == 'Login successful'
        assert data['user']['email'] == 'owner@test.com'
        assert 'password_hash' not in data['user']

    def test_login_records_last_login(self, client, db_session, sample_user):
        client.post('/api/v1/auth/login', json={'email': 'owner@test.com', 'password': TEST_PASSWORD})

        db_session.refresh(sample_user)
        assert sample_user.last_login is not None

    def test_login_case_insensitive_email(self, client, sample_user):
        response = client.post('/api/v1/auth/login', json={
            'email': '  OWNER@test.com ',
            'password': TEST_PASSWORD
        })

        assert response.status_code == 200

    def test_login_wrong_password(self, client, sample_user):
        response = client.post('/api/v1/auth/login', json={
            'email': 'owner@test.com',
            'password': 'wrong'
        })

        assert response.status_code == 401
        assert response.get_json()['code'] == 'invalid_credentials'

    def test_login_unknown_email(self, client):
        response = client.post('/api/v1/auth/login', json={
            'email': 'nobody@test.com',
            'password': TEST_PASSWORD
        })

        assert response.status_code == 401
        assert response.get_json()['code'] == 'invalid_credentials'

    def test_login_suspended_account(self, client, db_session):
        create_test_user(db_session, 'suspended@test.com', 'Suspended', status='suspended')

        response = client.post('/api/v1/auth/login', json={
            'email': 'suspended@test.com',
            'password': TEST_PASSWORD
        })

        assert response.status_code == 401
        assert response.get_json()['code'] == 'account_inactive'

    def test_login_missing_password(self, client):
        response = client.post('/api/v1/auth/login', json={'email': 'owner@test.com'})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'password is required'

    def test_login_without_body(self, client):
        response = client.post('/api/v1/auth/login')

        assert response.status_code == 400


# =============================================================================
# Session Tests (GET /api/v1/auth/me, POST /api/v1/auth/logout)
# =============================================================================

class TestSessionAPI:
    """Tests for the session endpoints."""

    def test_me_returns_logged_in_user(self, auth_client, sample_user):
        response = auth_client.get('/api/v1/auth/me')

        assert response.status_code == 200
        assert response.get_json()['id'] == sample_user.id

    def test_me_requires_authentication(self, client):
        response = client.get('/api/v1/auth/me')

        assert response.status_code == 401

    def test_logout(self, auth_client):
        response = auth_client.post('/api/v1/auth/logout')

        assert response.status_code == 200
        assert auth_client.get('/api/v1/auth/me').status_code == 401


# =============================================================================
# Bearer Token Tests
# =============================================================================

class TestBearerToken:
    """Tests for OAuth access token authentication."""

    def test_valid_token(self, client, db_session, sample_user):
        _add_token(db_session, sample_user)

        response = client.get('/api/v1/auth/me', headers={'Authorization': 'Bearer valid-token'})

        assert response.status_code == 200
        assert response.get_json()['email'] == 'owner@test.com'

    def test_expired_token(self, client, db_session, sample_user):
        _add_token(db_session, sample_user, issued_at=int(time.time()) - 7200)

        response = client.get('/api/v1/auth/me', headers={'Authorization': 'Bearer valid-token'})

        assert response.status_code == 401
        assert response.get_json()['code'] == 'invalid_token'

    def test_revoked_token(self, client, db_session, sample_user):
        _add_token(db_session, sample_user, access_token_revoked_at=int(time.time()))

        response = client.get('/api/v1/auth/me', headers={'Authorization': 'Bearer valid-token'})

        assert response.status_code == 401

    def test_token_of_suspended_user(self, client, db_session, sample_user):
        _add_token(db_session, sample_user)
        sample_user.status = 'suspended'
        db_session.commit()

        response = client.get('/api/v1/auth/me', headers={'Authorization': 'Bearer valid-token'})

        assert response.status_code == 401

    def test_malformed_header(self, client):
        response = client.get('/api/v1/auth/me', headers={'Authorization': 'Token abc'})

        assert response.status_code == 401
        assert response.get_json()['code'] == 'missing_token'
