"""
Pytest configuration and fixtures for Signage CMS tests.

This module provides shared fixtures for testing:
- Flask application with test configuration
- In-memory SQLite database
- Test client (anonymous and logged in)
- Factory container bound to the test database session
- Sample users, layouts and OAuth clients
"""

import os
import sys

import pytest

# Add project root to path for signage package imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

# Authlib refuses plain HTTP redirect URIs otherwise
os.environ.setdefault('AUTHLIB_INSECURE_TRANSPORT', '1')

from signage.app import create_app
from signage.factories import FactoryContainer
from signage.models import db, User, OAuthClient, OAuthClientRedirectUri
from signage.storage import SqlGateway


TEST_PASSWORD = 'TestPassword123!'


@pytest.fixture(scope='function')
def app():
    """
    Create a Flask application configured for testing.

    This fixture provides an isolated Flask app with:
    - In-memory SQLite database
    - Testing mode enabled
    - Clean database tables

    Yields:
        Flask application instance
    """
    application = create_app(config_name='testing')

    with application.app_context():
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """
    Create a test client for the Flask application.

    Args:
        app: Flask application fixture

    Returns:
        Flask test client
    """
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """
    Provide a database session for testing.

    Args:
        app: Flask application fixture

    Yields:
        SQLAlchemy session
    """
    with app.app_context():
        yield db.session


@pytest.fixture(scope='function')
def factories(db_session):
    """
    Factory container bound to the test database session.

    Returns:
        FactoryContainer instance
    """
    return FactoryContainer(SqlGateway(db_session))


@pytest.fixture(scope='function')
def sample_user(db_session):
    """
    Create an active user.

    Returns:
        User instance
    """
    return create_test_user(db_session, 'owner@test.com', 'Layout Owner')


@pytest.fixture(scope='function')
def other_user(db_session):
    """
    Create a second active user.

    Returns:
        User instance
    """
    return create_test_user(db_session, 'other@test.com', 'Other User')


@pytest.fixture(scope='function')
def auth_client(client, sample_user):
    """
    Test client with a logged-in session for sample_user.

    Returns:
        Flask test client
    """
    response = client.post('/api/v1/auth/login', json={
        'email': sample_user.email,
        'password': TEST_PASSWORD
    })
    assert response.status_code == 200
    return client


@pytest.fixture(scope='function')
def sample_layout(factories, sample_user):
    """
    Create a saved 1920x1080 layout owned by sample_user.

    Returns:
        Layout instance (not loaded)
    """
    return create_test_layout(factories, 'Lobby', owner_id=sample_user.id)


@pytest.fixture(scope='function')
def sample_layout_with_regions(factories, sample_user):
    """
    Create a saved layout with two regions, each with a playlist of widgets.

    The first region has an image and a video widget, the second a text
    widget. The layout is tagged 'lobby'.

    Returns:
        Layout instance as returned by the factory (not loaded)
    """
    layout = factories.layouts.create(
        owner_id=sample_user.id,
        name='Menu Board',
        description='Two zone menu board',
        width=1920,
        height=1080,
        background_color='#000000',
    )

    main = factories.regions.create(owner_id=sample_user.id, name='Main', width=1280, height=1080)
    main_playlist = factories.playlists.create(name='Main', owner_id=sample_user.id)
    main_playlist.widgets = [
        factories.widgets.create(owner_id=sample_user.id, type='image', duration=10),
        factories.widgets.create(owner_id=sample_user.id, type='video', duration=30),
    ]
    main.playlists.append(main_playlist)

    side = factories.regions.create(owner_id=sample_user.id, name='Side', width=640, height=1080,
                                    left=1280, z_index=1)
    side_playlist = factories.playlists.create(name='Side', owner_id=sample_user.id)
    side_playlist.widgets = [
        factories.widgets.create(owner_id=sample_user.id, type='text', duration=15),
    ]
    side.playlists.append(side_playlist)

    layout.regions = [main, side]
    layout.replace_tags(factories.tags.tags_from_string('lobby'))
    layout.save()

    return factories.layouts.get_by_id(layout.layout_id)


@pytest.fixture(scope='function')
def sample_oauth_client(db_session):
    """
    Register an OAuth application with one redirect URI.

    Returns:
        OAuthClient instance
    """
    return create_test_oauth_client(db_session, 'Menu Sync', 'http://localhost:8000/callback')


# =============================================================================
# Helper Functions
# =============================================================================


def create_test_user(db_session, email, name, status='active', password=TEST_PASSWORD):
    """
    Helper function to create a user with custom attributes.

    Args:
        db_session: Database session
        email: User email address
        name: User's display name
        status: Account status (default: 'active')
        password: Password to set (default: TEST_PASSWORD)

    Returns:
        User instance
    """
    user = User(email=email, name=name, status=status)
    user.set_password(password)
    db_session.add(user)
    db_session.commit()
    return user


def create_test_layout(factories, name, owner_id, width=1920, height=1080, description=None):
    """
    Helper function to create and save a layout.

    Args:
        factories: FactoryContainer
        name: Layout name
        owner_id: Owning user id
        width: Width in pixels
        height: Height in pixels
        description: Optional description

    Returns:
        Saved Layout instance
    """
    layout = factories.layouts.create(
        owner_id=owner_id,
        name=name,
        description=description,
        width=width,
        height=height,
        background_color='#000000',
    )
    layout.save()
    return layout


def create_test_oauth_client(db_session, name, redirect_uri, client_id=None, secret='test-secret'):
    """
    Helper function to register an OAuth application.

    Args:
        db_session: Database session
        name: Application name
        redirect_uri: The registered redirect URI
        client_id: Client id (default: derived from the name)
        secret: Client secret

    Returns:
        OAuthClient instance
    """
    oauth_client = OAuthClient(
        id=client_id or name.lower().replace(' ', '-'),
        secret=secret,
        name=name
    )
    oauth_client.redirect_uris.append(OAuthClientRedirectUri(redirect_uri=redirect_uri))
    db_session.add(oauth_client)
    db_session.commit()
    return oauth_client


def count_rows(db_session, table, where='1 = 1', **params):
    """
    Helper function to count rows of a layout schema table.

    Args:
        db_session: Database session
        table: Table name
        where: SQL condition with named parameters

    Returns:
        Number of matching rows
    """
    from sqlalchemy import text

    return db_session.execute(text(f'SELECT COUNT(*) FROM {table} WHERE {where}'), params).scalar()
