"""
OAuth Models for Signage CMS.

Storage adapters consumed by the Authlib authorization server:
- OAuthClient: registered applications (``oauth_clients``)
- OAuthClientRedirectUri: allowed redirect URIs (``oauth_client_redirect_uris``)
- OAuthAuthorizationCode: issued authorization codes
- OAuthToken: issued bearer access tokens

The grant negotiation itself lives in Authlib; these models only answer the
questions the server asks about clients, codes and tokens.
"""

import secrets

from authlib.integrations.sqla_oauth2 import OAuth2AuthorizationCodeMixin, OAuth2TokenMixin
from authlib.oauth2.rfc6749 import ClientMixin

from signage.models import db


# Client authentication methods accepted at the token endpoint
TOKEN_ENDPOINT_AUTH_METHODS = ('client_secret_basic', 'client_secret_post')

# Grant types registered on the authorization server
SUPPORTED_GRANT_TYPES = ('authorization_code',)


class OAuthClient(db.Model, ClientMixin):
    """
    SQLAlchemy model representing a registered OAuth application.

    Attributes:
        id: Opaque client identifier
        secret: Opaque client secret
        name: Human-readable application name
        redirect_uris: Redirect URIs registered for this client
    """

    __tablename__ = 'oauth_clients'

    id = db.Column(db.String(254), primary_key=True)
    secret = db.Column(db.String(254), nullable=False)
    name = db.Column(db.String(255), nullable=False)

    redirect_uris = db.relationship(
        'OAuthClientRedirectUri',
        backref='client',
        lazy='selectin',
        cascade='all, delete-orphan',
    )

    @property
    def client_id(self):
        return self.id

    def get_client_id(self):
        return self.id

    def get_default_redirect_uri(self):
        if self.redirect_uris:
            return self.redirect_uris[0].redirect_uri
        return None

    def get_allowed_scope(self, scope):
        # Scopes are not restricted per client
        return scope or ''

    def check_redirect_uri(self, redirect_uri):
        return redirect_uri in [uri.redirect_uri for uri in self.redirect_uris]

    def check_client_secret(self, client_secret):
        if not client_secret:
            return False
        return secrets.compare_digest(self.secret, client_secret)

    def check_endpoint_auth_method(self, method, endpoint):
        if endpoint == 'token':
            return method in TOKEN_ENDPOINT_AUTH_METHODS
        return True

    def check_token_endpoint_auth_method(self, method):
        return self.check_endpoint_auth_method(method, 'token')

    def check_response_type(self, response_type):
        return response_type == 'code'

    def check_grant_type(self, grant_type):
        return grant_type in SUPPORTED_GRANT_TYPES

    def to_dict(self):
        """
        Serialize the client for the applications grid.

        The secret is included: the grid is only visible to logged-in users
        registering their own applications.
        """
        return {
            'id': self.id,
            'name': self.name,
            'secret': self.secret,
            'redirect_uris': [uri.redirect_uri for uri in self.redirect_uris],
        }

    def __repr__(self):
        """String representation for debugging."""
        return f'<OAuthClient {self.name} ({self.id})>'


class OAuthClientRedirectUri(db.Model):
    """A redirect URI registered for an OAuth client."""

    __tablename__ = 'oauth_client_redirect_uris'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    client_id = db.Column(
        db.String(254),
        db.ForeignKey('oauth_clients.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    redirect_uri = db.Column(db.String(500), nullable=False)


class OAuthAuthorizationCode(db.Model, OAuth2AuthorizationCodeMixin):
    """An authorization code issued to a client on behalf of a user."""

    __tablename__ = 'oauth_auth_codes'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.userId', ondelete='CASCADE'), nullable=False)


class OAuthToken(db.Model, OAuth2TokenMixin):
    """A bearer access token issued to a client on behalf of a user."""

    __tablename__ = 'oauth_access_tokens'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.userId', ondelete='CASCADE'), nullable=True)

    user = db.relationship('User')
