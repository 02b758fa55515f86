"""
OAuth2 Authorization Server for Signage CMS.

Wires the Authlib authorization server to the OAuth models. Only the
authorization-code grant is registered. Authlib implements the protocol; this
module supplies the storage callbacks:
- query_client: look up a registered application
- save_token: persist an issued bearer token
- AuthorizationCodeGrant: persist, look up and consume authorization codes

Usage:
    from signage.oauth import get_authorization_server, init_oauth

    init_oauth(app)
    return get_authorization_server().create_authorization_response(grant_user=user)
"""

import logging
import os

from authlib.integrations.flask_oauth2 import AuthorizationServer
from authlib.oauth2.rfc6749 import grants
from flask import current_app

from signage.models import db, OAuthClient, OAuthAuthorizationCode, OAuthToken, User
from signage.models.oauth import TOKEN_ENDPOINT_AUTH_METHODS


logger = logging.getLogger(__name__)


def query_client(client_id):
    """Find a registered application by client id."""
    return db.session.get(OAuthClient, client_id)


def save_token(token, request):
    """Persist a token issued by the authorization server."""
    user_id = request.user.get_user_id() if request.user else None

    item = OAuthToken(
        client_id=request.client.get_client_id(),
        user_id=user_id,
        **token
    )
    db.session.add(item)
    db.session.commit()

    logger.info('Issued access token to client %s for user %s', item.client_id, user_id)


class AuthorizationCodeGrant(grants.AuthorizationCodeGrant):
    """Authorization-code grant backed by ``oauth_auth_codes``."""

    TOKEN_ENDPOINT_AUTH_METHODS = list(TOKEN_ENDPOINT_AUTH_METHODS)

    def save_authorization_code(self, code, request):
        auth_code = OAuthAuthorizationCode(
            code=code,
            client_id=request.client.get_client_id(),
            redirect_uri=request.payload.redirect_uri,
            scope=request.payload.scope,
            user_id=request.user.get_user_id(),
        )
        db.session.add(auth_code)
        db.session.commit()
        return auth_code

    def query_authorization_code(self, code, client):
        auth_code = OAuthAuthorizationCode.query.filter_by(
            code=code,
            client_id=client.get_client_id()
        ).first()

        if auth_code and not auth_code.is_expired():
            return auth_code
        return None

    def delete_authorization_code(self, authorization_code):
        db.session.delete(authorization_code)
        db.session.commit()

    def authenticate_user(self, authorization_code):
        return db.session.get(User, authorization_code.user_id)


def get_authorization_server():
    """The authorization server bound to the current application."""
    return current_app.extensions['oauth2_server']


def init_oauth(app):
    """
    Create the authorization server for the application.

    Args:
        app: Flask application instance.

    Returns:
        The AuthorizationServer, also stored in app.extensions
    """
    if app.config.get('OAUTH2_INSECURE_TRANSPORT'):
        # Authlib refuses plain HTTP unless told otherwise (development/tests)
        os.environ.setdefault('AUTHLIB_INSECURE_TRANSPORT', '1')

    authorization = AuthorizationServer(app, query_client=query_client, save_token=save_token)
    authorization.register_grant(AuthorizationCodeGrant)

    app.extensions['oauth2_server'] = authorization
    return authorization
