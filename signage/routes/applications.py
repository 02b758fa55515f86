"""
Signage Applications Routes

Blueprints for OAuth application registration and consent:
- GET /applications: Applications page
- GET /applications/grid: Registered applications (JSON)
- GET /applications/add: Registration form
- POST /applications: Register an application
- GET /applications/authorize: Consent page for an authorization request
- POST /applications/authorize: Approve or deny an authorization request
- POST /oauth/token: Token endpoint (authorization code exchange)

The protocol checks (client, redirect URI, response type, code exchange) are
performed by the Authlib authorization server configured in signage.oauth.
"""

from authlib.common.security import generate_token
from authlib.common.urls import add_params_to_uri
from authlib.oauth2 import OAuth2Error
from authlib.oauth2.rfc6749.errors import AccessDeniedError
from flask import Blueprint, request, jsonify, render_template, redirect, session, current_app
from sqlalchemy.exc import SQLAlchemyError

from signage.models import db, OAuthClient, OAuthClientRedirectUri
from signage.oauth import get_authorization_server, query_client
from signage.utils.auth import login_required, get_current_user


# Create applications blueprint (web pages and grid data)
applications_bp = Blueprint('applications', __name__)

# Create OAuth blueprint (token endpoint)
oauth_bp = Blueprint('oauth', __name__)


# Session key holding the pending authorization request
AUTH_PARAMS_KEY = 'authParams'


def _get_param(name):
    """Read a parameter from a form post or a JSON body."""
    value = request.form.get(name)
    if value is None:
        data = request.get_json(silent=True) or {}
        value = data.get(name)
    return value


@applications_bp.route('', methods=['GET'])
@login_required
def display_page():
    """Render the applications page."""
    return render_template('applications/page.html', active_page='applications')


@applications_bp.route('/grid', methods=['GET'])
@login_required
def grid():
    """
    Registered applications for the applications grid.

    Query Parameters:
        name: Name contains this text
        start: Paging offset (default 0)
        length: Page size (default 10)

    Returns:
        200:
            {
                "data": [ { client data }, ... ],
                "recordsTotal": 12
            }
    """
    query = OAuthClient.query

    name = request.args.get('name')
    if name:
        query = query.filter(OAuthClient.name.ilike(f'%{name}%'))

    start = request.args.get('start', 0, type=int)
    length = request.args.get('length', 10, type=int)

    total = query.count()
    clients = query.order_by(OAuthClient.name).offset(max(start, 0)).limit(max(length, 1)).all()

    return jsonify({
        'data': [client.to_dict() for client in clients],
        'recordsTotal': total
    }), 200


@applications_bp.route('/authorize', methods=['GET'])
@login_required
def authorize_request():
    """
    Show the consent page for an authorization request.

    The request is validated by the authorization server (client, redirect
    URI, response type) before anything is shown. The request parameters are
    kept in the session for the approve/deny post.

    Returns:
        200: Rendered applications/authorize.html
        400: Invalid authorization request
            {
                "error": "invalid_client",
                "message": "..."
            }
    """
    server = get_authorization_server()

    try:
        grant = server.get_consent_grant(end_user=get_current_user())
    except OAuth2Error as error:
        current_app.logger.info(f'Rejected authorization request: {error.error}')
        return jsonify({
            'error': error.error,
            'message': error.description
        }), 400

    auth_params = request.args.to_dict()
    session[AUTH_PARAMS_KEY] = auth_params

    return render_template(
        'applications/authorize.html',
        active_page='applications',
        client=grant.client,
        auth_params=auth_params,
        form_action=request.full_path
    )


@applications_bp.route('/authorize', methods=['POST'])
@login_required
def authorize():
    """
    Approve or deny the pending authorization request.

    Form Data:
        authorization: "Approve" to grant access; anything else denies it

    Returns:
        302: Redirect to the client's redirect URI, carrying either an
             authorization code or error=access_denied
        400: No pending authorization request
    """
    auth_params = session.pop(AUTH_PARAMS_KEY, None)

    if not auth_params:
        return jsonify({'error': 'No authorization request in progress'}), 400

    server = get_authorization_server()

    if request.form.get('authorization') == 'Approve':
        response = server.create_authorization_response(grant_user=get_current_user())
    else:
        client = query_client(auth_params.get('client_id'))
        redirect_uri = auth_params.get('redirect_uri') or (client.get_default_redirect_uri() if client else None)

        if not client or not redirect_uri or not client.check_redirect_uri(redirect_uri):
            return jsonify({'error': 'Invalid authorization request'}), 400

        error = AccessDeniedError()
        response = redirect(add_params_to_uri(redirect_uri, [
            ('error', error.error),
            ('message', error.description),
        ]), 302)

    current_app.logger.debug(f'Redirect URL is {response.headers.get("Location")}')

    return response


@applications_bp.route('/add', methods=['GET'])
@login_required
def add_form():
    """Render the application registration form."""
    return render_template('applications/form-add.html', active_page='applications')


@applications_bp.route('', methods=['POST'])
@login_required
def add():
    """
    Register a new application.

    A client id and secret are generated for it.

    Request Body (form or JSON):
        name: Application name (required)
        redirect_uri: Redirect URI (required)

    Returns:
        201: Application registered
            {
                "message": "Added My App",
                "id": "client id"
            }
        400: Missing name or redirect URI
        500: Database error
    """
    name = (_get_param('name') or '').strip()
    if not name:
        return jsonify({'error': 'name is required'}), 400

    redirect_uri = (_get_param('redirect_uri') or '').strip()
    if not redirect_uri:
        return jsonify({'error': 'redirect_uri is required'}), 400

    client = OAuthClient(
        id=generate_token(current_app.config.get('OAUTH2_CLIENT_ID_LENGTH', 40)),
        secret=generate_token(current_app.config.get('OAUTH2_CLIENT_SECRET_LENGTH', 254)),
        name=name
    )
    client.redirect_uris.append(OAuthClientRedirectUri(redirect_uri=redirect_uri))

    try:
        db.session.add(client)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f'Failed to add application {name}: {e}')
        return jsonify({'error': f'Failed to add application: {e}'}), 500

    current_app.logger.info(f'Application registered: {name} ({client.id})')

    return jsonify({
        'message': f'Added {name}',
        'id': client.id
    }), 201


@oauth_bp.route('/token', methods=['POST'])
def issue_token():
    """Exchange an authorization code for a bearer access token."""
    return get_authorization_server().create_token_response()
