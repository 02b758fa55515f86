"""
Signage Authentication Utilities.

Provides authentication decorators and token validation for the API.

Features:
- @login_required decorator for protecting routes
- Flask-Login session authentication for the web UI
- OAuth bearer token authentication for registered applications
- Current user retrieval via Flask's g object

Usage:
    from signage.utils.auth import login_required, get_current_user

    @blueprint.route('/protected')
    @login_required
    def protected_route():
        user = get_current_user()
        return jsonify({'user': user.to_dict()})
"""

from functools import wraps

from flask import request, jsonify, g
from flask_login import current_user as flask_login_user

from signage.models import db, OAuthToken, User


def get_current_user():
    """
    Get the currently authenticated user.

    Returns the user object stored in Flask's g object by the @login_required
    decorator. Returns None if no user is authenticated.

    Returns:
        User object if authenticated, None otherwise
    """
    return getattr(g, 'current_user', None)


def _extract_token_from_header():
    """
    Extract the bearer token from the Authorization header.

    Supports the format: "Bearer <token>"

    Returns:
        Token string if present and valid format, None otherwise
    """
    auth_header = request.headers.get('Authorization')
    if not auth_header:
        return None

    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != 'bearer':
        return None

    return parts[1]


def _validate_token(access_token):
    """
    Validate an OAuth access token and return the associated user and token.

    Performs the following checks:
    1. Token exists in database
    2. Token has not been revoked or expired
    3. User exists and is active

    Args:
        access_token: The bearer token to validate

    Returns:
        Tuple of (User, OAuthToken) if valid, (None, None) otherwise
    """
    if not access_token:
        return None, None

    token = OAuthToken.query.filter_by(access_token=access_token).first()
    if not token:
        return None, None

    if token.is_revoked() or token.is_expired():
        return None, None

    user = db.session.get(User, token.user_id) if token.user_id else None
    if not user or not user.is_active:
        return None, None

    return user, token


def login_required(f):
    """
    Decorator to require authentication for a route.

    Accepts either a Flask-Login session or an OAuth bearer token in the
    Authorization header, and stores the authenticated user in Flask's g
    object for access by the route handler.

    On failure, returns a 401 Unauthorized response.

    Args:
        f: The route function to wrap

    Returns:
        Decorated function that enforces authentication
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        # First check if user is logged in via Flask-Login session
        if flask_login_user and flask_login_user.is_authenticated:
            g.current_user = flask_login_user._get_current_object()
            g.current_token = None
            return f(*args, **kwargs)

        # Extract token from Authorization header
        access_token = _extract_token_from_header()
        if not access_token:
            return jsonify({
                'error': 'Authentication required',
                'code': 'missing_token'
            }), 401

        # Validate the token
        user, token = _validate_token(access_token)
        if not user:
            return jsonify({
                'error': 'Invalid or expired token',
                'code': 'invalid_token'
            }), 401

        # Store user and token in g for access by route
        g.current_user = user
        g.current_token = token

        return f(*args, **kwargs)

    return decorated_function
