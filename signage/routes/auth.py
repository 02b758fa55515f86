"""
Signage Auth Routes

Blueprint for authentication API endpoints:
- POST /login: Log in with email and password (Flask-Login session)
- POST /logout: Log out
- GET /me: Current user

All endpoints are prefixed with /api/v1/auth when registered with the app.
"""

from datetime import datetime, timezone

from flask import Blueprint, request, jsonify, current_app
from flask_login import login_user, logout_user

from signage.models import db, User
from signage.utils.auth import login_required, get_current_user


# Create auth blueprint
auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/login', methods=['POST'])
def login():
    """
    Login with email and password.

    Request Body:
        {
            "email": "user@example.com" (required),
            "password": "password123" (required),
            "remember_me": true (optional, default: false)
        }

    Returns:
        200: Login successful
            {
                "message": "Login successful",
                "user": { user data }
            }
        400: Missing required field
        401: Invalid credentials or inactive account
            {
                "error": "Invalid email or password",
                "code": "invalid_credentials"
            }
    """
    data = request.get_json(silent=True)

    if not data:
        return jsonify({'error': 'Request body is required'}), 400

    email = data.get('email')
    if not email or not isinstance(email, str):
        return jsonify({'error': 'email is required'}), 400

    password = data.get('password')
    if not password or not isinstance(password, str):
        return jsonify({'error': 'password is required'}), 400

    remember_me = data.get('remember_me', False)
    if not isinstance(remember_me, bool):
        remember_me = False

    user = User.query.filter_by(email=email.lower().strip()).first()

    if not user or not user.check_password(password):
        current_app.logger.info(f'Failed login for {email}')
        return jsonify({
            'error': 'Invalid email or password',
            'code': 'invalid_credentials'
        }), 401

    if not user.is_active:
        return jsonify({
            'error': 'Account is not active',
            'code': 'account_inactive'
        }), 401

    login_user(user, remember=remember_me)

    user.last_login = datetime.now(timezone.utc)
    db.session.commit()

    current_app.logger.info(f'User logged in: {user.email}')

    return jsonify({
        'message': 'Login successful',
        'user': user.to_dict()
    }), 200


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    """
    Log out the current user.

    Returns:
        200: Logout successful
    """
    logout_user()
    return jsonify({'message': 'Logout successful'}), 200


@auth_bp.route('/me', methods=['GET'])
@login_required
def get_me():
    """
    Get the authenticated user.

    Returns:
        200: { user data }
    """
    return jsonify(get_current_user().to_dict()), 200
