"""
Flask Application Factory for Signage CMS.

This module provides the create_app() factory function that creates and
configures the Flask application. It initializes:
- SQLAlchemy database connection (SQLite by default)
- Flask-Login session handling
- OAuth2 authorization server (Authlib)
- Blueprint registration
- Error handlers (including domain errors raised by the layout entities)
- Logging configuration

Usage:
    # Development
    python -m signage.app

    # Production
    gunicorn -w 4 -b 0.0.0.0:5002 'signage.app:create_app()'
"""

import logging
import os
from datetime import datetime, timezone
from typing import Optional

from flask import Flask, jsonify
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_talisman import Talisman

from signage.config import get_config
from signage.exceptions import InvalidArgumentError, NotFoundError
from signage.models import db, User
from signage.oauth import init_oauth

# Global migrate instance
migrate = Migrate()


def create_app(config_name: Optional[str] = None) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name ('development', 'testing', 'production').
                    If None, reads from FLASK_ENV environment variable.

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)

    # Load configuration
    config_class = get_config(config_name)
    app.config.from_object(config_class)
    config_class.init_app(app)

    # Store config class for reference
    app.config['CONFIG_CLASS'] = config_class

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Initialize security extensions
    _init_security(app, config_class)

    # Initialize Flask-Login
    login_manager = LoginManager()
    login_manager.init_app(app)

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    # Create database tables
    with app.app_context():
        db.create_all()

    # Configure logging
    _configure_logging(app)

    # Initialize OAuth2 authorization server
    init_oauth(app)

    # Register blueprints
    _register_blueprints(app)

    # Register error handlers
    _register_error_handlers(app)

    # Register health check endpoint
    @app.route('/health')
    @app.route('/api/v1/health')
    def health_check():
        """Health check endpoint for monitoring."""
        return jsonify({
            'status': 'healthy',
            'service': 'signage',
            'timestamp': datetime.now(timezone.utc).isoformat()
        })

    return app


def _init_security(app: Flask, config_class) -> None:
    """
    Initialize security extensions for the application.

    In production, enables Flask-Talisman for security headers. Flask-Limiter
    rate limits every endpoint unless RATELIMIT_ENABLED is off.

    Args:
        app: Flask application instance.
        config_class: Configuration class being used.
    """
    if config_class.__name__ == 'ProductionConfig':
        Talisman(
            app,
            force_https=True,
            strict_transport_security=True,
            strict_transport_security_max_age=31536000,  # 1 year
            content_security_policy={
                'default-src': "'self'",
                'img-src': ["'self'", "data:", "https:"],
            },
            frame_options='DENY',
        )
        app.logger.info('Security headers enabled (Flask-Talisman)')

    limiter = Limiter(
        key_func=get_remote_address,
        app=app,
        default_limits=app.config.get('RATELIMIT_DEFAULT_LIMITS', []),
        storage_uri=app.config.get('RATELIMIT_STORAGE_URI', 'memory://'),
    )
    # Store limiter on app for route-specific limits
    app.limiter = limiter


def _configure_logging(app: Flask) -> None:
    """
    Configure application logging.

    Args:
        app: Flask application instance.
    """
    # Get log directory from config
    log_dir = os.path.join(str(app.config.get('BASE_DIR', os.getcwd())), 'logs')

    # Set up file handler if log path is writable
    if not app.config.get('TESTING'):
        try:
            os.makedirs(log_dir, exist_ok=True)
            file_handler = logging.FileHandler(os.path.join(log_dir, 'signage.log'))
            file_handler.setLevel(logging.INFO)
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            ))
            app.logger.addHandler(file_handler)
            logging.getLogger('signage').addHandler(file_handler)
        except OSError:
            # Log path not writable, skip file logging
            pass

    # Set application log level
    app.logger.setLevel(logging.INFO)
    logging.getLogger('signage').setLevel(logging.INFO)


def _register_blueprints(app: Flask) -> None:
    """
    Register blueprints with the application.

    API blueprints are registered with the /api/v1 prefix. The applications
    pages and the OAuth token endpoint are registered at root.

    Args:
        app: Flask application instance.
    """
    from signage.routes import auth_bp, layouts_bp, applications_bp, oauth_bp

    app.register_blueprint(auth_bp, url_prefix='/api/v1/auth')
    app.logger.info('Registered auth blueprint at /api/v1/auth')

    app.register_blueprint(layouts_bp, url_prefix='/api/v1/layouts')
    app.logger.info('Registered layouts blueprint at /api/v1/layouts')

    app.register_blueprint(applications_bp, url_prefix='/applications')
    app.logger.info('Registered applications blueprint at /applications')

    app.register_blueprint(oauth_bp, url_prefix='/oauth')
    app.logger.info('Registered oauth blueprint at /oauth')


def _register_error_handlers(app: Flask) -> None:
    """
    Register error handlers for domain errors and common HTTP errors.

    Args:
        app: Flask application instance.
    """
    @app.errorhandler(NotFoundError)
    def entity_not_found(error):
        return jsonify({'error': str(error)}), 404

    @app.errorhandler(InvalidArgumentError)
    def invalid_argument(error):
        return jsonify({'error': str(error)}), 400

    @app.errorhandler(400)
    def bad_request(error):
        return jsonify({
            'status': 'error',
            'error': 'Bad Request',
            'message': str(error.description) if hasattr(error, 'description') else 'Invalid request'
        }), 400

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({
            'status': 'error',
            'error': 'Not Found',
            'message': 'The requested resource was not found'
        }), 404

    @app.errorhandler(429)
    def too_many_requests(error):
        return jsonify({
            'status': 'error',
            'error': 'Too Many Requests',
            'message': str(error.description) if hasattr(error, 'description') else 'Rate limit exceeded'
        }), 429

    @app.errorhandler(500)
    def internal_server_error(error):
        return jsonify({
            'status': 'error',
            'error': 'Internal Server Error',
            'message': 'An unexpected error occurred'
        }), 500


if __name__ == '__main__':
    # Development server
    application = create_app()
    config = application.config['CONFIG_CLASS']
    application.run(
        host=config.HOST,
        port=config.PORT,
        debug=config.DEBUG
    )
