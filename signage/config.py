"""
Signage CMS Configuration Module

Configuration settings for database, layouts, OAuth and server.
All sensitive values are loaded from environment variables.
"""

import os
from pathlib import Path


class Config:
    """Base configuration class with default settings."""

    # Flask Settings
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = False

    # Base Directory
    BASE_DIR = Path(__file__).parent.resolve()

    # Database Settings (SQLite)
    DATABASE_PATH = Path(os.environ.get('SIGNAGE_DATABASE_PATH', BASE_DIR / 'data' / 'signage.db'))
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL',
        f'sqlite:///{DATABASE_PATH}'
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Server Settings
    PORT = int(os.environ.get('SIGNAGE_PORT', 5002))
    HOST = os.environ.get('SIGNAGE_HOST', '0.0.0.0')

    # Layout Settings
    # Displays whose default layout is deleted fall back to this layout
    FALLBACK_LAYOUT_ID = int(os.environ.get('FALLBACK_LAYOUT_ID', 4))
    LAYOUT_SCHEMA_VERSION = 3
    LAYOUT_STATUS_NEW = 3

    # OAuth Settings
    OAUTH2_CLIENT_ID_LENGTH = 40
    OAUTH2_CLIENT_SECRET_LENGTH = 254
    OAUTH2_TOKEN_EXPIRES_IN = {
        'authorization_code': int(os.environ.get('OAUTH2_TOKEN_EXPIRES_IN', 3600)),
    }
    OAUTH2_INSECURE_TRANSPORT = False

    # Rate Limiting (Flask-Limiter)
    RATELIMIT_ENABLED = True
    RATELIMIT_DEFAULT_LIMITS = ['200 per day', '50 per hour']
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')

    @classmethod
    def init_app(cls, app):
        """Initialize application with this configuration."""
        # Ensure storage directories exist
        cls.DATABASE_PATH.parent.mkdir(parents=True, exist_ok=True)


class DevelopmentConfig(Config):
    """Development configuration with debug enabled."""

    DEBUG = True
    TESTING = False
    OAUTH2_INSECURE_TRANSPORT = True


class TestingConfig(Config):
    """Testing configuration with in-memory database."""

    DEBUG = True
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    OAUTH2_INSECURE_TRANSPORT = True
    RATELIMIT_ENABLED = False

    @classmethod
    def init_app(cls, app):
        """Nothing to create on disk for the in-memory database."""
        pass


class ProductionConfig(Config):
    """Production configuration with strict security settings."""

    DEBUG = False
    TESTING = False

    @classmethod
    def init_app(cls, app):
        """Production-specific initialization."""
        Config.init_app(app)

        # Verify required environment variables are set
        required_vars = [
            'SECRET_KEY',
        ]
        missing = [var for var in required_vars if not os.environ.get(var)]
        if missing:
            raise ValueError(f"Missing required environment variables: {', '.join(missing)}")


# Configuration mapping by environment name
config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig,
}


def get_config(env_name=None):
    """Get configuration class by environment name.

    Args:
        env_name: Environment name ('development', 'testing', 'production').
                  If None, reads from FLASK_ENV environment variable.

    Returns:
        Configuration class for the specified environment.
    """
    if env_name is None:
        env_name = os.environ.get('FLASK_ENV', 'development')
    return config.get(env_name, config['default'])
