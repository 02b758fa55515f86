"""
Signage Models Package.

SQLAlchemy models and table definitions for the Signage CMS including:
- Users (authentication, layout ownership)
- OAuth clients, redirect URIs, authorization codes and access tokens
- Layout schema tables (layouts, regions, playlists, widgets, tags,
  campaigns, permissions, displays) used by the entity factories through
  parameterized SQL
"""

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    All models should inherit from db.Model which uses this Base class.
    This provides the foundation for declarative model definitions.
    """
    pass


# SQLAlchemy database instance
# Initialize with model_class=Base for proper declarative base setup
db = SQLAlchemy(model_class=Base)


# Import models after db is defined to avoid circular imports
from signage.models.user import User
from signage.models.oauth import OAuthClient, OAuthClientRedirectUri, OAuthAuthorizationCode, OAuthToken
from signage.models import schema

__all__ = [
    'db',
    'Base',
    'User',
    'OAuthClient',
    'OAuthClientRedirectUri',
    'OAuthAuthorizationCode',
    'OAuthToken',
    'schema',
]
