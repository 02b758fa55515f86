"""
Signage Factories Package.

Repositories for the entity layer, bundled in a FactoryContainer:
- LayoutFactory, RegionFactory, PlaylistFactory, WidgetFactory
- TagFactory, CampaignFactory, PermissionFactory, DisplayFactory

Usage:
    from signage.factories import get_factories

    layout = get_factories().layouts.get_by_id(layout_id)
    layout.load()
"""

from flask import current_app, g

from signage.factories.base import BaseFactory, FactoryContainer, DEFAULT_SETTINGS
from signage.models import db
from signage.storage import SqlGateway


def get_factories():
    """
    Get the factory container of the current request.

    Created on first use from the Flask-SQLAlchemy session and the layout
    settings of the app config, then cached on ``flask.g``.

    Returns:
        FactoryContainer instance
    """
    if 'factories' not in g:
        settings = {key: current_app.config[key] for key in DEFAULT_SETTINGS if key in current_app.config}
        g.factories = FactoryContainer(SqlGateway(db.session), settings=settings)
    return g.factories


__all__ = [
    'BaseFactory',
    'FactoryContainer',
    'DEFAULT_SETTINGS',
    'get_factories',
]
