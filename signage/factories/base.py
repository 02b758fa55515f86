"""
Factory base class and container.

Factories are the repositories of the entity layer: they run SELECTs through
the gateway and hydrate entities bound to the same container, so entities
never reach for a global.
"""

from signage.storage import SqlGateway


DEFAULT_SETTINGS = {
    'FALLBACK_LAYOUT_ID': 4,
    'LAYOUT_SCHEMA_VERSION': 3,
    'LAYOUT_STATUS_NEW': 3,
}


class BaseFactory:
    """Shared access to the container and its gateway."""

    def __init__(self, container):
        self.container = container

    @property
    def gateway(self):
        return self.container.gateway


class FactoryContainer:
    """
    The set of factories used by one request (or one test).

    Attributes:
        gateway: SqlGateway all factories and entities share
        settings: Layout settings (fallback layout id, schema version, status)
        layouts, regions, playlists, widgets, tags, campaigns, permissions,
        displays: The factories
    """

    def __init__(self, gateway, settings=None):
        # Imported here, the factory modules import this module
        from signage.factories.campaign import CampaignFactory
        from signage.factories.display import DisplayFactory
        from signage.factories.layout import LayoutFactory
        from signage.factories.permission import PermissionFactory
        from signage.factories.playlist import PlaylistFactory, WidgetFactory
        from signage.factories.region import RegionFactory
        from signage.factories.tag import TagFactory

        if not isinstance(gateway, SqlGateway):
            gateway = SqlGateway(gateway)

        self.gateway = gateway
        self.settings = dict(DEFAULT_SETTINGS)
        self.settings.update(settings or {})

        self.layouts = LayoutFactory(self)
        self.regions = RegionFactory(self)
        self.playlists = PlaylistFactory(self)
        self.widgets = WidgetFactory(self)
        self.tags = TagFactory(self)
        self.campaigns = CampaignFactory(self)
        self.permissions = PermissionFactory(self)
        self.displays = DisplayFactory(self)
