"""
Signage Entities Package.

Plain entity classes persisted through the SQL gateway:
- Layout: aggregate root (regions, tags, campaigns, permissions)
- Region: positioned area of a layout owning playlists
- Playlist / Widget: ordered media items played in a region
- Tag: label assigned to layouts
- Campaign: scheduled group of layouts
- Permission: group rights on an object
"""

from signage.entities.base import Entity
from signage.entities.campaign import Campaign
from signage.entities.layout import Layout
from signage.entities.permission import Permission
from signage.entities.playlist import Playlist, Widget
from signage.entities.region import Region
from signage.entities.tag import Tag

__all__ = [
    'Entity',
    'Campaign',
    'Layout',
    'Permission',
    'Playlist',
    'Widget',
    'Region',
    'Tag',
]
