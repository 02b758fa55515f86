"""
Playlist and Widget factories.
"""

from typing import List

from signage.entities.playlist import Playlist, Widget
from signage.factories.base import BaseFactory


class PlaylistFactory(BaseFactory):
    """Repository for playlists."""

    def create(self, **kwargs) -> Playlist:
        """New, unsaved playlist bound to this container."""
        return Playlist(self.container, **kwargs)

    def get_by_region_id(self, region_id) -> List[Playlist]:
        """Playlists linked to a region, in display order."""
        rows = self.gateway.select(
            'SELECT playlist.playlistId, playlist.name, playlist.ownerId '
            'FROM playlist '
            'INNER JOIN lkregionplaylist ON lkregionplaylist.playlistId = playlist.playlistId '
            'WHERE lkregionplaylist.regionId = :regionId '
            'ORDER BY lkregionplaylist.displayOrder',
            {'regionId': region_id}
        )
        return [
            Playlist(
                self.container,
                playlist_id=row['playlistId'],
                name=row['name'],
                owner_id=row['ownerId'],
            ).mark_clean()
            for row in rows
        ]


class WidgetFactory(BaseFactory):
    """Repository for widgets."""

    def create(self, **kwargs) -> Widget:
        """New, unsaved widget bound to this container."""
        return Widget(self.container, **kwargs)

    def get_by_playlist_id(self, playlist_id) -> List[Widget]:
        """Widgets of a playlist, in display order."""
        rows = self.gateway.select(
            'SELECT widgetId, playlistId, ownerId, type, duration, displayOrder '
            'FROM widget WHERE playlistId = :playlistId ORDER BY displayOrder',
            {'playlistId': playlist_id}
        )
        return [
            Widget(
                self.container,
                widget_id=row['widgetId'],
                playlist_id=row['playlistId'],
                owner_id=row['ownerId'],
                type=row['type'],
                duration=row['duration'],
                display_order=row['displayOrder'],
            ).mark_clean()
            for row in rows
        ]
