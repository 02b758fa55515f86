"""
Playlist and Widget entities.

A playlist is an ordered list of widgets played inside a region. Widgets are
the individual media items (image, video, text, ...) with a duration.
"""

import logging

from signage.entities.base import Entity


logger = logging.getLogger(__name__)


class Playlist(Entity):
    """
    An ordered list of widgets.

    Attributes:
        playlist_id: Surrogate key, None until first save
        name: Playlist name
        owner_id: Owning user id
        widgets: Owned widgets, in display order
    """

    TRACKED_FIELDS = ('name', 'owner_id')

    STATE_FIELDS = ('playlist_id',)

    def __init__(self, factories, playlist_id=None, name=None, owner_id=None):
        super().__init__(factories)
        self.playlist_id = playlist_id
        self.name = name
        self.owner_id = owner_id

        self.widgets = []

    def __repr__(self):
        return f'<Playlist {self.name} ({self.playlist_id})>'

    def set_owner(self, owner_id):
        self.owner_id = owner_id

        for widget in self.widgets:
            widget.owner_id = owner_id

    def clone(self):
        duplicate = Playlist(self._factories, name=self.name, owner_id=self.owner_id)
        duplicate.widgets = [widget.clone() for widget in self.widgets]
        duplicate._loaded = True
        return duplicate

    def load(self):
        if self._loaded or not self.playlist_id:
            return

        self.widgets = self._factories.widgets.get_by_playlist_id(self.playlist_id)
        self._loaded = True

    def save(self):
        """Insert or update the playlist, then save its widgets in order."""
        with self.gateway.transaction():
            self.remember_state()
            for widget in self.widgets:
                widget.remember_state()

            if not self.playlist_id:
                self.playlist_id = self.gateway.insert(
                    'INSERT INTO playlist (name, ownerId) VALUES (:name, :ownerId)',
                    {'name': self.name, 'ownerId': self.owner_id}
                )
            elif self.is_dirty:
                self.gateway.update(
                    'UPDATE playlist SET name = :name, ownerId = :ownerId WHERE playlistId = :playlistId',
                    {'name': self.name, 'ownerId': self.owner_id, 'playlistId': self.playlist_id}
                )

            for display_order, widget in enumerate(self.widgets, start=1):
                widget.playlist_id = self.playlist_id
                widget.display_order = display_order
                widget.save()

            self._dirty = False

    def delete(self):
        """Delete the widgets, the region links and the playlist."""
        if not self._loaded:
            self.load()

        logger.debug('Deleting playlist %s', self.playlist_id)

        with self.gateway.transaction():
            for widget in self.widgets:
                widget.delete()

            self.gateway.update('DELETE FROM lkregionplaylist WHERE playlistId = :playlistId', {
                'playlistId': self.playlist_id,
            })

            self.gateway.update('DELETE FROM playlist WHERE playlistId = :playlistId', {
                'playlistId': self.playlist_id,
            })

    def to_dict(self):
        return {
            'playlist_id': self.playlist_id,
            'name': self.name,
            'owner_id': self.owner_id,
            'widgets': [widget.to_dict() for widget in self.widgets],
        }


class Widget(Entity):
    """
    A media item inside a playlist.

    Attributes:
        widget_id: Surrogate key, None until first save
        playlist_id: Parent playlist id
        owner_id: Owning user id
        type: Module type, e.g. 'image', 'video', 'text'
        duration: Play duration in seconds
        display_order: Position inside the playlist (1-based)
    """

    TRACKED_FIELDS = ('playlist_id', 'owner_id', 'type', 'duration', 'display_order')

    STATE_FIELDS = ('widget_id', 'playlist_id', 'display_order')

    def __init__(self, factories, widget_id=None, playlist_id=None, owner_id=None, type=None,
                 duration=0, display_order=0):
        super().__init__(factories)
        self.widget_id = widget_id
        self.playlist_id = playlist_id
        self.owner_id = owner_id
        self.type = type
        self.duration = duration
        self.display_order = display_order

    def __repr__(self):
        return f'<Widget {self.type} ({self.widget_id})>'

    def clone(self):
        return Widget(
            self._factories,
            owner_id=self.owner_id,
            type=self.type,
            duration=self.duration,
            display_order=self.display_order,
        )

    def save(self):
        self.remember_state()

        params = {
            'playlistId': self.playlist_id,
            'ownerId': self.owner_id,
            'type': self.type,
            'duration': self.duration or 0,
            'displayOrder': self.display_order or 0,
        }

        if not self.widget_id:
            self.widget_id = self.gateway.insert(
                'INSERT INTO widget (playlistId, ownerId, type, duration, displayOrder) '
                'VALUES (:playlistId, :ownerId, :type, :duration, :displayOrder)',
                params
            )
        elif self.is_dirty:
            params['widgetId'] = self.widget_id
            self.gateway.update(
                'UPDATE widget SET playlistId = :playlistId, ownerId = :ownerId, type = :type, '
                'duration = :duration, displayOrder = :displayOrder WHERE widgetId = :widgetId',
                params
            )

        self._dirty = False

    def delete(self):
        self.gateway.update('DELETE FROM widget WHERE widgetId = :widgetId', {
            'widgetId': self.widget_id,
        })

    def to_dict(self):
        return {
            'widget_id': self.widget_id,
            'playlist_id': self.playlist_id,
            'owner_id': self.owner_id,
            'type': self.type,
            'duration': self.duration,
            'display_order': self.display_order,
        }
