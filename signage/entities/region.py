"""
Region entity.

A region is a positioned rectangle on a layout. It owns the playlists that
play in it (linked through ``lkregionplaylist``) and the permissions granted
on it.
"""

import logging

from signage.entities.base import Entity


logger = logging.getLogger(__name__)


class Region(Entity):
    """
    A positioned area of a layout.

    Attributes:
        region_id: Surrogate key, None until first save
        layout_id: Parent layout id
        owner_id: Owning user id
        name: Optional region name
        width: Width in pixels
        height: Height in pixels
        top: Offset from the top edge in pixels
        left: Offset from the left edge in pixels
        z_index: Stacking order (higher values appear on top)
        duration: Duration of the region in seconds
        playlists: Owned playlists, in display order
        permissions: Permissions on this region
    """

    TRACKED_FIELDS = (
        'layout_id',
        'owner_id',
        'name',
        'width',
        'height',
        'top',
        'left',
        'z_index',
        'duration',
    )

    STATE_FIELDS = ('region_id', 'layout_id', '_linked_playlist_ids')

    def __init__(self, factories, region_id=None, layout_id=None, owner_id=None, name=None,
                 width=0, height=0, top=0, left=0, z_index=0, duration=0):
        super().__init__(factories)
        self.region_id = region_id
        self.layout_id = layout_id
        self.owner_id = owner_id
        self.name = name
        self.width = width
        self.height = height
        self.top = top
        self.left = left
        self.z_index = z_index
        self.duration = duration

        self.playlists = []
        self.permissions = []

        self._linked_playlist_ids = set()

    def __str__(self):
        return 'Region %s - %d x %d (%d, %d). regionId = %d, layoutId = %d' % (
            self.name,
            self.width or 0,
            self.height or 0,
            self.top or 0,
            self.left or 0,
            self.region_id or 0,
            self.layout_id or 0,
        )

    def set_owner(self, owner_id):
        """Set the owner of the region and of its playlists."""
        self.owner_id = owner_id

        for playlist in self.playlists:
            playlist.set_owner(owner_id)

    def clone(self):
        """Copy the region and its playlists as new, unsaved entities."""
        duplicate = Region(
            self._factories,
            owner_id=self.owner_id,
            name=self.name,
            width=self.width,
            height=self.height,
            top=self.top,
            left=self.left,
            z_index=self.z_index,
            duration=self.duration,
        )
        duplicate.playlists = [playlist.clone() for playlist in self.playlists]
        duplicate._loaded = True
        return duplicate

    def hydrate_links(self, playlist_ids):
        """Record which playlists are already linked in storage."""
        self._linked_playlist_ids = set(playlist_ids)

    def load(self):
        """Load permissions and playlists (with their widgets)."""
        if self._loaded or not self.region_id:
            return

        self.permissions = self._factories.permissions.get_by_object_id('region', self.region_id)

        self.playlists = self._factories.playlists.get_by_region_id(self.region_id)

        for playlist in self.playlists:
            playlist.load()

        self.hydrate_links(playlist.playlist_id for playlist in self.playlists)
        self._loaded = True

    def save(self):
        """Insert or update the region, then save and link its playlists."""
        with self.gateway.transaction():
            self.remember_state()

            if not self.region_id:
                self._add()
            elif self.is_dirty:
                self._update()

            for display_order, playlist in enumerate(self.playlists, start=1):
                playlist.save()

                if playlist.playlist_id not in self._linked_playlist_ids:
                    self.gateway.insert(
                        'INSERT INTO lkregionplaylist (regionId, playlistId, displayOrder) '
                        'VALUES (:regionId, :playlistId, :displayOrder)',
                        {
                            'regionId': self.region_id,
                            'playlistId': playlist.playlist_id,
                            'displayOrder': display_order,
                        }
                    )
                    self._linked_playlist_ids.add(playlist.playlist_id)

            self._dirty = False

    def delete(self):
        """Delete permissions, playlists and the region itself."""
        if not self._loaded:
            self.load()

        logger.debug('Deleting %s', self)

        with self.gateway.transaction():
            for permission in self.permissions:
                permission.delete_all()

            for playlist in self.playlists:
                playlist.delete()

            self.gateway.update('DELETE FROM lkregionplaylist WHERE regionId = :regionId', {
                'regionId': self.region_id,
            })

            self.gateway.update('DELETE FROM region WHERE regionId = :regionId', {
                'regionId': self.region_id,
            })

    def to_dict(self):
        return {
            'region_id': self.region_id,
            'layout_id': self.layout_id,
            'owner_id': self.owner_id,
            'name': self.name,
            'width': self.width,
            'height': self.height,
            'top': self.top,
            'left': self.left,
            'z_index': self.z_index,
            'duration': self.duration,
            'playlists': [playlist.to_dict() for playlist in self.playlists],
        }

    def _add(self):
        logger.debug('Adding region to layout %s', self.layout_id)

        self.region_id = self.gateway.insert(
            'INSERT INTO region (layoutId, ownerId, name, width, height, offsetTop, offsetLeft, zIndex, duration) '
            'VALUES (:layoutId, :ownerId, :name, :width, :height, :offsetTop, :offsetLeft, :zIndex, :duration)',
            self._params()
        )

    def _update(self):
        logger.debug('Editing region %s', self.region_id)

        params = self._params()
        params['regionId'] = self.region_id

        self.gateway.update(
            'UPDATE region SET layoutId = :layoutId, ownerId = :ownerId, name = :name, width = :width, '
            'height = :height, offsetTop = :offsetTop, offsetLeft = :offsetLeft, zIndex = :zIndex, '
            'duration = :duration WHERE regionId = :regionId',
            params
        )

    def _params(self):
        return {
            'layoutId': self.layout_id,
            'ownerId': self.owner_id,
            'name': self.name,
            'width': self.width,
            'height': self.height,
            'offsetTop': self.top or 0,
            'offsetLeft': self.left or 0,
            'zIndex': self.z_index or 0,
            'duration': self.duration or 0,
        }
