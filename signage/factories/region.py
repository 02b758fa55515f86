"""
Region factory.
"""

from typing import List

from signage.entities.region import Region
from signage.exceptions import NotFoundError
from signage.factories.base import BaseFactory


_SELECT = (
    'SELECT regionId, layoutId, ownerId, name, width, height, offsetTop, offsetLeft, zIndex, duration '
    'FROM region '
)


class RegionFactory(BaseFactory):
    """Repository for regions."""

    def create(self, **kwargs) -> Region:
        """New, unsaved region bound to this container."""
        return Region(self.container, **kwargs)

    def get_by_id(self, region_id) -> Region:
        rows = self.gateway.select(_SELECT + 'WHERE regionId = :regionId', {'regionId': region_id})

        if not rows:
            raise NotFoundError('Cannot find region')

        return self._hydrate(rows[0])

    def get_by_layout_id(self, layout_id) -> List[Region]:
        """Regions of a layout ordered by stacking order."""
        rows = self.gateway.select(
            _SELECT + 'WHERE layoutId = :layoutId ORDER BY zIndex, regionId',
            {'layoutId': layout_id}
        )
        return [self._hydrate(row) for row in rows]

    def _hydrate(self, row) -> Region:
        region = Region(
            self.container,
            region_id=row['regionId'],
            layout_id=row['layoutId'],
            owner_id=row['ownerId'],
            name=row['name'],
            width=row['width'],
            height=row['height'],
            top=row['offsetTop'],
            left=row['offsetLeft'],
            z_index=row['zIndex'],
            duration=row['duration'],
        )
        return region.mark_clean()
