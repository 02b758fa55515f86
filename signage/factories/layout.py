"""
Layout factory.

Queries layouts joined with their layout-specific campaign and hydrates
``Layout`` aggregates (children are fetched later by ``Layout.load()``).
"""

from typing import List, Optional

from signage.entities.layout import Layout
from signage.exceptions import NotFoundError
from signage.factories.base import BaseFactory
from signage.utils.dates import get_system_date


_SELECT = (
    'SELECT layout.layoutId, layout.layout, layout.description, layout.userId, layout.createdDT, '
    'layout.modifiedDT, layout.status, layout.width, layout.height, layout.schemaVersion, '
    'layout.backgroundImageId, layout.backgroundColor, layout.backgroundzIndex, layout.retired, '
    'layout.xml, own.campaignId '
    'FROM layout '
    'LEFT OUTER JOIN ('
    '  SELECT lkcampaignlayout.layoutId, campaign.campaignId '
    '    FROM lkcampaignlayout '
    '   INNER JOIN campaign ON campaign.campaignId = lkcampaignlayout.campaignId '
    '   WHERE campaign.isLayoutSpecific = 1'
    ') own ON own.layoutId = layout.layoutId '
    'WHERE 1 = 1 '
)


class LayoutFactory(BaseFactory):
    """Repository for layouts."""

    def create(self, **kwargs) -> Layout:
        """New, unsaved layout bound to this container."""
        return Layout(self.container, **kwargs)

    def get_by_id(self, layout_id) -> Layout:
        """
        Get a layout by id.

        Raises:
            NotFoundError: If the layout does not exist
        """
        layouts = self.query(layout_id=layout_id)

        if not layouts:
            raise NotFoundError('Layout not found')

        return layouts[0]

    def query(self, layout_id=None, user_id=None, name=None, name_exact=None,
              not_layout_id=None, retired=None, start: Optional[int] = None,
              length: Optional[int] = None) -> List[Layout]:
        """
        Query layouts.

        Args:
            layout_id: Only this layout
            user_id: Only layouts owned by this user
            name: Name contains this text
            name_exact: Name equals this text
            not_layout_id: Exclude this layout
            retired: Only retired (True) or unretired (False) layouts
            start: Offset for paging
            length: Page size

        Returns:
            List of unloaded Layout aggregates ordered by name
        """
        sql = _SELECT
        params = {}

        if layout_id is not None:
            sql += 'AND layout.layoutId = :layoutId '
            params['layoutId'] = layout_id

        if user_id is not None:
            sql += 'AND layout.userId = :userId '
            params['userId'] = user_id

        if name:
            sql += 'AND layout.layout LIKE :layout '
            params['layout'] = f'%{name}%'

        if name_exact is not None:
            sql += 'AND layout.layout = :layoutExact '
            params['layoutExact'] = name_exact

        if not_layout_id:
            sql += 'AND layout.layoutId <> :notLayoutId '
            params['notLayoutId'] = not_layout_id

        if retired is not None:
            sql += 'AND layout.retired = :retired '
            params['retired'] = 1 if retired else 0

        sql += 'ORDER BY layout.layout '

        if length is not None:
            sql += 'LIMIT :length OFFSET :start '
            params['length'] = int(length)
            params['start'] = int(start or 0)

        return [self._hydrate(row) for row in self.gateway.select(sql, params)]

    def _hydrate(self, row) -> Layout:
        layout = Layout(
            self.container,
            layout_id=row['layoutId'],
            owner_id=row['userId'],
            campaign_id=row['campaignId'],
            background_image_id=row['backgroundImageId'],
            schema_version=row['schemaVersion'],
            name=row['layout'],
            description=row['description'],
            background_color=row['backgroundColor'],
            legacy_xml=row['xml'],
            status=row['status'],
            retired=bool(row['retired']),
            background_z_index=row['backgroundzIndex'],
            width=row['width'],
            height=row['height'],
            created_dt=_as_string(row['createdDT']),
            modified_dt=_as_string(row['modifiedDT']),
        )
        return layout.mark_clean()


def _as_string(value):
    if value is None or isinstance(value, str):
        return value
    return get_system_date(value)
