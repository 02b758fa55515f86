"""
Display factory.

Displays are only touched here to keep their default layout valid.
"""

from typing import List

from signage.factories.base import BaseFactory


class DisplayFactory(BaseFactory):
    """Repository for display rows."""

    def add(self, name, default_layout_id) -> int:
        return self.gateway.insert(
            'INSERT INTO display (display, defaultlayoutid) VALUES (:display, :defaultLayoutId)',
            {'display': name, 'defaultLayoutId': default_layout_id}
        )

    def get_by_default_layout_id(self, layout_id) -> List[dict]:
        return self.gateway.select(
            'SELECT displayId, display, defaultlayoutid FROM display WHERE defaultlayoutid = :layoutId',
            {'layoutId': layout_id}
        )

    def repoint_default_layout(self, layout_id, fallback_layout_id) -> int:
        """
        Point displays defaulting to ``layout_id`` at the fallback layout.

        Returns:
            Number of displays changed
        """
        return self.gateway.update(
            'UPDATE display SET defaultlayoutid = :fallbackLayoutId WHERE defaultlayoutid = :layoutId',
            {'fallbackLayoutId': fallback_layout_id, 'layoutId': layout_id}
        )
