"""
Campaign entity.

A campaign groups one or more layouts for scheduling. Every layout has one
layout-specific campaign created with it; other campaigns may reference the
same layout through ``lkcampaignlayout``.
"""

import logging

from signage.entities.base import Entity
from signage.exceptions import InvalidArgumentError


logger = logging.getLogger(__name__)

MAX_CAMPAIGN_NAME_LENGTH = 254


class Campaign(Entity):
    """
    A scheduled group of layouts.

    Attributes:
        campaign_id: Surrogate key, None until first save
        name: Campaign name
        is_layout_specific: True for the shadow campaign of a single layout
        owner_id: Owning user id
        layout_ids: Assigned layout ids, in play order
    """

    TRACKED_FIELDS = ('name', 'is_layout_specific', 'owner_id')

    STATE_FIELDS = ('campaign_id', 'layout_ids', '_stored_layout_ids')

    def __init__(self, factories, campaign_id=None, name=None, is_layout_specific=False,
                 owner_id=None, layout_ids=None):
        super().__init__(factories)
        self.campaign_id = campaign_id
        self.name = name
        self.is_layout_specific = is_layout_specific
        self.owner_id = owner_id
        self.layout_ids = list(layout_ids or [])

        self._stored_layout_ids = set(self.layout_ids) if campaign_id else set()

    def __repr__(self):
        return f'<Campaign {self.name} ({self.campaign_id})>'

    def get_id(self):
        return self.campaign_id

    def assign_layout(self, layout_id):
        if layout_id not in self.layout_ids:
            self.layout_ids.append(layout_id)

    def unassign_layout(self, layout_id):
        if layout_id in self.layout_ids:
            self.layout_ids.remove(layout_id)

    def validate(self):
        if not self.name or len(self.name) > MAX_CAMPAIGN_NAME_LENGTH:
            raise InvalidArgumentError('Name must be between 1 and 254 characters')

    def save(self, validate=True):
        """
        Insert or update the campaign and synchronise its layout links.

        Args:
            validate: Run ``validate()`` first
        """
        if validate:
            self.validate()

        with self.gateway.transaction():
            self.remember_state()

            if not self.campaign_id:
                self.campaign_id = self.gateway.insert(
                    'INSERT INTO campaign (campaign, isLayoutSpecific, userId) '
                    'VALUES (:campaign, :isLayoutSpecific, :userId)',
                    {
                        'campaign': self.name,
                        'isLayoutSpecific': 1 if self.is_layout_specific else 0,
                        'userId': self.owner_id,
                    }
                )
            elif self.is_dirty:
                self.gateway.update(
                    'UPDATE campaign SET campaign = :campaign, isLayoutSpecific = :isLayoutSpecific, '
                    'userId = :userId WHERE campaignId = :campaignId',
                    {
                        'campaignId': self.campaign_id,
                        'campaign': self.name,
                        'isLayoutSpecific': 1 if self.is_layout_specific else 0,
                        'userId': self.owner_id,
                    }
                )

            self._save_links()
            self._dirty = False

    def delete(self):
        """Delete permissions, layout links and the campaign."""
        logger.debug('Deleting campaign %s', self.campaign_id)

        with self.gateway.transaction():
            for permission in self._factories.permissions.get_by_object_id('campaign', self.campaign_id):
                permission.delete_all()

            self.gateway.update('DELETE FROM lkcampaignlayout WHERE campaignId = :campaignId', {
                'campaignId': self.campaign_id,
            })

            self.gateway.update('DELETE FROM campaign WHERE campaignId = :campaignId', {
                'campaignId': self.campaign_id,
            })

    def to_dict(self):
        return {
            'campaign_id': self.campaign_id,
            'name': self.name,
            'is_layout_specific': bool(self.is_layout_specific),
            'owner_id': self.owner_id,
            'layout_ids': list(self.layout_ids),
        }

    def _save_links(self):
        current = set(self.layout_ids)

        for display_order, layout_id in enumerate(self.layout_ids, start=1):
            if layout_id not in self._stored_layout_ids:
                self.gateway.insert(
                    'INSERT INTO lkcampaignlayout (campaignId, layoutId, displayOrder) '
                    'VALUES (:campaignId, :layoutId, :displayOrder)',
                    {'campaignId': self.campaign_id, 'layoutId': layout_id, 'displayOrder': display_order}
                )

        for layout_id in self._stored_layout_ids - current:
            self.gateway.update(
                'DELETE FROM lkcampaignlayout WHERE campaignId = :campaignId AND layoutId = :layoutId',
                {'campaignId': self.campaign_id, 'layoutId': layout_id}
            )

        self._stored_layout_ids = current
