"""
Campaign factory.
"""

from typing import List

from signage.entities.campaign import Campaign
from signage.exceptions import NotFoundError
from signage.factories.base import BaseFactory


_SELECT = 'SELECT campaign.campaignId, campaign.campaign, campaign.isLayoutSpecific, campaign.userId FROM campaign '


class CampaignFactory(BaseFactory):
    """Repository for campaigns."""

    def create(self, **kwargs) -> Campaign:
        """New, unsaved campaign bound to this container."""
        return Campaign(self.container, **kwargs)

    def get_by_id(self, campaign_id) -> Campaign:
        """
        Get a campaign by id.

        Raises:
            NotFoundError: If the campaign does not exist
        """
        rows = self.gateway.select(_SELECT + 'WHERE campaign.campaignId = :campaignId', {
            'campaignId': campaign_id,
        })

        if not rows:
            raise NotFoundError('Campaign not found')

        return self._hydrate(rows[0])

    def get_by_layout_id(self, layout_id) -> List[Campaign]:
        """Every campaign the layout is assigned to, its own campaign included."""
        rows = self.gateway.select(
            _SELECT +
            'INNER JOIN lkcampaignlayout ON lkcampaignlayout.campaignId = campaign.campaignId '
            'WHERE lkcampaignlayout.layoutId = :layoutId '
            'ORDER BY campaign.campaignId',
            {'layoutId': layout_id}
        )
        return [self._hydrate(row) for row in rows]

    def _hydrate(self, row) -> Campaign:
        links = self.gateway.select(
            'SELECT layoutId FROM lkcampaignlayout WHERE campaignId = :campaignId ORDER BY displayOrder',
            {'campaignId': row['campaignId']}
        )
        campaign = Campaign(
            self.container,
            campaign_id=row['campaignId'],
            name=row['campaign'],
            is_layout_specific=bool(row['isLayoutSpecific']),
            owner_id=row['userId'],
            layout_ids=[link['layoutId'] for link in links],
        )
        return campaign.mark_clean()
