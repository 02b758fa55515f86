"""
Tests for the SQL gateway and the entity factories.

- SqlGateway: select/insert/update, unit of work commit and rollback
- LayoutFactory: query filters, paging, get_by_id
- TagFactory: tags_from_string
- CampaignFactory, PermissionFactory, DisplayFactory
"""

import pytest

from signage.exceptions import InvalidArgumentError, NotFoundError
from signage.factories import FactoryContainer, DEFAULT_SETTINGS
from signage.storage import SqlGateway
from signage.tests.conftest import create_test_layout, count_rows


# =============================================================================
# SqlGateway Tests
# =============================================================================

class TestSqlGateway:
    """Tests for SqlGateway."""

    def test_insert_returns_generated_id(self, db_session):
        gateway = SqlGateway(db_session)

        first = gateway.insert('INSERT INTO tag (tag) VALUES (:tag)', {'tag': 'lobby'})
        second = gateway.insert('INSERT INTO tag (tag) VALUES (:tag)', {'tag': 'menu'})

        assert second == first + 1

    def test_select_returns_dicts(self, db_session):
        gateway = SqlGateway(db_session)
        tag_id = gateway.insert('INSERT INTO tag (tag) VALUES (:tag)', {'tag': 'lobby'})

        rows = gateway.select('SELECT tagId, tag FROM tag WHERE tagId = :tagId', {'tagId': tag_id})

        assert rows == [{'tagId': tag_id, 'tag': 'lobby'}]

    def test_update_returns_row_count(self, db_session):
        gateway = SqlGateway(db_session)
        gateway.insert('INSERT INTO display (display, defaultlayoutid) VALUES (:d, 7)', {'d': 'One'})
        gateway.insert('INSERT INTO display (display, defaultlayoutid) VALUES (:d, 7)', {'d': 'Two'})

        assert gateway.update('UPDATE display SET defaultlayoutid = 4 WHERE defaultlayoutid = 7') == 2

    def test_transaction_commits_at_outermost_level(self, db_session):
        gateway = SqlGateway(db_session)

        with gateway.transaction():
            gateway.insert('INSERT INTO tag (tag) VALUES (:tag)', {'tag': 'lobby'})
            with gateway.transaction():
                gateway.insert('INSERT INTO tag (tag) VALUES (:tag)', {'tag': 'menu'})
                assert gateway.in_transaction is True

        assert gateway.in_transaction is False
        db_session.rollback()
        assert count_rows(db_session, 'tag') == 2

    def test_transaction_rolls_back_on_error(self, db_session):
        gateway = SqlGateway(db_session)

        with pytest.raises(RuntimeError):
            with gateway.transaction():
                gateway.insert('INSERT INTO tag (tag) VALUES (:tag)', {'tag': 'lobby'})
                with gateway.transaction():
                    gateway.insert('INSERT INTO tag (tag) VALUES (:tag)', {'tag': 'menu'})
                raise RuntimeError('boom')

        assert gateway.in_transaction is False
        assert count_rows(db_session, 'tag') == 0

    def test_rollback_runs_first_hook_per_key(self, db_session):
        gateway = SqlGateway(db_session)
        calls = []

        with pytest.raises(RuntimeError):
            with gateway.transaction():
                gateway.on_rollback('tag', lambda: calls.append('first'))
                gateway.on_rollback('tag', lambda: calls.append('second'))
                gateway.on_rollback('region', lambda: calls.append('region'))
                raise RuntimeError('boom')

        assert calls == ['region', 'first']

    def test_commit_discards_rollback_hooks(self, db_session):
        gateway = SqlGateway(db_session)
        calls = []

        with gateway.transaction():
            gateway.on_rollback('tag', lambda: calls.append('tag'))

        with pytest.raises(RuntimeError):
            with gateway.transaction():
                raise RuntimeError('boom')

        assert calls == []

    def test_container_wraps_session(self, db_session):
        container = FactoryContainer(db_session)

        assert isinstance(container.gateway, SqlGateway)
        assert container.settings == DEFAULT_SETTINGS

    def test_container_settings_override_defaults(self, db_session):
        container = FactoryContainer(db_session, settings={'FALLBACK_LAYOUT_ID': 9})

        assert container.settings['FALLBACK_LAYOUT_ID'] == 9
        assert container.settings['LAYOUT_SCHEMA_VERSION'] == 3


# =============================================================================
# LayoutFactory Tests
# =============================================================================

class TestLayoutFactory:
    """Tests for LayoutFactory."""

    def test_get_by_id(self, factories, sample_layout):
        layout = factories.layouts.get_by_id(sample_layout.layout_id)

        assert layout.name == 'Lobby'
        assert layout.campaign_id == sample_layout.campaign_id
        assert layout.loaded is False
        assert layout.is_dirty is False

    def test_get_by_id_unknown_raises(self, factories):
        with pytest.raises(NotFoundError, match='Layout not found'):
            factories.layouts.get_by_id(999)

    def test_query_orders_by_name(self, factories):
        for name in ('Zeta', 'Alpha', 'Mid'):
            create_test_layout(factories, name, owner_id=1)

        assert [layout.name for layout in factories.layouts.query()] == ['Alpha', 'Mid', 'Zeta']

    def test_query_by_owner(self, factories):
        create_test_layout(factories, 'Mine', owner_id=1)
        create_test_layout(factories, 'Theirs', owner_id=2)

        assert [layout.name for layout in factories.layouts.query(user_id=2)] == ['Theirs']

    def test_query_name_contains(self, factories):
        create_test_layout(factories, 'Breakfast Menu', owner_id=1)
        create_test_layout(factories, 'Lunch Menu', owner_id=1)
        create_test_layout(factories, 'Lobby', owner_id=1)

        assert [layout.name for layout in factories.layouts.query(name='Menu')] == ['Breakfast Menu', 'Lunch Menu']

    def test_query_retired(self, factories):
        create_test_layout(factories, 'Current', owner_id=1)
        old = create_test_layout(factories, 'Old', owner_id=1)
        old.retired = True
        old.save()

        assert [layout.name for layout in factories.layouts.query(retired=True)] == ['Old']
        assert [layout.name for layout in factories.layouts.query(retired=False)] == ['Current']

    def test_query_paging(self, factories):
        for name in ('A', 'B', 'C', 'D'):
            create_test_layout(factories, name, owner_id=1)

        page = factories.layouts.query(start=1, length=2)

        assert [layout.name for layout in page] == ['B', 'C']


# =============================================================================
# TagFactory Tests
# =============================================================================

class TestTagFactory:
    """Tests for TagFactory."""

    def test_tags_from_string_creates_unsaved_tags(self, factories):
        tags = factories.tags.tags_from_string('lobby, menu')

        assert [tag.tag for tag in tags] == ['lobby', 'menu']
        assert all(tag.tag_id is None for tag in tags)

    def test_tags_from_string_reuses_existing_tags(self, factories, sample_layout_with_regions):
        tags = factories.tags.tags_from_string('lobby,new')

        assert tags[0].tag_id is not None
        assert tags[0].layout_ids == [sample_layout_with_regions.layout_id]
        assert tags[1].tag_id is None

    def test_tags_from_string_rejects_non_text(self, factories):
        with pytest.raises(InvalidArgumentError, match='comma separated string'):
            factories.tags.tags_from_string(['lobby'])

    def test_tags_from_string_skips_blanks_and_duplicates(self, factories):
        tags = factories.tags.tags_from_string(' lobby, ,lobby,menu ')

        assert [tag.tag for tag in tags] == ['lobby', 'menu']

    def test_tags_from_empty_string(self, factories):
        assert factories.tags.tags_from_string('') == []
        assert factories.tags.tags_from_string(None) == []

    def test_get_by_tag_unknown_raises(self, factories):
        with pytest.raises(NotFoundError):
            factories.tags.get_by_tag('missing')


# =============================================================================
# Campaign, Permission and Display Factory Tests
# =============================================================================

class TestOtherFactories:
    """Tests for CampaignFactory, PermissionFactory and DisplayFactory."""

    def test_campaigns_by_layout_include_own_campaign(self, factories, sample_layout):
        weekend = factories.campaigns.create(name='Weekend', owner_id=1)
        weekend.assign_layout(sample_layout.layout_id)
        weekend.save()

        campaigns = factories.campaigns.get_by_layout_id(sample_layout.layout_id)

        assert [campaign.campaign_id for campaign in campaigns] == [sample_layout.campaign_id, weekend.campaign_id]
        assert campaigns[0].is_layout_specific is True
        assert campaigns[1].is_layout_specific is False

    def test_campaign_get_by_id_unknown_raises(self, factories):
        with pytest.raises(NotFoundError, match='Campaign not found'):
            factories.campaigns.get_by_id(999)

    def test_campaign_name_is_validated(self, factories):
        campaign = factories.campaigns.create(name='', owner_id=1)

        with pytest.raises(ValueError, match='Name must be between 1 and 254 characters'):
            campaign.save()

    def test_permissions_for_unsaved_object_are_empty(self, factories):
        assert factories.permissions.get_by_object_id('campaign', None) == []

    def test_permission_round_trip(self, factories):
        factories.permissions.create(3, 'region', 11, view=True, delete=True).save()

        permission = factories.permissions.get_by_object_id('region', 11)[0]

        assert permission.to_dict() == {
            'permission_id': permission.permission_id,
            'entity': 'region',
            'object_id': 11,
            'group_id': 3,
            'view': True,
            'edit': False,
            'delete': True,
        }

    def test_repoint_default_layout(self, db_session, factories):
        factories.displays.add('Reception', 10)
        factories.displays.add('Cafe', 10)
        factories.displays.add('Bar', 11)

        changed = factories.displays.repoint_default_layout(10, 4)

        assert changed == 2
        assert count_rows(db_session, 'display', 'defaultlayoutid = 4') == 2
        assert count_rows(db_session, 'display', 'defaultlayoutid = 11') == 1

    def test_region_get_by_id_unknown_raises(self, factories):
        with pytest.raises(NotFoundError, match='Cannot find region'):
            factories.regions.get_by_id(42)
