"""
Layout aggregate.

A layout is a signage screen composition. It owns its regions (which own
playlists, which own widgets), its tag assignments, the permissions on its
layout-specific campaign and the list of campaigns that reference it.

The aggregate loads its children through the injected factories and persists
itself with parameterized SQL through the gateway. ``save()`` and ``delete()``
cascade to the children in a fixed order inside one unit of work.

Lifecycle:
    New -> Loaded -> Saved, Saved -> dirty on mutation of a tracked field,
    Deleted is terminal.
"""

import hashlib
import logging

from signage.entities.base import Entity
from signage.exceptions import InvalidArgumentError, NotFoundError
from signage.utils.dates import get_system_date


logger = logging.getLogger(__name__)

# Validation limits
MAX_NAME_LENGTH = 50
MAX_DESCRIPTION_LENGTH = 254


class Layout(Entity):
    """
    Aggregate root for a signage layout.

    Attributes:
        layout_id: Surrogate key, None until first save
        owner_id: Owning user id
        campaign_id: Id of the layout-specific campaign (the external identity)
        background_image_id: Optional media id of the background image
        schema_version: Layout schema version
        name: Layout name (1-50 characters), stored in the ``layout`` column
        description: Optional description (max 254 characters)
        background_color: Background colour, e.g. '#000000'
        legacy_xml: XLF of layouts created before regions were stored as rows
        status: Build status code
        retired: Whether the layout is retired
        background_z_index: Stacking position of the background
        width: Canvas width in pixels
        height: Canvas height in pixels
        regions: Owned regions, in display order
        tags: Assigned tags
        permissions: Permissions on the layout-specific campaign
        campaigns: Campaigns that reference this layout
    """

    TRACKED_FIELDS = (
        'layout_id',
        'owner_id',
        'campaign_id',
        'background_image_id',
        'background_color',
        'width',
        'height',
        'status',
        'description',
        'name',
        'retired',
        'background_z_index',
    )

    STATE_FIELDS = (
        'layout_id',
        'campaign_id',
        'campaigns',
        'status',
        'schema_version',
        'created_dt',
        'modified_dt',
        'legacy_xml',
        '_unassigned_tags',
    )

    def __init__(self, factories, layout_id=None, owner_id=None, campaign_id=None,
                 background_image_id=None, schema_version=None, name=None,
                 description=None, background_color=None, legacy_xml=None,
                 status=None, retired=False, background_z_index=0, width=None,
                 height=None, created_dt=None, modified_dt=None):
        super().__init__(factories)
        self.layout_id = layout_id
        self.owner_id = owner_id
        self.campaign_id = campaign_id
        self.background_image_id = background_image_id
        self.schema_version = schema_version
        self.name = name
        self.description = description
        self.background_color = background_color
        self.legacy_xml = legacy_xml
        self.status = status
        self.retired = retired
        self.background_z_index = background_z_index
        self.width = width
        self.height = height
        self.created_dt = created_dt
        self.modified_dt = modified_dt

        # Child items
        self.regions = []
        self.tags = []
        self.permissions = []
        self.campaigns = []

        self._unassigned_tags = []
        self._deleted = False

    def __str__(self):
        return 'Layout %s - %d x %d. Regions = %d, Tags = %d. layoutId = %d' % (
            self.name,
            self.width or 0,
            self.height or 0,
            len(self.regions),
            len(self.tags),
            self.layout_id or 0,
        )

    def __repr__(self):
        return f'<Layout {self.name} ({self.layout_id})>'

    @property
    def deleted(self):
        return self._deleted

    def hash(self):
        """
        Content fingerprint of the mutable scalar fields.

        Used as the ETag of the layout resource. Not a security measure.

        Returns:
            32-character md5 hex digest
        """
        parts = (
            self.layout_id,
            self.owner_id,
            self.campaign_id,
            self.background_image_id,
            self.background_color,
            self.width,
            self.height,
            self.status,
            self.description,
        )
        joined = ''.join('' if part is None else str(part) for part in parts)
        return hashlib.md5(joined.encode('utf-8')).hexdigest()

    def get_id(self):
        """The layout is referenced from outside by its campaign id."""
        return self.campaign_id

    def get_owner_id(self):
        return self.owner_id

    def set_owner(self, owner_id):
        """
        Set the owner of the layout and of every region it owns.

        Not persisted until ``save()``.
        """
        self.owner_id = owner_id

        for region in self.regions:
            region.set_owner(owner_id)

    def get_region(self, region_id):
        """
        Find an owned region by id.

        Raises:
            NotFoundError: If no owned region has this id
        """
        for region in self.regions:
            if region.region_id == region_id:
                return region

        raise NotFoundError('Cannot find region')

    def get_widgets(self):
        """Widgets of every playlist of every region, in iteration order."""
        widgets = []

        for region in self.regions:
            for playlist in region.playlists:
                widgets.extend(playlist.widgets)

        return widgets

    def assign_tag(self, tag):
        """Add a tag to the layout (persisted on save)."""
        self._unassigned_tags = [t for t in self._unassigned_tags if t.tag != tag.tag]

        if all(t.tag != tag.tag for t in self.tags):
            self.tags.append(tag)

    def unassign_tag(self, tag):
        """Remove a tag from the layout (persisted on save)."""
        for existing in list(self.tags):
            if existing.tag == tag.tag:
                self.tags.remove(existing)
                self._unassigned_tags.append(existing)

    def replace_tags(self, tags):
        """Make ``tags`` the complete tag list of the layout."""
        names = {tag.tag for tag in tags}

        for existing in list(self.tags):
            if existing.tag not in names:
                self.unassign_tag(existing)

        for tag in tags:
            self.assign_tag(tag)

    def clone(self):
        """
        Copy the layout as a new, unsaved layout.

        Identity fields are cleared and regions (with their playlists and
        widgets) are copied so the duplicate is independent of this layout.
        Tags are shared; permissions and campaigns belong to the original.
        """
        duplicate = Layout(
            self._factories,
            owner_id=self.owner_id,
            background_image_id=self.background_image_id,
            schema_version=self.schema_version,
            name=self.name,
            description=self.description,
            background_color=self.background_color,
            legacy_xml=self.legacy_xml,
            status=self.status,
            retired=self.retired,
            background_z_index=self.background_z_index,
            width=self.width,
            height=self.height,
        )
        duplicate.regions = [region.clone() for region in self.regions]
        duplicate.tags = list(self.tags)
        duplicate._loaded = self._loaded
        return duplicate

    def load(self, load_playlists=False):
        """
        Load the child collections of this layout.

        Does nothing when the layout is already loaded.

        Args:
            load_playlists: Also load the playlists and widgets of each region
        """
        if self._loaded:
            return

        logger.debug('Loading layout %s', self.layout_id)

        self.permissions = self._factories.permissions.get_by_object_id('campaign', self.campaign_id)

        self.regions = self._factories.regions.get_by_layout_id(self.layout_id)

        if load_playlists:
            for region in self.regions:
                region.load()

        self.tags = self._factories.tags.load_by_layout_id(self.layout_id)

        self.campaigns = self._factories.campaigns.get_by_layout_id(self.layout_id)

        self._dirty = False
        self._loaded = True

        logger.debug('Loaded layout %s', self.layout_id)

    def validate(self):
        """
        Check the layout can be saved.

        Raises:
            InvalidArgumentError: On empty dimensions, a name that is not 1-50
                characters of text, a description that is not text or is over
                254 characters, or a name the owner already uses for another
                layout
        """
        if not self.width or not self.height or self.width <= 0 or self.height <= 0:
            raise InvalidArgumentError('The layout dimensions cannot be empty')

        if not isinstance(self.name, str) or not self.name or len(self.name) > MAX_NAME_LENGTH:
            raise InvalidArgumentError('Layout Name must be between 1 and 50 characters')

        if self.description is not None and not isinstance(self.description, str):
            raise InvalidArgumentError('Description must be text')

        if self.description and len(self.description) > MAX_DESCRIPTION_LENGTH:
            raise InvalidArgumentError('Description can not be longer than 254 characters')

        duplicates = self._factories.layouts.query(
            user_id=self.owner_id,
            name_exact=self.name,
            not_layout_id=self.layout_id,
        )

        if duplicates:
            raise InvalidArgumentError(
                f"You already own a layout called '{self.name}'. Please choose another name."
            )

    def save(self):
        """
        Insert or update the layout, then save its regions and tags.

        A layout without an id is inserted together with its layout-specific
        campaign. An existing layout is only updated when a tracked field
        changed. Regions and tags are always saved.
        """
        self._assert_not_deleted()

        logger.debug('Saving %s', self)

        with self.gateway.transaction():
            # A rollback restores these, so a retried save inserts again
            self.remember_state()
            for child in self.regions + self.tags + self._unassigned_tags:
                child.remember_state()

            if not self.layout_id:
                self._add()
            elif self.is_dirty:
                self._update()

            logger.debug('Saving regions on %s', self)

            for region in self.regions:
                region.layout_id = self.layout_id
                region.save()

            logger.debug('Saving tags on %s', self)

            for tag in self.tags:
                tag.assign_layout(self.layout_id)
                tag.save()

            for tag in self._unassigned_tags:
                tag.unassign_layout(self.layout_id)
                tag.save()

            self._unassigned_tags = []
            self._dirty = False

        logger.debug('Save finished for %s', self)

    def delete(self):
        """
        Delete the layout and everything it owns.

        Loads the layout first when needed, then in order: deletes the
        permissions, unassigns the tags, deletes the regions, unassigns the
        layout from every campaign, deletes its own campaign, repoints
        displays defaulting to it to the fallback layout and deletes the row.
        """
        self._assert_not_deleted()

        if not self._loaded:
            self.load()

        logger.debug('Deleting %s', self)

        with self.gateway.transaction():
            for child in self.tags + self.campaigns:
                child.remember_state()

            for permission in self.permissions:
                permission.delete_all()

            for tag in self.tags:
                tag.unassign_layout(self.layout_id)
                tag.save()

            for region in self.regions:
                region.delete()

            for campaign in self.campaigns:
                campaign.unassign_layout(self.layout_id)
                campaign.save(validate=False)

            campaign = self._factories.campaigns.get_by_id(self.campaign_id)
            campaign.delete()

            self._factories.displays.repoint_default_layout(
                self.layout_id,
                self._factories.settings['FALLBACK_LAYOUT_ID']
            )

            self.gateway.update('DELETE FROM layout WHERE layoutId = :layoutId', {
                'layoutId': self.layout_id,
            })

        self._deleted = True

        logger.info('Deleted layout %s', self.layout_id)

    def to_dict(self, include_children=False):
        """
        Serialize the layout to a dictionary for API responses.

        Args:
            include_children: If True, include regions, tags and campaigns

        Returns:
            Dictionary containing the layout fields
        """
        result = {
            'layout_id': self.layout_id,
            'campaign_id': self.campaign_id,
            'owner_id': self.owner_id,
            'name': self.name,
            'description': self.description,
            'width': self.width,
            'height': self.height,
            'status': self.status,
            'retired': bool(self.retired),
            'schema_version': self.schema_version,
            'background_image_id': self.background_image_id,
            'background_color': self.background_color,
            'background_z_index': self.background_z_index,
            'created_dt': self.created_dt,
            'modified_dt': self.modified_dt,
            'tags': [tag.tag for tag in self.tags],
        }
        if include_children:
            result['regions'] = [region.to_dict() for region in self.regions]
            result['campaigns'] = [campaign.to_dict() for campaign in self.campaigns]
        return result

    #
    # Add / Update
    #

    def _add(self):
        logger.debug('Adding layout %s', self.name)

        settings = self._factories.settings
        now = get_system_date()

        self.status = settings['LAYOUT_STATUS_NEW']
        self.schema_version = settings['LAYOUT_SCHEMA_VERSION']
        self.created_dt = now
        self.modified_dt = now

        self.layout_id = self.gateway.insert(
            'INSERT INTO layout (layout, description, userId, createdDT, modifiedDT, status, width, height, '
            'schemaVersion, backgroundImageId, backgroundColor, backgroundzIndex, retired) '
            'VALUES (:layout, :description, :userId, :createdDT, :modifiedDT, :status, :width, :height, '
            ':schemaVersion, :backgroundImageId, :backgroundColor, :backgroundzIndex, :retired)',
            {
                'layout': self.name,
                'description': self.description,
                'userId': self.owner_id,
                'createdDT': now,
                'modifiedDT': now,
                'status': self.status,
                'width': self.width,
                'height': self.height,
                'schemaVersion': self.schema_version,
                'backgroundImageId': self.background_image_id,
                'backgroundColor': self.background_color,
                'backgroundzIndex': self.background_z_index or 0,
                'retired': 1 if self.retired else 0,
            }
        )

        # Every layout is scheduled through its own campaign
        campaign = self._factories.campaigns.create(
            name=self.name,
            is_layout_specific=True,
            owner_id=self.owner_id,
        )
        campaign.assign_layout(self.layout_id)
        campaign.save()

        self.campaign_id = campaign.campaign_id
        self.campaigns.append(campaign)

    def _update(self):
        logger.debug('Editing layout %s. Id = %s', self.name, self.layout_id)

        now = get_system_date()
        self.modified_dt = now

        # Old XLF is dropped: regions are stored as rows from now on
        self.gateway.update(
            'UPDATE layout SET layout = :layout, description = :description, userId = :userId, '
            'modifiedDT = :modifiedDT, retired = :retired, width = :width, height = :height, '
            'backgroundImageId = :backgroundImageId, backgroundColor = :backgroundColor, '
            'backgroundzIndex = :backgroundzIndex, xml = NULL '
            'WHERE layoutId = :layoutId',
            {
                'layoutId': self.layout_id,
                'layout': self.name,
                'description': self.description,
                'userId': self.owner_id,
                'modifiedDT': now,
                'retired': 1 if self.retired else 0,
                'width': self.width,
                'height': self.height,
                'backgroundImageId': self.background_image_id,
                'backgroundColor': self.background_color,
                'backgroundzIndex': self.background_z_index or 0,
            }
        )
        self.legacy_xml = None

        campaign = self._factories.campaigns.get_by_id(self.campaign_id)
        campaign.name = self.name
        campaign.owner_id = self.owner_id
        campaign.save(validate=False)

    def _assert_not_deleted(self):
        if self._deleted:
            raise InvalidArgumentError(f'Layout {self.layout_id} has been deleted')
