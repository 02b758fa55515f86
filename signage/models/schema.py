"""
Layout schema tables.

The layout aggregate and its children are not ORM-mapped: entities load and
save themselves with parameterized SQL through ``signage.storage.SqlGateway``.
These table definitions exist so ``db.create_all()`` and Flask-Migrate know
about the schema. Column names are the ones the SQL statements use.
"""

from signage.models import db


layout = db.Table(
    'layout',
    db.Column('layoutId', db.Integer, primary_key=True, autoincrement=True),
    db.Column('layout', db.String(50), nullable=False),
    db.Column('description', db.String(254), nullable=True),
    db.Column('userId', db.Integer, db.ForeignKey('users.userId'), nullable=False, index=True),
    db.Column('createdDT', db.DateTime, nullable=False),
    db.Column('modifiedDT', db.DateTime, nullable=False),
    db.Column('status', db.Integer, nullable=False, default=3),
    db.Column('width', db.Integer, nullable=False),
    db.Column('height', db.Integer, nullable=False),
    db.Column('schemaVersion', db.Integer, nullable=False, default=3),
    db.Column('backgroundImageId', db.Integer, nullable=True),
    db.Column('backgroundColor', db.String(25), nullable=True),
    db.Column('backgroundzIndex', db.Integer, nullable=False, default=0),
    db.Column('retired', db.Integer, nullable=False, default=0),
    db.Column('xml', db.Text, nullable=True),
)

region = db.Table(
    'region',
    db.Column('regionId', db.Integer, primary_key=True, autoincrement=True),
    db.Column('layoutId', db.Integer, db.ForeignKey('layout.layoutId'), nullable=False, index=True),
    db.Column('ownerId', db.Integer, nullable=False),
    db.Column('name', db.String(254), nullable=True),
    db.Column('width', db.Integer, nullable=False),
    db.Column('height', db.Integer, nullable=False),
    db.Column('offsetTop', db.Integer, nullable=False, default=0),
    db.Column('offsetLeft', db.Integer, nullable=False, default=0),
    db.Column('zIndex', db.Integer, nullable=False, default=0),
    db.Column('duration', db.Integer, nullable=False, default=0),
)

playlist = db.Table(
    'playlist',
    db.Column('playlistId', db.Integer, primary_key=True, autoincrement=True),
    db.Column('name', db.String(254), nullable=False),
    db.Column('ownerId', db.Integer, nullable=False),
)

lkregionplaylist = db.Table(
    'lkregionplaylist',
    db.Column('regionId', db.Integer, primary_key=True),
    db.Column('playlistId', db.Integer, primary_key=True),
    db.Column('displayOrder', db.Integer, nullable=False, default=0),
)

widget = db.Table(
    'widget',
    db.Column('widgetId', db.Integer, primary_key=True, autoincrement=True),
    db.Column('playlistId', db.Integer, db.ForeignKey('playlist.playlistId'), nullable=False, index=True),
    db.Column('ownerId', db.Integer, nullable=False),
    db.Column('type', db.String(50), nullable=False),
    db.Column('duration', db.Integer, nullable=False, default=0),
    db.Column('displayOrder', db.Integer, nullable=False, default=0),
)

tag = db.Table(
    'tag',
    db.Column('tagId', db.Integer, primary_key=True, autoincrement=True),
    db.Column('tag', db.String(50), nullable=False, unique=True),
)

lktaglayout = db.Table(
    'lktaglayout',
    db.Column('lkTagLayoutId', db.Integer, primary_key=True, autoincrement=True),
    db.Column('tagId', db.Integer, nullable=False, index=True),
    db.Column('layoutId', db.Integer, nullable=False, index=True),
)

campaign = db.Table(
    'campaign',
    db.Column('campaignId', db.Integer, primary_key=True, autoincrement=True),
    db.Column('campaign', db.String(254), nullable=False),
    db.Column('isLayoutSpecific', db.Integer, nullable=False, default=0),
    db.Column('userId', db.Integer, nullable=False),
)

lkcampaignlayout = db.Table(
    'lkcampaignlayout',
    db.Column('lkCampaignLayoutId', db.Integer, primary_key=True, autoincrement=True),
    db.Column('campaignId', db.Integer, nullable=False, index=True),
    db.Column('layoutId', db.Integer, nullable=False, index=True),
    db.Column('displayOrder', db.Integer, nullable=False, default=0),
)

permission = db.Table(
    'permission',
    db.Column('permissionId', db.Integer, primary_key=True, autoincrement=True),
    db.Column('entity', db.String(50), nullable=False),
    db.Column('objectId', db.Integer, nullable=False),
    db.Column('groupId', db.Integer, nullable=False),
    db.Column('canView', db.Integer, nullable=False, default=0),
    db.Column('canEdit', db.Integer, nullable=False, default=0),
    db.Column('canDelete', db.Integer, nullable=False, default=0),
    db.Index('ix_permission_entity_object', 'entity', 'objectId'),
)

display = db.Table(
    'display',
    db.Column('displayId', db.Integer, primary_key=True, autoincrement=True),
    db.Column('display', db.String(50), nullable=False),
    db.Column('defaultlayoutid', db.Integer, nullable=False, index=True),
)
