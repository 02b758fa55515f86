"""
Permission entity.

A permission grants a user group view/edit/delete rights on one object,
identified by entity name and object id (e.g. ``('campaign', 12)``).
"""

from signage.entities.base import Entity


class Permission(Entity):
    """
    Rights of a group on an object.

    Attributes:
        permission_id: Surrogate key, None until first save
        entity: Object type, e.g. 'campaign' or 'region'
        object_id: Id of the object
        group_id: Group the rights are granted to
        can_view, can_edit, can_delete: Granted rights
    """

    TRACKED_FIELDS = ('group_id', 'can_view', 'can_edit', 'can_delete')

    STATE_FIELDS = ('permission_id',)

    def __init__(self, factories, permission_id=None, entity=None, object_id=None, group_id=None,
                 can_view=False, can_edit=False, can_delete=False):
        super().__init__(factories)
        self.permission_id = permission_id
        self.entity = entity
        self.object_id = object_id
        self.group_id = group_id
        self.can_view = can_view
        self.can_edit = can_edit
        self.can_delete = can_delete

    def __repr__(self):
        return f'<Permission {self.entity}:{self.object_id} group {self.group_id}>'

    def save(self):
        self.remember_state()

        params = {
            'groupId': self.group_id,
            'canView': 1 if self.can_view else 0,
            'canEdit': 1 if self.can_edit else 0,
            'canDelete': 1 if self.can_delete else 0,
        }

        if not self.permission_id:
            params.update({'entity': self.entity, 'objectId': self.object_id})
            self.permission_id = self.gateway.insert(
                'INSERT INTO permission (entity, objectId, groupId, canView, canEdit, canDelete) '
                'VALUES (:entity, :objectId, :groupId, :canView, :canEdit, :canDelete)',
                params
            )
        elif self.is_dirty:
            params['permissionId'] = self.permission_id
            self.gateway.update(
                'UPDATE permission SET groupId = :groupId, canView = :canView, canEdit = :canEdit, '
                'canDelete = :canDelete WHERE permissionId = :permissionId',
                params
            )

        self._dirty = False

    def delete(self):
        self.gateway.update('DELETE FROM permission WHERE permissionId = :permissionId', {
            'permissionId': self.permission_id,
        })

    def delete_all(self):
        """Delete every permission on the same object."""
        self.gateway.update('DELETE FROM permission WHERE entity = :entity AND objectId = :objectId', {
            'entity': self.entity,
            'objectId': self.object_id,
        })

    def to_dict(self):
        return {
            'permission_id': self.permission_id,
            'entity': self.entity,
            'object_id': self.object_id,
            'group_id': self.group_id,
            'view': bool(self.can_view),
            'edit': bool(self.can_edit),
            'delete': bool(self.can_delete),
        }
