"""
Permission factory.
"""

from typing import List

from signage.entities.permission import Permission
from signage.factories.base import BaseFactory


class PermissionFactory(BaseFactory):
    """Repository for permissions."""

    def create(self, group_id, entity, object_id, view=False, edit=False, delete=False) -> Permission:
        """New, unsaved permission bound to this container."""
        return Permission(
            self.container,
            entity=entity,
            object_id=object_id,
            group_id=group_id,
            can_view=view,
            can_edit=edit,
            can_delete=delete,
        )

    def get_by_object_id(self, entity, object_id) -> List[Permission]:
        """Permissions granted on one object."""
        if object_id is None:
            return []

        rows = self.gateway.select(
            'SELECT permissionId, entity, objectId, groupId, canView, canEdit, canDelete '
            'FROM permission WHERE entity = :entity AND objectId = :objectId '
            'ORDER BY permissionId',
            {'entity': entity, 'objectId': object_id}
        )
        return [
            Permission(
                self.container,
                permission_id=row['permissionId'],
                entity=row['entity'],
                object_id=row['objectId'],
                group_id=row['groupId'],
                can_view=bool(row['canView']),
                can_edit=bool(row['canEdit']),
                can_delete=bool(row['canDelete']),
            ).mark_clean()
            for row in rows
        ]
