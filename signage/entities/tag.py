"""
Tag entity.

Tags label layouts. The assignment of a tag to layouts is stored in
``lktaglayout``; ``save()`` writes the tag itself when it is new and then
brings the links in line with the assigned layout ids.
"""

from signage.entities.base import Entity


class Tag(Entity):
    """
    A label that can be assigned to layouts.

    Attributes:
        tag_id: Surrogate key, None until first save
        tag: The tag text
        layout_ids: Ids of the layouts this tag is assigned to
    """

    STATE_FIELDS = ('tag_id', 'layout_ids', '_stored_layout_ids')

    def __init__(self, factories, tag_id=None, tag=None, layout_ids=None):
        super().__init__(factories)
        self.tag_id = tag_id
        self.tag = tag
        self.layout_ids = list(layout_ids or [])

        self._stored_layout_ids = set(self.layout_ids) if tag_id else set()

    def __repr__(self):
        return f'<Tag {self.tag} ({self.tag_id})>'

    def assign_layout(self, layout_id):
        if layout_id not in self.layout_ids:
            self.layout_ids.append(layout_id)

    def unassign_layout(self, layout_id):
        if layout_id in self.layout_ids:
            self.layout_ids.remove(layout_id)

    def save(self):
        """Insert the tag if needed and synchronise its layout links."""
        with self.gateway.transaction():
            self.remember_state()

            if not self.tag_id:
                self.tag_id = self.gateway.insert('INSERT INTO tag (tag) VALUES (:tag)', {
                    'tag': self.tag,
                })

            current = set(self.layout_ids)

            for layout_id in self.layout_ids:
                if layout_id not in self._stored_layout_ids:
                    self.gateway.insert(
                        'INSERT INTO lktaglayout (tagId, layoutId) VALUES (:tagId, :layoutId)',
                        {'tagId': self.tag_id, 'layoutId': layout_id}
                    )

            for layout_id in self._stored_layout_ids - current:
                self.gateway.update(
                    'DELETE FROM lktaglayout WHERE tagId = :tagId AND layoutId = :layoutId',
                    {'tagId': self.tag_id, 'layoutId': layout_id}
                )

            self._stored_layout_ids = current
