"""
Tag factory.
"""

from typing import List

from signage.entities.tag import Tag
from signage.exceptions import InvalidArgumentError, NotFoundError
from signage.factories.base import BaseFactory


class TagFactory(BaseFactory):
    """Repository for tags."""

    def create(self, **kwargs) -> Tag:
        """New, unsaved tag bound to this container."""
        return Tag(self.container, **kwargs)

    def get_by_tag(self, tag) -> Tag:
        """
        Get a tag by its text.

        Raises:
            NotFoundError: If the tag does not exist
        """
        rows = self.gateway.select('SELECT tagId, tag FROM tag WHERE tag = :tag', {'tag': tag})

        if not rows:
            raise NotFoundError(f'Tag {tag} not found')

        return self._hydrate(rows[0])

    def load_by_layout_id(self, layout_id) -> List[Tag]:
        """Tags assigned to a layout."""
        rows = self.gateway.select(
            'SELECT tag.tagId, tag.tag '
            'FROM tag '
            'INNER JOIN lktaglayout ON lktaglayout.tagId = tag.tagId '
            'WHERE lktaglayout.layoutId = :layoutId '
            'ORDER BY tag.tag',
            {'layoutId': layout_id}
        )
        return [self._hydrate(row) for row in rows]

    def tags_from_string(self, tag_string) -> List[Tag]:
        """
        Turn a comma separated string into tags.

        Existing tags are reused, unknown ones are returned unsaved.
        """
        tags = []

        if not tag_string:
            return tags

        if not isinstance(tag_string, str):
            raise InvalidArgumentError('Tags must be a comma separated string')

        for text in tag_string.split(','):
            text = text.strip()
            if not text or any(tag.tag == text for tag in tags):
                continue

            try:
                tags.append(self.get_by_tag(text))
            except NotFoundError:
                tags.append(self.create(tag=text))

        return tags

    def _hydrate(self, row) -> Tag:
        links = self.gateway.select(
            'SELECT layoutId FROM lktaglayout WHERE tagId = :tagId ORDER BY lkTagLayoutId',
            {'tagId': row['tagId']}
        )
        return Tag(
            self.container,
            tag_id=row['tagId'],
            tag=row['tag'],
            layout_ids=[link['layoutId'] for link in links],
        )
