"""
Entity base class.

Entities are plain Python objects that load and persist themselves through
the SQL gateway of the factory container they were created with. Each entity
declares the attributes that are persisted by an UPDATE statement in
``TRACKED_FIELDS``; assigning a different value to any of them marks the
entity dirty so ``save()`` knows an UPDATE is needed.
"""

import copy

_MISSING = object()


class Entity:
    """
    Common state for signage entities.

    Attributes:
        is_dirty: True when a tracked field changed since the last load/save
        loaded: True once the entity's child collections have been fetched
    """

    TRACKED_FIELDS = ()

    # Attributes a save writes that must go back to their old values when the
    # unit of work rolls back: generated ids and stored link sets
    STATE_FIELDS = ()

    def __init__(self, factories):
        object.__setattr__(self, '_factories', factories)
        object.__setattr__(self, '_dirty', False)
        object.__setattr__(self, '_loaded', False)

    def __setattr__(self, name, value):
        if name in self.TRACKED_FIELDS and getattr(self, name, _MISSING) != value:
            object.__setattr__(self, '_dirty', True)
        object.__setattr__(self, name, value)

    @property
    def factories(self):
        return self._factories

    @property
    def gateway(self):
        return self._factories.gateway

    @property
    def is_dirty(self):
        return self._dirty

    @property
    def loaded(self):
        return self._loaded

    def mark_clean(self):
        """Forget pending changes, e.g. after hydrating from a row."""
        self._dirty = False
        return self

    def remember_state(self):
        """
        Snapshot ``STATE_FIELDS`` and the dirty flag for the current unit of work.

        If the unit rolls back the snapshot is restored, so a later save
        inserts again whatever the rolled back unit had inserted.
        """
        state = {name: copy.copy(getattr(self, name)) for name in self.STATE_FIELDS}
        state['_dirty'] = self._dirty
        self.gateway.on_rollback(id(self), lambda: self._restore_state(state))

    def _restore_state(self, state):
        for name, value in state.items():
            object.__setattr__(self, name, value)
