import logging

from pyosc.model import element_kind

log = logging.getLogger(__name__)

_list_fields = ('tags', 'nds', 'members')


def _snapshot(element, visible):
    """Copy an element with its visibility set, detached from the source lists."""
    copies = dict((name, list(getattr(element, name)))
                  for name in _list_fields
                  if name in element._fields and getattr(element, name) is not None)
    return element._replace(visible=visible, **copies)


class History(object):
    """Read-only element history for the elements touched by one change.

    Created and modified elements are recorded as visible, deleted ones as
    not visible. Entries for the same (kind, id) are kept in create, modify,
    delete order, one per occurrence. Nothing outside the change is ever
    consulted.
    """

    def __init__(self, change):
        index = {}
        for grouping, visible in ((change.create, True),
                                  (change.modify, True),
                                  (change.delete, False)):
            if grouping is None:
                continue
            for element in grouping:
                key = (element_kind(element), element.id)
                index.setdefault(key, []).append(_snapshot(element, visible))

        self._index = dict((key, tuple(entries)) for key, entries in index.items())
        log.debug("Indexed %d elements from change", len(self._index))

    def history_of(self, kind, element_id):
        """Return the entries recorded for an element, oldest first.

        An element this change never touched gives an empty list.
        """
        try:
            entries = self._index.get((kind, element_id), ())
        except TypeError:
            # unhashable id
            return []
        return [_snapshot(e, e.visible) for e in entries]

    def node_history(self, node_id):
        return self.history_of('node', node_id)

    def way_history(self, way_id):
        return self.history_of('way', way_id)

    def relation_history(self, relation_id):
        return self.history_of('relation', relation_id)

    def __contains__(self, key):
        try:
            return key in self._index
        except TypeError:
            return False

    def __iter__(self):
        return iter(self._index)

    def __len__(self):
        return len(self._index)
