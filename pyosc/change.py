from pyosc.history import History
from pyosc.model import ACTIONS, METADATA, OSM
from pyosc.writing import marshal_change


class Change(object):
    """An osmChange document: document metadata plus optional create,
    modify and delete groupings.

    A grouping left at None is absent and is not written out at all, while
    an empty OSM() still produces an empty section.
    """

    def __init__(self, version=None, generator=None, copyright=None,
                 attribution=None, license=None,
                 create=None, modify=None, delete=None):
        self.version = version
        self.generator = generator
        self.copyright = copyright
        self.attribution = attribution
        self.license = license
        self.create = create
        self.modify = modify
        self.delete = delete

    def _append(self, action, element):
        grouping = getattr(self, action)
        if grouping is None:
            grouping = OSM()
            setattr(self, action, grouping)
        grouping.append(element)

    def append_create(self, element):
        self._append('create', element)

    def append_modify(self, element):
        self._append('modify', element)

    def append_delete(self, element):
        self._append('delete', element)

    def groupings(self):
        """Yield (action, OSM) for every grouping that is present."""
        for action in ACTIONS:
            grouping = getattr(self, action)
            if grouping is not None:
                yield (action, grouping)

    def is_empty(self):
        return (all(getattr(self, name) is None for name in METADATA) and
                all(getattr(self, action) is None for action in ACTIONS))

    def marshal(self, **kwargs):
        """Serialize to osmChange XML bytes. See pyosc.writing.marshal_change."""
        return marshal_change(self, **kwargs)

    def to_history(self):
        """Index the elements of this change by identity."""
        return History(self)

    def __eq__(self, other):
        if not isinstance(other, Change):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in METADATA + ACTIONS)

    def __ne__(self, other):
        eq = self.__eq__(other)
        return eq if eq is NotImplemented else not eq

    __hash__ = None

    def __repr__(self):
        fields = ['%s=%r' % (name, getattr(self, name))
                  for name in METADATA + ACTIONS
                  if getattr(self, name) is not None]
        return 'Change(%s)' % ', '.join(fields)
