import collections

## OSM Objects
Tag = collections.namedtuple('Tag', 'key, value')
Node = collections.namedtuple('Node', 'id, version, changeset, user, uid, visible, timestamp, lat, lon, tags')
Way = collections.namedtuple('Way', 'id, version, changeset, user, uid, visible, timestamp, nds, tags')
Relation = collections.namedtuple('Relation', 'id, version, changeset, user, uid, visible, timestamp, members, tags')
Member = collections.namedtuple('Member', 'type, ref, role')

# Everything but the id is optional when building elements by hand.
Node.__new__.__defaults__ = (None,) * 9
Way.__new__.__defaults__ = (None,) * 8
Relation.__new__.__defaults__ = (None,) * 8

KINDS = ('node', 'way', 'relation')
ACTIONS = ('create', 'modify', 'delete')
METADATA = ('version', 'generator', 'copyright', 'attribution', 'license')

_kind_by_type = {
    Node: 'node',
    Way: 'way',
    Relation: 'relation',
}


def element_kind(element):
    """Return 'node', 'way' or 'relation' for an element record."""
    try:
        return _kind_by_type[type(element)]
    except KeyError:
        raise TypeError("Not an OSM element: %r" % (element,))


## Groupings
class OSM(object):
    """An ordered bundle of nodes, ways and relations.

    Each of the three sequences is either None (absent) or a list, and an
    absent sequence is not the same thing as an empty one.
    """

    __slots__ = ('nodes', 'ways', 'relations')

    def __init__(self, nodes=None, ways=None, relations=None):
        self.nodes = nodes
        self.ways = ways
        self.relations = relations

    def _sequence(self, kind):
        return getattr(self, kind + 's')

    def append(self, element):
        kind = element_kind(element)
        seq = self._sequence(kind)
        if seq is None:
            seq = []
            setattr(self, kind + 's', seq)
        seq.append(element)

    def __len__(self):
        return sum(len(s) for s in (self.nodes, self.ways, self.relations) if s)

    def __iter__(self):
        for kind in KINDS:
            for element in self._sequence(kind) or ():
                yield element

    def get(self, kind, element_id):
        for element in self._sequence(kind) or ():
            if element.id == element_id:
                return element
        return None

    def element_ids(self):
        return [(element_kind(e), e.id) for e in self]

    def __eq__(self, other):
        if not isinstance(other, OSM):
            return NotImplemented
        return (self.nodes == other.nodes and
                self.ways == other.ways and
                self.relations == other.relations)

    def __ne__(self, other):
        eq = self.__eq__(other)
        return eq if eq is NotImplemented else not eq

    __hash__ = None

    def __repr__(self):
        return 'OSM(nodes=%r, ways=%r, relations=%r)' % (self.nodes, self.ways, self.relations)
