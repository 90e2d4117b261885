import datetime
import logging
import os

from lxml import etree

from pyosc.errors import SerializeError
from pyosc.model import ACTIONS, KINDS, METADATA

log = logging.getLogger(__name__)

# Attribute order on the wire; unset (None) attributes are left out.
_common_attribs = ('id', 'version', 'changeset', 'timestamp', 'user', 'uid', 'visible')
_element_attribs = {
    'node': _common_attribs + ('lat', 'lon'),
    'way': _common_attribs,
    'relation': _common_attribs,
}


def datetimeToIso(dt):
    """Format a datetime the way OSM does, always in UTC."""
    if dt.tzinfo is not None:
        dt = dt.astimezone(datetime.timezone.utc).replace(tzinfo=None)
    s = dt.strftime("%Y-%m-%dT%H:%M:%S")
    if dt.microsecond:
        s += ('.%06d' % dt.microsecond).rstrip('0')
    return s + 'Z'

def formatValue(value):
    if isinstance(value, bool):
        return 'true' if value else 'false'
    elif isinstance(value, float):
        return repr(value)
    elif isinstance(value, int):
        return str(value)
    elif isinstance(value, datetime.datetime):
        return datetimeToIso(value)
    return value

def _set_attribs(elem, obj, names):
    for name in names:
        value = getattr(obj, name)
        if value is not None:
            elem.set(name, formatValue(value))

def _append_tags(parent, tags):
    for tag in tags or ():
        etree.SubElement(parent, 'tag', k=tag.key, v=tag.value)

def _append_node(parent, node):
    elem = etree.SubElement(parent, 'node')
    _set_attribs(elem, node, _element_attribs['node'])
    _append_tags(elem, node.tags)

def _append_way(parent, way):
    elem = etree.SubElement(parent, 'way')
    _set_attribs(elem, way, _element_attribs['way'])
    for ref in way.nds or ():
        etree.SubElement(elem, 'nd', ref=formatValue(ref))
    _append_tags(elem, way.tags)

def _append_relation(parent, relation):
    elem = etree.SubElement(parent, 'relation')
    _set_attribs(elem, relation, _element_attribs['relation'])
    for member in relation.members or ():
        etree.SubElement(elem, 'member', type=member.type, ref=formatValue(member.ref), role=member.role or '')
    _append_tags(elem, relation.tags)

_element_writers = {
    'node': _append_node,
    'way': _append_way,
    'relation': _append_relation,
}

def to_xml(change):
    """Build the lxml tree for a Change."""
    root = etree.Element('osmChange')
    _set_attribs(root, change, METADATA)

    for action in ACTIONS:
        grouping = getattr(change, action)
        if grouping is None:
            continue

        section = etree.SubElement(root, action)
        for kind in KINDS:
            write = _element_writers[kind]
            for element in getattr(grouping, kind + 's') or ():
                write(section, element)

    return root

def marshal_change(change, xml_declaration=True, pretty_print=False):
    """Serialize a Change to osmChange XML bytes.

    A change with no metadata and no groupings at all has nothing to say and
    comes out as b''.
    """

    if change.is_empty():
        return b''

    try:
        root = to_xml(change)
    except (TypeError, ValueError, AttributeError) as e:
        raise SerializeError("Could not encode change: %s" % e) from e

    data = etree.tostring(root, encoding='UTF-8', xml_declaration=xml_declaration,
                          pretty_print=pretty_print)
    log.debug("Marshalled osmChange into %d bytes", len(data))
    return data

def write_osm_change(change, sink, **kwargs):
    """Serialize a Change and write it to a path or a binary file-like."""

    data = marshal_change(change, **kwargs)
    try:
        if isinstance(sink, (str, os.PathLike)):
            with open(sink, 'wb') as f:
                f.write(data)
        else:
            sink.write(data)
    except OSError as e:
        raise SerializeError("Could not write osmChange to %r: %s" % (sink, e)) from e
