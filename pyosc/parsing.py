import datetime
import gzip
import io
import logging
import os
import re
import zlib

from lxml import etree

import pyosc.model as model
from pyosc.change import Change
from pyosc.errors import FormatError, TransportError

log = logging.getLogger(__name__)

GZIP_MAGIC = b'\x1f\x8b'

_int_re = re.compile(r"[+-]?[0-9]+\Z")
_float_re = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?\Z")
# RFC3339, as written by the OSM API and most editors.
_timestamp_re = re.compile(
    r"([0-9]{4})-([0-9]{2})-([0-9]{2})T([0-9]{2}):([0-9]{2}):([0-9]{2})"
    r"(?:\.([0-9]+))?(Z|[+-][0-9]{2}:[0-9]{2})\Z")

# Tags that only make sense inside a section or an element.
_element_level_tags = ('node', 'way', 'relation', 'nd', 'member', 'tag')


def isoToDatetime(s):
    """Parse a RFC3339 timestamp to a naive UTC Python datetime."""
    if s is None:
        return s
    m = _timestamp_re.match(s)
    if m is None:
        raise FormatError("Invalid timestamp %r" % s)

    year, month, day, hour, minute, second, fraction, offset = m.groups()
    try:
        dt = datetime.datetime(int(year), int(month), int(day),
                               int(hour), int(minute), int(second),
                               int((fraction or '0')[:6].ljust(6, '0')))
    except ValueError:
        raise FormatError("Invalid timestamp %r" % s)

    if offset != 'Z':
        delta = datetime.timedelta(hours=int(offset[1:3]), minutes=int(offset[4:6]))
        dt = dt - delta if offset[0] == '+' else dt + delta
    return dt

def maybeInt(s):
    if s is None:
        return s
    if _int_re.match(s) is None:
        raise FormatError("Invalid integer %r" % s)
    return int(s)

def maybeFloat(s):
    if s is None:
        return s
    if _float_re.match(s) is None:
        raise FormatError("Invalid number %r" % s)
    return float(s)

def maybeBool(s):
    if s is None:
        return s
    if s not in ('true', 'false'):
        raise FormatError("Invalid boolean %r" % s)
    return s == 'true'

def _required(elem, name):
    value = elem.get(name)
    if value is None:
        raise FormatError("<%s> on line %s is missing its %s attribute" % (elem.tag, elem.sourceline, name))
    return value

def _unexpected(elem, parent):
    return FormatError("Unexpected <%s> inside <%s> on line %s" % (elem.tag, parent.tag, elem.sourceline))

def _timestamp(elem, parse_timestamps):
    return isoToDatetime(elem.get('timestamp')) if parse_timestamps else elem.get('timestamp')

def _parse_tag(elem):
    return model.Tag(
        _required(elem, 'k'),
        _required(elem, 'v')
    )

def _parse_node(elem, parse_timestamps):
    node = model.Node(
        maybeInt(_required(elem, 'id')),
        maybeInt(elem.get('version')),
        maybeInt(elem.get('changeset')),
        elem.get('user'),
        maybeInt(elem.get('uid')),
        maybeBool(elem.get('visible')),
        _timestamp(elem, parse_timestamps),
        maybeFloat(elem.get('lat')),
        maybeFloat(elem.get('lon')),
        []
    )
    for child in elem:
        if child.tag == 'tag':
            node.tags.append(_parse_tag(child))
        else:
            raise _unexpected(child, elem)
    return node

def _parse_way(elem, parse_timestamps):
    way = model.Way(
        maybeInt(_required(elem, 'id')),
        maybeInt(elem.get('version')),
        maybeInt(elem.get('changeset')),
        elem.get('user'),
        maybeInt(elem.get('uid')),
        maybeBool(elem.get('visible')),
        _timestamp(elem, parse_timestamps),
        [],
        []
    )
    for child in elem:
        if child.tag == 'nd':
            way.nds.append(maybeInt(_required(child, 'ref')))
        elif child.tag == 'tag':
            way.tags.append(_parse_tag(child))
        else:
            raise _unexpected(child, elem)
    return way

def _parse_relation(elem, parse_timestamps):
    relation = model.Relation(
        maybeInt(_required(elem, 'id')),
        maybeInt(elem.get('version')),
        maybeInt(elem.get('changeset')),
        elem.get('user'),
        maybeInt(elem.get('uid')),
        maybeBool(elem.get('visible')),
        _timestamp(elem, parse_timestamps),
        [],
        []
    )
    for child in elem:
        if child.tag == 'member':
            relation.members.append(
                model.Member(
                    _required(child, 'type'),
                    maybeInt(_required(child, 'ref')),
                    child.get('role', '')
                )
            )
        elif child.tag == 'tag':
            relation.tags.append(_parse_tag(child))
        else:
            raise _unexpected(child, elem)
    return relation

_element_parsers = {
    'node': _parse_node,
    'way': _parse_way,
    'relation': _parse_relation,
}

def _parse_section(section, grouping, parse_timestamps):
    for elem in section:
        parser = _element_parsers.get(elem.tag)
        if parser is None:
            raise _unexpected(elem, section)
        grouping.append(parser(elem, parse_timestamps))

def _make_parser():
    return etree.XMLParser(resolve_entities=False, no_network=True,
                           remove_comments=True, remove_pis=True)

def parse_osm_change(data, parse_timestamps=True):
    """Parse a string or bytes containing osmChange XML into a Change.

    A create, modify or delete section that appears more than once is
    merged into a single grouping in document order. A section that never
    appears leaves the matching grouping at None.
    """

    if isinstance(data, str):
        data = data.encode('utf-8')

    if not data.strip():
        return Change()

    try:
        root = etree.fromstring(data, _make_parser())
    except etree.XMLSyntaxError as e:
        raise FormatError("Malformed osmChange document: %s" % e) from e

    if root.tag != 'osmChange':
        raise FormatError("Expected <osmChange> root, got <%s>" % root.tag)

    change = Change(
        version=maybeFloat(root.get('version')),
        generator=root.get('generator'),
        copyright=root.get('copyright'),
        attribution=root.get('attribution'),
        license=root.get('license'),
    )

    for section in root:
        if section.tag in model.ACTIONS:
            grouping = getattr(change, section.tag)
            if grouping is None:
                grouping = model.OSM()
                setattr(change, section.tag, grouping)
            _parse_section(section, grouping, parse_timestamps)
        elif section.tag in _element_level_tags:
            raise _unexpected(section, root)
        else:
            log.debug("Skipping unknown <%s> on line %s", section.tag, section.sourceline)

    log.debug("Parsed osmChange: %s", ', '.join(
        '%d %s' % (len(grouping), action) for action, grouping in change.groupings()) or 'no sections')

    return change

def load_osm_change(source, parse_timestamps=True):
    """Read osmChange XML from a path or a binary file-like and parse it.

    Gzipped input (.osc.gz) is decompressed on the fly. Failures reading the
    source raise TransportError, problems with its contents FormatError.
    """

    try:
        if isinstance(source, (str, bytes, os.PathLike)):
            with open(source, 'rb') as f:
                data = f.read()
        else:
            data = source.read()

        if data[:2] == GZIP_MAGIC:
            data = gzip.GzipFile(fileobj=io.BytesIO(data)).read()
    except (OSError, EOFError, zlib.error) as e:
        raise TransportError("Could not read osmChange from %r: %s" % (source, e)) from e

    return parse_osm_change(data, parse_timestamps)
