"""Read, write and query OpenStreetMap change (osmChange) documents."""

import logging

from pyosc.change import Change
from pyosc.errors import FormatError, OSCError, ParseError, SerializeError, TransportError
from pyosc.history import History
from pyosc.model import OSM, Member, Node, Relation, Tag, Way
from pyosc.parsing import load_osm_change, parse_osm_change
from pyosc.writing import marshal_change, write_osm_change

__version__ = '0.1.0'

__all__ = [
    'Change',
    'OSM',
    'Node',
    'Way',
    'Relation',
    'Tag',
    'Member',
    'History',
    'parse_osm_change',
    'load_osm_change',
    'marshal_change',
    'write_osm_change',
    'OSCError',
    'ParseError',
    'FormatError',
    'TransportError',
    'SerializeError',
]

logging.getLogger('pyosc').addHandler(logging.NullHandler())
