"""Tests for writing osmChange documents."""

import datetime
import io

import pytest
from lxml import etree

from pyosc.change import Change
from pyosc.errors import SerializeError
from pyosc.model import OSM, Member, Node, Relation, Tag, Way
from pyosc.parsing import parse_osm_change
from pyosc.writing import datetimeToIso, formatValue, marshal_change, write_osm_change


class TestFormatValue:
    """Tests for attribute formatting."""

    def test_scalars(self):
        assert formatValue(True) == 'true'
        assert formatValue(False) == 'false'
        assert formatValue(21598503) == '21598503'
        assert formatValue(0.6) == '0.6'
        assert formatValue(50.7107023) == '50.7107023'
        assert formatValue('osm-go') == 'osm-go'

    def test_naive_datetime(self):
        assert datetimeToIso(datetime.datetime(2014, 4, 10, 0, 43, 5)) == '2014-04-10T00:43:05Z'

    def test_fractional_seconds(self):
        assert datetimeToIso(datetime.datetime(2014, 4, 10, 0, 43, 5, 500000)) == '2014-04-10T00:43:05.5Z'
        assert datetimeToIso(datetime.datetime(2014, 4, 10, 0, 43, 5, 123)) == '2014-04-10T00:43:05.000123Z'

    def test_aware_datetime_is_converted_to_utc(self):
        tz = datetime.timezone(datetime.timedelta(hours=2))
        dt = datetime.datetime(2014, 4, 10, 2, 43, 5, tzinfo=tz)
        assert formatValue(dt) == '2014-04-10T00:43:05Z'


class TestMarshal:
    """Tests for Change -> XML."""

    def test_metadata_and_single_node(self):
        change = Change(
            version=0.6,
            generator='osm-go',
            copyright='copyright1',
            attribution='attribution1',
            license='license1',
            create=OSM(nodes=[Node(id=123)]),
        )
        data = marshal_change(change, xml_declaration=False)
        assert data == (
            b'<osmChange version="0.6" generator="osm-go" copyright="copyright1" '
            b'attribution="attribution1" license="license1">'
            b'<create><node id="123"/></create></osmChange>'
        )

    def test_unset_metadata_is_omitted(self):
        change = Change(generator='osm-go')
        data = marshal_change(change, xml_declaration=False)
        assert data == b'<osmChange generator="osm-go"/>'

    def test_empty_change_is_zero_length(self):
        assert marshal_change(Change()) == b''
        assert Change().marshal() == b''

    def test_empty_grouping_is_not_the_shortcut(self):
        data = marshal_change(Change(delete=OSM()), xml_declaration=False)
        assert data == b'<osmChange><delete/></osmChange>'

    def test_only_present_sections_are_written(self):
        root = etree.fromstring(marshal_change(Change(create=OSM())))
        assert [child.tag for child in root] == ['create']
        assert len(root[0]) == 0

    def test_section_and_element_order(self):
        change = Change(
            delete=OSM(nodes=[Node(3)]),
            create=OSM(relations=[Relation(5)], ways=[Way(4)], nodes=[Node(1), Node(2)]),
        )
        root = etree.fromstring(marshal_change(change))
        assert [child.tag for child in root] == ['create', 'delete']
        assert [(e.tag, e.get('id')) for e in root[0]] == [
            ('node', '1'), ('node', '2'), ('way', '4'), ('relation', '5'),
        ]

    def test_element_children(self):
        way = Way(7, version=2, visible=True, nds=[1, 2, 1], tags=[Tag('area', 'yes')])
        relation = Relation(8, members=[Member('way', 7, 'outer')], tags=[Tag('type', 'multipolygon')])
        root = etree.fromstring(marshal_change(Change(modify=OSM(ways=[way], relations=[relation]))))

        way_elem, relation_elem = root[0]
        assert dict(way_elem.attrib) == {'id': '7', 'version': '2', 'visible': 'true'}
        assert [(c.tag, dict(c.attrib)) for c in way_elem] == [
            ('nd', {'ref': '1'}),
            ('nd', {'ref': '2'}),
            ('nd', {'ref': '1'}),
            ('tag', {'k': 'area', 'v': 'yes'}),
        ]
        assert [(c.tag, dict(c.attrib)) for c in relation_elem] == [
            ('member', {'type': 'way', 'ref': '7', 'role': 'outer'}),
            ('tag', {'k': 'type', 'v': 'multipolygon'}),
        ]

    def test_xml_declaration(self):
        data = marshal_change(Change(create=OSM()))
        assert data.startswith(b"<?xml version='1.0' encoding='UTF-8'?>")

    def test_unencodable_value(self):
        change = Change(create=OSM(nodes=[Node(1, tags=[Tag('name', 'bad\x00value')])]))
        with pytest.raises(SerializeError):
            marshal_change(change)

    def test_non_string_value(self):
        change = Change(create=OSM(nodes=[Node(1, user=object())]))
        with pytest.raises(SerializeError):
            marshal_change(change)


class TestRoundTrip:
    """parse(marshal(parse(data))) == parse(data)."""

    def test_changeset(self, changeset_bytes):
        change = parse_osm_change(changeset_bytes)
        assert parse_osm_change(marshal_change(change)) == change

    def test_relations(self, relations_bytes):
        change = parse_osm_change(relations_bytes)
        assert parse_osm_change(change.marshal(pretty_print=True)) == change

    def test_raw_timestamps(self, changeset_bytes):
        change = parse_osm_change(changeset_bytes, parse_timestamps=False)
        again = parse_osm_change(marshal_change(change), parse_timestamps=False)
        assert again == change

    def test_fractional_and_offset_timestamps(self):
        change = parse_osm_change(
            '<osmChange><modify>'
            '<node id="1" timestamp="2014-04-10T00:43:05.25Z"/>'
            '<node id="2" timestamp="2014-04-10T02:43:05+02:00"/>'
            '</modify></osmChange>')
        assert parse_osm_change(marshal_change(change)) == change

    @pytest.mark.parametrize('data', [
        '<osmChange/>',
        '<osmChange version="0.6"/>',
        '<osmChange><create/></osmChange>',
        '<osmChange><modify/><delete/></osmChange>',
    ])
    def test_degenerate_documents(self, data):
        change = parse_osm_change(data)
        assert parse_osm_change(marshal_change(change)) == change


class TestWrite:
    """Tests for writing to sinks."""

    def test_path(self, tmp_path, changeset_bytes):
        change = parse_osm_change(changeset_bytes)
        path = tmp_path / 'out.osc'
        write_osm_change(change, path)
        assert parse_osm_change(path.read_bytes()) == change

    def test_file_like(self):
        buf = io.BytesIO()
        write_osm_change(Change(create=OSM()), buf, xml_declaration=False)
        assert buf.getvalue() == b'<osmChange><create/></osmChange>'

    def test_failing_sink(self):
        class Full(object):
            def write(self, data):
                raise OSError('No space left on device')

        with pytest.raises(SerializeError):
            write_osm_change(Change(create=OSM()), Full())

    def test_unwritable_path(self, tmp_path):
        with pytest.raises(SerializeError):
            write_osm_change(Change(create=OSM()), str(tmp_path / 'missing' / 'out.osc'))
