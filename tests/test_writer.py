# -*- coding: utf-8 -*-
"""
Unit Tests for the DAT writer

Round-trip fidelity per dialect, edited and new row composition and the
blank-row policy.
"""

import pytest

from datforge_enums import FileKind
from datforge_exceptions import FileWriteError
from parser.core import parse
from parser.tool_parser import parse_tool_lines
from parser.writer import render_document, write_document


DIALECT_FIXTURES = [
    ("tool_lines", FileKind.TOOLS),
    ("end_mill_lines", FileKind.TOOLS),
    ("holder_lines", FileKind.HOLDERS),
    ("holder_marker_lines", FileKind.HOLDERS),
    ("shank_lines", FileKind.SHANKS),
    ("trackpoint_lines", FileKind.TRACKPOINTS),
    ("segmented_lines", FileKind.SEGMENTED_TOOLS),
]


class TestRoundTrip:
    """Unmodified documents reproduce their source."""

    @pytest.mark.parametrize("fixture_name, kind", DIALECT_FIXTURES)
    def test_file_round_trip(self, request, tmp_path, fixture_name, kind):
        lines = request.getfixturevalue(fixture_name)
        source = '\n'.join(lines) + '\n'
        output_path = tmp_path / "out.dat"

        write_document(output_path, parse(source.splitlines(), kind))

        assert output_path.read_text(encoding='utf-8') == source

    @pytest.mark.parametrize("fixture_name, kind", DIALECT_FIXTURES)
    def test_field_mapping_totality(self, request, fixture_name, kind):
        doc = parse(request.getfixturevalue(fixture_name), kind)
        for cls in doc.classes:
            for row in cls.rows:
                assert len(row.values) == len(cls.format_fields)


class TestEndMillScenario:
    """The smallest tool file, unmodified and edited."""

    def test_unmodified(self, end_mill_lines):
        assert render_document(parse_tool_lines(end_mill_lines)) == end_mill_lines

    def test_edit_changes_only_that_value(self, end_mill_lines):
        doc = parse_tool_lines(end_mill_lines)
        doc.classes[0].rows[0].set("DIA", "12.5")

        output = render_document(doc)

        assert output[2] == "#DATA | 1 | 2 | 12.5 | 50.0"
        assert output[:2] == end_mill_lines[:2]
        assert output[3:] == end_mill_lines[3:]


class TestRowComposition:
    """Edited and new rows."""

    def test_edited_row_keeps_indent(self, tool_lines):
        doc = parse_tool_lines(tool_lines)
        doc.classes[0].rows[0].set("DIA", "12.0")

        output = render_document(doc)

        assert output[8] == "  DATA | ugt0201_001 | 02 | 01 | 1 | 1 | End Mill D10 | 12.0 | 50.0 | 2"
        assert output[9:] == tool_lines[9:]

    def test_edited_multiline_row_collapses(self, tool_lines):
        doc = parse_tool_lines(tool_lines)
        doc.classes[0].rows[1].set("FN", "4")

        output = render_document(doc)

        assert output[9] == "  DATA | ugt0201_002 | 02 | 01 | 1 | 1 | Ball Mill D6 | 6.0 | 40.0 | 4"
        assert output[10] == tool_lines[11]
        assert len(output) == len(tool_lines) - 1

    def test_new_row_uses_format_indent(self, tool_lines):
        doc = parse_tool_lines(tool_lines)
        doc.classes[0].new_row(LIBRF="ugt0201_004", T="02", ST="01")

        output = render_document(doc)

        assert output[12].startswith("  DATA | ugt0201_004 | 02 | 01 | ")
        assert output[13] == "END_DATA"

    def test_new_row_without_format_line(self):
        doc = parse_tool_lines(['CLASS A', 'FORMAT X Y', 'DATA | 1 | 2'])
        cls = doc.classes[0]
        cls.format_lines.clear()
        cls.new_row(X="3", Y="4")

        assert render_document(doc)[-1] == "    DATA | 3 | 4"

    def test_values_read_through_map(self):
        doc = parse_tool_lines(['CLASS A', 'FORMAT X Y', 'DATA | 1 | 2'])
        row = doc.classes[0].rows[0]
        row.set("y", "9")

        assert row.values == ["1", "2"]
        assert render_document(doc)[-1] == "DATA | 1 | 9"


class TestBlankRows:
    """Soft-deleted rows are not written."""

    def test_parsed_blank_row_skipped(self):
        lines = ['CLASS A', 'FORMAT X Y', 'DATA | 1 | 2', 'DATA |  | ', 'END_DATA']
        assert render_document(parse_tool_lines(lines)) == lines[:3] + lines[4:]

    def test_cleared_row_skipped(self, end_mill_lines):
        doc = parse_tool_lines(end_mill_lines)
        row = doc.classes[0].rows[0]
        for field in doc.classes[0].format_fields:
            row.set(field, "")

        assert render_document(doc) == [end_mill_lines[0], end_mill_lines[1], end_mill_lines[3]]


class TestWriteDocument:
    """File output."""

    def test_line_endings(self, tmp_path, end_mill_lines):
        path = tmp_path / "out.dat"
        write_document(path, parse_tool_lines(end_mill_lines))

        data = path.read_bytes()
        assert b'\r\n' not in data
        assert data.endswith(b'#END_DATA\n')

    def test_write_failure(self, tmp_path, end_mill_lines):
        with pytest.raises(FileWriteError) as exc_info:
            write_document(tmp_path / "missing" / "out.dat", parse_tool_lines(end_mill_lines))
        assert exc_info.value.operation == 'write'
        assert isinstance(exc_info.value.__cause__, OSError)
