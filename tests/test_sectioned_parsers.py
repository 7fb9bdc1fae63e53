# -*- coding: utf-8 -*-
"""
Unit Tests for the trackpoint and segmented tool parsers

Both dialects must reproduce all non-data text exactly.
"""

import pytest

from datforge_enums import FileKind
from datforge_exceptions import StructuralError
from parser.segmented_parser import (
    get_segment_rows,
    new_segment_row,
    parse_segmented_lines,
    resequence_rows,
    visible_segment_fields,
)
from parser.trackpoint_parser import parse_trackpoint_lines
from parser.writer import render_document


class TestTrackpointParser:
    """Tests for parse_trackpoint_lines()."""

    def test_structure(self, trackpoint_lines):
        doc = parse_trackpoint_lines(trackpoint_lines)

        assert doc.kind == FileKind.TRACKPOINTS
        assert doc.units == "Inch"
        assert doc.head == trackpoint_lines[:5]
        assert [cls.name for cls in doc.classes] == ["MILL", "DRILL"]

    def test_buckets(self, trackpoint_lines):
        mill = parse_trackpoint_lines(trackpoint_lines).classes[0]

        assert mill.class_line == "CLASS MILL"
        assert mill.pre_format_lines == ["# trackpoint definitions for mills"]
        assert mill.format_lines == ["FORMAT LIBRF DEFTYPE TPNAME ADJREG"]
        assert mill.pre_data_lines == []
        assert mill.rows[1].lead_lines == ["# second point"]
        assert mill.post_data_lines == ["END_DATA", ""]

    def test_rows_reference_class(self, trackpoint_lines):
        doc = parse_trackpoint_lines(trackpoint_lines)
        for cls in doc.classes:
            for row in cls.rows:
                assert row.parent_class is cls
                assert len(row.values) == len(cls.format_fields)

    def test_round_trip(self, trackpoint_lines):
        assert render_document(parse_trackpoint_lines(trackpoint_lines)) == trackpoint_lines

    def test_edit_keeps_comments(self, trackpoint_lines):
        doc = parse_trackpoint_lines(trackpoint_lines)
        doc.classes[0].rows[1].set("TPNAME", "TP_9")

        output = render_document(doc)

        expected = list(trackpoint_lines)
        expected[10] = "DATA | MILL_001 | 1 | TP_9 | 2"
        assert output == expected

    def test_remove_row_keeps_lead_comment(self, trackpoint_lines):
        doc = parse_trackpoint_lines(trackpoint_lines)
        mill = doc.classes[0]
        mill.remove_row(mill.rows[1])

        output = render_document(doc)

        assert "# second point" in output
        assert "DATA | MILL_001 | 1 | TP_2 | 2" not in output

    def test_commented_format_continuation(self):
        lines = ['#CLASS MILL', '#FORMAT LIBRF DEFTYPE', '#   TPNAME ADJREG', '#DATA | M1 | 0 | TP_1 | 1']
        doc = parse_trackpoint_lines(lines)
        mill = doc.classes[0]

        assert mill.format_fields == ['LIBRF', 'DEFTYPE', 'TPNAME', 'ADJREG']
        assert mill.rows[0].get("ADJREG") == "1"
        assert render_document(doc) == lines

    def test_data_before_class(self):
        with pytest.raises(StructuralError):
            parse_trackpoint_lines(['# header', 'DATA | 1'])

    def test_data_before_format(self):
        with pytest.raises(StructuralError) as exc_info:
            parse_trackpoint_lines(['CLASS MILL', '# no format', 'DATA | 1'])
        assert exc_info.value.class_name == "MILL"
        assert exc_info.value.line_number == 3


class TestSegmentedParser:
    """Tests for parse_segmented_lines() and segment helpers."""

    def test_structure(self, segmented_lines):
        doc = parse_segmented_lines(segmented_lines)

        assert doc.kind == FileKind.SEGMENTED_TOOLS
        assert doc.units == "Metric"
        cls = doc.classes[0]
        assert cls.name == "MILL_FORM"
        assert len(cls.rows) == 3

    def test_trailing_pipe_truncated(self, segmented_lines):
        cls = parse_segmented_lines(segmented_lines).classes[0]
        row = cls.rows[0]

        assert len(row.values) == len(cls.format_fields) == 8
        assert row.get("RADIUS") == "2.0"

    def test_round_trip(self, segmented_lines):
        assert render_document(parse_segmented_lines(segmented_lines)) == segmented_lines

    def test_segment_rows(self, segmented_lines):
        cls = parse_segmented_lines(segmented_lines).classes[0]

        assert [row.get("SEQ") for row in get_segment_rows(cls, "seg_001")] == ["1", "2"]
        assert get_segment_rows(cls, "") == []

    def test_new_segment_row_for_tool(self, segmented_lines):
        doc = parse_segmented_lines(segmented_lines)
        cls = doc.classes[0]

        row = new_segment_row(cls, "SEG_002", "STEP_DRILL")

        assert row.get("LIBRF") == "SEG_002"
        assert row.get("T") == "1"
        assert row.get("STYPE") == "1"
        assert doc.is_modified

    def test_new_segment_row_for_holder(self):
        doc = parse_segmented_lines(['CLASS HOLDER', 'FORMAT LIBRF RTYPE SEQ DIAM'])
        row = new_segment_row(doc.classes[0], "H1", "holder")

        assert row.get("RTYPE") == "2"
        assert row.get("T") == ""

    def test_new_row_written_with_format_indent(self, segmented_lines):
        doc = parse_segmented_lines(segmented_lines)
        cls = doc.classes[0]
        row = new_segment_row(cls, "SEG_003", "MILL_FORM")
        row.set("SEQ", "1")

        output = render_document(doc)

        assert output[-2] == "DATA | SEG_003 | 1 | 0 | 1 |  |  |  | "
        assert output[-1] == "#END_DATA"

    def test_resequence(self, segmented_lines):
        cls = parse_segmented_lines(segmented_lines).classes[0]
        rows = get_segment_rows(cls, "SEG_001")
        rows.reverse()

        assert resequence_rows(rows) == 2
        assert [row.get("SEQ") for row in rows] == ["1", "2"]
        assert resequence_rows(rows) == 0

    def test_visible_fields(self, segmented_lines):
        cls = parse_segmented_lines(segmented_lines).classes[0]
        assert visible_segment_fields(cls) == ["SWEEP", "LENGTH", "RADIUS"]
