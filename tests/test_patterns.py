# -*- coding: utf-8 -*-
"""
Unit Tests for the DAT grammar helpers

Tokenizer, field-token recognizer and keyword matching.
"""

import pytest

from datforge_enums import Keyword
from parser.patterns import DatPatterns, split_pipe_keep_empties, field_tokens


class TestSplitPipeKeepEmpties:
    """Tests for the DATA payload tokenizer."""

    def test_simple_values(self):
        """Values are split and trimmed."""
        assert split_pipe_keep_empties('| 1 | 2 | 10.0 | 50.0') == ['1', '2', '10.0', '50.0']

    def test_empty_values_kept(self):
        """Empty fields between pipes survive."""
        assert split_pipe_keep_empties('| a |  | c') == ['a', '', 'c']

    def test_trailing_pipe_gives_empty_field(self):
        """A trailing pipe yields a trailing empty value."""
        assert split_pipe_keep_empties('| 1 | 2 |') == ['1', '2', '']

    def test_inline_comments_stripped(self):
        """'//' and '#' suffixes inside a value are dropped."""
        assert split_pipe_keep_empties('| 10.0 // diameter | 5 # height | x') == ['10.0', '5', 'x']

    def test_text_before_first_pipe_ignored(self):
        assert split_pipe_keep_empties('  | a | b') == ['a', 'b']

    def test_no_pipe(self):
        assert split_pipe_keep_empties('no pipes here') == []


class TestFieldTokens:
    """Tests for FORMAT field recognition."""

    def test_field_names(self):
        assert field_tokens('LIBRF T ST UGT_1') == ['LIBRF', 'T', 'ST', 'UGT_1']

    def test_prose_filtered(self):
        """Lower-case and punctuated words are not fields."""
        assert field_tokens('DIA the Diameter, HEI') == ['DIA', 'HEI']

    def test_empty(self):
        assert field_tokens('   ') == []


class TestKeywordMatching:
    """Tests for structural keyword recognition."""

    @pytest.mark.parametrize("line, keyword", [
        ('CLASS MILL', Keyword.CLASS),
        ('#CLASS MILL', Keyword.CLASS),
        ('# CLASS MILL', Keyword.CLASS),
        ('  FORMAT A B', Keyword.FORMAT),
        ('DATA | 1', Keyword.DATA),
        ('DATA| 1', Keyword.DATA),
        ('#END_DATA', Keyword.END_DATA),
        ('data | 1', Keyword.DATA),
    ])
    def test_keywords(self, line, keyword):
        match = DatPatterns.match_keyword(line)
        assert match is not None
        assert match.keyword == keyword

    @pytest.mark.parametrize("line", [
        '# Database of tools',
        '# Class list follows',
        '# data below',
        'DATABASE',
        'CLASSIC',
        '',
    ])
    def test_not_keywords(self, line):
        """Prose and longer words do not match."""
        assert DatPatterns.match_keyword(line) is None

    def test_comment_marker_kept(self):
        """The '#' prefix is recorded without the indent."""
        match = DatPatterns.match_keyword('  # DATA | 1')
        assert match.commented
        assert match.indent == '  '
        assert match.marker == '# '
        assert match.rest == ' | 1'

    def test_units_comment(self):
        assert DatPatterns.find_units('# Unit: Metric') == 'Metric'
        assert DatPatterns.find_units('## Units : Inch ') == 'Inch'
        assert DatPatterns.find_units('# no units') is None

    def test_units_comment_with_qualifier(self):
        """Anything between 'Unit' and the colon is allowed."""
        assert DatPatterns.find_units('# Unit system: Metric') == 'Metric'
        assert DatPatterns.find_units('# Units (length): mm') == 'mm'
