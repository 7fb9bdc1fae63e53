# -*- coding: utf-8 -*-
"""
Document Builder

Shared bookkeeping for the dialect parsers. Each dialect runs its own state
machine and tells the builder what it saw; the builder owns the document
under construction, row creation and the placement of every incidental line
(comments, blanks, END_DATA markers) into the right verbatim bucket so the
writer can reproduce the file.

Incidental lines are held until the next structural event decides where they
belong:
- before a class's first row: split around the latest FORMAT block into
  pre_format_lines / format_lines / pre_data_lines
- before any later row: that row's lead_lines
- at the next CLASS or end of file: the class's post_data_lines
"""

from typing import Iterable, List, Optional

from datforge_enums import FileKind, Keyword
from datforge_exceptions import StructuralError
from datforge_logger import get_logger
from models.dat_document import DatClass, DatDocument, DatRow
from parser.patterns import DatPatterns, KeywordLine, field_tokens, split_pipe_keep_empties

logger = get_logger("parser.base")


def normalize_lines(lines: Iterable[str]) -> List[str]:
    """Materialize the input and drop line terminators."""
    return [line.rstrip('\r\n') for line in lines]


def is_data_line(match: Optional[KeywordLine]) -> bool:
    """DATA keyword; behind a '#' it only counts when a pipe payload follows."""
    if match is None or match.keyword != Keyword.DATA:
        return False
    return not match.commented or match.rest.lstrip().startswith('|')


def is_format_line(match: Optional[KeywordLine]) -> bool:
    """FORMAT keyword; behind a '#' it only counts when field names follow."""
    if match is None or match.keyword != Keyword.FORMAT:
        return False
    return not match.commented or bool(field_tokens(match.rest))


def format_continuation(line: str, commented: bool = False) -> List[str]:
    """
    Field names on a FORMAT continuation line, or [] if the line is not one.

    Behind a '#FORMAT' the continuation lines are commented as well; such a
    line only counts when every token on it is a field name, so prose
    comments are never read as fields.
    """
    stripped = line.strip()
    if not stripped or stripped.startswith('//'):
        return []
    if not stripped.startswith('#'):
        return field_tokens(stripped)
    if not commented:
        return []
    text = DatPatterns.strip_comment_prefix(line)
    tokens = field_tokens(text)
    return tokens if len(tokens) == len(text.split()) else []


def is_continuation_line(line: str) -> bool:
    """A '|' line extending the previous DATA row."""
    return DatPatterns.strip_comment_prefix(line).startswith('|')


class DocumentBuilder:
    """Accumulates one DatDocument while a dialect parser walks the lines."""

    def __init__(self, kind: FileKind):
        self.document = DatDocument(kind=kind)
        self.current_class: Optional[DatClass] = None
        self.current_row: Optional[DatRow] = None
        self.line_number = 0
        self._row_tokens: List[str] = []
        self._pending: List[str] = []
        self._row_mark = 0
        self._format_start: Optional[int] = None
        self._format_end: Optional[int] = None
        self._units_found = False

    # =========================================================================
    # HEAD
    # =========================================================================

    def head_line(self, line: str):
        """Keep a line before the first class, watching for the unit comment."""
        self.document.head.append(line)
        if not self._units_found:
            units = DatPatterns.find_units(line)
            if units:
                self.document.units = units
                self._units_found = True

    # =========================================================================
    # INCIDENTAL LINES
    # =========================================================================

    def hold(self, line: str):
        """Keep a verbatim line until the next structural event places it."""
        self._pending.append(line)

    def hold_format(self, line: str, continuation: bool = False):
        """Keep a FORMAT (or FORMAT continuation) line and remember the block span."""
        if not continuation or self._format_start is None:
            self._format_start = len(self._pending)
        self._pending.append(line)
        self._format_end = len(self._pending)

    def _take_pending(self):
        pending = self._pending
        start, end = self._format_start, self._format_end
        self._pending = []
        self._format_start = self._format_end = None
        return pending, start, end

    def settle_pending(self, cls: Optional[DatClass], row: Optional[DatRow] = None):
        """
        Place held lines relative to `cls`.

        With a row that is not the class's first, the lines become the row's
        lead lines. Otherwise they fill the class header buckets (before the
        first row) or its post-data bucket (after the last one).
        """
        if cls is None:
            pending, _, _ = self._take_pending()
            for line in pending:
                self.head_line(line)
            return

        pending, start, end = self._take_pending()
        if not pending:
            return

        has_rows = any(r is not row for r in cls.rows)
        if row is not None and has_rows:
            row.lead_lines.extend(pending)
            return
        if has_rows:
            cls.post_data_lines.extend(pending)
            return

        if start is not None and not cls.format_lines:
            cls.pre_format_lines.extend(pending[:start])
            cls.format_lines.extend(pending[start:end])
            cls.pre_data_lines.extend(pending[end:])
        else:
            cls.pre_data_lines.extend(pending)

    # =========================================================================
    # CLASSES
    # =========================================================================

    def open_class(self, name: str, class_line: Optional[str] = None, synthetic: bool = False) -> DatClass:
        """Close the current class and start a new one."""
        self.finish_row()
        self.settle_pending(self.current_class)
        cls = self.document.add_class(DatClass(name=name, class_line=class_line, synthetic=synthetic))
        self.current_class = cls
        return cls

    def add_class(self, name: str, synthetic: bool = True) -> DatClass:
        """Add a class without making it current (holder/shank synthetic buckets)."""
        return self.document.add_class(DatClass(name=name, synthetic=synthetic))

    # =========================================================================
    # ROWS
    # =========================================================================

    def start_row(self, line: str, match: KeywordLine, cls: Optional[DatClass] = None) -> DatRow:
        """
        Parse a DATA line into a new row.

        The row is attached to `cls` when given; pass None to defer the
        decision (RTYPE routing) and call place_row() later.

        Raises:
            StructuralError: if the payload does not start with '|'
        """
        self.finish_row()
        payload = match.rest.lstrip()
        if not payload.startswith('|'):
            raise StructuralError(
                f"Line {self.line_number}: DATA row must start with '|'.",
                line_number=self.line_number,
                class_name=cls.display_name if cls is not None else None,
                line_content=line,
            )

        self._row_tokens = split_pipe_keep_empties(payload)
        row = DatRow(values=self._row_tokens, raw_lines=[line], keyword_prefix=match.marker)
        self.current_row = row
        if cls is not None:
            self.place_row(cls, row)
        # Lines held before a deferred row stay in front of it
        self._row_mark = len(self._pending)
        return row

    def accepts_continuation(self, line: str) -> bool:
        """True if `line` continues the current row. '#|' lines only continue '#DATA' rows."""
        row = self.current_row
        if row is None:
            return False
        if line.lstrip().startswith('|'):
            return True
        return bool(row.keyword_prefix.strip()) and is_continuation_line(line)

    def continue_row(self, line: str) -> bool:
        """Append a '|' continuation line to the current row. Returns False if there is none."""
        row = self.current_row
        if row is None:
            return False
        # A trailing pipe on the previous line closes its last value, it is not an empty field
        if row.raw_lines[-1].rstrip().endswith('|') and self._row_tokens and self._row_tokens[-1] == '':
            self._row_tokens.pop()
        # Comments between a DATA line and its continuation belong to the row's source span
        row.raw_lines.extend(self.take_trailing())
        row.raw_lines.append(line)
        self._row_tokens.extend(split_pipe_keep_empties(DatPatterns.strip_comment_prefix(line)))
        # Rows waiting for RTYPE routing have no class yet; keep their values current anyway
        cls = row.parent_class
        row.map_to_fields(cls.format_fields if cls is not None else [], self._row_tokens)
        return True

    def take_trailing(self) -> List[str]:
        """Remove and return the lines held since the current row's last source line."""
        if self.current_row is None:
            return []
        trailing = self._pending[self._row_mark:]
        del self._pending[self._row_mark:]
        return trailing

    def place_row(self, cls: DatClass, row: DatRow):
        """Attach a row to a class, placing held lines first and mapping values."""
        self.settle_pending(cls, row)
        cls.attach_row(row)
        tokens = self._row_tokens if row is self.current_row else None
        row.map_to_fields(cls.format_fields, tokens)

    def finish_row(self) -> Optional[DatRow]:
        """End the current row's continuation window."""
        row, self.current_row = self.current_row, None
        self._row_tokens = []
        return row

    # =========================================================================
    # ERRORS
    # =========================================================================

    def structural_error(self, reason: str, line: str = None) -> StructuralError:
        cls = self.current_class
        class_name = cls.display_name if cls is not None else None
        message = f"{reason} at line {self.line_number}"
        if class_name:
            message += f" in class '{class_name}'"
        return StructuralError(message + ".", line_number=self.line_number,
                               class_name=class_name, line_content=line)

    # =========================================================================
    # FINISH
    # =========================================================================

    def finish(self, last_class: Optional[DatClass] = None) -> DatDocument:
        """Place the remaining held lines and return the document."""
        self.finish_row()
        self.settle_pending(last_class if last_class is not None else self.current_class)
        doc = self.document
        logger.debug(
            f"Parsed {doc.kind.value if doc.kind else 'unknown'} document: "
            f"{len(doc.classes)} classes, {doc.row_count} rows, {len(doc.head)} head lines"
        )
        return doc
