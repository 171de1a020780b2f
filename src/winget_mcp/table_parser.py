"""Decode winget's fixed-width console tables into records.

winget prints tables for terminal display, e.g.::

    Name            Id                 Version
    --------------------------------------------
    Visual Studio … Microsoft.VisualS… 17.9.6

Column boundaries come from the header line above the dash separator: each
column is a header word plus the padding that follows it. Data lines are
sliced at those codepoint offsets.

winget pads columns to a *display* width, and CJK/Hangul glyphs occupy two
terminal cells but one codepoint. A row containing N such glyphs is therefore
N codepoints shorter than the header suggests. The correction is a single
per-row scalar applied on the assumption that wide glyphs only occur in the
first column (package names); glyphs in later columns shift the slices.
"""
from __future__ import annotations

import logging
import re

from .errors import (
    InsufficientColumns,
    MalformedHeader,
    MalformedRow,
    MissingSeparator,
)
from .models import ColumnHeader, ColumnLayout, Record
from .signatures import check_error_signatures

logger = logging.getLogger(__name__)

SEPARATOR_RE = re.compile(r"^-+$")

# Boundary between a whitespace char and the next non-whitespace char
_COLUMN_BOUNDARY_RE = re.compile(r"(?<=\s)(?=\S)")

# Codepoints rendered in two terminal cells: Hiragana/Katakana, CJK
# extension A, CJK unified ideographs, CJK compatibility ideographs,
# halfwidth Katakana, Hangul compatibility Jamo through Hangul syllables.
_WIDE_GLYPH_RE = re.compile(
    "["
    "\u3040-\u30ff"
    "\u3400-\u4dbf"
    "\u4e00-\u9fff"
    "\uf900-\ufaff"
    "\uff66-\uff9f"
    "\u3131-\ud79d"
    "]"
)

MIN_COLUMNS = 2


def find_header_index(lines: list[str]) -> int:
    """Return the index of the header line (the line above the separator).

    Anything above the header is progress/status noise and is ignored.

    Raises:
        MissingSeparator: No dash-only line exists.
        MalformedHeader: The separator is the first line, or the line above
            it is blank.
    """
    for i, line in enumerate(lines):
        if SEPARATOR_RE.match(line):
            if i == 0:
                raise MalformedHeader("separator is the first line; no header above it")
            if not lines[i - 1].strip():
                raise MalformedHeader(f"line {i - 1} above the separator is blank")
            return i - 1
    raise MissingSeparator(f"no dash separator line in {len(lines)} lines")


def extract_layout(header_line: str) -> ColumnLayout:
    """Split a header line into columns, keeping each column's padding.

    Each token is a run of non-space characters plus all whitespace that
    follows it, so ``len(token)`` is the column's width. Leading whitespace
    is folded into the first column, which always starts at offset 0.

    Raises:
        InsufficientColumns: Fewer than two columns.
        MalformedHeader: Two columns share a name.
    """
    tokens = _COLUMN_BOUNDARY_RE.split(header_line)
    if len(tokens) > 1 and not tokens[0].strip():
        tokens[1] = tokens[0] + tokens[1]
        tokens = tokens[1:]

    layout: ColumnLayout = []
    offset = 0
    for token in tokens:
        layout.append(ColumnHeader(name=token.strip(), span=token, start=offset))
        offset += len(token)

    if len(layout) < MIN_COLUMNS:
        raise InsufficientColumns(
            f"header {header_line!r} has {len(layout)} column(s), need {MIN_COLUMNS}"
        )

    names = [col.name for col in layout]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise MalformedHeader(f"duplicate column names: {', '.join(duplicates)}")

    return layout


def count_wide_glyphs(line: str) -> int:
    """Count codepoints that a terminal renders two cells wide."""
    return len(_WIDE_GLYPH_RE.findall(line))


def decode_row(
    line: str,
    layout: ColumnLayout,
    wide_glyphs: int = 0,
    line_index: int = -1,
) -> Record:
    """Slice one data line into a record using the column layout.

    The first column absorbs the wide-glyph correction; the last column runs
    to the end of the line so overlong trailing text is kept whole.

    Args:
        line: Data line as captured (not stripped).
        layout: Columns from :func:`extract_layout`.
        wide_glyphs: Result of :func:`count_wide_glyphs` for this line.
        line_index: Position of the line in the input, for error reporting.

    Raises:
        MalformedRow: The line is too short for the layout.
    """
    first, last = layout[0], layout[-1]
    first_end = first.width - wide_glyphs
    last_start = last.start - wide_glyphs

    if first_end < 0:
        raise MalformedRow(
            f"line {line_index}: {wide_glyphs} wide glyphs exceed first column width {first.width}",
            line_index=line_index,
            line=line,
        )
    if len(line) < last_start:
        raise MalformedRow(
            f"line {line_index}: length {len(line)} ends before column {last.name!r} at {last_start}",
            line_index=line_index,
            line=line,
        )

    record: Record = {first.name: line[:first_end].strip()}
    for col in layout[1:-1]:
        start = col.start - wide_glyphs
        record[col.name] = line[start:start + col.width].strip()
    record[last.name] = line[last_start:].strip()
    return record


def parse_table(
    lines: list[str],
    error_signatures: frozenset[str] = frozenset(),
) -> list[Record]:
    """Decode captured winget output into records.

    Args:
        lines: Captured stdout split into lines; may start with noise.
        error_signatures: Substrings marking a winget failure message.

    Returns:
        One record per data line, in input order. Empty if the separator is
        the last line.

    Raises:
        TableParseError: A subclass naming why decoding failed. A single
            malformed row fails the whole call.
    """
    check_error_signatures(lines, error_signatures)

    header_index = find_header_index(lines)
    layout = extract_layout(lines[header_index])
    logger.debug(
        f"Header at line {header_index}: "
        + ", ".join(f"{c.name}@{c.start}+{c.width}" for c in layout)
    )

    records: list[Record] = []
    first_data = header_index + 2
    for i, line in enumerate(lines[first_data:], start=first_data):
        if not line:
            continue
        records.append(decode_row(line, layout, count_wide_glyphs(line), line_index=i))

    logger.debug(f"Decoded {len(records)} rows")
    return records
