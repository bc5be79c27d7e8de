"""Position utilities for JavaScript source text.

Converts offsets into 1-based line/column positions. ``\\r\\n``, ``\\r`` and
``\\n`` each count as exactly one line break, and every character
(including a tab) advances the column by one.
"""

import re
from bisect import bisect_right

from qunitlint.models import SourceLocation

LINE_BREAK = re.compile(r"\r\n|\r|\n")
# UTF-8 continuation bytes never collide with CR or LF
_BYTE_LINE_BREAK = re.compile(rb"\r\n|\r|\n")


def resolve_position(base_line: int, base_column: int, text: str, offset: int) -> tuple[int, int]:
    """Resolve an offset inside text to an absolute line/column.

    Args:
        base_line: 1-based line where text starts
        base_column: 1-based column where text starts
        text: The text the offset points into
        offset: Character offset within text

    Returns:
        (line, column), both 1-based

    Example:
        >>> resolve_position(1, 1, "/**\\r\\n\\ttest()", 6)
        (2, 2)
        >>> resolve_position(3, 5, "// test()", 3)
        (3, 8)
    """
    if offset < 0:
        msg = f"Offset must be >= 0, got {offset}"
        raise ValueError(msg)
    offset = min(offset, len(text))

    breaks = 0
    line_start = None
    for match in LINE_BREAK.finditer(text, 0, offset):
        breaks += 1
        line_start = match.end()

    if line_start is None:
        return base_line, base_column + offset
    return base_line + breaks, offset - line_start + 1


class SourceIndex:
    """Maps UTF-8 byte offsets of a source file to line/column positions.

    tree-sitter reports byte offsets and only treats ``\\n`` as a row break,
    so locations are recomputed here with the same line break rules.
    """

    def __init__(self, source: bytes):
        self.source = source
        self._line_bytes: list[int] = [0]
        self._line_bytes.extend(m.end() for m in _BYTE_LINE_BREAK.finditer(source))

    @property
    def line_count(self) -> int:
        return len(self._line_bytes)

    def location(self, byte_offset: int) -> SourceLocation:
        """Get the 1-based location of a byte offset."""
        index = bisect_right(self._line_bytes, byte_offset) - 1
        line_start = self._line_bytes[index]
        prefix = self.source[line_start:byte_offset].decode("utf-8", errors="replace")
        return SourceLocation(line=index + 1, column=len(prefix) + 1)
