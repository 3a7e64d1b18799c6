"""
Source buffer

Owns the normalized source text and a stable line-splitting view.
"""

import re

from codegraph_source.exceptions import EncodingError

STRING_SOURCE_NAME = "(string)"

_BOM = "\ufeff"
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class SourceBuffer:
    """
    Normalized source text with a name.

    Attributes:
        name: File path, or STRING_SOURCE_NAME for in-memory sources
        first_line: Number of the first line (1-indexed by default)
    """

    def __init__(self, name: str = STRING_SOURCE_NAME, first_line: int = 1):
        self.name = name
        self.first_line = first_line
        self._source: str | None = None
        self._lines: tuple[str, ...] | None = None

    @property
    def source(self) -> str:
        """Normalized text (raises if nothing was assigned)."""
        if self._source is None:
            raise RuntimeError(f"Source buffer {self.name!r} has no source assigned")
        return self._source

    @source.setter
    def source(self, raw: str | bytes) -> None:
        """
        Assign source text, normalizing to UTF-8.

        Bytes are reinterpreted as UTF-8 as-is (no transcoding, no coding
        cookie lookup). Text must be encodable as UTF-8.

        Raises:
            EncodingError: If raw is not valid UTF-8
        """
        self._source = _normalize(raw, self.name)
        self._lines = None

    @property
    def is_assigned(self) -> bool:
        return self._source is not None

    @property
    def source_lines(self) -> tuple[str, ...]:
        """Physical lines with terminators stripped."""
        if self._lines is None:
            lines = _LINE_BREAK.split(self.source)
            # A final terminator does not open a new line
            if lines and lines[-1] == "":
                lines.pop()
            self._lines = tuple(lines)
        return self._lines

    def line(self, line_num: int) -> str | None:
        """
        Get specific line (1-indexed).

        Returns:
            Line content without terminator, or None when out of range
        """
        index = line_num - self.first_line
        if 0 <= index < len(self.source_lines):
            return self.source_lines[index]
        return None

    def char_column(self, line_num: int, byte_offset: int) -> int:
        """
        Convert a UTF-8 byte column on a line into a character column.

        `ast` reports col_offset in UTF-8 bytes; tokens use characters.
        """
        text = self.line(line_num)
        if text is None or text.isascii():
            return byte_offset
        return len(text.encode("utf-8")[:byte_offset].decode("utf-8", errors="ignore"))

    def __repr__(self) -> str:
        return f"SourceBuffer(name={self.name!r})"


def _normalize(raw: str | bytes, name: str) -> str:
    if isinstance(raw, (bytes, bytearray, memoryview)):
        try:
            text = bytes(raw).decode("utf-8")
        except UnicodeDecodeError as e:
            raise EncodingError(
                f"invalid byte sequence in UTF-8: {name}",
                {"path": name, "position": e.start, "reason": e.reason},
            ) from e
    else:
        text = raw
        try:
            text.encode("utf-8")
        except UnicodeEncodeError as e:
            raise EncodingError(
                f"invalid character in UTF-8: {name}",
                {"path": name, "position": e.start, "reason": e.reason},
            ) from e

    if text.startswith(_BOM):
        text = text[len(_BOM) :]
    return text
