"""Offset to line/character conversion over the document-sync layer.

The diagnostic engine works on plain string offsets. Positions reported to
the client use zero-based lines and UTF-16 code unit columns, so the
conversion goes through pygls' `PositionCodec`, the same codec the workspace
uses to interpret client positions.
"""

from __future__ import annotations

from bisect import bisect_right
from typing import Protocol, Sequence

from lsprotocol.types import Position
from pygls.workspace import PositionCodec, TextDocument

from uselsp.exceptions import MalformedRange
from uselsp.invariants import never

_DEFAULT_CODEC = PositionCodec()


class TextSource(Protocol):
    def get_text(self) -> str: ...

    def offset_to_position(self, offset: int) -> Position: ...


def split_lines(text: str) -> list[str]:
    # Same split the pygls workspace applies to document sources.
    return text.splitlines(True)


def line_starts(lines: Sequence[str]) -> list[int]:
    starts: list[int] = []
    total = 0
    for line in lines:
        starts.append(total)
        total += len(line)
    starts.append(total)
    return starts


def offset_to_position(
    lines: Sequence[str],
    offset: int,
    codec: PositionCodec | None = None,
    starts: Sequence[int] | None = None,
) -> Position:
    """Convert a string offset into a line/character Position.

    `starts` is the `line_starts(lines)` table; pass it when converting many
    offsets against the same lines.
    """
    starts = starts if starts is not None else line_starts(lines)
    total = starts[-1]
    if offset < 0 or offset > total:
        raise MalformedRange(offset, offset, total)
    codec = codec or _DEFAULT_CODEC
    line_no = bisect_right(starts, offset, hi=len(lines)) - 1
    if line_no < 0:
        # No lines at all: the text is empty.
        return Position(line=0, character=0)
    character = offset - starts[line_no]
    line = lines[line_no]
    if character == len(line):
        if len(line.splitlines()[0]) == len(line):
            # End of the final line, which has no line break.
            return codec.position_to_client_units(
                lines, Position(line=line_no, character=character)
            )
        if line_no != len(lines) - 1:
            never("offset at a line break must belong to the next line", offset=offset)
        # The offset sits after a trailing line break.
        return Position(line=len(lines), character=0)
    return codec.position_to_client_units(
        lines, Position(line=line_no, character=character)
    )


class StringSource:
    """A `TextSource` over a bare string, for offline checks."""

    def __init__(self, text: str, codec: PositionCodec | None = None) -> None:
        self._text = text
        self._lines = split_lines(text)
        self._starts = line_starts(self._lines)
        self._codec = codec or _DEFAULT_CODEC

    def get_text(self) -> str:
        return self._text

    def offset_to_position(self, offset: int) -> Position:
        return offset_to_position(self._lines, offset, self._codec, self._starts)


class DocumentSource(StringSource):
    """Snapshot of a pygls workspace document.

    The text is captured once so every finding of one validation pass is
    computed against the same content, even if an edit lands meanwhile.
    """

    def __init__(self, document: TextDocument) -> None:
        super().__init__(document.source, document.position_codec)
        self.uri = document.uri
        self.version = document.version
