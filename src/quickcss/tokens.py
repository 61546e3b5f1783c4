"""Position types, markup token kinds, and the data passed between components."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenKind(Enum):
    TAG_NAME = auto()  # <div
    CLOSING_TAG = auto()  # </div>
    ATTR_NAME = auto()  # class=
    ATTR_VALUE = auto()  # ="a b"
    NONE = auto()  # text, comments, outside any tag


@dataclass(frozen=True, slots=True)
class Position:
    """Editor position, 0-based line and 0-based character."""

    line: int
    ch: int


@dataclass(frozen=True, slots=True)
class Selection:
    """Editor selection from start to end position."""

    start: Position
    end: Position

    @property
    def single_line(self) -> bool:
        return self.start.line == self.end.line


@dataclass(frozen=True, slots=True)
class PositionContext:
    """What the markup tokenizer knows about one cursor position."""

    tag_name: str = ""
    attr_name: str = ""
    attr_value: str = ""
    offset: int = 0  # cursor offset within attr_value
    kind: TokenKind = TokenKind.NONE


@dataclass(frozen=True, slots=True)
class StylesheetDescriptor:
    """A stylesheet known to the project file index."""

    full_path: str
    display_name: str


@dataclass(frozen=True, slots=True)
class LineRange:
    """Inclusive line span of a rule inside a stylesheet."""

    start_line: int
    end_line: int


@dataclass(frozen=True, slots=True)
class NewRuleInfo:
    """Result of inserting a rule: its line span and where the caret goes."""

    range: LineRange
    pos: Position


@dataclass(frozen=True, slots=True)
class EditorPrefs:
    """Indentation preferences used when inserting a new rule."""

    use_tabs: bool = False
    space_units: int = 4
