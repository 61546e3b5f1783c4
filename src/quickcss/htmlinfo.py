"""Markup tokenizer: finds the tag/attribute context around a cursor position."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from quickcss.tokens import Position, PositionContext, TokenKind

# Elements whose content is raw text, never markup
_RAW_TEXT_TAGS = frozenset({"script", "style", "textarea", "title"})

_NAME_STOP = frozenset(" \t\r\n\f/>=<\"'")


class _State(Enum):
    NORMAL = auto()
    IN_TAG = auto()


@dataclass(frozen=True, slots=True)
class MarkupToken:
    """A tag or attribute token, with 0-based character offsets into the source.

    For ATTR_VALUE tokens, start/end bound the value content (quotes excluded).
    """

    kind: TokenKind
    value: str
    start: int
    end: int
    tag_name: str
    attr_name: str = ""
    attr_value: str = ""


class MarkupLexer:
    """Tokenize HTML source into tag and attribute tokens.

    Text content, comments, doctype declarations and processing instructions
    produce no tokens. Malformed markup never raises; an unterminated tag or
    attribute value simply runs to the end of the input.
    """

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._tokens: list[MarkupToken] = []
        self._state = _State.NORMAL
        self._tag = ""

    def tokenize(self) -> list[MarkupToken]:
        """Tokenize the full source and return the token list."""
        while self._pos < len(self._source):
            if self._state == _State.NORMAL:
                self._lex_normal()
            else:
                self._lex_in_tag()
        return self._tokens

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _startswith(self, text: str) -> bool:
        return self._source.startswith(text, self._pos)

    def _skip_past(self, terminator: str) -> None:
        idx = self._source.find(terminator, self._pos)
        self._pos = len(self._source) if idx == -1 else idx + len(terminator)

    def _skip_whitespace(self) -> None:
        while self._peek() and self._peek().isspace():
            self._pos += 1

    def _read_name(self) -> tuple[str, int, int]:
        start = self._pos
        while self._peek() and self._peek() not in _NAME_STOP:
            self._pos += 1
        return self._source[start : self._pos], start, self._pos

    def _emit(self, kind: TokenKind, value: str, start: int, end: int, **attr: str) -> None:
        self._tokens.append(MarkupToken(kind, value, start, end, self._tag, **attr))

    # ------------------------------------------------------------------
    # Text content
    # ------------------------------------------------------------------

    def _lex_normal(self) -> None:
        if self._startswith("<!--"):
            self._skip_past("-->")
            return

        if self._startswith("<!") or self._startswith("<?"):
            self._skip_past(">")
            return

        if self._startswith("</"):
            self._pos += 2
            name, start, end = self._read_name()
            if name:
                self._tag = name
                self._emit(TokenKind.CLOSING_TAG, name, start, end)
            self._skip_past(">")
            return

        if self._peek() == "<" and self._peek(1).isalpha():
            self._pos += 1
            name, start, end = self._read_name()
            self._tag = name
            self._emit(TokenKind.TAG_NAME, name, start, end)
            self._state = _State.IN_TAG
            return

        self._pos += 1

    # ------------------------------------------------------------------
    # Inside an opening tag
    # ------------------------------------------------------------------

    def _lex_in_tag(self) -> None:
        self._skip_whitespace()
        ch = self._peek()

        if ch == "":
            return

        if ch == ">" or self._startswith("/>"):
            self_closing = ch == "/"
            self._pos += 2 if self_closing else 1
            self._state = _State.NORMAL
            if not self_closing and self._tag.lower() in _RAW_TEXT_TAGS:
                self._skip_raw_text()
            return

        if ch == "<":
            # Unterminated tag; let the next tag start fresh
            self._state = _State.NORMAL
            return

        name, name_start, name_end = self._read_name()
        if not name:
            self._pos += 1
            return

        attr_name = name.lower()
        self._skip_whitespace()
        if self._peek() != "=":
            self._emit(TokenKind.ATTR_NAME, name, name_start, name_end, attr_name=attr_name)
            return

        self._pos += 1
        self._skip_whitespace()
        value, value_start, value_end = self._read_value()
        self._emit(
            TokenKind.ATTR_NAME,
            name,
            name_start,
            name_end,
            attr_name=attr_name,
            attr_value=value,
        )
        self._emit(
            TokenKind.ATTR_VALUE,
            value,
            value_start,
            value_end,
            attr_name=attr_name,
            attr_value=value,
        )

    def _read_value(self) -> tuple[str, int, int]:
        quote = self._peek()
        if quote in ("'", '"'):
            self._pos += 1
            start = self._pos
            idx = self._source.find(quote, start)
            end = len(self._source) if idx == -1 else idx
            self._pos = end + 1 if idx != -1 else end
            return self._source[start:end], start, end

        start = self._pos
        while self._peek() and not self._peek().isspace() and self._peek() != ">":
            self._pos += 1
        return self._source[start : self._pos], start, self._pos

    def _skip_raw_text(self) -> None:
        close = f"</{self._tag.lower()}"
        idx = self._source.lower().find(close, self._pos)
        self._pos = len(self._source) if idx == -1 else idx


def tokenize(source: str) -> list[MarkupToken]:
    """Convenience wrapper: tokenize source and return token list."""
    return MarkupLexer(source).tokenize()


def offset_at(source: str, pos: Position) -> int:
    """Convert an editor position to a character offset, clamped to the line."""
    offset = 0
    for index, line in enumerate(source.split("\n")):
        if index == pos.line:
            return offset + max(0, min(pos.ch, len(line)))
        offset += len(line) + 1
    return len(source)


def get_tag_info(source: str, pos: Position) -> PositionContext:
    """Describe the tag/attribute token under pos, or an empty context.

    Name tokens include the position just past their last character, so a
    cursor at the end of a tag name still counts as on that tag. Attribute
    names report a value offset of 0.
    """
    offset = offset_at(source, pos)
    for tok in tokenize(source):
        if tok.start > offset:
            break
        if offset > tok.end:
            continue
        if tok.kind in (TokenKind.TAG_NAME, TokenKind.CLOSING_TAG):
            return PositionContext(tag_name=tok.tag_name, kind=tok.kind)
        return PositionContext(
            tag_name=tok.tag_name,
            attr_name=tok.attr_name,
            attr_value=tok.attr_value,
            offset=offset - tok.start if tok.kind == TokenKind.ATTR_VALUE else 0,
            kind=tok.kind,
        )
    return PositionContext()
