"""Resolve a markup position context to the CSS selector it refers to."""

from __future__ import annotations

from quickcss.htmlinfo import get_tag_info
from quickcss.tokens import Position, PositionContext, TokenKind


def resolve(context: PositionContext) -> str:
    """Return the selector for a position context, or "" if there is none.

    Tag names become type selectors, the class under the cursor becomes a
    class selector, and an id attribute becomes an id selector. Only the
    single class containing the cursor is used: for
    ``class="error-dialog modal hide"`` with the cursor inside "modal" the
    result is ``.modal``.
    """
    if context.kind in (TokenKind.TAG_NAME, TokenKind.CLOSING_TAG):
        return context.tag_name

    if context.kind in (TokenKind.ATTR_NAME, TokenKind.ATTR_VALUE):
        if context.attr_name == "class":
            return _class_selector(context.attr_value, context.offset)
        if context.attr_name == "id":
            return "#" + context.attr_value

    return ""


def _class_selector(value: str, offset: int) -> str:
    offset = max(0, min(offset, len(value)))
    start = value.rfind(" ", 0, offset) + 1
    end = value.find(" ", offset)
    if end == -1:
        end = len(value)
    name = value[start:end]
    # Cursor sits on a separating space
    if not name:
        return ""
    return "." + name


def selector_at(source: str, pos: Position) -> str:
    """Tokenize source and resolve the selector at pos."""
    return resolve(get_tag_info(source, pos))
