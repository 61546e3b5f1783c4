"""Quick CSS editing from HTML markup."""

from __future__ import annotations

__version__ = "0.1.0"


def selector_at(source: str, line: int, ch: int) -> str:
    """Return the CSS selector at a 0-based line/character in HTML source."""
    from quickcss.selector import selector_at as _selector_at
    from quickcss.tokens import Position

    return _selector_at(source, Position(line, ch))
