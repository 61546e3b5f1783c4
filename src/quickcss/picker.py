"""Stylesheet picker: a short-lived dropdown for choosing where a new rule goes."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum, auto
from typing import ClassVar

from quickcss.host import DropdownHandle, PopupHost
from quickcss.tokens import StylesheetDescriptor

logger = logging.getLogger(__name__)


class PickerState(Enum):
    CLOSED = auto()
    OPEN = auto()
    CLOSING = auto()


@dataclass(frozen=True, slots=True)
class Rect:
    """Screen bounds of the element a dropdown is anchored to."""

    left: float
    top: float
    width: float
    height: float


class StylesheetPicker:
    """Dropdown listing stylesheets under an anchor element.

    CLOSED -> OPEN on open(); OPEN -> CLOSING -> CLOSED on an outside click,
    an item selection, or the dropdown's own close signal. All three routes
    end in _teardown(), which runs once per open/close cycle. Only one picker
    is open at a time across the process.

    The host must not report the click that opened the picker as an outside
    click.
    """

    _current: ClassVar[StylesheetPicker | None] = None

    def __init__(self, host: PopupHost) -> None:
        self._host = host
        self._state = PickerState.CLOSED
        self._handle: DropdownHandle | None = None
        self._on_select: Callable[[str], None] | None = None
        self._candidates: tuple[StylesheetDescriptor, ...] = ()
        self._outside_click = self.close

    @classmethod
    def current(cls) -> StylesheetPicker | None:
        """Return the picker that is open right now, if any."""
        return cls._current

    @property
    def state(self) -> PickerState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state == PickerState.OPEN

    @property
    def candidates(self) -> tuple[StylesheetDescriptor, ...]:
        return self._candidates

    def open(
        self,
        anchor: Rect,
        candidates: Sequence[StylesheetDescriptor],
        on_select: Callable[[str], None],
    ) -> None:
        """Render the candidates under anchor and wait for a choice."""
        if self._state != PickerState.CLOSED:
            self.close()

        previous = StylesheetPicker._current
        if previous is not None:
            previous.close()
        self._host.close_all_menus()

        self._candidates = tuple(candidates)
        self._on_select = on_select
        self._state = PickerState.OPEN
        StylesheetPicker._current = self

        self._host.add_click_listener(self._outside_click)
        self._handle = self._host.show_dropdown(
            render_list(self._candidates),
            anchor.left,
            anchor.top + anchor.height,
            self._select,
            self._teardown,
        )
        logger.debug("picker opened with %d stylesheets", len(self._candidates))

    def close(self) -> None:
        """Dismiss the dropdown. Does nothing when already closed."""
        if self._state != PickerState.OPEN:
            return
        handle = self._handle
        if handle is not None:
            handle.close()
        # The handle normally calls back into _teardown; make sure it ran.
        self._teardown()

    def _select(self, path: str | None) -> None:
        if self._state != PickerState.OPEN:
            return
        on_select = self._on_select
        try:
            if path and on_select is not None:
                on_select(path)
        finally:
            self.close()

    def _teardown(self) -> None:
        if self._state != PickerState.OPEN:
            return
        self._state = PickerState.CLOSING
        self._host.remove_click_listener(self._outside_click)
        self._handle = None
        self._on_select = None
        if StylesheetPicker._current is self:
            StylesheetPicker._current = None
        self._state = PickerState.CLOSED
        logger.debug("picker closed")
        self._host.focus_editor()


# ---------------------------------------------------------------------------
# Markup
# ---------------------------------------------------------------------------


def render_list(candidates: Sequence[StylesheetDescriptor]) -> str:
    """Render the dropdown list: one link per stylesheet, name plus path."""
    parts: list[str] = ['<ul class="dropdown-menu stylesheet-menu" tabindex="-1">\n']
    for info in candidates:
        parts.append(
            f'<li><a class="stylesheet-link" data-path="{_escape_attr(info.full_path)}">'
            f'<span class="stylesheet-name">{_escape_html(info.display_name)}</span>'
            f'<span class="stylesheet-dir">{_escape_html(info.full_path)}</span>'
            "</a></li>\n"
        )
    parts.append("</ul>")
    return "".join(parts)


def _escape_html(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _escape_attr(text: str) -> str:
    return _escape_html(text).replace('"', "&quot;")
