"""Contracts for the host editor collaborators quickcss calls into.

None of these are implemented here. An editor integration supplies objects
satisfying them; the tests supply fakes.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Protocol

from quickcss.tokens import NewRuleInfo, Position, Selection, StylesheetDescriptor


class Document(Protocol):
    """An open text document."""

    @property
    def text(self) -> str: ...


class HostEditor(Protocol):
    """The markup editor the quick edit is opened from."""

    @property
    def document(self) -> Document: ...

    def language_at_selection(self) -> str: ...

    def selection(self) -> Selection: ...


class WidgetEditor(Protocol):
    """The embedded editor inside a multi-range widget."""

    def set_cursor_pos(self, line: int, ch: int) -> None: ...


class MultiRangeWidget(Protocol):
    """Inline widget showing several rule ranges as one scrollable unit."""

    @property
    def editor(self) -> WidgetEditor: ...

    def load(self, host_editor: HostEditor) -> None: ...

    def add_and_select_range(
        self, label: str, document: Document, start_line: int, end_line: int
    ) -> None: ...

    def has_focus(self) -> bool: ...

    def add_header_button(self, button: Any) -> None: ...

    def add_focus_listener(self, listener: Callable[[bool], None]) -> None: ...

    def add_dispose_listener(self, listener: Callable[[], None]) -> None: ...


WidgetFactory = Callable[
    [Sequence[Any], Callable[[], Awaitable[str]], Callable[[Sequence[Any]], list[str]]],
    MultiRangeWidget,
]


class RuleService(Protocol):
    """CSS rule search, aggregation and insertion."""

    async def find_matching_rules(self, selector: str, document: Document) -> list[Any]: ...

    def consolidate_rules(self, rules: Sequence[Any]) -> list[Any]: ...

    def get_range_selectors(self, ranges: Sequence[Any]) -> list[str]: ...

    def add_rule_to_document(
        self, document: Document, selector: str, use_tabs: bool, space_units: int
    ) -> NewRuleInfo: ...


class DocumentProvider(Protocol):
    async def get_document_for_path(self, path: str) -> Document: ...


class FileIndex(Protocol):
    async def get_file_info_list(self, extension: str) -> list[StylesheetDescriptor]: ...


class DropdownHandle(Protocol):
    """An open dropdown. close() must end up calling the on_close it was opened with."""

    def close(self) -> None: ...


class PopupHost(Protocol):
    """Popup placement, keyboard navigation and document-wide click events."""

    def close_all_menus(self) -> None: ...

    def show_dropdown(
        self,
        markup: str,
        left: float,
        top: float,
        on_select: Callable[[str | None], None],
        on_close: Callable[[], None],
    ) -> DropdownHandle: ...

    def add_click_listener(self, listener: Callable[[], None]) -> None: ...

    def remove_click_listener(self, listener: Callable[[], None]) -> None: ...

    def focus_editor(self) -> None: ...


class EditorManager(Protocol):
    def register_inline_edit_provider(
        self,
        provider: Callable[[HostEditor, Position], Awaitable[MultiRangeWidget | None] | None],
    ) -> None: ...
