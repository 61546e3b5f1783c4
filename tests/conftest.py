"""Shared test fixtures and fake host collaborators."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import pytest

from quickcss.commands import CommandManager
from quickcss.coordinator import QuickEditCoordinator
from quickcss.errors import RuleLookupError
from quickcss.picker import StylesheetPicker
from quickcss.tokens import (
    EditorPrefs,
    LineRange,
    NewRuleInfo,
    Position,
    Selection,
    StylesheetDescriptor,
)


@pytest.fixture(autouse=True)
def _reset_picker_slot():
    StylesheetPicker._current = None
    yield
    StylesheetPicker._current = None


# ---------------------------------------------------------------------------
# Host editor and documents
# ---------------------------------------------------------------------------


@dataclass
class FakeDocument:
    text: str
    path: str = "index.html"


class FakeEditor:
    def __init__(self, text: str, sel: Selection, language: str = "html") -> None:
        self.document = FakeDocument(text)
        self.sel = sel
        self.language = language

    def language_at_selection(self) -> str:
        return self.language

    def selection(self) -> Selection:
        return self.sel


def make_editor(
    text: str,
    line: int,
    ch: int,
    end: Position | None = None,
    language: str = "html",
) -> FakeEditor:
    """Editor with the selection starting at (line, ch); collapsed unless end is given."""
    start = Position(line, ch)
    return FakeEditor(text, Selection(start, end or start), language)


class FakeDocuments:
    def __init__(self, missing: tuple[str, ...] = ()) -> None:
        self.missing = missing
        self.opened: list[str] = []

    async def get_document_for_path(self, path: str) -> FakeDocument:
        self.opened.append(path)
        if path in self.missing:
            raise FileNotFoundError(path)
        return FakeDocument("", path)


# ---------------------------------------------------------------------------
# Rules and file index
# ---------------------------------------------------------------------------


NEW_RULE = NewRuleInfo(LineRange(10, 12), Position(11, 4))


class FakeRuleService:
    def __init__(self, rules: list[str] | None = None, fail: bool = False) -> None:
        self.rules = rules or []
        self.fail = fail
        self.error: Exception | None = None
        self.lookups: list[str] = []
        self.inserted: list[tuple[str, str, bool, int]] = []

    async def find_matching_rules(self, selector: str, document: FakeDocument) -> list[str]:
        self.lookups.append(selector)
        if self.fail:
            raise RuleLookupError("rule search failed", selector)
        if self.error is not None:
            raise self.error
        return list(self.rules)

    def consolidate_rules(self, rules: list[str]) -> list[str]:
        return [f"range:{r}" for r in rules]

    def get_range_selectors(self, ranges: list[str]) -> list[str]:
        return [r.removeprefix("range:") for r in ranges]

    def add_rule_to_document(
        self, document: FakeDocument, selector: str, use_tabs: bool, space_units: int
    ) -> NewRuleInfo:
        self.inserted.append((document.path, selector, use_tabs, space_units))
        return NEW_RULE


class FakeFileIndex:
    def __init__(
        self, infos: list[StylesheetDescriptor], gate: asyncio.Event | None = None
    ) -> None:
        self.infos = infos
        self.gate = gate
        self.error: Exception | None = None
        self.extensions: list[str] = []

    async def get_file_info_list(self, extension: str) -> list[StylesheetDescriptor]:
        self.extensions.append(extension)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return list(self.infos)


def sheets(*paths: str) -> list[StylesheetDescriptor]:
    return [StylesheetDescriptor(p, p.rsplit("/", 1)[-1]) for p in paths]


# ---------------------------------------------------------------------------
# Widget
# ---------------------------------------------------------------------------


class FakeWidgetEditor:
    def __init__(self) -> None:
        self.cursor: Position | None = None

    def set_cursor_pos(self, line: int, ch: int) -> None:
        self.cursor = Position(line, ch)


class FakeWidget:
    def __init__(self, ranges: list[Any], no_rules_message: Callable[..., Any], label_fn: Any) -> None:
        self.ranges: list[Any] = list(ranges)
        self.no_rules_message = no_rules_message
        self.label_fn = label_fn
        self.editor = FakeWidgetEditor()
        self.host: Any = None
        self.buttons: list[Any] = []
        self.selected: Any = None
        self.focused = False
        self._focus_listeners: list[Callable[[bool], None]] = []
        self._dispose_listeners: list[Callable[[], None]] = []

    def load(self, host_editor: Any) -> None:
        self.host = host_editor

    def add_and_select_range(self, label: str, document: Any, start_line: int, end_line: int) -> None:
        entry = (label, document.path, start_line, end_line)
        self.ranges.append(entry)
        self.selected = entry

    def has_focus(self) -> bool:
        return self.focused

    def add_header_button(self, button: Any) -> None:
        self.buttons.append(button)

    def add_focus_listener(self, listener: Callable[[bool], None]) -> None:
        self._focus_listeners.append(listener)

    def add_dispose_listener(self, listener: Callable[[], None]) -> None:
        self._dispose_listeners.append(listener)

    # test drivers

    def set_focus(self, focused: bool) -> None:
        self.focused = focused
        for listener in list(self._focus_listeners):
            listener(focused)

    def dispose(self) -> None:
        for listener in list(self._dispose_listeners):
            listener()


class FakeWidgetFactory:
    def __init__(self) -> None:
        self.widgets: list[FakeWidget] = []

    def __call__(self, ranges: list[Any], no_rules_message: Any, label_fn: Any) -> FakeWidget:
        widget = FakeWidget(ranges, no_rules_message, label_fn)
        self.widgets.append(widget)
        return widget


# ---------------------------------------------------------------------------
# Popups
# ---------------------------------------------------------------------------


class FakeDropdown:
    def __init__(
        self,
        markup: str,
        left: float,
        top: float,
        on_select: Callable[[str | None], None],
        on_close: Callable[[], None],
    ) -> None:
        self.markup = markup
        self.left = left
        self.top = top
        self.on_select = on_select
        self.on_close = on_close
        self.closed = False

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.on_close()

    # test drivers

    def select(self, path: str | None) -> None:
        self.on_select(path)


class FakePopupHost:
    def __init__(self) -> None:
        self.dropdowns: list[FakeDropdown] = []
        self.click_listeners: list[Callable[[], None]] = []
        self.menus_closed = 0
        self.editor_focused = 0

    def close_all_menus(self) -> None:
        self.menus_closed += 1

    def show_dropdown(
        self,
        markup: str,
        left: float,
        top: float,
        on_select: Callable[[str | None], None],
        on_close: Callable[[], None],
    ) -> FakeDropdown:
        dropdown = FakeDropdown(markup, left, top, on_select, on_close)
        self.dropdowns.append(dropdown)
        return dropdown

    def add_click_listener(self, listener: Callable[[], None]) -> None:
        self.click_listeners.append(listener)

    def remove_click_listener(self, listener: Callable[[], None]) -> None:
        self.click_listeners.remove(listener)

    def focus_editor(self) -> None:
        self.editor_focused += 1

    # test drivers

    def click_outside(self) -> None:
        for listener in list(self.click_listeners):
            listener()


# ---------------------------------------------------------------------------
# Coordinator environment
# ---------------------------------------------------------------------------


@dataclass
class QuickEditEnv:
    coordinator: QuickEditCoordinator
    rules: FakeRuleService
    documents: FakeDocuments
    index: FakeFileIndex
    factory: FakeWidgetFactory
    popups: FakePopupHost
    commands: CommandManager
    errors: list[Exception] = field(default_factory=list)


@pytest.fixture
def make_env():
    """Return a helper that builds a coordinator wired to fakes and installed."""

    def _make(
        stylesheets: list[StylesheetDescriptor] | None = None,
        rules: list[str] | None = None,
        fail_lookup: bool = False,
        missing: tuple[str, ...] = (),
        gate: asyncio.Event | None = None,
        prefs: EditorPrefs | None = None,
    ) -> QuickEditEnv:
        rule_service = FakeRuleService(rules, fail=fail_lookup)
        documents = FakeDocuments(missing)
        index = FakeFileIndex(stylesheets or [], gate)
        factory = FakeWidgetFactory()
        popups = FakePopupHost()
        errors: list[Exception] = []
        coordinator = QuickEditCoordinator(
            rule_service,
            documents,
            index,
            factory,
            popups,
            prefs=prefs,
            on_error=errors.append,
        )
        commands = CommandManager()
        coordinator.install(_EditorManager(), commands)
        return QuickEditEnv(
            coordinator, rule_service, documents, index, factory, popups, commands, errors
        )

    return _make


class _EditorManager:
    def __init__(self) -> None:
        self.providers: list[Any] = []

    def register_inline_edit_provider(self, provider: Any) -> None:
        self.providers.append(provider)


async def open_quick_edit(env: QuickEditEnv, editor: FakeEditor) -> FakeWidget:
    """Provide a quick edit and wait until its stylesheet list has been applied."""
    task = env.coordinator.provide(editor, editor.sel.end)
    assert task is not None
    widget = await task
    assert widget is not None
    session = env.coordinator.session_for(widget)
    assert session is not None and session.stylesheets_loaded is not None
    await session.stylesheets_loaded
    return widget
