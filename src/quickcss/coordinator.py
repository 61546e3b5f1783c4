"""Quick edit coordinator: turns a markup position into a CSS rule widget.

The host editor calls QuickEditCoordinator.provide() when the user asks for
an inline editor. If the cursor is on a tag name, a class or an id, the
matching rules are looked up and shown in a multi-range widget carrying a
"New Rule" button. The button (and the global new-rule command, which acts
on whichever quick edit has focus) either creates the rule directly or opens
a StylesheetPicker when the project has several stylesheets.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine, Sequence
from dataclasses import dataclass, field
from functools import partial
from typing import Any

from quickcss.commands import Command, CommandManager
from quickcss.errors import QuickCssError, RuleCreationError
from quickcss.host import (
    DocumentProvider,
    EditorManager,
    FileIndex,
    HostEditor,
    MultiRangeWidget,
    PopupHost,
    RuleService,
    WidgetFactory,
)
from quickcss.htmlinfo import get_tag_info
from quickcss.messages import (
    BUTTON_NEW_RULE,
    CMD_NEW_RULE,
    CMD_NEW_RULE_ID,
    NO_MATCHES,
    NO_STYLESHEETS,
)
from quickcss.picker import Rect, StylesheetPicker
from quickcss.rules import create_rule
from quickcss.selector import resolve
from quickcss.tokens import EditorPrefs, Position, PositionContext, StylesheetDescriptor

logger = logging.getLogger(__name__)

TagInfoFn = Callable[[HostEditor, Position], PositionContext]


def _document_tag_info(editor: HostEditor, pos: Position) -> PositionContext:
    return get_tag_info(editor.document.text, pos)


@dataclass(eq=False)
class NewRuleButton:
    """The "New Rule" button added to a quick edit header.

    Disabled until the project's stylesheets are known. ``dropdown`` marks it
    as opening a picker rather than creating the rule directly. The host
    keeps ``bounds`` current and may set ``focus_hook`` to move keyboard
    focus onto the button.
    """

    label: str
    on_click: Callable[[], None]
    disabled: bool = True
    dropdown: bool = False
    focused: bool = False
    bounds: Rect = field(default_factory=lambda: Rect(0, 0, 0, 0))
    focus_hook: Callable[[], None] | None = None

    def click(self) -> None:
        self.on_click()

    def focus(self) -> None:
        self.focused = True
        if self.focus_hook is not None:
            self.focus_hook()


@dataclass(eq=False)
class QuickEditSession:
    """One open quick edit: the widget, its button and its stylesheet targets."""

    selector: str
    widget: MultiRangeWidget
    rules: Sequence[Any]
    picker: StylesheetPicker
    button: NewRuleButton | None = None
    stylesheets: tuple[StylesheetDescriptor, ...] = ()
    stylesheets_loaded: asyncio.Task[None] | None = None

    def handle_new_rule(self) -> None:
        if self.button is not None:
            self.button.click()


class QuickEditCoordinator:
    """Inline edit provider for CSS rules plus the global new-rule command."""

    def __init__(
        self,
        rules: RuleService,
        documents: DocumentProvider,
        file_index: FileIndex,
        widget_factory: WidgetFactory,
        popups: PopupHost,
        *,
        prefs: EditorPrefs | None = None,
        stylesheet_extension: str = "css",
        tag_info: TagInfoFn = _document_tag_info,
        on_error: Callable[[QuickCssError], None] | None = None,
    ) -> None:
        self._rules = rules
        self._documents = documents
        self._file_index = file_index
        self._widget_factory = widget_factory
        self._popups = popups
        self._prefs = prefs if prefs is not None else EditorPrefs()
        self._extension = stylesheet_extension
        self._tag_info = tag_info
        self._on_error = on_error
        self._sessions: dict[int, QuickEditSession] = {}
        self._active: QuickEditSession | None = None
        self._command: Command | None = None
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def sessions(self) -> tuple[QuickEditSession, ...]:
        return tuple(self._sessions.values())

    @property
    def active_session(self) -> QuickEditSession | None:
        return self._active

    @property
    def command(self) -> Command | None:
        return self._command

    def session_for(self, widget: MultiRangeWidget) -> QuickEditSession | None:
        return self._sessions.get(id(widget))

    def install(self, editor_manager: EditorManager, commands: CommandManager) -> Command:
        """Register the inline edit provider and the (initially disabled) command."""
        editor_manager.register_inline_edit_provider(self.provide)
        self._command = commands.register(CMD_NEW_RULE, CMD_NEW_RULE_ID, self.handle_new_rule)
        self._command.set_enabled(False)
        return self._command

    # ------------------------------------------------------------------
    # Provider
    # ------------------------------------------------------------------

    def selector_for(self, host_editor: HostEditor) -> str:
        """Return the selector at the start of the selection, or "".

        Only HTML content with a single-line selection has a selector.
        """
        if host_editor.language_at_selection() != "html":
            return ""
        sel = host_editor.selection()
        if not sel.single_line:
            return ""
        # The selection start, not the provider position, decides the selector
        return resolve(self._tag_info(host_editor, sel.start))

    def provide(
        self, host_editor: HostEditor, pos: Position
    ) -> asyncio.Task[MultiRangeWidget | None] | None:
        """Start a quick edit at pos, or return None if there is nothing to edit.

        Must be called from inside a running event loop. The returned task
        resolves to the widget, or to None if the rule lookup fails.
        """
        selector = self.selector_for(host_editor)
        if not selector:
            return None
        return asyncio.get_running_loop().create_task(self._open(host_editor, selector))

    async def _open(self, host_editor: HostEditor, selector: str) -> MultiRangeWidget | None:
        try:
            rules = await self._rules.find_matching_rules(selector, host_editor.document)
        except Exception:
            logger.warning("error in find_matching_rules() for %s", selector, exc_info=True)
            return None

        widget = self._widget_factory(
            self._rules.consolidate_rules(rules),
            self._no_rules_message,
            self._rules.get_range_selectors,
        )
        widget.load(host_editor)

        session = QuickEditSession(selector, widget, rules, StylesheetPicker(self._popups))
        session.button = NewRuleButton(BUTTON_NEW_RULE, partial(self._handle_click, session))
        widget.add_header_button(session.button)
        widget.add_focus_listener(partial(self._on_focus_change, session))
        widget.add_dispose_listener(partial(self._dispose, session))
        self._sessions[id(widget)] = session
        logger.debug("quick edit opened for %s with %d rules", selector, len(rules))

        # Widget is returned before the stylesheet list is known
        session.stylesheets_loaded = self._spawn(self._load_stylesheets(session))
        return widget

    async def _no_rules_message(self) -> str:
        try:
            infos = await self._file_index.get_file_info_list(self._extension)
        except OSError:
            logger.warning("could not list stylesheets", exc_info=True)
            return NO_STYLESHEETS
        return NO_MATCHES if infos else NO_STYLESHEETS

    async def _load_stylesheets(self, session: QuickEditSession) -> None:
        try:
            infos = await self._file_index.get_file_info_list(self._extension)
        except OSError:
            logger.warning("could not list stylesheets; new rule stays disabled", exc_info=True)
            return
        if self._sessions.get(id(session.widget)) is not session:
            # Disposed while the list was loading
            return

        session.stylesheets = tuple(infos)
        button = session.button
        if button is None:
            return
        if session.stylesheets:
            button.disabled = False
            if not session.rules:
                # Let a keyboard user create the rule right away
                button.focus()
        if len(session.stylesheets) > 1:
            button.dropdown = True

        if session.widget.has_focus():
            self._active = session
        self._update_command()

    # ------------------------------------------------------------------
    # New rule
    # ------------------------------------------------------------------

    def handle_new_rule(self) -> None:
        """Global command: act on the new-rule button of the focused quick edit."""
        session = self._active
        if session is None or not session.widget.has_focus():
            return
        session.handle_new_rule()

    def _handle_click(self, session: QuickEditSession) -> None:
        button = session.button
        if button is None or button.disabled:
            return
        if len(session.stylesheets) == 1:
            self._create(session, session.stylesheets[0].full_path)
        elif session.picker.is_open:
            session.picker.close()
        else:
            session.picker.open(button.bounds, session.stylesheets, partial(self._create, session))

    def _create(self, session: QuickEditSession, path: str) -> asyncio.Task[Any]:
        return self._spawn(
            create_rule(
                session.selector,
                session.widget,
                path,
                self._documents,
                self._rules,
                self._prefs,
            )
        )

    # ------------------------------------------------------------------
    # Focus, command state and disposal
    # ------------------------------------------------------------------

    def _on_focus_change(self, session: QuickEditSession, focused: bool) -> None:
        if focused:
            self._active = session
        elif self._active is session:
            self._active = None
        self._update_command()

    def _update_command(self) -> None:
        if self._command is None:
            return
        session = self._active
        self._command.set_enabled(
            session is not None
            and session.widget.has_focus()
            and session.button is not None
            and not session.button.disabled
        )

    def _dispose(self, session: QuickEditSession) -> None:
        self._sessions.pop(id(session.widget), None)
        session.picker.close()
        if self._active is session:
            self._active = None
            self._update_command()
        logger.debug("quick edit for %s disposed", session.selector)

    # ------------------------------------------------------------------
    # Background tasks
    # ------------------------------------------------------------------

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is None:
            return
        if isinstance(exc, RuleCreationError):
            logger.error("%s", exc.format())
            if self._on_error is not None:
                self._on_error(exc)
        else:
            logger.error("quick edit task failed", exc_info=exc)
