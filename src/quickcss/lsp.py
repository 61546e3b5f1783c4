"""Minimal LSP server for quickcss: selector lookup and the new-rule command."""

from __future__ import annotations

import logging

from lsprotocol.types import Position as LspPosition
from lsprotocol.types import TextDocumentSyncKind
from pygls.lsp.server import LanguageServer

from quickcss import __version__
from quickcss.commands import Command, CommandManager
from quickcss.coordinator import QuickEditCoordinator
from quickcss.host import EditorManager
from quickcss.messages import CMD_NEW_RULE_ID, CMD_SELECTOR_AT_ID
from quickcss.selector import selector_at
from quickcss.tokens import Position

logger = logging.getLogger(__name__)

_HTML_SUFFIXES = (".html", ".htm")

server = LanguageServer(
    "quickcss-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)

commands = CommandManager()


def install_coordinator(
    coordinator: QuickEditCoordinator, editor_manager: EditorManager
) -> Command:
    """Attach a quick edit coordinator so quickcss.newRule reaches its widgets.

    An editor embedding the server calls this once at startup. Until then the
    command reports False.
    """
    return coordinator.install(editor_manager, commands)


def _is_html(language_id: str | None, uri: str) -> bool:
    if language_id:
        return language_id == "html"
    return uri.lower().endswith(_HTML_SUFFIXES)


def _selector_at(ls: LanguageServer, uri: str, line: int, character: int) -> str | None:
    """Return the selector at a 0-based position in an open HTML document.

    ``character`` is in the client's position encoding (UTF-16 by default).
    """
    doc = ls.workspace.get_text_document(uri)
    if not _is_html(doc.language_id, uri):
        return None
    server_pos = doc.position_codec.position_from_client_units(
        doc.lines, LspPosition(line=line, character=character)
    )
    selector = selector_at(doc.source, Position(server_pos.line, server_pos.character))
    return selector or None


def _new_rule(registry: CommandManager) -> bool:
    """Run the new-rule command; False when nothing is installed or it is disabled."""
    cmd = registry.get(CMD_NEW_RULE_ID)
    if cmd is None or not cmd.enabled:
        logger.debug("%s not available", CMD_NEW_RULE_ID)
        return False
    cmd.execute()
    return True


@server.command(CMD_SELECTOR_AT_ID)
def selector_at_command(ls: LanguageServer, uri: str, line: int, character: int) -> str | None:
    return _selector_at(ls, uri, line, character)


@server.command(CMD_NEW_RULE_ID)
def new_rule_command(ls: LanguageServer) -> bool:
    return _new_rule(commands)


def main() -> None:
    server.start_io()
