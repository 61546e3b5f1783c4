"""Create a new CSS rule and splice it into a live quick-edit widget."""

from __future__ import annotations

import logging

from quickcss.errors import RuleCreationError
from quickcss.host import DocumentProvider, MultiRangeWidget, RuleService
from quickcss.tokens import EditorPrefs, NewRuleInfo

logger = logging.getLogger(__name__)


async def create_rule(
    selector: str,
    widget: MultiRangeWidget,
    path: str,
    documents: DocumentProvider,
    rules: RuleService,
    prefs: EditorPrefs,
) -> NewRuleInfo:
    """Add an empty rule for selector to the stylesheet at path and show it.

    The new range is added to the widget and selected, and the widget's
    editor caret is moved inside the rule body. Raises RuleCreationError if
    the stylesheet cannot be opened.
    """
    try:
        document = await documents.get_document_for_path(path)
    except OSError as exc:
        raise RuleCreationError(f"cannot open stylesheet: {exc}", selector, path) from exc

    info = rules.add_rule_to_document(document, selector, prefs.use_tabs, prefs.space_units)
    widget.add_and_select_range(selector, document, info.range.start_line, info.range.end_line)
    widget.editor.set_cursor_pos(info.pos.line, info.pos.ch)
    logger.debug(
        "added rule %s to %s at lines %d-%d",
        selector,
        path,
        info.range.start_line,
        info.range.end_line,
    )
    return info
