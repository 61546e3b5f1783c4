"""User-visible strings and command identifiers."""

from __future__ import annotations

NO_MATCHES = "No existing rules match. Click New Rule to create one."
NO_STYLESHEETS = "There are no stylesheets in your project. Create one to add CSS rules."

BUTTON_NEW_RULE = "New Rule"

CMD_NEW_RULE = "New Rule"
CMD_NEW_RULE_ID = "quickcss.newRule"
CMD_SELECTOR_AT_ID = "quickcss.selectorAt"
