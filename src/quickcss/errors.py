"""Error types with formatted context."""

from __future__ import annotations

from pathlib import Path


class QuickCssError(Exception):
    """Base class for all quickcss errors."""


class RuleLookupError(QuickCssError):
    """Raised by rule search when matching rules cannot be collected."""

    def __init__(self, message: str, selector: str) -> None:
        self.message = message
        self.selector = selector
        super().__init__(self.format())

    def format(self) -> str:
        return f"error: {self.message}\n  = selector: {self.selector}"


class RuleCreationError(QuickCssError):
    """Raised when a new rule cannot be added to a stylesheet."""

    def __init__(self, message: str, selector: str, path: str) -> None:
        self.message = message
        self.selector = selector
        self.path = path
        super().__init__(self.format())

    def format(self) -> str:
        gutter = "  "
        return (
            f"error: {self.message}\n"
            f"{gutter}--> {self.path}\n"
            f"{gutter} |\n"
            f"{gutter} = selector: {self.selector}"
        )


class ConfigError(QuickCssError):
    """Raised when a config value has the wrong type or range."""

    def __init__(self, message: str, key: str, path: Path | None = None) -> None:
        self.message = message
        self.key = key
        self.path = path
        super().__init__(self.format())

    def format(self) -> str:
        where = str(self.path) if self.path is not None else "<config>"
        return f"error: {self.message}\n  --> {where}: {self.key}"
