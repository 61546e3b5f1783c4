"""In-process command registry with enable/disable state."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class Command:
    """A globally addressable command. Disabled commands ignore execute()."""

    id: str
    name: str
    handler: Callable[[], Any]
    enabled: bool = True
    _listeners: list[Callable[[Command], None]] = field(default_factory=list, init=False, repr=False)

    def set_enabled(self, enabled: bool) -> None:
        if enabled == self.enabled:
            return
        self.enabled = enabled
        for listener in list(self._listeners):
            listener(self)

    def on_enabled_change(self, listener: Callable[[Command], None]) -> None:
        self._listeners.append(listener)

    def execute(self) -> Any:
        if not self.enabled:
            logger.debug("command %s is disabled, ignoring", self.id)
            return None
        return self.handler()


class CommandManager:
    """Registry of commands keyed by their stable identifier."""

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}

    def register(self, name: str, command_id: str, handler: Callable[[], Any]) -> Command:
        if command_id in self._commands:
            raise ValueError(f"command already registered: {command_id}")
        cmd = Command(command_id, name, handler)
        self._commands[command_id] = cmd
        return cmd

    def get(self, command_id: str) -> Command | None:
        return self._commands.get(command_id)

    def execute(self, command_id: str) -> Any:
        cmd = self._commands.get(command_id)
        if cmd is None:
            raise KeyError(command_id)
        return cmd.execute()
