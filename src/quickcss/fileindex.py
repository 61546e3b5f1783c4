"""Stylesheet discovery under a project directory."""

from __future__ import annotations

import asyncio
import fnmatch
from dataclasses import dataclass
from pathlib import Path

from quickcss.tokens import StylesheetDescriptor


@dataclass
class DirectoryFileIndex:
    """Finds files by extension below a project root.

    A file is skipped when any directory between the root and the file
    matches one of the exclude glob patterns. The scan runs in a worker
    thread so the event loop is never blocked.
    """

    root: Path
    exclude: tuple[str, ...] = ()

    async def get_file_info_list(self, extension: str) -> list[StylesheetDescriptor]:
        return await asyncio.to_thread(self.scan, extension)

    def scan(self, extension: str) -> list[StylesheetDescriptor]:
        suffix = "." + extension.lstrip(".")
        found: list[StylesheetDescriptor] = []
        for path in sorted(self.root.rglob(f"*{suffix}")):
            if not path.is_file() or self._excluded(path):
                continue
            found.append(StylesheetDescriptor(str(path), path.name))
        return found

    def _excluded(self, path: Path) -> bool:
        parts = path.relative_to(self.root).parts[:-1]
        return any(fnmatch.fnmatch(part, pattern) for part in parts for pattern in self.exclude)
