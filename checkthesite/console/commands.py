"""Console command model."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field


@dataclass
class ConsoleCommand:
    """A command typed on the console.

    ``commands`` holds one or more aliases that all run ``execute``.
    ``source`` is filled in on registration and groups commands in ``help``.
    """

    commands: list[str]
    description: str
    execute: Callable[[], None]
    source: str | None = field(default=None, compare=False)

    @classmethod
    def single(cls, command: str, description: str, execute: Callable[[], None]) -> ConsoleCommand:
        return cls([command], description, execute)

    def matches(self, line: str) -> bool:
        return line in self.commands
