"""Interactive console — reads commands line by line and dispatches them."""

from __future__ import annotations

import logging
import sys
from enum import Enum
from typing import TextIO

from rich.console import Console
from rich.table import Table

from checkthesite.console.commands import ConsoleCommand

logger = logging.getLogger(__name__)


class ExitReason(str, Enum):
    USER = "user"  # exit command
    PROGRAM = "program"  # graceful stop, e.g. after generating example config
    ERROR = "error"

    @property
    def exit_code(self) -> int:
        return 1 if self is ExitReason.ERROR else 0


class ConsoleService:
    """Command registry plus the blocking input loop."""

    def __init__(self, stream: TextIO | None = None, console: Console | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdin
        self._console = console or Console()
        self._commands: list[ConsoleCommand] = []
        self._exit_requested = False
        self.register_commands(
            "console",
            ConsoleCommand.single("exit", "Exits the program", self.request_exit),
            ConsoleCommand(["help", "h"], "Prints a list of all commands", self.print_help),
        )

    @property
    def commands(self) -> list[ConsoleCommand]:
        return list(self._commands)

    def register_commands(self, source: str, *commands: ConsoleCommand) -> None:
        for command in commands:
            command.source = source
            self._commands.append(command)

    def execute(self, line: str) -> bool:
        """Run the command matching ``line``; False if there is none."""
        line = line.strip()
        if not line:
            return False
        for command in self._commands:
            if command.matches(line):
                try:
                    command.execute()
                except Exception:
                    logger.exception("Command %r failed", line)
                return True
        logger.info("Command not found: %s", line)
        return False

    def request_exit(self) -> None:
        self._exit_requested = True

    def loop(self) -> ExitReason:
        """Read and handle input until ``exit`` or end of input."""
        while not self._exit_requested:
            line = self._stream.readline()
            if line == "":
                logger.error("Console input closed")
                return ExitReason.ERROR
            self.execute(line)
        return ExitReason.USER

    def print_help(self) -> None:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Source")
        table.add_column("Command")
        table.add_column("Description")
        for command in sorted(self._commands, key=lambda c: c.source or ""):
            table.add_row(command.source or "-", ", ".join(command.commands), command.description)
        self._console.print(table)
