"""Interactive console — commands typed by the operator."""

from checkthesite.console.commands import ConsoleCommand
from checkthesite.console.service import ConsoleService, ExitReason

__all__ = ["ConsoleCommand", "ConsoleService", "ExitReason"]
