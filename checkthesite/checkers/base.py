"""Site checker contract.

A site checker decides whether the fetched page represents a change worth a
notification. Only ``check`` must be implemented; everything else is optional:

- ``config_info`` + ``decode_configuration``/``encode_configuration`` when the
  checker needs its own configuration file,
- ``edit_mail_content`` to build the notification mail dynamically,
- ``custom_commands`` to add console commands.

See ``checkthesite.checkers.simple_contains`` for a complete example.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import httpx

from checkthesite.console.commands import ConsoleCommand
from checkthesite.models import MailContent


class SiteCheckError(Exception):
    """Raised by a checker when it cannot evaluate a response."""


# ── Boxed checker configuration ──────────────────────────────────────────────


class NoConfig:
    """Marker for checkers that do not use a configuration file."""

    _instance: NoConfig | None = None

    def __new__(cls) -> NoConfig:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_CONFIG"


NO_CONFIG = NoConfig()


@dataclass(frozen=True)
class Configured:
    """Decoded configuration of a checker, passed through untouched."""

    value: Any


CheckerConfig = Configured | NoConfig


@dataclass(frozen=True)
class CheckerConfigInfo:
    """Configuration file a checker requires.

    ``file_name`` is a bare file name (no directories), ``default_config`` the
    example written on first start.
    """

    file_name: str
    default_config: Any


# ── Contract ─────────────────────────────────────────────────────────────────


class SiteChecker(ABC):
    """Base class for site checker implementations."""

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def config_info(self) -> CheckerConfigInfo | None:
        return None

    @property
    def custom_commands(self) -> list[ConsoleCommand]:
        return []

    def edit_mail_content(self, content: MailContent) -> MailContent:
        return content

    def decode_configuration(self, text: str) -> Any | None:
        return None

    def encode_configuration(self, config: Any) -> str | None:
        return None

    @abstractmethod
    def check(self, response: httpx.Response, config: CheckerConfig) -> bool:
        """Return True when the page shows the change to notify about.

        Raises ``SiteCheckError`` when the response cannot be evaluated.
        """


@dataclass(frozen=True)
class CheckerHandle:
    """A resolved checker together with its (boxed) configuration."""

    checker: SiteChecker
    config: CheckerConfig = NO_CONFIG

    @property
    def name(self) -> str:
        return self.checker.name

    def check(self, response: httpx.Response) -> bool:
        return self.checker.check(response, self.config)
