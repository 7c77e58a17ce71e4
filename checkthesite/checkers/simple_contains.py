"""Simple "page contains text" checker.

Fully functional example of a checker with its own configuration file: the
result is POSITIVE when the page contains (or, with ``contains_or_not:
false``, does not contain) ``contained_string``.
"""

from __future__ import annotations

import logging

import httpx
import yaml
from pydantic import BaseModel

from checkthesite.checkers.base import (
    CheckerConfig,
    CheckerConfigInfo,
    Configured,
    SiteChecker,
    SiteCheckError,
)
from checkthesite.checkers.registry import register_checker
from checkthesite.console.commands import ConsoleCommand

logger = logging.getLogger(__name__)


class SimpleContainsConfig(BaseModel):
    contained_string: str
    ignore_case: bool = True
    contains_or_not: bool = True


@register_checker("simple-contains")
class SimpleContainsChecker(SiteChecker):

    @property
    def config_info(self) -> CheckerConfigInfo:
        return CheckerConfigInfo(
            "simple-contains-config.yaml",
            SimpleContainsConfig(
                contained_string="The website must contain this text!",
                ignore_case=True,
                contains_or_not=True,
            ),
        )

    @property
    def custom_commands(self) -> list[ConsoleCommand]:
        return [
            ConsoleCommand.single(
                "example",
                "Example for a custom command by a site checker implementation",
                lambda: logger.info("Pong!"),
            )
        ]

    def decode_configuration(self, text: str) -> SimpleContainsConfig:
        return SimpleContainsConfig.model_validate(yaml.safe_load(text) or {})

    def encode_configuration(self, config: SimpleContainsConfig) -> str:
        return yaml.safe_dump(config.model_dump(), sort_keys=False, allow_unicode=True)

    def check(self, response: httpx.Response, config: CheckerConfig) -> bool:
        if not isinstance(config, Configured):
            raise SiteCheckError("Site config cannot be empty")
        cfg: SimpleContainsConfig = config.value

        body = response.text
        needle = cfg.contained_string
        if cfg.ignore_case:
            found = needle.casefold() in body.casefold()
        else:
            found = needle in body
        return cfg.contains_or_not == found
