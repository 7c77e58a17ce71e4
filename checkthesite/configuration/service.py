"""Configuration loading — ``config.yaml`` plus the site checker's own file.

On first start the missing files are generated from defaults and the caller
is told to stop (``ConfigGenerated``) so the user can fill them in. Any
parse, validation or checker resolution problem surfaces as ``ConfigError``
carrying every message found.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from checkthesite.checkers import (
    NO_CONFIG,
    CheckerHandle,
    CheckerResolutionError,
    Configured,
    SiteChecker,
    resolve_checker,
)
from checkthesite.configuration.files import FileService
from checkthesite.configuration.models import DEFAULT_CONFIGURATION, Configuration, RequestData
from checkthesite.scheduling import PollingPolicy, is_compatible, resolve_unit

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.yaml"


class ConfigError(Exception):
    """Configuration could not be loaded; ``errors`` lists every problem."""

    def __init__(self, file_name: str, errors: list[str]) -> None:
        self.file_name = file_name
        self.errors = errors
        super().__init__(f"{file_name}: " + "; ".join(errors))


class ConfigGenerated(Exception):
    """An example configuration file was written and needs editing."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Generated example configuration {path}")


@dataclass
class LoadedConfiguration:
    configuration: Configuration
    policy: PollingPolicy
    checker: CheckerHandle


# ── Validation ───────────────────────────────────────────────────────────────


def _units_incompatible(config: Configuration) -> bool:
    delay_unit = resolve_unit(config.request_data.delay_unit)
    randomness_unit = resolve_unit(config.request_data.randomness_unit)
    return (
        delay_unit is not None
        and randomness_unit is not None
        and not is_compatible(delay_unit, randomness_unit)
    )


_VALIDATIONS: list[tuple[Callable[[Configuration], bool], str]] = [
    (lambda c: not c.request_data.url.strip(), "Request url is empty"),
    (lambda c: not c.request_data.delay_unit.strip(), "Request delay unit is empty"),
    (lambda c: not c.request_data.randomness_unit.strip(), "Request randomness unit is empty"),
    (
        lambda c: bool(c.request_data.delay_unit.strip()) and resolve_unit(c.request_data.delay_unit) is None,
        "delay_unit couldn't be parsed",
    ),
    (
        lambda c: bool(c.request_data.randomness_unit.strip())
        and resolve_unit(c.request_data.randomness_unit) is None,
        "randomness_unit couldn't be parsed",
    ),
    (lambda c: c.request_data.min_delay < 0, "Min delay is negative"),
    (lambda c: c.request_data.min_delay > c.request_data.max_delay, "Min delay is larger than max delay"),
    (_units_incompatible, "randomness_unit is less precise than delay_unit"),
    (lambda c: c.request_data.timeout_seconds <= 0, "Request timeout must be positive"),
    (lambda c: not c.site_checker.strip(), "Site checker implementation is empty"),
    (lambda c: c.mail_data.enabled and not c.mail_data.host.strip(), "Mail host is empty"),
    (lambda c: c.mail_data.enabled and not c.mail_data.email_from.strip(), "Mail sender is empty"),
    (lambda c: c.mail_data.enabled and not c.mail_data.email_to, "Mail recipient list is empty"),
]


def validate_configuration(config: Configuration) -> list[str]:
    """Return every validation error message for ``config``."""
    return [message for predicate, message in _VALIDATIONS if predicate(config)]


def build_policy(request_data: RequestData) -> PollingPolicy:
    """Turn validated request data into a polling policy."""
    delay_unit = resolve_unit(request_data.delay_unit)
    randomness_unit = resolve_unit(request_data.randomness_unit)
    if delay_unit is None or randomness_unit is None:
        raise ValueError("request data contains unknown time units")
    return PollingPolicy(
        url=request_data.url.strip(),
        min_delay=request_data.min_delay,
        max_delay=request_data.max_delay,
        delay_unit=delay_unit,
        randomness_unit=randomness_unit,
        periodic_scheduling=request_data.periodic_scheduling,
        verbose_logging=request_data.print_debug,
    )


def _format_validation_error(e: ValidationError) -> list[str]:
    return [
        f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
        for err in e.errors()
    ]


# ── Service ──────────────────────────────────────────────────────────────────


class ConfigurationService:
    """Loads the main configuration and the configured site checker."""

    def __init__(self, files: FileService, config_file: str = CONFIG_FILE_NAME) -> None:
        self.files = files
        self.config_file = config_file

    def load(self) -> LoadedConfiguration:
        configuration = self._load_main_configuration()
        checker = self._load_site_checker(configuration.site_checker)
        policy = build_policy(configuration.request_data)
        return LoadedConfiguration(configuration=configuration, policy=policy, checker=checker)

    def _load_main_configuration(self) -> Configuration:
        logger.info("Attempting to load configuration data from %s", self.config_file)
        if not self.files.exists(self.config_file):
            logger.info(
                "Configuration file %s not found. Generating example config file, "
                "please set it up and restart the program",
                self.config_file,
            )
            self._generate(self.config_file, _dump_yaml(DEFAULT_CONFIGURATION.model_dump()))

        raw = self._read_yaml(self.config_file)
        try:
            configuration = Configuration.model_validate(raw)
        except ValidationError as e:
            raise ConfigError(self.config_file, _format_validation_error(e)) from e

        errors = validate_configuration(configuration)
        if errors:
            raise ConfigError(self.config_file, errors)
        logger.info("Successfully loaded configuration data from %s", self.config_file)
        return configuration

    def _load_site_checker(self, identifier: str) -> CheckerHandle:
        logger.info("Attempting to load site checker implementation %s", identifier)
        try:
            checker = resolve_checker(identifier)
        except CheckerResolutionError as e:
            raise ConfigError(self.config_file, [str(e)]) from e

        info = checker.config_info
        if info is None:
            logger.info("%s doesn't require any configuration", checker.name)
            return CheckerHandle(checker, NO_CONFIG)

        logger.info(
            "%s requires configuration in %s. Attempting to load configuration data",
            checker.name, info.file_name,
        )
        if not self.files.exists(info.file_name):
            logger.info(
                "Configuration file %s not found. Generating example config file, "
                "please set it up and restart the program",
                info.file_name,
            )
            self._generate(info.file_name, checker.encode_configuration(info.default_config) or "")

        config = self._decode_checker_config(checker, info.file_name)
        logger.info("Successfully loaded %s configuration data from %s", checker.name, info.file_name)
        return CheckerHandle(checker, Configured(config))

    def _decode_checker_config(self, checker: SiteChecker, file_name: str) -> Any:
        text = self._read(file_name)
        try:
            return checker.decode_configuration(text)
        except ValidationError as e:
            raise ConfigError(file_name, _format_validation_error(e)) from e
        except Exception as e:
            raise ConfigError(file_name, [f"Failed parsing {file_name}: {e}"]) from e

    def _generate(self, file_name: str, content: str) -> None:
        try:
            path = self.files.write_text(file_name, content)
        except FileExistsError as e:
            raise ConfigError(
                file_name, [f"Tried to generate an example configuration file, but {file_name} already exists"]
            ) from e
        except OSError as e:
            raise ConfigError(file_name, [f"Couldn't write {file_name}: {e}"]) from e
        raise ConfigGenerated(path)

    def _read(self, file_name: str) -> str:
        try:
            return self.files.read_text(file_name)
        except OSError as e:
            raise ConfigError(file_name, [f"Couldn't read {file_name}: {e}"]) from e

    def _read_yaml(self, file_name: str) -> Any:
        try:
            raw = yaml.safe_load(self._read(file_name))
        except yaml.YAMLError as e:
            raise ConfigError(file_name, [f"Failed parsing {file_name}: {e}"]) from e
        if not isinstance(raw, dict):
            raise ConfigError(file_name, [f"{file_name} must contain a mapping at the top level"])
        return raw


def _dump_yaml(data: dict[str, Any]) -> str:
    return yaml.dump(data, allow_unicode=True, sort_keys=False, default_flow_style=False)
