"""Entry point — `check-the-site` console script."""

from __future__ import annotations

import argparse
import logging
import sys
import threading
from typing import TextIO

import uvicorn
from rich.console import Console
from rich.panel import Panel

from checkthesite import __version__
from checkthesite.api import create_app, serve_in_background
from checkthesite.checkers import available_checkers
from checkthesite.config import settings
from checkthesite.configuration import (
    ConfigError,
    ConfigGenerated,
    ConfigurationService,
    FileService,
)
from checkthesite.console import ConsoleCommand, ConsoleService, ExitReason
from checkthesite.fetcher import HttpFetcher
from checkthesite.notifications import MailNotifier, WebhookNotifier
from checkthesite.scheduling import OutcomeListenerBus, PollScheduler

logger = logging.getLogger(__name__)

console = Console()


def _wait_forever() -> ExitReason:
    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        pass
    return ExitReason.USER


def run(config_dir: str, stream: TextIO | None = None) -> ExitReason:
    """Load configuration, start polling and block until the user exits."""
    files = FileService(config_dir)
    try:
        loaded = ConfigurationService(files, settings.config_file).load()
    except ConfigGenerated as e:
        console.print(f"[yellow]Generated {e.path}, please set it up and restart the program[/yellow]")
        return ExitReason.PROGRAM
    except ConfigError as e:
        logger.error("Configuration in %s contains errors (see below), please fix them and restart the program", e.file_name)
        for error in e.errors:
            logger.error("  %s", error)
        return ExitReason.ERROR

    policy, handle = loaded.policy, loaded.checker
    console.print(
        Panel.fit(
            f"[bold]check-the-site[/bold] v{__version__}\n"
            f"URL:      {policy.url}\n"
            f"Checker:  {handle.name}\n"
            f"Delay:    {policy.min_delay}..{policy.max_delay} {policy.delay_unit.label}"
            f" (randomized in {policy.randomness_unit.label})\n"
            f"Periodic: {policy.periodic_scheduling}",
            border_style="green",
        )
    )

    consoles = ConsoleService(stream=stream)
    consoles.register_commands(handle.name, *handle.checker.custom_commands)

    fetcher = HttpFetcher(timeout=loaded.configuration.request_data.timeout_seconds, verbose=policy.verbose_logging)
    bus = OutcomeListenerBus()
    scheduler = PollScheduler(policy, handle, fetcher, bus)
    consoles.register_commands(
        "scheduler",
        ConsoleCommand.single(
            "confirm",
            "Confirms a POSITIVE request result and re-enables automatic request scheduling",
            scheduler.confirm,
        ),
        ConsoleCommand.single("status", "Prints the current scheduling status", lambda: console.print(scheduler.status())),
    )

    mail = MailNotifier(loaded.configuration.mail_data, handle.checker)
    mail.attach(bus)
    consoles.register_commands("mail", *mail.commands)
    WebhookNotifier.from_settings(policy.url).attach(bus)

    scheduler.start()
    try:
        if settings.api_enabled:
            app = create_app(scheduler)
            if not settings.console_enabled:
                uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level=settings.log_level.lower())
                return ExitReason.USER
            serve_in_background(app, settings.api_host, settings.api_port, settings.log_level)

        if not settings.console_enabled:
            return _wait_forever()
        logger.info('Type "help" for a list of commands')
        return consoles.loop()
    finally:
        scheduler.shutdown()
        fetcher.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Poll a web page and notify when it changes")
    parser.add_argument("--config-dir", default=settings.config_dir, help="Directory holding config.yaml")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("run", help="Start polling (default)")
    sub.add_parser("checkers", help="List the built-in site checkers")

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    if args.command == "checkers":
        for name in available_checkers():
            console.print(name)
        return

    reason = run(args.config_dir)
    logger.info("Program closed with exit reason: %s", reason.name)
    sys.exit(reason.exit_code)


if __name__ == "__main__":
    main()
