from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Process settings loaded from environment / .env file.

    The monitored site itself is configured in ``config.yaml`` inside
    ``config_dir``; these settings only cover how the process runs.
    """

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # Configuration files
    config_dir: str = "."
    config_file: str = "config.yaml"

    # Logging
    log_level: str = "INFO"

    # Interactive console (disable when running detached, e.g. in a container)
    console_enabled: bool = True

    # Control API (optional)
    api_enabled: bool = False
    api_host: str = "127.0.0.1"
    api_port: int = 8000
    api_token: str = ""  # X-Api-Token; empty = no auth

    # Webhook notifications (optional — Slack / Telegram)
    slack_webhook_url: str = ""
    telegram_bot_token: str = ""
    telegram_chat_id: str = ""


settings = Settings()
