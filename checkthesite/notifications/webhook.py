"""Webhook notifications — Slack and Telegram.

Posts a short message after every POSITIVE poll to each configured channel.
Runs on the poll thread, so each call is bounded by a short timeout and
failures are logged, never raised.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from checkthesite.config import settings
from checkthesite.scheduling import Outcome, OutcomeListenerBus

logger = logging.getLogger(__name__)

TELEGRAM_API = "https://api.telegram.org/bot{token}"
WEBHOOK_TIMEOUT = 10.0  # seconds


class WebhookNotifier:
    """Dispatcher for Slack / Telegram notifications."""

    def __init__(
        self,
        url: str,
        slack_webhook: str = "",
        telegram_token: str = "",
        telegram_chat_id: str = "",
    ) -> None:
        self.url = url
        self.slack_webhook = slack_webhook
        self.telegram_token = telegram_token
        self.telegram_chat_id = telegram_chat_id

    @classmethod
    def from_settings(cls, url: str) -> WebhookNotifier:
        return cls(
            url,
            slack_webhook=settings.slack_webhook_url,
            telegram_token=settings.telegram_bot_token,
            telegram_chat_id=settings.telegram_chat_id,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.slack_webhook or (self.telegram_token and self.telegram_chat_id))

    def status(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "slack_configured": bool(self.slack_webhook),
            "telegram_configured": bool(self.telegram_token and self.telegram_chat_id),
        }

    def attach(self, bus: OutcomeListenerBus) -> bool:
        if not self.enabled:
            logger.info("Webhook notifier disabled (no Slack webhook / Telegram bot configured)")
            return False
        bus.subscribe(self.on_outcome)
        logger.info("Registered webhook notifier (%s)", self.status())
        return True

    def on_outcome(self, outcome: Outcome) -> None:
        if outcome is not Outcome.POSITIVE:
            return
        self.send(f"✅ *Site check positive*\nURL: {self.url}\nType `confirm` to resume polling.")

    # -- Low-level dispatch -------------------------------------------------

    def send(self, text: str) -> None:
        with httpx.Client(timeout=WEBHOOK_TIMEOUT) as client:
            if self.slack_webhook:
                self._send_slack(client, text)
            if self.telegram_token and self.telegram_chat_id:
                self._send_telegram(client, text)

    def _send_slack(self, client: httpx.Client, text: str) -> None:
        try:
            resp = client.post(self.slack_webhook, json={"text": text, "mrkdwn": True})
            if resp.status_code != 200:
                logger.warning("Slack webhook returned %d: %s", resp.status_code, resp.text[:200])
        except httpx.HTTPError as exc:
            logger.warning("Slack notification failed: %s", exc)

    def _send_telegram(self, client: httpx.Client, text: str) -> None:
        url = f"{TELEGRAM_API.format(token=self.telegram_token)}/sendMessage"
        try:
            resp = client.post(
                url,
                json={"chat_id": self.telegram_chat_id, "text": text, "parse_mode": "Markdown"},
            )
            if resp.status_code != 200:
                logger.warning("Telegram API returned %d: %s", resp.status_code, resp.text[:200])
        except httpx.HTTPError as exc:
            logger.warning("Telegram notification failed: %s", exc)
