"""Outcome notifiers — mail and Slack/Telegram webhooks.

Both subscribe to the outcome listener bus and only act on POSITIVE results.
"""

from checkthesite.notifications.mail import MailNotifier
from checkthesite.notifications.webhook import WebhookNotifier

__all__ = ["MailNotifier", "WebhookNotifier"]
