"""Mail notifier — sends a mail after every POSITIVE poll.

SMTP over implicit TLS (port 465) with login; recipients go to BCC so they
do not see each other.
"""

from __future__ import annotations

import logging
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr

from checkthesite.checkers.base import SiteChecker
from checkthesite.configuration.models import MailData
from checkthesite.console.commands import ConsoleCommand
from checkthesite.scheduling import Outcome, OutcomeListenerBus

logger = logging.getLogger(__name__)

SMTP_TIMEOUT = 30  # seconds


class MailNotifier:
    """Outcome listener that mails the configured recipients."""

    def __init__(self, mail_data: MailData, checker: SiteChecker) -> None:
        self.mail_data = mail_data
        self.checker = checker

    @property
    def enabled(self) -> bool:
        return self.mail_data.enabled

    @property
    def commands(self) -> list[ConsoleCommand]:
        return [
            ConsoleCommand.single(
                "testmail",
                "Sends a test email to check whether the mail service is correctly configured",
                self.send_test_mail,
            )
        ]

    def attach(self, bus: OutcomeListenerBus) -> bool:
        """Subscribe to ``bus`` if mailing is enabled."""
        if not self.enabled:
            logger.info("Mail sending is disabled in the configuration, so the mail notifier won't be registered")
            return False
        bus.subscribe(self.on_outcome)
        logger.info("Registered mail notifier to react on HTTP requests")
        return True

    def on_outcome(self, outcome: Outcome) -> None:
        if outcome is not Outcome.POSITIVE:
            return
        try:
            self.send_mail()
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Error while sending mail: %s", e)

    def send_test_mail(self) -> None:
        if not self.enabled:
            logger.info("Mail sending is disabled, command aborted")
            return
        logger.info("Sending a test email with exactly the same data like regular emails")
        try:
            self.send_mail()
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Error while sending mail: %s", e)

    def build_message(self) -> EmailMessage:
        content = self.checker.edit_mail_content(self.mail_data.content)
        msg = EmailMessage()
        msg["Subject"] = content.subject
        msg["From"] = formataddr((self.mail_data.name_from, self.mail_data.email_from))
        msg["Bcc"] = ", ".join(self.mail_data.email_to)
        msg.set_content(content.text)
        return msg

    def send_mail(self) -> None:
        """Send the notification mail. SMTP errors propagate."""
        data = self.mail_data
        count = len(data.email_to)
        logger.info("Sending email to the specified %d recipient%s", count, "" if count == 1 else "s")

        msg = self.build_message()
        context = ssl.create_default_context()
        with smtplib.SMTP_SSL(data.host, data.port, timeout=SMTP_TIMEOUT, context=context) as server:
            server.login(data.username, data.password)
            server.send_message(msg, from_addr=data.email_from, to_addrs=data.email_to)
        logger.info("Email got successfully sent")
