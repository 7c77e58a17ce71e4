"""Models shared between the checkers, the configuration and the notifiers."""

from __future__ import annotations

from pydantic import BaseModel


class MailContent(BaseModel):
    """Subject and body of a notification mail."""

    subject: str
    text: str
