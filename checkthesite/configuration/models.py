"""Pydantic models for ``config.yaml``."""

from __future__ import annotations

from pydantic import BaseModel, Field

from checkthesite.models import MailContent


class RequestData(BaseModel):
    """Where to poll and how to randomize the delay between polls.

    ``min_delay``/``max_delay`` are in ``delay_unit``; the random delay is
    drawn in ``randomness_unit`` (equal to or more precise than
    ``delay_unit``). ``periodic_scheduling`` re-arms after every non-positive
    poll; ``print_debug`` turns on HTTP client debug logging.
    """

    url: str
    min_delay: int
    max_delay: int
    delay_unit: str
    randomness_unit: str
    periodic_scheduling: bool = False
    print_debug: bool = False
    timeout_seconds: float = 30.0


class MailData(BaseModel):
    """SMTP settings. All other fields are ignored when ``enabled`` is false."""

    enabled: bool = False
    host: str = ""
    port: int = 465
    username: str = ""
    password: str = ""
    email_from: str = ""
    name_from: str = ""
    email_to: list[str] = Field(default_factory=list)
    content: MailContent = MailContent(subject="Mail subject", text="This is the content of the mail!")


class Configuration(BaseModel):
    request_data: RequestData
    mail_data: MailData
    site_checker: str


DEFAULT_CONFIGURATION = Configuration(
    request_data=RequestData(
        url="https://www.python-httpx.org",
        min_delay=3,
        max_delay=5,
        delay_unit="minutes",
        randomness_unit="seconds",
        periodic_scheduling=False,
        print_debug=False,
    ),
    mail_data=MailData(
        enabled=False,
        host="smtp.example.com",
        port=465,
        username="sender@example.com",
        password="1234pwd",
        email_from="sender@example.com",
        name_from="Example sender",
        email_to=["recipient@example.com"],
        content=MailContent(subject="Mail subject", text="This is the content of the mail!"),
    ),
    site_checker="simple-contains",
)
