# src/taskdesk/notifications/email.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class OutgoingEmail:
    to: str
    subject: str
    body: str


@dataclass(slots=True)
class MockEmailSender:
    """
    Records the intent to send mail and logs it. Nothing leaves the process.
    """

    outbox: list[OutgoingEmail] = field(default_factory=list)

    def send(self, *, to: str, subject: str, body: str) -> None:
        self.outbox.append(OutgoingEmail(to=to, subject=subject, body=body))
        logger.info("[EMAIL MOCK] Sending email to %s: %s", to, body)
