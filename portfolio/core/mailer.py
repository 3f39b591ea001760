"""
Outbound mail transport for contact form messages.

Wraps aiosmtplib with the SMTP relay settings loaded at startup. The
Mailer is built once and shared by every request.
"""

import asyncio
import logging
from email.message import EmailMessage
from email.utils import formataddr
from typing import Optional

import aiosmtplib

from portfolio.core.config import Settings

logger = logging.getLogger(__name__)

SENDER_NAME = "Portfolio Contact"


class MailError(Exception):
    """Base exception for mail transport failures"""


class MailDeliveryError(MailError):
    """Connection, authentication or protocol failure talking to the relay"""


class MailTimeoutError(MailError):
    """The relay did not complete the send in time"""


class Mailer:
    def __init__(self, settings: Settings):
        self.hostname = settings.smtp_host
        self.port = settings.smtp_port
        self.username = settings.smtp_user
        self.password = settings.smtp_pass
        self.use_tls = settings.smtp_secure
        self.timeout = settings.smtp_timeout
        self.from_email = settings.from_email
        self.to_email = settings.to_email

    @property
    def sender(self) -> str:
        return formataddr((SENDER_NAME, self.from_email or ""))

    @property
    def configured(self) -> bool:
        return bool(self.hostname and self.port and self.from_email and self.to_email)

    def build_message(self, from_addr: str, to_addr: str, reply_to: Optional[str], subject: str, html: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = from_addr
        msg["To"] = to_addr
        msg["Subject"] = subject
        if reply_to:
            msg["Reply-To"] = reply_to
        msg.set_content(html, subtype="html")
        return msg

    async def send(self, from_addr: str, to_addr: str, reply_to: Optional[str], subject: str, html: str):
        """
        Send a single HTML email through the relay.

        Args:
            from_addr: Formatted sender header
            to_addr: Recipient address
            reply_to: Address replies should go to
            subject: Subject line
            html: HTML body

        Raises:
            MailTimeoutError: if the send exceeds the configured timeout
            MailDeliveryError: on any SMTP or network failure
        """
        try:
            msg = self.build_message(from_addr, to_addr, reply_to, subject, html)
        except (ValueError, TypeError) as e:
            raise MailDeliveryError(f"Could not build message: {e}") from e

        try:
            response = await asyncio.wait_for(
                aiosmtplib.send(
                    msg,
                    hostname=self.hostname,
                    port=self.port,
                    username=self.username,
                    password=self.password,
                    use_tls=self.use_tls,
                    timeout=self.timeout,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise MailTimeoutError(f"SMTP send to {self.hostname}:{self.port} timed out after {self.timeout}s") from e
        except (aiosmtplib.SMTPException, OSError, ValueError) as e:
            raise MailDeliveryError(f"SMTP send to {self.hostname}:{self.port} failed: {e}") from e

        logger.info(f"📨 Mail sent to {to_addr}")
        return response
