"""SMTP mail sender: opens authenticated aiosmtplib sessions against Gmail."""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import make_msgid
from typing import AsyncIterator, Union

import aiosmtplib

from gmail_mcp.config import Settings
from gmail_mcp.errors import AuthError, TransportError
from gmail_mcp.models import Envelope, HtmlBody
from gmail_mcp.services.oauth import xoauth2_string

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppPassword:
    password: str


@dataclass(frozen=True)
class AccessToken:
    token: str


Secret = Union[AppPassword, AccessToken]


def _describe(exc: Exception) -> str:
    if isinstance(exc, aiosmtplib.SMTPResponseException):
        return f"{exc.code} {exc.message}"
    return str(exc) or type(exc).__name__


def build_message(envelope: Envelope) -> EmailMessage:
    """Render an envelope as a MIME message with a fresh Message-ID."""
    msg = EmailMessage()
    msg["From"] = envelope.sender
    msg["To"] = envelope.to
    msg["Subject"] = envelope.subject
    domain = envelope.sender.rpartition("@")[2] or None
    msg["Message-ID"] = make_msgid(domain=domain)

    if isinstance(envelope.body, HtmlBody):
        msg.set_content(envelope.body.html, subtype="html")
    else:
        msg.set_content(envelope.body.text)
    return msg


class SMTPSession:
    """An authenticated SMTP connection. Use via SMTPMailSender.create_session."""

    def __init__(self, smtp: aiosmtplib.SMTP):
        self._smtp = smtp

    async def send(self, envelope: Envelope) -> str:
        """Submit the envelope. Returns its Message-ID."""
        msg = build_message(envelope)
        try:
            await self._smtp.send_message(msg)
        except (aiosmtplib.SMTPException, OSError) as e:
            raise TransportError(_describe(e)) from e
        return msg["Message-ID"]

    async def verify(self) -> bool:
        """NOOP handshake on the authenticated connection."""
        try:
            await self._smtp.noop()
        except (aiosmtplib.SMTPException, OSError) as e:
            raise TransportError(_describe(e)) from e
        return True


class SMTPMailSender:
    """Creates one SMTP session per call. Sessions are never pooled."""

    def __init__(self, settings: Settings):
        self.host = settings.smtp_host
        self.port = settings.smtp_port
        self.timeout = settings.smtp_timeout_seconds

    @property
    def use_tls(self) -> bool:
        return self.port == 465

    @property
    def use_starttls(self) -> bool:
        return self.port in (587, 25)

    @asynccontextmanager
    async def create_session(self, account: str, secret: Secret) -> AsyncIterator[SMTPSession]:
        smtp = aiosmtplib.SMTP(
            hostname=self.host,
            port=self.port,
            use_tls=self.use_tls,
            start_tls=self.use_starttls,
            timeout=self.timeout,
        )
        logger.debug("Connecting to %s:%d as %s", self.host, self.port, account)
        try:
            await smtp.connect()
        except (aiosmtplib.SMTPException, OSError) as e:
            raise TransportError(_describe(e)) from e

        try:
            await self._authenticate(smtp, account, secret)
            yield SMTPSession(smtp)
        finally:
            await self._close(smtp)

    async def _authenticate(self, smtp: aiosmtplib.SMTP, account: str, secret: Secret) -> None:
        try:
            if isinstance(secret, AccessToken):
                await smtp.ehlo()
                response = await smtp.execute_command(
                    b"AUTH", b"XOAUTH2", xoauth2_string(account, secret.token).encode("ascii")
                )
                if response.code == 334:
                    # Server sent an error challenge; an empty reply ends the exchange.
                    response = await smtp.execute_command(b"")
                if response.code != 235:
                    raise AuthError(f"{response.code} {response.message}")
            else:
                await smtp.login(account, secret.password)
        except aiosmtplib.SMTPAuthenticationError as e:
            raise AuthError(_describe(e)) from e
        except (aiosmtplib.SMTPException, OSError) as e:
            raise TransportError(_describe(e)) from e

    async def _close(self, smtp: aiosmtplib.SMTP) -> None:
        if not smtp.is_connected:
            return
        try:
            await smtp.quit()
        except aiosmtplib.SMTPException as e:
            logger.debug("SMTP QUIT failed, closing socket: %s", e)
            smtp.close()
