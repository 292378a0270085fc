"""Email tools: send an email, send an introduction email, check the Gmail setup."""

import logging
from typing import AsyncContextManager, Optional, Protocol

import httpx

from gmail_mcp.config import Settings
from gmail_mcp.errors import ConfigurationError, SendError
from gmail_mcp.models import (
    ConfigCheckResult,
    EmailRequest,
    Envelope,
    HtmlBody,
    IntroductionRequest,
    PlainTextBody,
    SendResult,
)
from gmail_mcp.services.oauth import refresh_access_token
from gmail_mcp.services.smtp import AccessToken, AppPassword, Secret, SMTPMailSender


class Session(Protocol):
    async def send(self, envelope: Envelope) -> str: ...

    async def verify(self) -> bool: ...


class MailSender(Protocol):
    def create_session(self, account: str, secret: Secret) -> AsyncContextManager[Session]: ...


def render_introduction(sender_name: str, custom_message: str, account: str, background: str) -> str:
    """Plain-text introduction body. Paragraphs are separated by a blank line."""
    paragraphs = [
        "Dear Recipient,",
        f"I hope this email finds you well. I'm writing to introduce myself - I'm {sender_name}, "
        "and I wanted to reach out to connect with you.",
    ]
    if custom_message.strip():
        paragraphs.append(custom_message)
    paragraphs.append(background)
    paragraphs.append("Thank you for your time, and I look forward to hearing from you.")
    paragraphs.append(f"Best regards,\n{sender_name}\n{account}")
    return "\n\n".join(paragraphs)


class MailTools:
    """The operations behind the MCP tools.

    Settings, the mail sender and the logger are injected so the operations
    can run against fakes. Every call opens its own transport session.
    """

    def __init__(
        self,
        settings: Settings,
        sender: Optional[MailSender] = None,
        logger: Optional[logging.Logger] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings
        self.sender = sender if sender is not None else SMTPMailSender(settings)
        self.logger = logger or logging.getLogger(__name__)
        self._http_client = http_client

    async def _secret(self) -> Secret:
        if self.settings.uses_oauth2:
            token = await refresh_access_token(self.settings, self._http_client)
            return AccessToken(token)
        return AppPassword(self.settings.gmail_app_password)

    def _require_credentials(self) -> None:
        missing = self.settings.missing_credentials
        if missing:
            self.logger.warning("Refusing to send: missing %s", ", ".join(missing))
            raise ConfigurationError(missing)

    async def send_email(self, req: EmailRequest) -> SendResult:
        self._require_credentials()

        account = self.settings.account
        body = HtmlBody(req.body) if req.is_html else PlainTextBody(req.body)
        envelope = Envelope(sender=account, to=req.to, subject=req.subject, body=body)

        self.logger.info("Sending email to %s as %s", req.to, account)
        secret = await self._secret()
        async with self.sender.create_session(account, secret) as session:
            message_id = await session.send(envelope)
        self.logger.info("Email sent to %s, Message-ID %s", req.to, message_id)
        return SendResult(message_id=message_id)

    def introduction_request(self, req: IntroductionRequest) -> EmailRequest:
        """Fill the introduction template into a plain-text EmailRequest."""
        name = req.sender_name or self.settings.default_sender_name
        body = render_introduction(
            sender_name=name,
            custom_message=req.custom_message,
            account=self.settings.account,
            background=self.settings.intro_background,
        )
        return EmailRequest(to=req.to, subject=f"Introduction - {name}", body=body, is_html=False)

    async def send_introduction_email(self, req: IntroductionRequest) -> SendResult:
        return await self.send_email(self.introduction_request(req))

    async def check_configuration(self) -> ConfigCheckResult:
        """Verify credentials with a live handshake. Never cached."""
        settings = self.settings
        self.logger.info(
            "Checking Gmail config: GMAIL_USER=%s auth=%s secret=%s",
            settings.account or "undefined",
            settings.gmail_auth_method,
            "[HIDDEN]" if settings.is_configured else "undefined",
        )

        missing = settings.missing_credentials
        if missing:
            return ConfigCheckResult(
                is_valid=False,
                message=(
                    f"Missing environment variables: {', '.join(missing)}\n\n"
                    "Please check your .env file configuration."
                ),
            )

        try:
            secret = await self._secret()
            async with self.sender.create_session(settings.account, secret) as session:
                await session.verify()
        except SendError as e:
            self.logger.warning("Gmail handshake failed: %s", e)
            return ConfigCheckResult(is_valid=False, message=f"Gmail configuration error: {e}")

        return ConfigCheckResult(
            is_valid=True,
            account=settings.account,
            message=f"Gmail configuration is valid!\nEmail: {settings.account}",
        )
