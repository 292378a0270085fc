"""Request/result value types for the mail tools.

All of these live for a single tool invocation.
"""

from dataclasses import dataclass
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EmailRequest(BaseModel):
    """Arguments of send_email."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    to: str = Field(..., min_length=1)
    subject: str = Field(..., min_length=1)
    body: str = Field(..., min_length=1)
    is_html: bool = Field(False, alias="html")

    @field_validator("to", "subject", "body")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class IntroductionRequest(BaseModel):
    """Arguments of send_introduction_email.

    sender_name is None when the caller omits it; the configured default
    identity is filled in by the tool.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    to: str = Field(..., min_length=1)
    sender_name: Optional[str] = Field(None, alias="name")
    custom_message: str = Field("", alias="customMessage")

    @field_validator("to")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


@dataclass(frozen=True)
class PlainTextBody:
    text: str


@dataclass(frozen=True)
class HtmlBody:
    html: str


Body = Union[PlainTextBody, HtmlBody]


@dataclass(frozen=True)
class Envelope:
    """Message handed to a transport session."""

    sender: str
    to: str
    subject: str
    body: Body

    @property
    def text(self) -> Optional[str]:
        return self.body.text if isinstance(self.body, PlainTextBody) else None

    @property
    def html(self) -> Optional[str]:
        return self.body.html if isinstance(self.body, HtmlBody) else None


@dataclass(frozen=True)
class SendResult:
    message_id: str

    @property
    def text(self) -> str:
        return f"Email sent successfully! Message ID: {self.message_id}"


@dataclass(frozen=True)
class ConfigCheckResult:
    is_valid: bool
    message: str
    account: Optional[str] = None
