"""Error taxonomy for the mail tools."""


class MailToolError(Exception):
    """Base class for errors raised by the mail tools."""


class ConfigurationError(MailToolError):
    """Required credentials are missing. Raised before any network call."""

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(
            f"Gmail configuration not found. Missing environment variables: "
            f"{', '.join(self.missing)}. Please check your .env file."
        )


class SendError(MailToolError):
    """A failure reported by the mail transport. Message is carried verbatim."""


class AuthError(SendError):
    """The provider rejected the credentials."""


class TransportError(SendError):
    """Network or provider-side failure during connect, send or verify."""


class UnknownOperationError(MailToolError):
    """Requested tool name is not in the catalogue."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")
