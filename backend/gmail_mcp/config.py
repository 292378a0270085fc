from typing import List

from pydantic_settings import BaseSettings

DEFAULT_INTRO_BACKGROUND = (
    "I'm a software engineer with experience in various programming technologies "
    "including JavaScript, React, and web development. I'm always interested in "
    "discussing potential opportunities for collaboration or simply connecting "
    "professionally."
)


class Settings(BaseSettings):
    """Server configuration from environment variables. Read once at startup."""

    # Sending account
    gmail_user: str = ""

    # "app_password" or "oauth2"
    gmail_auth_method: str = "app_password"

    # App password auth
    gmail_app_password: str = ""

    # OAuth2 auth (refresh token is exchanged for an access token per session)
    gmail_oauth_client_id: str = ""
    gmail_oauth_client_secret: str = ""
    gmail_oauth_refresh_token: str = ""
    gmail_oauth_token_uri: str = "https://oauth2.googleapis.com/token"

    # SMTP transport
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 465
    smtp_timeout_seconds: int = 30

    # Introduction email template data
    default_sender_name: str = "Yasir Aquil"
    intro_background: str = DEFAULT_INTRO_BACKGROUND

    log_level: str = "INFO"

    # Export tool-call spans to stderr
    telemetry_enabled: bool = False

    class Config:
        env_file = ".env"
        extra = "ignore"
        frozen = True

    @property
    def account(self) -> str:
        return self.gmail_user.strip()

    @property
    def uses_oauth2(self) -> bool:
        return self.gmail_auth_method.strip().lower() == "oauth2"

    @property
    def missing_credentials(self) -> List[str]:
        """Names of the env vars the selected auth method needs but are unset."""
        required = {"GMAIL_USER": self.gmail_user}
        if self.uses_oauth2:
            required.update({
                "GMAIL_OAUTH_CLIENT_ID": self.gmail_oauth_client_id,
                "GMAIL_OAUTH_CLIENT_SECRET": self.gmail_oauth_client_secret,
                "GMAIL_OAUTH_REFRESH_TOKEN": self.gmail_oauth_refresh_token,
            })
        else:
            required["GMAIL_APP_PASSWORD"] = self.gmail_app_password
        return [name for name, value in required.items() if not value.strip()]

    @property
    def is_configured(self) -> bool:
        return not self.missing_credentials
