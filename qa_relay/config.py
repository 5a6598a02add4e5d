"""
Application configuration management.
"""

from functools import lru_cache
from typing import Optional, Tuple

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Secrets default to empty strings so the service can boot without them;
    the events endpoint refuses to process deliveries until they are set.
    """

    # Slack
    slack_bot_token: str = ""
    slack_signing_secret: str = ""
    slack_api_base_url: str = "https://slack.com/api"
    signature_max_age_seconds: int = 300

    # GitHub
    github_token: str = ""
    github_repository: Optional[str] = None  # Default "owner/repo" fallback
    github_api_base_url: str = "https://api.github.com"
    github_user_agent: str = "qa-relay"

    # Application
    log_level: str = "INFO"
    http_timeout_seconds: float = 10.0

    class Config:
        env_file = ".env"
        case_sensitive = False
        frozen = True

    def missing_secrets(self) -> Tuple[str, ...]:
        """Return the names of required secrets that are not configured."""
        required = {
            "slack_bot_token": self.slack_bot_token,
            "slack_signing_secret": self.slack_signing_secret,
            "github_token": self.github_token,
        }
        return tuple(name for name, value in required.items() if not value)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, read once from the environment."""
    return Settings()
