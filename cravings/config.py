"""Configuration management with pydantic-settings and validation."""

from pydantic_settings import BaseSettings
from pydantic import field_validator


# Fields that are optional (app works without them)
OPTIONAL_FIELDS = {
    "emailjs_service_id",
    "emailjs_template_id",
    "emailjs_public_key",
    "emailjs_private_key",
}

# Tunables that always carry a default
DEFAULTED_FIELDS = {
    "anthropic_model",
    "recipe_page_size",
    "recipe_candidate_pool",
    "strict_dietary_filter",
    "user_timezone",
    "request_timeout",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database Configuration
    database_url: str

    # Spoonacular recipe API
    spoonacular_api_key: str

    # Anthropic Configuration
    anthropic_api_key: str
    anthropic_model: str = "claude-sonnet-4-5-20250929"

    # Shared secret for the cron sweep endpoint
    cron_secret: str

    # EmailJS (optional, sending is disabled without them)
    emailjs_service_id: str = ""
    emailjs_template_id: str = ""
    emailjs_public_key: str = ""
    emailjs_private_key: str = ""

    # Recipe feed settings
    recipe_page_size: int = 10
    recipe_candidate_pool: int = 50
    strict_dietary_filter: bool = True

    user_timezone: str = "America/New_York"
    request_timeout: int = 10

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @field_validator("database_url", mode="before")
    @classmethod
    def fix_database_url(cls, v):
        """Heroku-style postgres:// URLs need to be postgresql:// for SQLAlchemy."""
        if isinstance(v, str) and v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

    @field_validator("*", mode="before")
    @classmethod
    def check_not_empty(cls, v, info):
        """Validate that required environment variables are not empty."""
        if info.field_name in OPTIONAL_FIELDS:
            return v if v is not None else ""
        if info.field_name in DEFAULTED_FIELDS:
            return v
        if v is None:
            raise ValueError("Required environment variable is not set")
        if isinstance(v, str) and v.strip() == "":
            raise ValueError("Required environment variable is empty")
        return v

    @property
    def email_configured(self) -> bool:
        """True when every EmailJS credential is present."""
        return all(
            [
                self.emailjs_service_id,
                self.emailjs_template_id,
                self.emailjs_public_key,
                self.emailjs_private_key,
            ]
        )


def get_settings() -> Settings:
    """Load and validate settings from environment.

    Raises:
        ValidationError: If required environment variables are missing or invalid.
    """
    return Settings()
