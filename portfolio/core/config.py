from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)

# Settings attribute -> environment variable the mail relay needs
REQUIRED_VARS = {
    "smtp_host": "SMTP_HOST",
    "smtp_port": "SMTP_PORT",
    "smtp_user": "SMTP_USER",
    "smtp_pass": "SMTP_PASS",
    "to_email": "TO_EMAIL",
    "from_email": "FROM_EMAIL",
}


class ConfigurationError(Exception):
    """Raised when required configuration is missing and strict mode is on"""


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    # SMTP relay
    smtp_host: Optional[str] = None
    smtp_port: Optional[int] = None
    smtp_user: Optional[str] = None
    smtp_pass: Optional[str] = None
    smtp_timeout: float = 30.0

    # Addresses
    to_email: Optional[str] = None
    from_email: Optional[str] = None

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    static_dir: str = "public"
    cors_origins: str = "*"
    log_level: str = "INFO"

    # Refuse to start when mail settings are missing
    strict_config: bool = False

    @field_validator("smtp_host", "smtp_port", "smtp_user", "smtp_pass", "to_email", "from_email", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def allowed_origins(self) -> List[str]:
        """CORS origins as a list"""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def smtp_secure(self) -> bool:
        """Implicit TLS is used on the SMTPS port"""
        return self.smtp_port == 465

    def missing_required(self) -> List[str]:
        return [env for attr, env in REQUIRED_VARS.items() if getattr(self, attr) is None]


def load_settings(**overrides) -> Settings:
    """Build the process-wide settings from the environment and .env"""
    return Settings(**overrides)


def check_required(settings: Settings) -> List[str]:
    """
    Report missing mail configuration.

    Each missing variable is logged; startup continues unless
    STRICT_CONFIG is enabled, in which case ConfigurationError is raised.
    """
    missing = settings.missing_required()
    for name in missing:
        logger.error(f"Missing env var: {name}")
    if missing and settings.strict_config:
        raise ConfigurationError(f"Missing required configuration: {', '.join(missing)}")
    return missing
