"""centralized configuration management using pydantic settings.

secrets and defaults are loaded from environment variables and an optional
.env file. an optional config.yaml can override model, generation and smtp
parameters. everything is folded into one immutable ServerConfig that is
built once at startup and passed to the client, the mail transport and the
tools.
"""

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError

DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_SMTP_HOST = "smtp.gmail.com"
DEFAULT_SMTP_PORT = 587


class Settings(BaseSettings):
    """environment settings for the tool server.

    attributes:
        gemini_api_key: api key for gemini (GEMINI_API_KEY)
        google_api_key: alternative name for the same key (GOOGLE_API_KEY)
        smtp_user: smtp login, also the sender address
        smtp_password: smtp password or app password
        smtp_host: smtp relay host
        smtp_port: smtp submission port (starttls)
        gemini_model: gemini model name
        output_dir: default directory for generated artifacts
        log_level: logging level (DEBUG, INFO, WARNING, ERROR)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # ignore extra env vars
    )

    # api keys
    gemini_api_key: str | None = None
    google_api_key: str | None = None

    # mail credentials, the NODEMAILER_* names are accepted for older setups
    smtp_user: str | None = Field(
        default=None, validation_alias=AliasChoices("SMTP_USER", "NODEMAILER_EMAIL")
    )
    smtp_password: str | None = Field(
        default=None, validation_alias=AliasChoices("SMTP_PASSWORD", "NODEMAILER_PASSWORD")
    )
    smtp_host: str = DEFAULT_SMTP_HOST
    smtp_port: int = Field(default=DEFAULT_SMTP_PORT, gt=0, lt=65536)

    gemini_model: str = Field(default=DEFAULT_MODEL, alias="GEMINI_MODEL")
    output_dir: str | None = Field(default=None, alias="GEMINI_TOOLS_OUTPUT_DIR")
    log_level: str = Field(default="INFO", alias="GEMINI_TOOLS_LOG_LEVEL")

    def get_api_key(self) -> str | None:
        """get gemini api key, checking both GEMINI_API_KEY and GOOGLE_API_KEY."""
        return self.gemini_api_key or self.google_api_key


@lru_cache
def get_settings() -> Settings:
    """get the singleton settings instance.

    call get_settings.cache_clear() to reload settings if needed.
    """
    return Settings()


def load_yaml_config(path: str | Path = "config.yaml") -> dict[str, Any]:
    """Load configuration from a yaml file if it exists."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        return {}


@dataclass(frozen=True)
class MailCredentials:
    """Login for the smtp relay."""
    user: str
    password: str


@dataclass(frozen=True)
class GenerationConfig:
    """Sampling parameters sent with every gemini request."""
    temperature: float = 0.7
    top_p: float = 0.95
    top_k: int = 64
    max_output_tokens: int = 65536


@dataclass(frozen=True)
class ServerConfig:
    """Immutable configuration threaded through the server at startup.

    Attributes:
        api_key: gemini api key (None if not configured)
        mail_credentials: smtp login (None if not configured)
        default_output_dir: where artifacts go when a call has no outputDir
        model: gemini model name
        generation: sampling parameters
        smtp_host: smtp relay host
        smtp_port: smtp relay port
        smtp_timeout: socket timeout for the smtp connection, in seconds
    """
    api_key: str | None
    mail_credentials: MailCredentials | None
    default_output_dir: Path
    model: str = DEFAULT_MODEL
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    smtp_host: str = DEFAULT_SMTP_HOST
    smtp_port: int = DEFAULT_SMTP_PORT
    smtp_timeout: float = 30.0

    @classmethod
    def from_sources(
        cls,
        settings: Settings,
        yaml_config: dict[str, Any] | None = None,
        overrides: dict[str, Any] | None = None,
    ) -> "ServerConfig":
        """Build the config. Priority: overrides (cli) > yaml > env > defaults.

        Args:
            settings: environment settings
            yaml_config: parsed config.yaml content
            overrides: non-None cli values (output_dir, model)

        Returns:
            the server config
        """
        yaml_config = yaml_config or {}
        overrides = {k: v for k, v in (overrides or {}).items() if v is not None}
        gemini_cfg = yaml_config.get("gemini") or {}
        smtp_cfg = yaml_config.get("smtp") or {}

        credentials = None
        if settings.smtp_user and settings.smtp_password:
            credentials = MailCredentials(user=settings.smtp_user, password=settings.smtp_password)

        output_dir = (
            overrides.get("output_dir")
            or yaml_config.get("output_dir")
            or settings.output_dir
            or Path.cwd() / "output"
        )

        defaults = GenerationConfig()
        generation = GenerationConfig(
            temperature=float(gemini_cfg.get("temperature", defaults.temperature)),
            top_p=float(gemini_cfg.get("top_p", defaults.top_p)),
            top_k=int(gemini_cfg.get("top_k", defaults.top_k)),
            max_output_tokens=int(gemini_cfg.get("max_output_tokens", defaults.max_output_tokens)),
        )

        return cls(
            api_key=settings.get_api_key(),
            mail_credentials=credentials,
            default_output_dir=Path(output_dir).resolve(),
            model=overrides.get("model") or gemini_cfg.get("model") or settings.gemini_model,
            generation=generation,
            smtp_host=smtp_cfg.get("host", settings.smtp_host),
            smtp_port=int(smtp_cfg.get("port", settings.smtp_port)),
            smtp_timeout=float(smtp_cfg.get("timeout", 30.0)),
        )

    def require_api_key(self) -> str:
        """Return the gemini api key or raise ConfigurationError."""
        if not self.api_key:
            raise ConfigurationError(
                "GEMINI_API_KEY",
                "Set GEMINI_API_KEY (or GOOGLE_API_KEY) in the environment or .env file",
            )
        return self.api_key

    def require_mail_credentials(self) -> MailCredentials:
        """Return the smtp login or raise ConfigurationError."""
        if self.mail_credentials is None:
            raise ConfigurationError(
                "SMTP_USER/SMTP_PASSWORD",
                "Email credentials (SMTP_USER and SMTP_PASSWORD, or NODEMAILER_EMAIL and "
                "NODEMAILER_PASSWORD) are not set in environment variables",
            )
        return self.mail_credentials
