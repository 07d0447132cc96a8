"""FileStream application configuration.

Loads settings from two YAML files:
  * filestream.settings.yaml  — non-secret configuration
  * filestream.secrets.yaml   — Telegram credentials (never committed)

The loaded configuration is cached; use ``get_config()`` everywhere and
``reset_config()`` in tests.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

SETTINGS_FILE = Path("filestream.settings.yaml")
SECRETS_FILE  = Path("filestream.secrets.yaml")


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.warning("Config file not found: %s", path)
        return {}
    with path.open(encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


# ---------------------------------------------------------------------------
# Secrets models
# ---------------------------------------------------------------------------


class TelegramSecrets(BaseModel):
    api_id:    Optional[int] = None
    api_hash:  Optional[str] = None
    bot_token: Optional[str] = None


class Secrets(BaseModel):
    telegram: TelegramSecrets = Field(default_factory=TelegramSecrets)


# ---------------------------------------------------------------------------
# Settings models
# ---------------------------------------------------------------------------


class ServerSettings(BaseModel):
    host:       str           = "0.0.0.0"
    port:       int           = 3000
    public_url: Optional[str] = None


class StorageSettings(BaseModel):
    """The storage conversation that holds every relayed file."""
    chat: Optional[Union[int, str]] = None


class MessagingSettings(BaseModel):
    provider:           Literal["telegram", "memory"] = "telegram"
    session_file:       str                           = "session.txt"
    connection_retries: int                           = 5
    retry_delay:        int                           = 1


class LoggingSettings(BaseModel):
    level: str = "info"

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        if not isinstance(logging.getLevelName(value.upper()), int):
            raise ValueError(f"Unknown log level: {value}")
        return value


class AppConfig(BaseModel):
    server:    ServerSettings    = Field(default_factory=ServerSettings)
    storage:   StorageSettings   = Field(default_factory=StorageSettings)
    messaging: MessagingSettings = Field(default_factory=MessagingSettings)
    logging:   LoggingSettings   = Field(default_factory=LoggingSettings)
    secrets:   Secrets           = Field(default_factory=Secrets)

    @property
    def base_url(self) -> str:
        """Base URL used to compose direct and watch links."""
        if self.server.public_url:
            return self.server.public_url.rstrip("/")
        return f"http://localhost:{self.server.port}"


# ---------------------------------------------------------------------------
# Public loader
# ---------------------------------------------------------------------------


def load_config(
    settings_path: Optional[Path] = None,
    secrets_path: Optional[Path] = None,
) -> AppConfig:
    """Load and merge settings + secrets into a single *AppConfig* object.

    A relative ``messaging.session_file`` is resolved against the directory
    that holds the settings file.
    """
    settings_path = Path(settings_path) if settings_path else SETTINGS_FILE
    secrets_path = Path(secrets_path) if secrets_path else settings_path.with_name(SECRETS_FILE.name)

    settings_data = _load_yaml(settings_path)
    secrets_data  = _load_yaml(secrets_path)

    # Merge: secrets live under the "secrets" key in AppConfig
    settings_data["secrets"] = secrets_data

    config = AppConfig(**settings_data)

    session_file = Path(config.messaging.session_file)
    if not session_file.is_absolute():
        config.messaging.session_file = str(settings_path.parent / session_file)

    logger.info(
        "Settings loaded (server=%s:%s, messaging=%s, storage.chat=%s)",
        config.server.host,
        config.server.port,
        config.messaging.provider,
        config.storage.chat,
    )
    return config


_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Return the cached configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Drop the cached configuration (for testing)."""
    global _config
    _config = None
