"""Configuration management for PipoJournal."""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

PIPOJOURNAL_HOME = Path(os.environ.get("PIPOJOURNAL_HOME", Path.home() / "pipojournal"))
CONFIG_FILE = PIPOJOURNAL_HOME / "config" / "pipojournal.conf"
SESSION_FILE = PIPOJOURNAL_HOME / "config" / ".session.json"


@dataclass
class Config:
    """PipoJournal configuration."""

    supabase_url: str = ""
    supabase_anon_key: str = ""
    timezone: str = "America/Toronto"
    request_timeout: int = 30
    # Telegram bot settings
    telegram_bot_token: str = ""
    telegram_allowed_users: list[int] = field(default_factory=list)


@dataclass
class SessionTokens:
    """Supabase session tokens for the signed-in user."""

    access_token: str = ""
    refresh_token: str = ""
    expires_at: int = 0

    def save(self, path: Path | None = None) -> None:
        """Save tokens to file."""
        path = path or SESSION_FILE
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(
                {
                    "access_token": self.access_token,
                    "refresh_token": self.refresh_token,
                    "expires_at": self.expires_at,
                }
            )
        )
        path.chmod(0o600)

    @classmethod
    def load(cls, path: Path | None = None) -> "SessionTokens":
        """Load tokens from file."""
        path = path or SESSION_FILE
        if not path.exists():
            return cls()
        try:
            data = json.loads(path.read_text())
            return cls(
                access_token=data.get("access_token", ""),
                refresh_token=data.get("refresh_token", ""),
                expires_at=data.get("expires_at", 0),
            )
        except (json.JSONDecodeError, KeyError, AttributeError):
            return cls()


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    if value[:1] in ('"', "'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        if end_quote != -1:
            return value[1:end_quote]
        return value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from pipojournal.conf."""
    path = path or CONFIG_FILE
    config = Config()

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "supabase_url":
                config.supabase_url = value.rstrip("/")
            case "supabase_anon_key":
                config.supabase_anon_key = value
            case "timezone":
                config.timezone = value
            case "request_timeout":
                try:
                    config.request_timeout = int(value)
                except ValueError:
                    logger.warning(f"Invalid REQUEST_TIMEOUT: {value}")
            case "telegram_bot_token":
                config.telegram_bot_token = value
            case "telegram_allowed_users":
                try:
                    config.telegram_allowed_users = [
                        int(u.strip()) for u in value.split(",") if u.strip()
                    ]
                except ValueError:
                    logger.warning(f"Invalid TELEGRAM_ALLOWED_USERS: {value}")

    return config
