"""
Hedge Layer CLI - Configuration

Credential and endpoint storage.

The config file lives at ~/.hedgelayer/config.json:
    {
      "api_url": "https://hedgelayer.ai",
      "token": "hl_..."
    }

Environment variables take precedence over the file:
- HEDGELAYER_TOKEN: API token
- HEDGELAYER_API_URL: API base URL
- HEDGELAYER_CONFIG_DIR: alternative config directory
"""

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

DEFAULT_API_URL = "https://hedgelayer.ai"
CONFIG_FILENAME = "config.json"

TOKEN_PREFIX = "hl_"
TOKEN_LENGTH = 43


@dataclass
class Config:
    """Stored client configuration."""
    api_url: str = DEFAULT_API_URL
    token: Optional[str] = None


def config_dir() -> Path:
    """Directory holding the config file."""
    override = os.getenv("HEDGELAYER_CONFIG_DIR")
    if override:
        return Path(override)
    return Path.home() / ".hedgelayer"


def config_path() -> Path:
    """Full path of the config file."""
    return config_dir() / CONFIG_FILENAME


def load_config() -> Config:
    """
    Load the stored config.

    A missing or unreadable file yields the defaults.
    """
    path = config_path()
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        return Config()

    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return Config()
    if not isinstance(data, dict):
        return Config()

    return Config(
        api_url=data.get("api_url") or DEFAULT_API_URL,
        token=data.get("token") or None,
    )


def save_config(config: Config) -> Path:
    """Write the config file, creating its directory if needed."""
    path = config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    # Created owner-only; an existing file is narrowed before the token is written.
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        os.chmod(path, 0o600)
        f.write(json.dumps(asdict(config), indent=2) + "\n")
    return path


def clear_config() -> bool:
    """
    Remove the config file.

    Returns:
        True if a file was removed.
    """
    try:
        config_path().unlink()
    except FileNotFoundError:
        return False
    return True


def resolve_token(explicit: Optional[str] = None, config: Optional[Config] = None) -> Optional[str]:
    """Token from argument, then HEDGELAYER_TOKEN, then the config file."""
    if explicit:
        return explicit
    env_token = os.getenv("HEDGELAYER_TOKEN")
    if env_token:
        return env_token
    return (config or load_config()).token


def resolve_api_url(explicit: Optional[str] = None, config: Optional[Config] = None) -> str:
    """Base URL from argument, then HEDGELAYER_API_URL, then the config file."""
    url = explicit or os.getenv("HEDGELAYER_API_URL") or (config or load_config()).api_url
    return (url or DEFAULT_API_URL).rstrip("/")


def is_valid_token(token: str) -> bool:
    """API tokens start with ``hl_`` and are 43 characters long."""
    return token.startswith(TOKEN_PREFIX) and len(token) == TOKEN_LENGTH
