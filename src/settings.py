"""Static configuration for gatekeeper.

Secrets and deployment settings come from the environment (a local .env
file is loaded via python-dotenv). Logging can additionally be tuned in an
optional config.json at the project root.
"""

import json
import os
from typing import Optional

from dotenv import load_dotenv

from core.errors import ConfigurationError

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

CONFIG_PATH = os.path.join(PROJECT_ROOT, "config.json")

DEFAULT_GROUP_CHAT_ID = -1001380105834

load_dotenv()


def _load_json_config() -> dict:
    """Load config.json if present; the file is optional."""

    if not os.path.exists(CONFIG_PATH):
        return {}

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid {name}: {raw!r} is not an integer") from exc


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid {name}: {raw!r} is not a number") from exc


def _build_logging(config: dict) -> dict:
    """Merge the config.json logging section with environment overrides."""

    logging_config = dict(config.get("logging", {}))
    logging_config.setdefault("level", "INFO")
    logging_config.setdefault("console", True)
    # The bot credentials are always scrubbed from log output.
    redact = dict(logging_config.get("redact", {}))
    redact.setdefault("enabled", True)
    redact.setdefault("patterns", ["VERIFICATION_BOT_TOKEN", "API_HASH"])
    logging_config["redact"] = redact

    level = os.getenv("LOG_LEVEL")
    if level:
        logging_config["level"] = level
    log_file = os.getenv("LOG_FILE")
    if log_file:
        file_cfg = dict(logging_config.get("file", {}))
        file_cfg.update({"enabled": True, "path": log_file})
        logging_config["file"] = file_cfg
    return logging_config


_CONFIG = _load_json_config()

# Credentials are validated lazily by client.build_client so that offline
# subcommands work without them.
BOT_TOKEN: Optional[str] = os.getenv("VERIFICATION_BOT_TOKEN")
API_ID: Optional[str] = os.getenv("API_ID")
API_HASH: Optional[str] = os.getenv("API_HASH")
SESSION_NAME = os.getenv("SESSION_NAME", "gatekeeper")

# Membership in this group is what makes a user eligible for verification.
GROUP_CHAT_ID = _int_env("GROUP_CHAT_ID", DEFAULT_GROUP_CHAT_ID)

WHITELIST_FILE = os.getenv("WHITELIST_FILE", "whitelist.txt")
FORBIDDEN_PATTERNS_FILE = os.getenv("FORBIDDEN_PATTERNS_FILE", "forbidden_patterns.txt")

# Bot notices are removed after this many seconds.
NOTICE_TTL_SECONDS = _float_env("NOTICE_TTL_SECONDS", 30.0)

# Outbound calls are tried three times, waiting RETRY_BASE_DELAY * attempt
# seconds between tries.
RETRY_BASE_DELAY = _float_env("RETRY_BASE_DELAY", 0.5)

LOGGING = _build_logging(_CONFIG)
