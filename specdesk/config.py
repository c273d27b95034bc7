"""SpecDesk Configuration."""
import os
from pathlib import Path


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


# Per-user state directory (project registry + desktop preferences)
CONFIG_DIR = Path(os.getenv("SPECDESK_HOME", str(Path.home() / ".lean-spec"))).expanduser()
PROJECTS_JSON = "projects.json"
PROJECTS_YAML = "projects.yaml"
SETTINGS_FILE = "desktop.yaml"

# Logging
LOG_LEVEL = os.getenv("SPECDESK_LOG_LEVEL", "INFO").upper()

# Registry discovery
DISCOVERY_MAX_DEPTH = _env_int("SPECDESK_DISCOVERY_MAX_DEPTH", 3)
DISCOVERY_LIMIT = _env_int("SPECDESK_DISCOVERY_LIMIT", 50)

# Server settings
HOST = os.getenv("SPECDESK_HOST", "127.0.0.1")
PORT = _env_int("SPECDESK_PORT", 3333)
RELOAD = _env_bool("SPECDESK_RELOAD", False)

# CORS
FRONTEND_ORIGIN = os.getenv("SPECDESK_FRONTEND_ORIGIN", "http://localhost:5173")
