"""Summary: Application configuration for Quiet Quotes.

Importance: Centralizes environment, .env, and config defaults for consistent behavior.
Alternatives: Use a dedicated settings library like Pydantic Settings.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from dataclasses import dataclass

from quietquotes.storage.sqlite_store import default_store_path


@dataclass(frozen=True)
class AppConfig:
    """Summary: Holds configuration values for storage, monitoring, and the API.

    Importance: Ensures all services derive settings from a single source of truth.
    Alternatives: Store settings in a shared config file and parse at startup.
    """

    db_path: str
    quotes_path: str
    min_text_length: int
    max_blocks: int
    scan_interval_seconds: float
    debounce_seconds: float
    api_host: str
    api_port: int
    api_key: str
    log_level: str

    @staticmethod
    def from_env() -> "AppConfig":
        """Summary: Build configuration from defaults, .env, and environment.

        Importance: Keeps all variables defined in config defaults while allowing overrides.
        Alternatives: Parse only environment variables without a defaults file.
        """

        defaults = load_defaults(Path("config") / "defaults.json")
        load_dotenv(Path(".env"))
        return AppConfig(
            db_path=os.getenv("QUIETQUOTES_DB_PATH") or defaults["db_path"] or default_store_path(),
            quotes_path=os.getenv("QUIETQUOTES_QUOTES_PATH", defaults["quotes_path"]),
            min_text_length=int(
                os.getenv("QUIETQUOTES_MIN_TEXT_LENGTH", defaults["min_text_length"])
            ),
            max_blocks=int(os.getenv("QUIETQUOTES_MAX_BLOCKS", defaults["max_blocks"])),
            scan_interval_seconds=float(
                os.getenv("QUIETQUOTES_SCAN_INTERVAL_SECONDS", defaults["scan_interval_seconds"])
            ),
            debounce_seconds=float(
                os.getenv("QUIETQUOTES_DEBOUNCE_SECONDS", defaults["debounce_seconds"])
            ),
            api_host=os.getenv("QUIETQUOTES_API_HOST", defaults["api_host"]),
            api_port=int(os.getenv("QUIETQUOTES_API_PORT", defaults["api_port"])),
            api_key=os.getenv("QUIETQUOTES_API_KEY", defaults["api_key"]),
            log_level=os.getenv("QUIETQUOTES_LOG_LEVEL", defaults["log_level"]).upper(),
        )


def load_defaults(path: Path) -> dict[str, str]:
    """Summary: Load configuration defaults from JSON.

    Importance: Ensures all variables exist in a single config file.
    Alternatives: Inline defaults in the AppConfig initializer.
    """

    if not path.exists():
        raise FileNotFoundError(f"Defaults file not found: {path}")
    return json.loads(path.read_text(encoding="utf-8"))


def load_dotenv(path: Path) -> None:
    """Summary: Load key-value pairs from a .env file into the environment.

    Importance: Keeps local overrides out of code while supporting local workflows.
    Alternatives: Use python-dotenv or OS-specific secret stores.
    """

    if not path.exists():
        return
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())
