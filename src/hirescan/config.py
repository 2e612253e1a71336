"""Runtime settings.

Settings come from environment variables, optionally seeded from a .env
file at the project root:

    HIRESCAN_CONFIG_DIR   directory holding skill_catalog.json (default: config/)
    HIRESCAN_DATA_DIR     directory for the database and event log (default: data/)
    HIRESCAN_DB_TIMEOUT   SQLite busy timeout in seconds (default: 5)
    HIRESCAN_LOG_LEVEL    logging level name (default: INFO)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv


ROOT = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG_DIR = ROOT / "config"
DEFAULT_DATA_DIR = ROOT / "data"

DATABASE_FILENAME = "hirescan.db"
EVENT_LOG_FILENAME = "events.jsonl"


@dataclass(frozen=True)
class ScanSettings:
    config_dir: Path = DEFAULT_CONFIG_DIR
    data_dir: Path = DEFAULT_DATA_DIR
    db_timeout_seconds: float = 5.0
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.db_timeout_seconds <= 0:
            raise ValueError(
                f"db_timeout_seconds must be > 0, got {self.db_timeout_seconds}"
            )
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unknown log level: '{self.log_level}'")

    @property
    def database_path(self) -> Path:
        return self.data_dir / DATABASE_FILENAME

    @property
    def event_log_path(self) -> Path:
        return self.data_dir / EVENT_LOG_FILENAME

    @classmethod
    def from_env(
        cls,
        env_file: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> ScanSettings:
        """Build settings from the environment.

        Args:
            env_file: .env file to load first (default: ROOT/.env). Values
                already present in the process environment win.
            environ: Mapping to read instead of os.environ (tests).

        Raises:
            ValueError: If a value is malformed.
        """
        if environ is None:
            load_dotenv(env_file or ROOT / ".env")
            environ = os.environ

        timeout_raw = environ.get("HIRESCAN_DB_TIMEOUT", "5")
        try:
            timeout = float(timeout_raw)
        except ValueError:
            raise ValueError(
                f"HIRESCAN_DB_TIMEOUT must be a number, got '{timeout_raw}'"
            ) from None

        return cls(
            config_dir=Path(environ.get("HIRESCAN_CONFIG_DIR", DEFAULT_CONFIG_DIR)),
            data_dir=Path(environ.get("HIRESCAN_DATA_DIR", DEFAULT_DATA_DIR)),
            db_timeout_seconds=timeout,
            log_level=environ.get("HIRESCAN_LOG_LEVEL", "INFO").upper(),
        )
