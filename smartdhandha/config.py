"""
Configuration management for SmartDhandha reports.

Loads settings from environment variables with sensible defaults.
"""
from __future__ import annotations
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


def _parse_snapshot_path() -> Optional[Path]:
    """Parse SD_SNAPSHOT_PATH environment variable to a Path."""
    env_val = os.getenv("SD_SNAPSHOT_PATH")
    if not env_val or not env_val.strip():
        return None
    return Path(env_val.strip()).expanduser()


@dataclass
class AppConfig:
    """Configuration settings for the reporting CLI."""

    # Snapshot of the backend collections (JSON export)
    snapshot_path: Optional[Path] = field(default_factory=_parse_snapshot_path)

    # Presentation
    currency_symbol: str = field(
        default_factory=lambda: os.getenv("SD_CURRENCY_SYMBOL", "₹")
    )

    # Warn when stored invoice totals disagree with their items
    check_totals: bool = field(
        default_factory=lambda: os.getenv("SD_CHECK_TOTALS", "true").lower() == "true"
    )

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_file: Optional[str] = field(
        default_factory=lambda: os.getenv("SD_LOG_FILE")
    )

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create config from environment variables."""
        return cls()

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []
        if self.snapshot_path is None:
            errors.append("SD_SNAPSHOT_PATH is required (or pass --data)")
        elif not self.snapshot_path.exists():
            errors.append(f"Snapshot file not found: {self.snapshot_path}")
        if self.log_level.upper() not in ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"Unknown LOG_LEVEL: {self.log_level}")
        return errors


# Default configuration instance
default_config = AppConfig.from_env()
