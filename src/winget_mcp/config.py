"""Configuration management."""
from dataclasses import dataclass
from pathlib import Path
import json
import logging
import os
import shutil

DEFAULT_CONFIG_PATH = "~/.config/winget-mcp/config.json"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Config:
    """Application configuration."""
    winget_path: str
    command_timeout: float
    # Text file of error signatures; None uses the bundled list
    error_signatures_path: Path | None
    accept_source_agreements: bool
    # Switch the Windows console to UTF-8 around each winget call
    force_utf8_console: bool
    default_source: str | None
    log_level: str

    @classmethod
    def load(cls, path: Path | str | None = None) -> "Config":
        """Load config from file and/or environment."""
        if path is not None:
            config_path = Path(path).expanduser()
        else:
            config_path = Path(DEFAULT_CONFIG_PATH).expanduser()

        data = {}
        if config_path.exists():
            with open(config_path, encoding="utf-8") as f:
                data = json.load(f)

        signatures_path = data.get("error_signatures_path") or os.environ.get("WINGET_ERROR_SIGNATURES")

        return cls(
            winget_path=data.get("winget_path") or os.environ.get("WINGET_PATH") or "winget",
            command_timeout=data.get("command_timeout", 60.0),
            error_signatures_path=Path(signatures_path).expanduser() if signatures_path else None,
            accept_source_agreements=data.get("accept_source_agreements", True),
            force_utf8_console=data.get("force_utf8_console", True),
            default_source=data.get("default_source"),
            log_level=(data.get("log_level") or os.environ.get("WINGET_MCP_LOG_LEVEL") or "INFO").upper(),
        )

    def validate(self, require_executable: bool = True) -> list[str]:
        """Return list of validation errors, empty if valid.

        Args:
            require_executable: Check that winget is on PATH. Decoding a
                saved capture does not need it.
        """
        errors = []
        if require_executable and shutil.which(self.winget_path) is None:
            errors.append(f"winget executable not found: {self.winget_path}")
        if self.error_signatures_path is not None and not self.error_signatures_path.exists():
            errors.append(f"Error signature file not found: {self.error_signatures_path}")
        if self.command_timeout <= 0:
            errors.append(f"command_timeout must be positive, got {self.command_timeout}")
        if self.log_level not in _LOG_LEVELS:
            errors.append(f"Invalid log_level: {self.log_level}. Must be one of {', '.join(_LOG_LEVELS)}")
        return errors

    def logging_level(self) -> int:
        """Numeric logging level, falling back to INFO for unknown names."""
        return getattr(logging, self.log_level, logging.INFO)
