"""Configuration module for wwtt."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

from wwtt import __version__
from wwtt.exceptions import ConfigurationError

# Load environment variables from the project root .env file.
# Anchored to __file__ so it works regardless of the process CWD.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

# User-level config, shared by every working directory
_USER_ENV = Path.home() / ".wwtt" / ".env"
load_dotenv(_USER_ENV)


logger = logging.getLogger(__name__)

DEFAULT_LOG_DIR = Path.home() / ".wwtt" / "logs"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class WwttConfig(BaseModel):
    """Configuration for wwtt."""

    # Base directory that relative paths are resolved against
    base_dir: Path = Field(
        default_factory=lambda: Path(os.getenv("WWTT_BASE_DIR", "."))
    )
    # The single notes file
    storage_path: Path = Field(
        default_factory=lambda: Path(os.getenv("WWTT_STORAGE_PATH", "wwtt.json"))
    )
    # When True, a missing notes file is initialized empty at startup
    # instead of aborting the process.
    create_if_missing: bool = Field(
        default_factory=lambda: _env_flag("WWTT_CREATE_IF_MISSING", "true")
    )
    # Logging configuration
    log_dir: Path = Field(
        default_factory=lambda: Path(os.getenv("WWTT_LOG_DIR", str(DEFAULT_LOG_DIR)))
    )
    log_level: str = Field(
        default_factory=lambda: os.getenv("WWTT_LOG_LEVEL", "INFO").upper()
    )
    # Server configuration
    server_name: str = Field(default=os.getenv("WWTT_SERVER_NAME", "wwtt"))
    server_version: str = Field(default=__version__)

    @model_validator(mode="after")
    def _validate_paths_and_levels(self) -> "WwttConfig":
        """Reject settings that cannot work."""
        if not str(self.storage_path).strip() or self.storage_path == Path("."):
            raise ValueError("storage_path must name a file")
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {', '.join(_LOG_LEVELS)}, "
                f"got {self.log_level!r}"
            )
        return self

    def get_absolute_path(self, path: Path) -> Path:
        """Convert a relative path to an absolute path based on base_dir."""
        if path.is_absolute():
            return path
        return self.base_dir / path

    def get_storage_path(self) -> Path:
        """Get the absolute path to the notes file.

        Raises:
            ConfigurationError: If the configured path is an existing directory.
        """
        storage_path = self.get_absolute_path(self.storage_path)
        if storage_path.is_dir():
            raise ConfigurationError(
                f"Storage path {storage_path} is a directory",
                config_key="storage_path",
            )
        return storage_path

    def get_log_level(self) -> int:
        """Get the configured log level as a logging constant."""
        return getattr(logging, self.log_level.upper(), logging.INFO)

    def get_log_dir(self) -> Path:
        """Get the absolute log directory."""
        return self.get_absolute_path(self.log_dir)


# Create a global config instance
config = WwttConfig()
