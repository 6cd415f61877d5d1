"""Application configuration for rego-loader.

Defines configuration models for policy source collection, remote fetching
and logging. The config file is optional: when it does not exist, defaults
are used. It is stored at the OS-appropriate location (via platformdirs).

Example usage:
    # Load from config file
    config = LoaderConfig.load_from_files(config_path)

    # Save new configuration
    config.save_to_file(config_path)
"""

import json
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

from rego_loader.constants import (
    CONFIG_DIR,
    CONFIG_FILENAME,
    DEFAULT_EXCLUDE_PATTERNS,
    DEFAULT_REGO_EXTENSIONS,
    DEFAULT_REMOTE_TIMEOUT_SECONDS,
    MAX_REMOTE_TIMEOUT_SECONDS,
    MIN_REMOTE_TIMEOUT_SECONDS,
)


def get_config_path() -> Path:
    """Get the default config file path.

    Returns:
        Path to rego_loader_config.json in the OS config directory.
    """
    return Path(CONFIG_DIR) / CONFIG_FILENAME


# =============================================================================
# Logging Configuration
# =============================================================================


class LoggingConfig(BaseModel):
    """Logging configuration settings.

    Attributes:
        log_level: Minimum level written. DEBUG adds one event per file.
        log_file: JSON lines file to append to. If None, logs go to stderr.
    """

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    log_file: str | None = None


# =============================================================================
# Policy Sources
# =============================================================================


class RemoteConfig(BaseModel):
    """Remote policy fetch configuration.

    Attributes:
        timeout: HTTP timeout in seconds (1-300).
    """

    timeout: int = Field(
        default=DEFAULT_REMOTE_TIMEOUT_SECONDS,
        ge=MIN_REMOTE_TIMEOUT_SECONDS,
        le=MAX_REMOTE_TIMEOUT_SECONDS,
    )


class LoaderConfig(BaseModel):
    """Main application configuration for rego-loader.

    Attributes:
        extensions: File suffixes collected when walking directories.
        exclude_patterns: fnmatch patterns for file names to skip.
        default_action: Action used by the CLI when --action is not given.
            Empty string selects every policy.
        logging: Logging configuration.
        remote: Remote fetch configuration.
    """

    extensions: list[str] = Field(default_factory=lambda: list(DEFAULT_REGO_EXTENSIONS))
    exclude_patterns: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))
    default_action: str = Field(default="", pattern=r"^[a-z]*$")
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    remote: RemoteConfig = Field(default_factory=RemoteConfig)

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to JSON file.

        Creates parent directories if they don't exist.

        Args:
            config_path: Path where the config should be saved.
        """
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self.model_dump(), f, indent=2)
            f.write("\n")

    @classmethod
    def load_from_files(cls, config_path: Path | None = None) -> "LoaderConfig":
        """Load configuration from JSON file.

        Args:
            config_path: Path to the config file. If None, uses the default
                location. A missing file yields the default configuration.

        Returns:
            LoaderConfig instance with loaded configuration.

        Raises:
            ValueError: If config file is invalid JSON or fails validation.
        """
        path = config_path or get_config_path()
        if not path.exists():
            return cls()

        try:
            with path.open(encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in config file {path}: {e}") from e
        except OSError as e:
            raise ValueError(f"Could not read config file {path}: {e}") from e

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            errors = []
            for error in e.errors():
                loc = ".".join(str(x) for x in error["loc"])
                msg = error["msg"]
                errors.append(f"  - {loc}: {msg}")

            raise ValueError(
                f"Invalid configuration in {path}:\n"
                + "\n".join(errors)
                + "\n\nEdit the config file or delete it to use defaults."
            ) from e
