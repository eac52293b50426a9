"""
Configuration settings for the CEC traffic decoder.

Handles environment variables for the adapter process, handler registry
behaviour and logging.
"""

import os
import shlex
import logging
from typing import Optional, List
from dataclasses import dataclass, field


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    """Read an integer variable; unparseable values become 0 and fail validate()."""
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logging.getLogger(__name__).warning(f"Invalid integer for {name}: {value!r}")
        return 0


@dataclass
class ClientSettings:
    """Adapter process settings."""

    client: str = "cec-client"
    params: List[str] = field(default_factory=list)
    osd_name: Optional[str] = None

    @classmethod
    def from_env(cls) -> "ClientSettings":
        """Load client settings from environment variables."""
        return cls(
            client=os.getenv("CEC_CLIENT", "cec-client"),
            params=shlex.split(os.getenv("CEC_CLIENT_PARAMS", "")),
            osd_name=os.getenv("CEC_OSD_NAME") or None,
        )


@dataclass
class DecoderSettings:
    """Line handling settings."""

    # Evaluate every registered line handler instead of only the first one
    evaluate_all_handlers: bool = False
    chunk_size: int = 4096

    @classmethod
    def from_env(cls) -> "DecoderSettings":
        """Load decoder settings from environment variables."""
        return cls(
            evaluate_all_handlers=_env_flag("CEC_EVALUATE_ALL_HANDLERS"),
            chunk_size=_env_int("CEC_CHUNK_SIZE", 4096),
        )


@dataclass
class ApplicationSettings:
    """Main application settings container."""

    client: ClientSettings
    decoder: DecoderSettings
    log_level: str = "info"

    @classmethod
    def from_env(cls) -> "ApplicationSettings":
        """Load all settings from environment variables."""
        return cls(
            client=ClientSettings.from_env(),
            decoder=DecoderSettings.from_env(),
            log_level=os.getenv("LOG_LEVEL", "info").lower(),
        )

    def validate(self):
        """Validate configuration settings."""
        errors = []

        if not self.client.client:
            errors.append("Adapter client executable must not be empty")

        if self.client.osd_name is not None and not self.client.osd_name.isascii():
            errors.append(f"OSD name must be ASCII: {self.client.osd_name!r}")

        if self.decoder.chunk_size <= 0:
            errors.append(f"Invalid chunk size: {self.decoder.chunk_size}")

        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"Invalid log level: {self.log_level}")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

    def log_configuration(self):
        """Log current configuration."""
        logger = logging.getLogger(__name__)

        logger.info("=== Decoder Configuration ===")
        logger.info(f"Client: {self.client.client} {' '.join(self.client.params)}".rstrip())
        logger.info(f"OSD Name: {self.client.osd_name or '(adapter default)'}")
        logger.info(f"Evaluate All Handlers: {self.decoder.evaluate_all_handlers}")
        logger.info(f"Chunk Size: {self.decoder.chunk_size}")
        logger.info(f"Log Level: {self.log_level}")
        logger.info("=== End Configuration ===")


# Global settings instance
settings = ApplicationSettings.from_env()


def get_settings() -> ApplicationSettings:
    """Get the global settings instance."""
    return settings


def reload_settings() -> ApplicationSettings:
    """Reload settings from environment variables."""
    global settings
    settings = ApplicationSettings.from_env()
    return settings
