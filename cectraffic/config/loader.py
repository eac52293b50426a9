"""
Configuration loader for decoder and adapter settings.

Allows users to override settings via YAML configuration files.
"""

import yaml
import shlex
import logging
from pathlib import Path
from typing import Dict, Optional, Any

from .settings import ApplicationSettings, get_settings

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Loads and applies custom configuration from YAML files."""

    @staticmethod
    def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to custom config file. If None, looks for:
                        1. cec_config.yaml in current directory
                        2. config/cec_config.yaml
                        3. ~/.cectraffic/cec_config.yaml
                        4. /etc/cectraffic/cec_config.yaml

        Returns:
            Configuration dictionary
        """
        search_paths = [
            Path("cec_config.yaml"),
            Path("config/cec_config.yaml"),
            Path.home() / ".cectraffic" / "cec_config.yaml",
            Path("/etc/cectraffic/cec_config.yaml"),
        ]

        if config_path:
            search_paths.insert(0, Path(config_path))

        for path in search_paths:
            if path.exists():
                try:
                    with open(path, "r") as f:
                        config = yaml.safe_load(f) or {}
                        logger.info(f"Loaded configuration from {path}")
                        return config
                except (OSError, yaml.YAMLError) as e:
                    logger.error(f"Failed to load config from {path}: {e}")

        logger.debug("No custom configuration file found, using defaults")
        return {}

    @staticmethod
    def apply_config(config: Dict[str, Any], app_settings: ApplicationSettings) -> None:
        """
        Apply custom configuration on top of the given settings.

        Args:
            config: Configuration dictionary from YAML
            app_settings: Settings instance to update in place
        """
        if "client" in config:
            if isinstance(config["client"], str) and config["client"]:
                app_settings.client.client = config["client"]
            else:
                logger.warning(f"Invalid client executable: {config['client']!r}")

        if "params" in config:
            params = config["params"]
            if isinstance(params, str):
                app_settings.client.params = shlex.split(params)
            elif isinstance(params, list):
                app_settings.client.params = [str(p) for p in params]
            else:
                logger.warning(f"Invalid client params: {params!r}")

        if "osd_name" in config:
            osd_name = config["osd_name"]
            if osd_name is None or isinstance(osd_name, str):
                app_settings.client.osd_name = osd_name or None
            else:
                logger.warning(f"Invalid OSD name: {osd_name!r}")

        if "evaluate_all_handlers" in config:
            if isinstance(config["evaluate_all_handlers"], bool):
                app_settings.decoder.evaluate_all_handlers = config["evaluate_all_handlers"]
            else:
                logger.warning(
                    f"Invalid evaluate_all_handlers value: {config['evaluate_all_handlers']!r}"
                )

        if "chunk_size" in config:
            try:
                app_settings.decoder.chunk_size = int(config["chunk_size"])
            except (ValueError, TypeError) as e:
                logger.warning(f"Invalid chunk size {config['chunk_size']!r}: {e}")

        if "log_level" in config:
            app_settings.log_level = str(config["log_level"]).lower()

        logger.debug("Custom configuration applied")


def load_and_apply_config(
    config_path: Optional[str] = None,
    app_settings: Optional[ApplicationSettings] = None,
) -> ApplicationSettings:
    """
    Load and apply configuration in one step.

    Args:
        config_path: Optional path to custom config file
        app_settings: Settings to update (defaults to the global instance)

    Returns:
        The updated settings instance
    """
    if app_settings is None:
        app_settings = get_settings()

    loader = ConfigLoader()
    config = loader.load_config(config_path)
    if config:
        loader.apply_config(config, app_settings)
    return app_settings
