"""
Runtime settings for the Formation Board application.

Settings default to the values in constants.py and can be overridden through
FORMATION_BOARD_* environment variables.
"""
import logging
import os
from dataclasses import dataclass, fields
from typing import Any, Dict

from .constants import (
    DEFAULT_AVATAR_DIR, DEFAULT_DATA_FILE, DEFAULT_HOST,
    DEFAULT_LOG_LEVEL, DEFAULT_PORT
)

logger = logging.getLogger(__name__)

ENV_PREFIX = "FORMATION_BOARD_"


@dataclass
class AppSettings:
    """Application settings for the web server and local collaborators."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    data_file: str = DEFAULT_DATA_FILE
    avatar_dir: str = DEFAULT_AVATAR_DIR
    log_level: str = DEFAULT_LOG_LEVEL
    secret_key: str = "dev"

    @classmethod
    def load_from_env(cls) -> "AppSettings":
        """
        Load settings, applying environment overrides where present.

        Values that cannot be converted to the field type are logged and the
        default is kept.

        Returns:
            AppSettings: Instance with overrides applied
        """
        instance = cls()
        for settings_field in fields(cls):
            env_var = ENV_PREFIX + settings_field.name.upper()
            env_value = os.getenv(env_var)
            if env_value is None:
                continue
            field_type = type(getattr(instance, settings_field.name))
            try:
                setattr(instance, settings_field.name, field_type(env_value))
            except ValueError as e:
                logger.warning("Could not convert %s: %s", env_var, e)
        return instance

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to a dictionary, hiding the secret key."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["secret_key"] = "***"
        return data
