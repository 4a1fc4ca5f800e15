import json
import os
from pathlib import Path
from typing import Any, Dict

# Package defaults (bundled with code)
PACKAGE_CONFIG_DIR = Path(__file__).parent / "defaults"

# User configs (in project root, gitignored)
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
USER_CONFIG_DIR = PROJECT_ROOT / "config"

# Environment variable -> app.json key
ENV_OVERRIDES = {
    "FINANCE_TRACKER_DB": "database_path",
    "FINANCE_TRACKER_LOG_LEVEL": "log_level",
}


class ConfigLoader:
    """Load configuration with user overrides"""

    @staticmethod
    def load_config(config_name: str, layered: bool = False) -> Dict[str, Any]:
        """
        Load config with fallback: user config -> default config

        Args:
            config_name: Name of the config file (e.g., 'app.json')
            layered: Start from the default config and update it with the
                user config's keys, instead of using one file or the other

        Raises:
            FileNotFoundError: If no config file was found

        Returns:
            Parsed JSON configuration
        """
        user_config_path = USER_CONFIG_DIR / config_name
        default_config_path = PACKAGE_CONFIG_DIR / config_name
        paths = [p for p in (default_config_path, user_config_path) if p.exists()]

        if not paths:
            raise FileNotFoundError(
                f"Config file '{config_name}' not found in:\n"
                f" - {user_config_path}\n"
                f" - {default_config_path}"
            )
        if not layered:
            paths = paths[-1:]

        config: Dict[str, Any] = {}
        for path in paths:
            with open(path) as f:
                config.update(json.load(f))
        return config

    @staticmethod
    def load_app_config() -> Dict[str, Any]:
        """
        Load application settings, letting environment variables win.

        User config keys are layered over the packaged defaults, so a user
        file only needs the keys it changes.
        """
        config = ConfigLoader.load_config("app.json", layered=True)

        for env_var, key in ENV_OVERRIDES.items():
            value = os.getenv(env_var)
            if value:
                config[key] = value

        return config
