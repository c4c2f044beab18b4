import os
import shutil
import tempfile
from pathlib import Path
from typing import Dict, Optional

import yaml
from dotenv import load_dotenv

from fastgpt.config.models import ClientConfig, Settings
from fastgpt.utils.errors import ConfigError, ConfigMissingError
from fastgpt.utils.logging import get_logger

logger = get_logger(__name__)

API_KEY_ENV = "FASTGPT_API_KEY"
CONFIG_DIR_ENV = "FASTGPT_CONFIG_DIR"


class ConfigManager:
    """Manages settings from YAML and environment variables"""

    def __init__(self):
        env_dir = os.getenv(CONFIG_DIR_ENV)
        self.config_dir = Path(env_dir) if env_dir else Path.home() / ".fastgpt"
        self.config_dir.mkdir(parents=True, exist_ok=True)

        # Load environment variables
        load_dotenv()

        self.config_path = self.config_dir / "config.yaml"

        self.settings = Settings(**self._load_config_file())
        logger.debug(f"Settings loaded from {self.config_path}")

    def _load_config_file(self) -> Dict:
        """Load settings from YAML file, empty when the file is absent"""
        if not self.config_path.exists():
            return {}
        try:
            with open(self.config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to read config file {self.config_path}: {e}") from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {self.config_path} must contain a mapping")
        return data

    def get_api_key(self) -> Optional[str]:
        """Get API key, preferring the environment over the stored value"""
        return os.getenv(API_KEY_ENV) or self.settings.api_key

    def set_api_key(self, api_key: str) -> None:
        self.settings.api_key = api_key
        self.save()

    def reset_api_key(self) -> None:
        self.settings.api_key = None
        self.save()

    def toggle_references(self) -> bool:
        """Flip the persisted references preference and return the new value"""
        self.settings.show_references = not self.settings.show_references
        self.save()
        return self.settings.show_references

    def resolve(self, cache: bool = True, json_mode: bool = False) -> ClientConfig:
        """Build the session configuration.

        Raises:
            ConfigMissingError: No API key is stored or set in the environment.
        """
        api_key = self.get_api_key()
        if not api_key:
            raise ConfigMissingError()
        return ClientConfig(
            api_key=api_key,
            cache=cache,
            json_mode=json_mode,
            show_references=self.settings.show_references,
        )

    def save(self):
        """Save current settings to file atomically"""
        fd, temp_path = tempfile.mkstemp(
            dir=str(self.config_path.parent), prefix=".config-", suffix=".yaml"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                yaml.safe_dump(self.settings.model_dump(), f, default_flow_style=False)
            shutil.move(temp_path, str(self.config_path))
        except Exception:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise
        logger.info(f"Config saved to {self.config_path}")


def mask_api_key(api_key: str) -> str:
    """Mask a key for display, keeping the first and last four characters"""
    if len(api_key) > 8:
        return f"{api_key[:4]}...{api_key[-4:]}"
    return "*" * len(api_key)
