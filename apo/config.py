"""Configuration loading and saving.

Settings come from a JSON file (~/.config/apo/config.json by default) and are
overridden by AZURE_DEVOPS_* environment variables.
"""

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

from .exceptions import ConfigError

DEFAULT_API_URL = "https://dev.azure.com"
DEFAULT_API_VERSION = "7.1"
DEFAULT_TIMEOUT_SECONDS = 30.0

CONFIG_PATH_ENV = "APO_CONFIG"

ENV_OVERRIDES = {
    "organization": "AZURE_DEVOPS_ORG",
    "project": "AZURE_DEVOPS_PROJECT",
    "pat": "AZURE_DEVOPS_PAT",
    "api_url": "AZURE_DEVOPS_URL",
    "api_version": "AZURE_DEVOPS_API_VERSION",
}


def get_config_dir() -> Path:
    """Directory holding the config file and the log file."""
    return get_config_path().parent


def get_config_path() -> Path:
    """Path of the config file, honouring APO_CONFIG."""
    override = os.environ.get(CONFIG_PATH_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "apo" / "config.json"


@dataclass
class Config:
    """Connection settings for an Azure DevOps organization and project."""

    organization: str = ""
    project: str = ""
    pat: str = ""
    api_url: str = DEFAULT_API_URL
    api_version: str = DEFAULT_API_VERSION

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Config":
        """Read the config file, then apply environment overrides.

        Args:
            path: Config file to read (defaults to get_config_path())

        Returns:
            The resolved configuration. A missing file yields defaults.

        Raises:
            ConfigError: If the file exists but is not a JSON object
        """
        config_path = path or get_config_path()
        cfg = cls()

        if config_path.is_file():
            try:
                data = json.loads(config_path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                raise ConfigError(f"parsing config file {config_path}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(f"parsing config file {config_path}: expected a JSON object")
            for name in ENV_OVERRIDES:
                value = data.get(name)
                if isinstance(value, str):
                    setattr(cfg, name, value)

        for name, env_var in ENV_OVERRIDES.items():
            value = os.environ.get(env_var)
            if value:
                setattr(cfg, name, value)

        if not cfg.api_url:
            cfg.api_url = DEFAULT_API_URL
        if not cfg.api_version:
            cfg.api_version = DEFAULT_API_VERSION

        return cfg

    def save(self, path: Optional[Path] = None) -> Path:
        """Write the configuration as JSON, readable only by the owner.

        Returns:
            The path written to
        """
        config_path = path or get_config_path()
        config_path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        config_path.write_text(json.dumps(asdict(self), indent=2) + "\n", encoding="utf-8")
        config_path.chmod(0o600)
        return config_path

    def validate(self) -> None:
        """Check that the organization and access token are set.

        Raises:
            ConfigError: If a required setting is missing
        """
        if not self.organization:
            raise ConfigError("organization is required")
        if not self.pat:
            raise ConfigError("personal access token (PAT) is required")

    def validate_with_project(self) -> None:
        """Like validate(), but also require a project."""
        self.validate()
        if not self.project:
            raise ConfigError("project is required")
