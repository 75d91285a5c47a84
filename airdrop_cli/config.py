"""
CLI Configuration

Configuration management for the hs-airdrop CLI. Supports environment
variables and JSON or YAML configuration files.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from airdrop.config import RuntimeConfig


# Environment variable prefix
ENV_PREFIX = "AIRDROP_"

MANIFEST_NAME = "manifest.json"


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Datasets, node and proof settings
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    @property
    def manifest_path(self) -> Path:
        """Configured manifest, or ``manifest.json`` in the cache directory."""
        if self.runtime.datasets.manifest_path:
            return Path(self.runtime.datasets.manifest_path).expanduser()
        return Path(self.runtime.datasets.cache_dir).expanduser() / MANIFEST_NAME


def _read_data(path: Path) -> dict[str, Any]:
    with open(path, "r") as f:
        if path.suffix.lower() in (".yaml", ".yml"):
            import yaml
            data = yaml.safe_load(f)
        else:
            data = json.load(f)
    return data or {}


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON or YAML file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    data = _read_data(path)

    config = CLIConfig(runtime=RuntimeConfig.from_dict(data))
    config.log_level = data.get("log_level", config.log_level)
    config.log_file = data.get("log_file", config.log_file)

    return config


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration
    """
    config = CLIConfig()

    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        default_paths = [
            Path.cwd() / "hs-airdrop.json",
            Path.cwd() / ".hs-airdrop.json",
            Path.home() / ".config" / "hs-airdrop" / "config.json",
        ]
        for default_path in default_paths:
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    config.runtime = config.runtime.with_env_overrides()

    if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config.log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "INFO")
    if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config.log_file = os.getenv(f"{ENV_PREFIX}LOG_FILE")

    return config


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """{
  "log_level": "INFO",
  "log_file": null,
  "network": {
    "network": "main",
    "rpc_host": "127.0.0.1",
    "api_key": null
  },
  "datasets": {
    "cache_dir": "~/.hs-tree-data",
    "base_url": "https://github.com/handshake-org/hs-tree-data/raw/master",
    "manifest_path": null
  },
  "http": {
    "timeout": 600
  },
  "pipeline": {
    "bare": false
  }
}
"""
