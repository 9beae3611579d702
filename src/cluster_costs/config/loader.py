"""Configuration loader for Cluster Costs."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

import yaml

from cluster_costs.config.schema import Config


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _find_config_dir() -> Path:
    """Find the config directory, searching up from current directory."""
    # Check for CONFIG_DIR environment variable first
    if config_dir := os.environ.get("CONFIG_DIR"):
        return Path(config_dir)

    # Search up from current directory
    current = Path.cwd()
    while current != current.parent:
        config_path = current / "config"
        if config_path.is_dir():
            return config_path
        current = current.parent

    # Fall back to ./config
    return Path("config")


def load_config(
    config_path: str | Path | None = None,
    environment: str | None = None,
) -> Config:
    """
    Load configuration from YAML files.

    Loads config.yaml as base, then merges environment-specific overrides
    (e.g., config.dev.yaml, config.prod.yaml), then environment variables.

    Args:
        config_path: Path to config directory. If None, searches for config/ directory.
        environment: Environment name (dev, staging, prod). If None, uses CONFIG_ENV
                    environment variable or defaults to 'dev'.

    Returns:
        Config: Validated configuration object.

    Raises:
        ValueError: If an override or the merged configuration is invalid.
        yaml.YAMLError: If a config file is not valid YAML.
    """
    config_dir = Path(config_path) if config_path else _find_config_dir()
    environment = environment or os.environ.get("CONFIG_ENV", "dev")

    # Load base config
    base_config_path = config_dir / "config.yaml"
    config_data: dict = {}

    if base_config_path.exists():
        with open(base_config_path) as f:
            config_data = yaml.safe_load(f) or {}

    # Load environment-specific overrides
    env_config_path = config_dir / f"config.{environment}.yaml"
    if env_config_path.exists():
        with open(env_config_path) as f:
            env_data = yaml.safe_load(f) or {}
            config_data = _deep_merge(config_data, env_data)

    # Override with environment variables
    config_data = _apply_env_overrides(config_data)

    # Set environment in config
    config_data["environment"] = environment

    return Config(**config_data)


def _apply_env_overrides(config_data: dict) -> dict:
    """Apply environment variable overrides to configuration."""
    # Overrides via environment variables
    env_mappings = {
        "PROMETHEUS_URL": ("prometheus", "url"),
        "CLUSTER_ID": ("cluster", "default_cluster_id"),
        "CLOUD_PROVIDER": ("provider", "name"),
        "LOG_LEVEL": ("logging", "level"),
        "MAX_WORKERS": ("aggregation", "max_workers"),
    }

    for env_var, path in env_mappings.items():
        value = os.environ.get(env_var)
        if value is None:
            continue

        # Navigate to the nested key and set the value
        current = config_data
        for key in path[:-1]:
            current = current.setdefault(key, {})

        # Convert types as needed
        final_key = path[-1]
        if final_key == "max_workers":
            try:
                current[final_key] = int(value)
            except ValueError as e:
                raise ValueError(f"{env_var} must be an integer, got {value!r}") from e
        elif final_key == "level":
            current[final_key] = value.upper()
        else:
            current[final_key] = value

    return config_data


@lru_cache(maxsize=1)
def get_cached_config() -> Config:
    """
    Get cached configuration singleton.

    Useful for long-running callers to avoid re-loading config on every request.
    """
    return load_config()
