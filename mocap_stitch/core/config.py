"""Configuration management system"""

import copy
from pathlib import Path
from typing import Any, Optional
import yaml


DEFAULT_CONFIG = {
    "app": {
        "name": "mocap-stitch",
        "version": "0.1.0",
        "log_level": "INFO",
        "log_file": None,
        "log_dir": "logs",
    },
    "parser": {
        "strict": True,
    },
    "stitching": {
        "transition_duration": 0.5,
        "blend_frames": None,
        "frame_time_tolerance": 1e-6,
    },
    "export": {
        "output_dir": "./output",
        "precision": 6,
        "write_json": True,
    },
}


def _deep_merge(base: dict, override: dict) -> dict:
    """Merge override into a copy of base, recursing into nested dicts."""
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Config:
    """Configuration manager with dot-notation access.

    Each instance holds its own settings; there is no shared global state.
    Values from config.yaml are layered over DEFAULT_CONFIG.
    """

    def __init__(self, config_path: Optional[str] = None):
        self._config_path: Optional[str] = None

        if config_path is None:
            config_path = self._find_config()

        if config_path is None:
            self._config = copy.deepcopy(DEFAULT_CONFIG)
        else:
            self._load(config_path)

    @classmethod
    def from_dict(cls, values: dict) -> "Config":
        """Build a config from an in-memory dict layered over the defaults."""
        config = cls.__new__(cls)
        config._config_path = None
        config._config = _deep_merge(DEFAULT_CONFIG, values)
        return config

    def _find_config(self) -> Optional[str]:
        """Find config.yaml in project root."""
        current = Path(__file__).parent
        for _ in range(5):
            config_file = current / "config.yaml"
            if config_file.exists():
                return str(config_file)
            current = current.parent

        return None

    def _load(self, config_path: str) -> None:
        """Load configuration from YAML file."""
        if not Path(config_path).exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "r") as f:
            loaded = yaml.safe_load(f) or {}
        self._config = _deep_merge(DEFAULT_CONFIG, loaded)
        self._config_path = config_path

    def reload(self) -> None:
        """Reload configuration from file."""
        if self._config_path is not None:
            self._load(self._config_path)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get config value using dot notation.

        Example:
            config.get("stitching.transition_duration", 0.5)
            config.get("export.output_dir")
        """
        keys = key.split(".")
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """Set config value using dot notation (runtime only, not persisted)."""
        keys = key.split(".")
        config = self._config

        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    def save(self, path: Optional[str] = None) -> None:
        """Save current configuration to file."""
        save_path = path or self._config_path
        if save_path is None:
            raise ValueError("No path given and config was not loaded from a file")
        with open(save_path, "w") as f:
            yaml.dump(self._config, f, default_flow_style=False)

    @property
    def path(self) -> Optional[str]:
        return self._config_path

    @property
    def app(self) -> dict:
        return self._config.get("app", {})

    @property
    def parser(self) -> dict:
        return self._config.get("parser", {})

    @property
    def stitching(self) -> dict:
        return self._config.get("stitching", {})

    @property
    def export(self) -> dict:
        return self._config.get("export", {})

    def __repr__(self) -> str:
        return f"Config({self._config_path or '<defaults>'})"
