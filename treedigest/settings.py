"""SettingsLoader — layered defaults, JSON config file and environment."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from treedigest.config import DEFAULT_CONFIG_PATH, DEFAULT_HASH_ALGO, DEFAULT_SQUASH_VERSION

logger = logging.getLogger(__name__)

CONFIG_ENV_KEY = "TREEDIGEST_CONFIG"

# All known configuration keys with defaults
_CONFIG_KEYS: dict[str, dict[str, Any]] = {
    "TREEDIGEST_HASH_ALGO": {"default": DEFAULT_HASH_ALGO, "description": "Hash algorithm"},
    "TREEDIGEST_SQUASH_VERSION": {
        "default": str(DEFAULT_SQUASH_VERSION),
        "description": "Squash folding version (1 or 2)",
    },
    "TREEDIGEST_LOG_LEVEL": {"default": "WARNING", "description": "Logging level"},
    CONFIG_ENV_KEY: {"default": str(DEFAULT_CONFIG_PATH), "description": "JSON config file"},
}


def config_keys() -> list[str]:
    return list(_CONFIG_KEYS)


class SettingsLoader:
    """Resolve treedigest settings.

    Parameters
    ----------
    config_path:
        Explicit JSON config file; overrides ``TREEDIGEST_CONFIG``.
    environ:
        Environment mapping, ``os.environ`` by default.
    """

    def __init__(
        self,
        config_path: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.config_path = Path(config_path) if config_path else None
        self.environ = os.environ if environ is None else environ

    def resolve_config_path(self) -> Path:
        if self.config_path is not None:
            return self.config_path.expanduser()
        raw = self.environ.get(CONFIG_ENV_KEY) or _CONFIG_KEYS[CONFIG_ENV_KEY]["default"]
        return Path(raw).expanduser()

    def load_settings(self) -> dict[str, str]:
        """Load merged settings: defaults -> config file -> env vars.

        Returns a flat dict of string values.
        """
        settings: dict[str, str] = {}

        # 1. Defaults
        for key, info in _CONFIG_KEYS.items():
            settings[key] = str(info["default"])

        # 2. JSON config file
        config_file = self.resolve_config_path()
        settings[CONFIG_ENV_KEY] = str(config_file)
        if config_file.is_file():
            try:
                data = json.loads(config_file.read_text(encoding="utf-8"))
                if not isinstance(data, dict):
                    raise ValueError("config root must be an object")
                for k, v in data.items():
                    settings[k] = str(v)
            except (json.JSONDecodeError, ValueError, OSError):
                logger.debug("Could not read %s", config_file, exc_info=True)

        # 3. Environment variables override all
        for key in _CONFIG_KEYS:
            env_val = self.environ.get(key)
            if env_val is not None and key != CONFIG_ENV_KEY:
                settings[key] = env_val

        return settings

    def generate_template(self, path: str | Path) -> Path:
        """Write an example JSON config listing every key with its default.

        Returns the path to the generated file.
        """
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        data = {
            key: info["default"]
            for key, info in _CONFIG_KEYS.items()
            if key != CONFIG_ENV_KEY
        }
        out.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        logger.info("Config template written: %s", out)
        return out
