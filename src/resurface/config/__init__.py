"""Configuration management for Resurface.

The YAML file only holds the values a user changed. Anything it leaves out
resolves to the defaults on ``ResurfaceConfig``, so new defaults reach
existing installs without a migration.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import ResurfaceConfig
from .resolver import assign_nested, env_to_overrides, flatten_for_env, resolve_with_precedence

DEFAULT_CONFIG_PATH = Path("~/.resurface/config.yaml")
_CONFIG_HEADER = "# Resurface settings. Keys left out use the built-in defaults.\n"


class ConfigManager:
    """Resolve the effective configuration and edit the user's overrides."""

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = env if env is not None else os.environ

    @property
    def config_path(self) -> Path:
        return self._config_path

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
    ) -> ResurfaceConfig:
        """Return defaults overlaid by the file, ``RESURFACE__`` variables and CLI values.

        Raises:
            ConfigError: If any layer is malformed or the result fails validation.
        """
        return resolve_with_precedence(
            defaults=ResurfaceConfig(),
            file_overrides=self.overrides(),
            env_overrides=env_to_overrides(self._env) if include_env else None,
            cli_overrides=cli_overrides,
        )

    def overrides(self) -> dict[str, Any]:
        """Return the overrides stored in the config file (empty when absent)."""
        text = self.read_text()
        try:
            raw = yaml.safe_load(text) if text else None
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse {self._config_path}: {exc}") from exc
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise ConfigError(f"{self._config_path} must contain a mapping at the top level.")
        return raw

    def set_value(self, key: str, raw_value: str) -> tuple[str, str]:
        """Store ``raw_value``, parsed as a YAML scalar, at dotted ``key``.

        The merged result is validated before anything is written.

        Returns:
            tuple[str, str]: File contents before and after the change.

        Raises:
            ConfigError: If the key, the value, or the resulting configuration
                is invalid.
        """
        segments = [segment.strip() for segment in key.split(".") if segment.strip()]
        if not segments:
            raise ConfigError("KEY must be a dotted path such as 'scoring.base_score'.")
        try:
            value = yaml.safe_load(raw_value)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Unable to parse value: {exc}") from exc

        before = self.read_text()
        data = self.overrides()
        assign_nested(data, segments, value)
        resolve_with_precedence(defaults=ResurfaceConfig(), file_overrides=data)

        after = _CONFIG_HEADER + yaml.safe_dump(data, sort_keys=True)
        if after != before:
            self._config_path.parent.mkdir(parents=True, exist_ok=True)
            self._config_path.write_text(after, encoding="utf-8")
        return before, after

    def read_text(self) -> str:
        if not self._config_path.exists():
            return ""
        try:
            return self._config_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigError(f"Unable to read {self._config_path}: {exc}") from exc


__all__ = [
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "ResurfaceConfig",
    "resolve_with_precedence",
    "flatten_for_env",
    "ConfigError",
]
