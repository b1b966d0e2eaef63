"""Load a launcher configuration file."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import ValidationError

from gvrun.config.models import LauncherConfig
from gvrun.errors import ConfigError

if TYPE_CHECKING:
    from pathlib import Path


class ConfigLoader:
    """Load and validate a YAML file into a :class:`LauncherConfig`."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> LauncherConfig:
        """Read YAML, interpolate env vars, and validate.

        Environment variables in the form ``${VAR}`` or ``$VAR`` are expanded
        using :func:`os.path.expandvars` before YAML parsing. An empty file
        yields the default configuration.

        Raises:
            ConfigError: On read errors, YAML parse errors or schema
                validation failures.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read {self._path}: {exc}") from exc

        expanded = os.path.expandvars(raw)

        try:
            data: Any = yaml.safe_load(expanded)
        except yaml.YAMLError as exc:
            raise ConfigError(f"YAML parse error: {exc}") from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("Launcher config must be a mapping")

        try:
            return LauncherConfig.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc
