"""
Shell configuration for kumi.

Settings come from three layers, later layers winning:

1. Defaults on :class:`ShellConfig`
2. The ``[shell]`` table of a ``kumi.toml`` file
3. Environment variables ``KUMI_PROMPT`` and ``KUMI_LOG_LEVEL``

Usage:
    from kumi.core.config import load_config

    config = load_config()                  # ./kumi.toml if present
    config = load_config(Path("kumi.toml")) # explicit file, must exist
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, TypeVar

from kumi.core.errors import ConfigError

logger = logging.getLogger(__name__)

T = TypeVar("T")

CONFIG_FILENAME = "kumi.toml"
PROMPT_ENV_VAR = "KUMI_PROMPT"
LOG_LEVEL_ENV_VAR = "KUMI_LOG_LEVEL"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ShellConfig:
    """Settings for the interpreter shell."""

    prompt: str = "kumi> "
    program_label: str = "<program>"
    log_level: str = "WARNING"
    color: bool = True

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)


def _normalize_log_level(value: object, default: str) -> str:
    level = str(value).upper().strip()
    if level not in _LOG_LEVELS:
        logger.warning(
            "Unknown log level '%s'. Valid values: %s. Using '%s'.",
            value,
            ", ".join(_LOG_LEVELS),
            default,
        )
        return default
    return level


def _setting(table: dict[str, Any], key: str, kind: type[T], default: T, path: Path) -> T:
    value = table.get(key, default)
    if not isinstance(value, kind):
        raise ConfigError(
            f"Invalid config in {path}: shell.{key} must be a {kind.__name__}, "
            f"got {value!r}"
        )
    return value


def load_config(path: Path | None = None, environ: dict[str, str] | None = None) -> ShellConfig:
    """Load shell settings.

    Args:
        path: Config file to read. When omitted, ``kumi.toml`` in the current
            directory is used if it exists.
        environ: Environment mapping; defaults to ``os.environ``.

    Returns:
        The merged configuration.

    Raises:
        ConfigError: If ``path`` is given but missing, the file is not
            valid TOML, or a ``[shell]`` setting has the wrong type.
    """
    env = os.environ if environ is None else environ
    config = ShellConfig()

    if path is None:
        candidate = Path.cwd() / CONFIG_FILENAME
        path = candidate if candidate.exists() else None
    elif not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    if path is not None:
        try:
            data = tomllib.loads(path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {path}: {e}") from e
        shell = data.get("shell", {})
        if not isinstance(shell, dict):
            raise ConfigError(f"Invalid config in {path}: 'shell' must be a table")
        config = ShellConfig(
            prompt=_setting(shell, "prompt", str, config.prompt, path),
            program_label=_setting(shell, "program_label", str, config.program_label, path),
            log_level=_normalize_log_level(
                _setting(shell, "log_level", str, config.log_level, path), config.log_level
            ),
            color=_setting(shell, "color", bool, config.color, path),
        )
        logger.debug("Loaded config from %s", path)

    if PROMPT_ENV_VAR in env:
        config = replace(config, prompt=env[PROMPT_ENV_VAR])
    if LOG_LEVEL_ENV_VAR in env:
        config = replace(
            config, log_level=_normalize_log_level(env[LOG_LEVEL_ENV_VAR], config.log_level)
        )

    return config
