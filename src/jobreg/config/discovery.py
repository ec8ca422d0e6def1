"""Locating and reading ``jobreg.toml``.

A registry is configured by the nearest ``jobreg.toml`` at or above the
starting directory, unless ``JOBREG_CONFIG`` names a file explicitly.
The file's directory becomes the root that a relative ``[database] path``
resolves against (see :class:`~jobreg.config.settings.RegistrySettings`).
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

import click

from jobreg.config.models import RegistryConfig

CONFIG_FILENAME = "jobreg.toml"
CONFIG_ENV_VAR = "JOBREG_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file that governs *start* (default: cwd), if any.

    ``JOBREG_CONFIG`` wins outright; when it points at a missing file no
    walk-up happens and None is returned.
    """
    pinned = os.environ.get(CONFIG_ENV_VAR)
    if pinned:
        path = Path(pinned)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def read_config_table(path: Path) -> dict[str, Any]:
    """Parse *path* as TOML. Syntax errors surface as a CLI error naming the file."""
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc


def load_config(path: Path | None = None, cwd: Path | None = None) -> RegistryConfig:
    """Validated ``[database]`` and ``[query]`` sections, defaults where absent."""
    path = path or find_config(cwd)
    if path is None:
        return RegistryConfig()
    return RegistryConfig.model_validate(read_config_table(path))
