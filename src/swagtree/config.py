"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for swagtree:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.swagtree/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~swagtree.models.GlobalConfig`
  JSON file listing the configured document sources and defaults.
* **Project config** -- An optional ``./swagtree.json`` whose ``sources``
  and ``default_group`` override the global ones for one repository.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config.
* **Source selection** -- :func:`select_sources` picks the sources a command
  works on.

File writes go through :func:`_atomic_write` (temp file then rename).
"""

from __future__ import annotations

import json
import logging
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from swagtree.exceptions import ConfigError, InvalidUsageError, NotFoundError
from swagtree.models import GlobalConfig, SourceConfig

logger = logging.getLogger(__name__)

_APP_NAME = "swagtree"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "swagtree.json"

ENV_SPEC = "SWAGTREE_SPEC"
ENV_DEFAULT_GROUP = "SWAGTREE_DEFAULT_GROUP"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    return Path.home().joinpath(*default_segments)


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/swagtree/`` (default ``~/.config/swagtree/``).
    On macOS/Windows: ``~/.swagtree/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory used for crash logs, creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/swagtree/`` (default ``~/.local/share/swagtree/``).
    On macOS/Windows: ``~/.swagtree/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}" / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* through a temp file in the same directory.

    ``os.replace`` then swaps it in, so readers never see a half-written
    file.  The temp file is removed if anything fails.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="w",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
        encoding="utf-8",
    ) as handle:
        tmp_path = handle.name
        try:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        except BaseException:
            handle.close()
            os.unlink(tmp_path)
            raise

    try:
        os.replace(tmp_path, path)
    except OSError:
        os.unlink(tmp_path)
        raise


# --- Global config ---


def _global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The stored :class:`~swagtree.models.GlobalConfig`, or a default
        instance if the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        return GlobalConfig.model_validate(json.loads(path.read_text(encoding="utf-8")))
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./swagtree.json``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def resolve_config(
    cli_spec: Optional[str] = None,
    cli_format: Optional[str] = None,
) -> GlobalConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flags (``cli_spec`` replaces all sources with one document)
        2. Environment variables (``SWAGTREE_SPEC``, ``SWAGTREE_DEFAULT_GROUP``)
        3. Project config (``./swagtree.json``)
        4. User config (``~/.config/swagtree/config.json``)
        5. Defaults

    Returns:
        A new :class:`~swagtree.models.GlobalConfig`; the stored files are
        not modified.

    Raises:
        ConfigError: If any config layer is invalid.
    """
    data = load_global_config().model_dump(mode="json")

    project = load_project_config()
    if project is not None:
        for key in ("sources", "default_group"):
            if key in project:
                data[key] = project[key]

    env_spec = os.environ.get(ENV_SPEC)
    if env_spec:
        data["sources"] = [{"url": env_spec}]
    env_group = os.environ.get(ENV_DEFAULT_GROUP)
    if env_group:
        data["default_group"] = env_group

    if cli_spec is not None:
        data["sources"] = [{"url": cli_spec}]
    if cli_format is not None:
        data["output"]["format"] = cli_format

    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def select_sources(config: GlobalConfig, name: Optional[str] = None) -> list[SourceConfig]:
    """Pick the sources a command should load.

    Args:
        config: The resolved configuration.
        name: Source title or URL; ``None`` selects every source.

    Raises:
        InvalidUsageError: If no sources are configured.
        NotFoundError: If *name* matches no configured source.
    """
    if not config.sources:
        raise InvalidUsageError(
            "No sources configured. Pass --spec or run: swagtree config add-source <url>"
        )
    if name is None:
        return list(config.sources)

    matches = [s for s in config.sources if name in (s.title, s.url)]
    if not matches:
        raise NotFoundError(f"Source '{name}' is not configured")
    return matches


def add_source(config: GlobalConfig, source: SourceConfig) -> GlobalConfig:
    """Return a copy of *config* with *source* added or replacing one with the same URL."""
    sources = [s for s in config.sources if s.url != source.url]
    sources.append(source)
    logger.debug("Configured sources: %s", [s.url for s in sources])
    return config.model_copy(update={"sources": sources})


def remove_source(config: GlobalConfig, name: str) -> GlobalConfig:
    """Return a copy of *config* without the source titled or located at *name*.

    Raises:
        NotFoundError: If no source matches *name*.
    """
    sources = [s for s in config.sources if name not in (s.title, s.url)]
    if len(sources) == len(config.sources):
        raise NotFoundError(f"Source '{name}' is not configured")
    return config.model_copy(update={"sources": sources})
