"""Load the effective tealup configuration.

Layers, lowest to highest precedence: built-in defaults, the global
``~/.tealup/config/config.yml``, the project ``.tealup.yml`` (or the file
given with ``--config``), and CLI flags. String values may reference
environment variables as ``${VAR}`` or ``${VAR:-default}``.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from tealup.bootstrap.paths import TealupPaths
from tealup.config.models import (
    ProbeConfig,
    ReleaseConfig,
    ServerConfig,
    TealupConfig,
    UpdatesConfig,
)
from tealup.config.validation import validate_config
from tealup.core.errors import ConfigError
from tealup.core.logging import get_logger

LOGGER = get_logger(__name__)

# Searched in this order in the project root
PROJECT_CONFIG_NAMES = [".tealup.yml", ".tealup.yaml", "tealup.yml", "tealup.yaml"]

ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


def load_config(
    project_root: Path,
    cli_config_path: Optional[Path] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
) -> TealupConfig:
    """Merge all configuration layers into a TealupConfig.

    A broken global config is logged and skipped. A broken project or
    ``--config`` file is an error, as is a ``--config`` path that does not
    exist.

    Raises:
        ConfigError: If the project or custom config cannot be used.
    """
    sources: List[str] = []
    merged: Dict[str, Any] = {}

    global_path = find_global_config()
    if global_path is not None:
        try:
            merged = merge_configs(merged, _load_validated(global_path))
            sources.append(f"global:{global_path}")
        except ConfigError as e:
            LOGGER.warning(f"Ignoring global config: {e}")

    if cli_config_path:
        if not cli_config_path.exists():
            raise ConfigError(f"Config file not found: {cli_config_path}")
        merged = merge_configs(merged, _load_validated(cli_config_path))
        sources.append(f"custom:{cli_config_path}")
    else:
        project_path = find_project_config(project_root)
        if project_path is not None:
            merged = merge_configs(merged, _load_validated(project_path))
            sources.append(f"project:{project_path}")

    if cli_overrides:
        merged = merge_configs(merged, cli_overrides)
        sources.append("cli")

    config = dict_to_config(merged)
    config._config_sources = sources
    LOGGER.debug(f"Config loaded from sources: {sources}")
    return config


def _load_validated(path: Path) -> Dict[str, Any]:
    try:
        data = load_yaml_file(path)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    errors = [w for w in validate_config(data, source=str(path)) if w.is_error]
    if errors:
        details = "; ".join(w.message for w in errors)
        raise ConfigError(f"Invalid configuration in {path}: {details}")
    return data


def find_project_config(project_root: Path) -> Optional[Path]:
    for name in PROJECT_CONFIG_NAMES:
        config_path = project_root / name
        if config_path.exists():
            return config_path
    return None


def find_global_config() -> Optional[Path]:
    config_path = TealupPaths.default().global_config_file
    return config_path if config_path.exists() else None


def load_yaml_file(path: Path) -> Dict[str, Any]:
    """Parse a config file and expand environment variables in it.

    An empty file yields an empty mapping.

    Raises:
        yaml.YAMLError: If YAML parsing fails.
        ConfigError: If the document is not a mapping.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a YAML mapping, got {type(data).__name__}")
    return expand_env_vars(data)


def expand_env_vars(data: Any) -> Any:
    if isinstance(data, dict):
        return {k: expand_env_vars(v) for k, v in data.items()}
    if isinstance(data, list):
        return [expand_env_vars(item) for item in data]
    if isinstance(data, str):
        return ENV_VAR_PATTERN.sub(_env_var_replacer, data)
    return data


def _env_var_replacer(match: re.Match) -> str:
    var_name, default_value = match.group(1), match.group(2)
    value = os.environ.get(var_name)
    if value is not None:
        return value
    if default_value is not None:
        return default_value
    LOGGER.warning(f"Environment variable ${var_name} is not set and has no default")
    return ""


def merge_configs(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two config dicts; mappings merge, anything else is replaced."""
    result = base.copy()
    for key, overlay_value in overlay.items():
        if isinstance(result.get(key), dict) and isinstance(overlay_value, dict):
            result[key] = merge_configs(result[key], overlay_value)
        else:
            result[key] = overlay_value
    return result


def dict_to_config(data: Dict[str, Any]) -> TealupConfig:
    """Build a TealupConfig from a validated mapping, filling in defaults."""
    defaults = TealupConfig()
    server = data.get("server") or {}
    release = data.get("release") or {}
    probe = data.get("probe") or {}
    updates = data.get("updates") or {}

    channel = data.get("channel")
    channel = channel.strip() or None if isinstance(channel, str) else None

    return TealupConfig(
        channel=channel,
        development=bool(data.get("development", False)),
        server=ServerConfig(
            path=server.get("path") or None,
            debug=server.get("debug", defaults.server.debug),
            debug_log=server.get("debug_log", defaults.server.debug_log),
            stop_timeout=float(server.get("stop_timeout", defaults.server.stop_timeout)),
            features=dict(server.get("features") or {}),
        ),
        release=ReleaseConfig(
            base_url=release.get("base_url", defaults.release.base_url),
            timeout=float(release.get("timeout", defaults.release.timeout)),
        ),
        probe=ProbeConfig(
            timeout=float(probe.get("timeout", defaults.probe.timeout)),
        ),
        updates=UpdatesConfig(
            check_on_start=updates.get("check_on_start", defaults.updates.check_on_start),
            auto_upgrade=updates.get("auto_upgrade", defaults.updates.auto_upgrade),
        ),
    )
