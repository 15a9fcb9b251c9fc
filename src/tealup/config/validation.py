"""Configuration validation for tealup.

Validates known keys and their types, and warns on unknown keys with a
suggestion for likely typos. ``server.features`` is passed through to the
language server without validation.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from typing import Any, Dict, List, Optional, Set, Tuple, Type, Union

from tealup.core.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass
class ConfigValidationWarning:
    """A validation warning for configuration."""

    message: str
    source: str
    key: Optional[str] = None
    suggestion: Optional[str] = None
    is_error: bool = False


_Number = (int, float)

# Expected type of each scalar top-level key
TOP_LEVEL_SCALARS: Dict[str, Union[Type, Tuple[Type, ...]]] = {
    "channel": str,
    "development": bool,
}

# Expected types of keys inside each section
SECTION_KEYS: Dict[str, Dict[str, Union[Type, Tuple[Type, ...]]]] = {
    "server": {
        "path": str,
        "debug": bool,
        "debug_log": str,
        "stop_timeout": _Number,
        "features": dict,
    },
    "release": {
        "base_url": str,
        "timeout": _Number,
    },
    "probe": {
        "timeout": _Number,
    },
    "updates": {
        "check_on_start": bool,
        "auto_upgrade": bool,
    },
}

# Valid top-level keys (core config)
VALID_TOP_LEVEL_KEYS: Set[str] = set(TOP_LEVEL_SCALARS) | set(SECTION_KEYS) | {"version"}


def _type_name(expected: Union[Type, Tuple[Type, ...]]) -> str:
    if expected is bool:
        return "a boolean"
    if expected is str:
        return "a string"
    if expected is dict:
        return "a mapping"
    return "a number"


def _matches(value: Any, expected: Union[Type, Tuple[Type, ...]]) -> bool:
    # bool is an int subclass; a boolean is never a valid number here
    if isinstance(value, bool) and expected is not bool:
        return False
    return isinstance(value, expected)


def validate_config(
    data: Dict[str, Any],
    source: str,
) -> List[ConfigValidationWarning]:
    """Validate configuration dictionary.

    Does not raise exceptions - returns warnings instead. Warnings with
    ``is_error`` describe values tealup cannot use.

    Args:
        data: Config dictionary to validate.
        source: Source file path for warning messages.

    Returns:
        List of validation warnings.
    """
    warnings: List[ConfigValidationWarning] = []

    if not isinstance(data, dict):  # type: ignore[unreachable]
        warnings.append(ConfigValidationWarning(
            message=f"Config must be a mapping, got {type(data).__name__}",
            source=source,
            is_error=True,
        ))
        return warnings  # type: ignore[unreachable]

    for key, value in data.items():
        if key not in VALID_TOP_LEVEL_KEYS:
            warning = ConfigValidationWarning(
                message=f"Unknown top-level key '{key}'",
                source=source,
                key=key,
                suggestion=_suggest_key(key, VALID_TOP_LEVEL_KEYS),
            )
            warnings.append(warning)
            _log_warning(warning)
            continue

        expected = TOP_LEVEL_SCALARS.get(key)
        if expected is not None and value is not None and not _matches(value, expected):
            warnings.append(ConfigValidationWarning(
                message=f"'{key}' must be {_type_name(expected)}, got {type(value).__name__}",
                source=source,
                key=key,
                is_error=True,
            ))

    for section, section_keys in SECTION_KEYS.items():
        section_data = data.get(section)
        if section_data is None:
            continue
        if not isinstance(section_data, dict):
            warnings.append(ConfigValidationWarning(
                message=f"'{section}' must be a mapping, got {type(section_data).__name__}",
                source=source,
                key=section,
                is_error=True,
            ))
            continue

        for key, value in section_data.items():
            if key not in section_keys:
                warning = ConfigValidationWarning(
                    message=f"Unknown key '{section}.{key}'",
                    source=source,
                    key=f"{section}.{key}",
                    suggestion=_suggest_key(key, set(section_keys)),
                )
                warnings.append(warning)
                _log_warning(warning)
            elif value is not None and not _matches(value, section_keys[key]):
                warnings.append(ConfigValidationWarning(
                    message=(
                        f"'{section}.{key}' must be {_type_name(section_keys[key])}, "
                        f"got {type(value).__name__}"
                    ),
                    source=source,
                    key=f"{section}.{key}",
                    is_error=True,
                ))

    release = data.get("release")
    if isinstance(release, dict):
        base_url = release.get("base_url")
        if isinstance(base_url, str) and not base_url.startswith("https://"):
            warnings.append(ConfigValidationWarning(
                message=f"Invalid value '{base_url}' for 'release.base_url': HTTPS is required",
                source=source,
                key="release.base_url",
                is_error=True,
            ))

    return warnings


def _suggest_key(invalid_key: str, valid_keys: Set[str]) -> Optional[str]:
    """Suggest a valid key for a potential typo.

    Args:
        invalid_key: The invalid key entered.
        valid_keys: Set of valid keys.

    Returns:
        Closest matching valid key, or None if no good match.
    """
    matches = get_close_matches(invalid_key, sorted(valid_keys), n=1, cutoff=0.6)
    return matches[0] if matches else None


def _log_warning(warning: ConfigValidationWarning) -> None:
    """Log a validation warning."""
    msg = f"{warning.message} in {warning.source}"
    if warning.suggestion:
        msg += f" (did you mean '{warning.suggestion}'?)"
    LOGGER.warning(msg)
