import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

if sys.version_info < (3, 11):
    import tomli as tomllib
else:
    import tomllib


class ConfigError(ValueError):
    pass


class ConflictPolicy(str, Enum):
    SKIP_OCCURRENCE = "skip-occurrence"  # leave the receiver, keep normalizing
    SKIP_DIRECTORY = "skip-directory"  # stop working on this directory
    ABORT = "abort"  # stop the whole run


class ParseErrorPolicy(str, Enum):
    SKIP = "skip"
    ABORT = "abort"


@dataclass
class UnselfConfig:
    on_conflict: ConflictPolicy = ConflictPolicy.SKIP_OCCURRENCE
    on_parse_error: ParseErrorPolicy = ParseErrorPolicy.SKIP
    exclude: List[str] = field(default_factory=list)
    extensions: List[str] = field(default_factory=lambda: [".py"])
    overrides: Dict[str, str] = field(default_factory=dict)


def _find_pyproject_toml(search_path: Path) -> Optional[Path]:
    current_dir = search_path.resolve()
    while True:
        pyproject_path = current_dir / "pyproject.toml"
        if pyproject_path.is_file():
            return pyproject_path
        if current_dir.parent == current_dir:
            return None
        current_dir = current_dir.parent


def _coerce_policy(enum_cls, value: Any, key: str):
    try:
        return enum_cls(value)
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        raise ConfigError(f"'{key}' must be one of {choices}, got {value!r}")


def _coerce_str_list(value: Any, key: str) -> List[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' must be a list of strings")
    return list(value)


def _coerce_overrides(value: Any) -> Dict[str, str]:
    if not isinstance(value, dict):
        raise ConfigError("'overrides' must be a table of type name = abbreviation")
    overrides: Dict[str, str] = {}
    for type_name, short in value.items():
        if not isinstance(short, str) or not short.isidentifier() or short != short.lower():
            raise ConfigError(
                f"override for '{type_name}' must be a lowercase identifier, got {short!r}"
            )
        overrides[type_name] = short
    return overrides


def load_config_from_path(search_path: Path) -> UnselfConfig:
    config_path = _find_pyproject_toml(search_path)
    if config_path is None:
        return UnselfConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{config_path}: {e}")

    tool_data: Dict[str, Any] = data.get("tool", {}).get("unself", {})
    config = UnselfConfig()

    if "on_conflict" in tool_data:
        config.on_conflict = _coerce_policy(
            ConflictPolicy, tool_data["on_conflict"], "on_conflict"
        )
    if "on_parse_error" in tool_data:
        config.on_parse_error = _coerce_policy(
            ParseErrorPolicy, tool_data["on_parse_error"], "on_parse_error"
        )
    if "exclude" in tool_data:
        config.exclude = _coerce_str_list(tool_data["exclude"], "exclude")
    if "extensions" in tool_data:
        config.extensions = _coerce_str_list(tool_data["extensions"], "extensions")
    if "overrides" in tool_data:
        config.overrides = _coerce_overrides(tool_data["overrides"])

    return config
