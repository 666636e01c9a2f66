"""Layered YAML configuration for rift."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any, Dict, List, Literal, Mapping, MutableMapping, Optional, Tuple

import yaml

from .ignore import ALWAYS_EXCLUDE, DEFAULT_IGNORE_FILE

CONFIG_DIR_ENV = "RIFT_CONFIG_DIR"
DEFAULT_CONFIG_DIR = Path("~/.config/rift")
PROJECT_CONFIG_NAME = ".rift.yml"

DiagnosticLevel = Literal["info", "warning", "error"]
ConfigurationStatus = Literal["ready", "invalid"]


# section -> key -> (expected type, default); list values hold strings only.
CONFIG_SCHEMA: Dict[str, Dict[str, Tuple[type, Any]]] = {
    "sync": {
        "destination": (str, ""),
        "ignore_file": (str, DEFAULT_IGNORE_FILE),
        "always_exclude": (list, ALWAYS_EXCLUDE),
        "exclude": (list, ()),
    },
    "logging": {
        "level": (str, "WARNING"),
        "file": (str, ""),
        "structured": (bool, False),
    },
    "ui": {
        "verbose": (bool, True),
    },
}


@dataclass
class Diagnostic:
    """Represents a configuration validation or loading issue."""

    level: DiagnosticLevel
    message: str
    source: Optional[Path] = None


@dataclass
class ConfigurationBundle:
    """All configuration data a rift run needs."""

    source_dir: Path
    status: ConfigurationStatus
    merged: Dict[str, Any] = field(default_factory=dict)
    files_loaded: List[Path] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    log_path: Optional[Path] = None


@dataclass
class SyncSettings:
    """Sync-related values pulled out of the merged configuration."""

    destination: str = ""
    ignore_file: str = DEFAULT_IGNORE_FILE
    always_exclude: Tuple[str, ...] = ALWAYS_EXCLUDE
    exclude: Tuple[str, ...] = ()

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "SyncSettings":
        raw = config.get("sync", {}) if config else {}
        return cls(
            destination=str(raw.get("destination", "")),
            ignore_file=str(raw.get("ignore_file", DEFAULT_IGNORE_FILE)),
            always_exclude=tuple(raw.get("always_exclude", ALWAYS_EXCLUDE)),
            exclude=tuple(raw.get("exclude", ())),
        )


def resolve_config_dir(env: Optional[Mapping[str, str]] = None) -> Path:
    """Resolve the user configuration directory from the environment."""

    env_source = env if env is not None else os.environ
    raw = env_source.get(CONFIG_DIR_ENV)
    if raw:
        return Path(raw).expanduser()
    return DEFAULT_CONFIG_DIR.expanduser()


def load_runtime_configuration(
    source_dir: Path,
    config_dir: Optional[Path] = None,
) -> ConfigurationBundle:
    """Load user configuration and the project override file.

    Layers merge in order: schema defaults, ``*.yml`` files of the user
    configuration directory, then ``.rift.yml`` in ``source_dir``.
    """

    resolved_config_dir = config_dir or resolve_config_dir()
    diagnostics: List[Diagnostic] = []
    files_loaded: List[Path] = []

    user_config, user_files = _load_directory_configs(
        resolved_config_dir,
        diagnostics,
        label="user config",
    )
    files_loaded.extend(user_files)

    project_overrides: Dict[str, Any] = {}
    project_file = source_dir / PROJECT_CONFIG_NAME
    if project_file.is_file():
        content = _read_yaml_mapping(project_file, diagnostics)
        if content is not None:
            project_overrides = content
            files_loaded.append(project_file)

    merged = deepcopy(user_config)
    _deep_merge_dicts(merged, project_overrides)

    _validate_schema(merged, diagnostics)

    status: ConfigurationStatus = "ready"
    if any(diag.level == "error" for diag in diagnostics):
        status = "invalid"

    return ConfigurationBundle(
        source_dir=source_dir,
        status=status,
        merged=merged,
        files_loaded=files_loaded,
        diagnostics=diagnostics,
    )


def _load_directory_configs(
    directory: Path,
    diagnostics: List[Diagnostic],
    label: str,
) -> Tuple[Dict[str, Any], List[Path]]:
    """Load all YAML files from a directory, merging them in order."""

    data: Dict[str, Any] = {}
    loaded_files: List[Path] = []

    if not directory.exists():
        diagnostics.append(
            Diagnostic(
                level="info",
                message=f"No configuration directory found at '{directory}' ({label}).",
                source=directory,
            )
        )
        return data, loaded_files

    if not directory.is_dir():
        diagnostics.append(
            Diagnostic(
                level="error",
                message=f"Configuration path '{directory}' ({label}) is not a directory.",
                source=directory,
            )
        )
        return data, loaded_files

    yaml_files = sorted(directory.glob("*.yml")) + sorted(directory.glob("*.yaml"))

    for yaml_file in yaml_files:
        content = _read_yaml_mapping(yaml_file, diagnostics)
        if content is None:
            continue
        _deep_merge_dicts(data, content)
        loaded_files.append(yaml_file)

    return data, loaded_files


def _read_yaml_mapping(path: Path, diagnostics: List[Diagnostic]) -> Optional[Dict[str, Any]]:
    """Parse one YAML file; None when it is unreadable or not a mapping."""

    try:
        content = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        diagnostics.append(
            Diagnostic(
                level="error",
                message=f"Failed to parse '{path}': {exc}",
                source=path,
            )
        )
        return None

    if content is None:
        return {}

    if not isinstance(content, MutableMapping):
        diagnostics.append(
            Diagnostic(
                level="warning",
                message=f"Ignoring '{path}' because it does not contain a mapping.",
                source=path,
            )
        )
        return None

    return dict(content)


def _deep_merge_dicts(dest: MutableMapping[str, Any], source: Mapping[str, Any]) -> None:
    """Recursively merge mapping values."""

    for key, value in source.items():
        if (
            key in dest
            and isinstance(dest[key], MutableMapping)
            and isinstance(value, Mapping)
        ):
            _deep_merge_dicts(dest[key], value)
        else:
            dest[key] = deepcopy(value)


def _default_value(expected_type: type, default: Any) -> Any:
    return list(default) if expected_type is list else default


def _validate_schema(config: Dict[str, Any], diagnostics: List[Diagnostic]) -> None:
    for key in config:
        if key not in CONFIG_SCHEMA:
            diagnostics.append(
                Diagnostic(level="warning", message=f"Unknown configuration key '{key}'.")
            )

    for name, fields in CONFIG_SCHEMA.items():
        section = config.get(name)
        if section is None:
            section = config[name] = {}
        elif not isinstance(section, dict):
            diagnostics.append(
                Diagnostic(
                    level="error",
                    message=f"Configuration section '{name}' must be a mapping.",
                )
            )
            section = config[name] = {}
        _validate_section(name, section, fields, diagnostics)


def _validate_section(
    name: str,
    section: Dict[str, Any],
    fields: Mapping[str, Tuple[type, Any]],
    diagnostics: List[Diagnostic],
) -> None:
    for key in section:
        if key not in fields:
            diagnostics.append(
                Diagnostic(level="warning", message=f"Unknown configuration key '{name}.{key}'.")
            )

    for key, (expected_type, default) in fields.items():
        path = f"{name}.{key}"
        if key not in section:
            section[key] = _default_value(expected_type, default)
            continue

        value = section[key]
        if not isinstance(value, expected_type):
            diagnostics.append(
                Diagnostic(
                    level="error",
                    message=f"'{path}' must be of type {expected_type.__name__}.",
                )
            )
            section[key] = _default_value(expected_type, default)
        elif expected_type is list:
            for idx, item in enumerate(value):
                if not isinstance(item, str):
                    diagnostics.append(
                        Diagnostic(level="error", message=f"'{path}[{idx}]' must be of type str.")
                    )
            section[key] = [item for item in value if isinstance(item, str)]


__all__ = [
    "CONFIG_DIR_ENV",
    "ConfigurationBundle",
    "ConfigurationStatus",
    "DEFAULT_CONFIG_DIR",
    "Diagnostic",
    "PROJECT_CONFIG_NAME",
    "SyncSettings",
    "load_runtime_configuration",
    "resolve_config_dir",
]
