# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the scriptbind configuration file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from scriptbind.emit.common import EmitOptions
from scriptbind.emit.output import OutputKind

# ###############
# Public Interface
# ###############


class BindingConfigError(Exception):
    """Raised when a binding configuration file is invalid or cannot be loaded."""


@dataclass
class OutputFolders:
    """Destination folders of the four output kinds."""

    native_engine: Path = Path("Generated/Native/Engine")
    native_editor: Path = Path("Generated/Native/Editor")
    managed_engine: Path = Path("Generated/Managed/Engine")
    managed_editor: Path = Path("Generated/Managed/Editor")

    def as_mapping(self) -> dict[OutputKind, Path]:
        return {
            OutputKind.NATIVE_ENGINE: self.native_engine,
            OutputKind.NATIVE_EDITOR: self.native_editor,
            OutputKind.MANAGED_ENGINE: self.managed_engine,
            OutputKind.MANAGED_EDITOR: self.managed_editor,
        }


@dataclass
class Namespaces:
    native_engine: str = "bs"
    native_editor: str = "bs"
    managed_engine: str = "BansheeEngine"
    managed_editor: str = "BansheeEditor"


@dataclass
class ExportMacros:
    engine: str = "BS_SCR_BE_EXPORT"
    editor: str = "BS_SCR_BED_EXPORT"


@dataclass
class BindingConfig:
    """The parsed configuration of a binding run.

    Attributes:
        output: Output folders; relative entries in a config file are resolved
            against the directory holding that file.
        generate_editor: Whether editor file groups and lookups are produced.
        namespaces: Native and managed namespaces of the generated code.
        export_macros: Export macros on engine and editor companion classes.
        type_map: Extra plain struct types known without declarations, name
            to declaring header.
        aliases: Extra type aliases, name to the C++ type text.
    """

    output: OutputFolders = field(default_factory=OutputFolders)
    generate_editor: bool = True
    namespaces: Namespaces = field(default_factory=Namespaces)
    export_macros: ExportMacros = field(default_factory=ExportMacros)
    type_map: dict[str, str] = field(default_factory=dict)
    aliases: dict[str, str] = field(default_factory=dict)

    def emit_options(self) -> EmitOptions:
        return EmitOptions(
            native_namespace=self.namespaces.native_engine,
            native_editor_namespace=self.namespaces.native_editor,
            managed_namespace=self.namespaces.managed_engine,
            managed_editor_namespace=self.namespaces.managed_editor,
            export_macro=self.export_macros.engine,
            editor_export_macro=self.export_macros.editor,
            generate_editor=self.generate_editor,
        )


def load_binding_config(path: Path) -> BindingConfig:
    """Load and parse a scriptbind configuration file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        A BindingConfig populated from the file.

    Raises:
        BindingConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise BindingConfigError(f"Binding config file not found: {path}") from None
    except OSError as exc:
        raise BindingConfigError(f"Cannot read binding config file: {exc}") from exc

    return _parse_binding_config(text, source_label=str(path), base_dir=path.parent)


# ################
# Implementation
# ################

_OUTPUT_KEYS = ("native-engine", "native-editor", "managed-engine", "managed-editor")
_NAMESPACE_KEYS = _OUTPUT_KEYS
_MACRO_KEYS = ("engine", "editor")
_TOP_LEVEL_KEYS = frozenset({"output", "generate-editor", "namespaces", "export-macros", "type-map", "aliases"})


def _parse_binding_config(text: str, source_label: str = "<string>", base_dir: Path | None = None) -> BindingConfig:
    """Parse binding config YAML text into a BindingConfig.

    Args:
        text: Raw YAML content.
        source_label: Human-readable label used in error messages (e.g. the file path).
        base_dir: Directory relative output folders are resolved against.

    Returns:
        A BindingConfig instance. An empty document yields the defaults.

    Raises:
        BindingConfigError: If the YAML is invalid or a field has the wrong shape.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise BindingConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise BindingConfigError(f"{source_label}: binding config must be a YAML mapping")

    unknown = sorted(str(key) for key in data if key not in _TOP_LEVEL_KEYS)
    if unknown:
        raise BindingConfigError(f"{source_label}: unknown field(s) {', '.join(repr(k) for k in unknown)}")

    config = BindingConfig()

    output = _optional_section(data, "output", _OUTPUT_KEYS, source_label)
    for key, value in output.items():
        folder = Path(value)
        if base_dir is not None and not folder.is_absolute():
            folder = base_dir / folder
        setattr(config.output, _attribute(key), folder)

    if "generate-editor" in data:
        value = data["generate-editor"]
        if not isinstance(value, bool):
            raise BindingConfigError(f"{source_label}: 'generate-editor' must be a boolean")
        config.generate_editor = value

    for key, value in _optional_section(data, "namespaces", _NAMESPACE_KEYS, source_label).items():
        setattr(config.namespaces, _attribute(key), value)
    for key, value in _optional_section(data, "export-macros", _MACRO_KEYS, source_label).items():
        setattr(config.export_macros, _attribute(key), value)

    config.type_map = _string_mapping(data, "type-map", source_label)
    config.aliases = _string_mapping(data, "aliases", source_label)
    return config


def _attribute(key: str) -> str:
    return key.replace("-", "_")


def _require_string(mapping: dict[str, object], key: str, source_label: str) -> str:
    """Extract a required string field from a mapping, raising BindingConfigError if missing."""
    if key not in mapping:
        raise BindingConfigError(f"{source_label}: missing required field '{key}'")
    value = mapping[key]
    if not isinstance(value, str):
        raise BindingConfigError(f"{source_label}: '{key}' must be a string")
    return value


def _optional_section(
    data: dict[str, object], section: str, allowed: tuple[str, ...], source_label: str
) -> dict[str, str]:
    """Read a mapping of string values whose keys are limited to *allowed*."""
    if section not in data:
        return {}
    raw = data[section]
    location = f"{source_label}: {section}"
    if not isinstance(raw, dict):
        raise BindingConfigError(f"{location} must be a YAML mapping")
    result: dict[str, str] = {}
    for key in raw:
        if key not in allowed:
            raise BindingConfigError(f"{location}: unknown field '{key}' (expected one of {', '.join(allowed)})")
        result[key] = _require_string(raw, key, location)
    return result


def _string_mapping(data: dict[str, object], section: str, source_label: str) -> dict[str, str]:
    if section not in data:
        return {}
    raw = data[section]
    location = f"{source_label}: {section}"
    if not isinstance(raw, dict):
        raise BindingConfigError(f"{location} must be a YAML mapping")
    return {str(key): _require_string(raw, key, location) for key in raw}
