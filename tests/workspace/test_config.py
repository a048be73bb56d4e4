# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the binding configuration module."""

from pathlib import Path

import pytest

from scriptbind.emit.output import OutputKind
from scriptbind.workspace import BindingConfig, BindingConfigError, load_binding_config
from scriptbind.workspace.config import _parse_binding_config

# ###############
# Helpers
# ###############


def _write_config(tmp_path: Path, content: str) -> Path:
    """Write a binding config file and return its path."""
    config_file = tmp_path / "scriptbind.yaml"
    config_file.write_text(content, encoding="utf-8")
    return config_file


# ###############
# Normal Cases
# ###############


def test_empty_config_yields_defaults() -> None:
    """An empty document parses to the default configuration."""
    config = _parse_binding_config("")

    assert config == BindingConfig()
    assert config.generate_editor is True
    assert config.namespaces.managed_engine == "BansheeEngine"
    assert config.export_macros.editor == "BS_SCR_BED_EXPORT"


def test_relative_output_folders_resolve_against_config_dir(tmp_path: Path) -> None:
    """Relative output folders are anchored at the directory of the config file."""
    content = """\
output:
  native-engine: gen/native
  managed-editor: /abs/managed
"""
    config = load_binding_config(_write_config(tmp_path, content))

    folders = config.output.as_mapping()
    assert folders[OutputKind.NATIVE_ENGINE] == tmp_path / "gen" / "native"
    assert folders[OutputKind.MANAGED_EDITOR] == Path("/abs/managed")
    assert folders[OutputKind.NATIVE_EDITOR] == Path("Generated/Native/Editor")


def test_full_config() -> None:
    """Every section is carried into the configuration and its emit options."""
    content = """\
generate-editor: false
namespaces:
  native-engine: game
  managed-engine: Game
export-macros:
  engine: GAME_EXPORT
type-map:
  Vector5: Math/BsVector5.h
aliases:
  HTex: ResourceHandle<Texture>
"""
    config = _parse_binding_config(content)

    assert config.generate_editor is False
    assert config.type_map == {"Vector5": "Math/BsVector5.h"}
    assert config.aliases == {"HTex": "ResourceHandle<Texture>"}

    options = config.emit_options()
    assert options.native_namespace == "game"
    assert options.managed_namespace == "Game"
    assert options.managed_editor_namespace == "BansheeEditor"
    assert options.export_macro == "GAME_EXPORT"
    assert options.generate_editor is False


# ###############
# Error Cases
# ###############


def test_missing_file(tmp_path: Path) -> None:
    """A missing config file raises BindingConfigError."""
    with pytest.raises(BindingConfigError, match="Binding config file not found"):
        load_binding_config(tmp_path / "missing.yaml")


def test_invalid_yaml() -> None:
    """Malformed YAML is reported with the source label."""
    with pytest.raises(BindingConfigError, match="Invalid YAML in cfg.yaml"):
        _parse_binding_config("output: [unclosed", source_label="cfg.yaml")


def test_top_level_must_be_mapping() -> None:
    """A top-level list is rejected."""
    with pytest.raises(BindingConfigError, match="must be a YAML mapping"):
        _parse_binding_config("- a\n- b\n")


def test_unknown_top_level_field() -> None:
    """Unknown top-level keys are rejected and named."""
    with pytest.raises(BindingConfigError, match="unknown field\\(s\\) 'extra'"):
        _parse_binding_config("extra: 1\n")


def test_generate_editor_must_be_boolean() -> None:
    """The editor toggle only accepts booleans."""
    with pytest.raises(BindingConfigError, match="must be a boolean"):
        _parse_binding_config("generate-editor: yes please\n")


@pytest.mark.parametrize(
    ("content", "message"),
    [
        ("output: folder\n", "output must be a YAML mapping"),
        ("output:\n  somewhere: x\n", "unknown field 'somewhere'"),
        ("namespaces:\n  native-engine: 3\n", "'native-engine' must be a string"),
        ("type-map:\n  Vector5: [a]\n", "'Vector5' must be a string"),
        ("aliases: text\n", "aliases must be a YAML mapping"),
    ],
)
def test_section_shape_errors(content: str, message: str) -> None:
    """Sections with the wrong shape raise BindingConfigError naming the problem."""
    with pytest.raises(BindingConfigError, match=message):
        _parse_binding_config(content)
