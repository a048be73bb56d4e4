# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the end-to-end binding pipeline."""

from pathlib import Path

import pytest

from scriptbind.frontend.declarations import DeclarationError
from scriptbind.model.types import Category
from scriptbind.workspace import BindingConfig, OutputFolders, analyze_documents, generate_bindings

_ENGINE = Path(__file__).parent.parent / "data" / "engine.yaml"

# ###############
# Helpers
# ###############


def _config(tmp_path: Path, *, generate_editor: bool = True) -> BindingConfig:
    output = OutputFolders(
        native_engine=tmp_path / "native",
        native_editor=tmp_path / "native-editor",
        managed_engine=tmp_path / "managed",
        managed_editor=tmp_path / "managed-editor",
    )
    return BindingConfig(output=output, generate_editor=generate_editor)


# ###############
# Analysis
# ###############


def test_analyze_sample_document() -> None:
    """The sample document analyzes cleanly into three file groups."""
    run = analyze_documents([_ENGINE], BindingConfig())

    assert not run.diagnostics.has_errors, run.diagnostics.messages()
    assert run.written == []
    assert sorted(run.context.file_groups) == ["Light", "Mesh", "Renderable"]
    assert run.context.category_of("Mesh") is Category.RESOURCE
    renderable = run.context.find_class("Renderable")
    assert renderable is not None
    assert [ctor.interop_name for ctor in renderable.ctors] == ["createRenderable"]


def test_config_type_map_and_aliases_are_applied(tmp_path: Path) -> None:
    """Extra type-map entries and aliases from the config reach the analysis."""
    document = tmp_path / "extra.yaml"
    document.write_text(
        """\
declarations:
  - kind: record
    name: Widget
    annotation: se
    methods:
      - name: setOffset
        annotation: se
        params:
          - {name: offset, type: Offset}
""",
        encoding="utf-8",
    )
    config = BindingConfig(type_map={"Vector5": "Math/BsVector5.h"}, aliases={"Offset": "Vector5"})
    run = analyze_documents([document], config)

    assert not run.diagnostics.has_errors, run.diagnostics.messages()
    method = run.context.file_groups["Widget"].classes[0].methods[0]
    assert method.params[0].type.name == "Vector5"
    assert method.params[0].type.category is Category.STRUCT


def test_missing_document_raises() -> None:
    """An unreadable document aborts the run."""
    with pytest.raises(DeclarationError):
        analyze_documents([Path("does-not-exist.yaml")], BindingConfig())


# ###############
# Generation
# ###############


def test_generate_writes_all_files(tmp_path: Path) -> None:
    """Generation writes native, managed, lookup, mapping and timestamp files."""
    run = generate_bindings([_ENGINE], _config(tmp_path), timestamp_ms=42)

    names = sorted(path.name for path in run.written)
    assert names == [
        "BsBuiltinComponentLookup.generated.h",
        "BsBuiltinReflectableTypesLookup.generated.h",
        "BsEditorBuiltinComponentLookup.generated.h",
        "BsEditorBuiltinReflectableTypesLookup.generated.h",
        "BsScriptMesh.generated.cpp",
        "BsScriptMesh.generated.h",
        "BsScriptRenderable.generated.cpp",
        "BsScriptRenderable.generated.h",
        "Light.generated.cs",
        "Mesh.generated.cs",
        "Renderable.generated.cs",
        "info.xml",
        "scriptBindings.timestamp",
    ]
    assert (tmp_path / "native" / "scriptBindings.timestamp").read_text(encoding="utf-8") == "42\n"

    managed = (tmp_path / "managed" / "Renderable.generated.cs").read_text(encoding="utf-8")
    assert "public partial class Renderable : ScriptObject" in managed
    assert "public event Action<uint> OnMeshChanged;" in managed
    assert "[LayerMask]" in managed

    lookup = (tmp_path / "native" / "BsBuiltinReflectableTypesLookup.generated.h").read_text(encoding="utf-8")
    assert "ADD_ENTRY(Renderable, ScriptRenderable, Renderable::getRTTIStatic()->getRTTIId())" in lookup


def test_generate_without_editor(tmp_path: Path) -> None:
    """Disabling editor output drops the editor lookups."""
    run = generate_bindings([_ENGINE], _config(tmp_path, generate_editor=False), timestamp_ms=1)

    assert not any("Editor" in path.name for path in run.written)
    assert not (tmp_path / "native-editor").exists()
