# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""High-level tests demonstrating how to construct the binding model."""

from scriptbind.diagnostics import Diagnostics
from scriptbind.model import (
    BindingContext,
    Category,
    ClassFlags,
    ClassInfo,
    CommentEntry,
    CommentIndex,
    EnumInfo,
    FileGroup,
    SourceKind,
    StructInfo,
    TypeFlags,
    TypeRef,
    UserTypeInfo,
)


def test_type_ref_source_kind() -> None:
    """The source kind is derived from the single ownership bit."""
    ref = TypeRef(name="Mesh", flags=TypeFlags.SRC_RHANDLE | TypeFlags.ARRAY)
    assert ref.source_kind is SourceKind.RESOURCE_HANDLE
    assert ref.is_array
    assert not ref.is_output
    assert TypeRef(name="INT32", flags=TypeFlags.BUILTIN).source_kind is SourceKind.VALUE


def test_type_ref_with_source_kind_replaces_bit() -> None:
    """Replacing the source kind keeps every other flag."""
    ref = TypeRef(name="Plain", flags=TypeFlags.SRC_REF | TypeFlags.OUTPUT)
    changed = ref.with_source_kind(TypeFlags.SRC_SPTR)
    assert changed.source_kind is SourceKind.SHARED_PTR
    assert changed.is_output
    assert ref.source_kind is SourceKind.REFERENCE


def test_type_ref_has_matches_any_bit() -> None:
    """has() is true when any bit of the mask is set."""
    ref = TypeRef(name="String", flags=TypeFlags.STRING)
    assert ref.has(TypeFlags.STRING | TypeFlags.WSTRING)
    assert not ref.has(TypeFlags.PATH)


def test_type_ref_same_type() -> None:
    """Two references are the same type only with equal names and flags."""
    a = TypeRef(name="Vector3", flags=TypeFlags.SRC_REF)
    assert a.same_type(TypeRef(name="Vector3", flags=TypeFlags.SRC_REF, category=Category.STRUCT))
    assert not a.same_type(TypeRef(name="Vector3"))
    assert not a.same_type(TypeRef(name="Vector4", flags=TypeFlags.SRC_REF))


def test_file_group_includes_are_unique() -> None:
    """Include and forward-declaration lists keep the first insertion only."""
    group = FileGroup(name="Mesh")
    group.add_header_include("Mesh/BsMesh.h")
    group.add_header_include("Mesh/BsMesh.h")
    group.add_source_include("BsScriptArray.h")
    group.add_forward_declaration("class Mesh;")
    group.add_forward_declaration("class Mesh;")
    assert group.header_includes == ["Mesh/BsMesh.h"]
    assert group.source_includes == ["BsScriptArray.h"]
    assert group.forward_declarations == ["class Mesh;"]
    assert group.is_empty()


def test_context_group_and_lookups() -> None:
    """Groups are created on first use and records are found by source name."""
    context = BindingContext()
    group = context.group("Mesh")
    assert context.group("Mesh") is group

    group.classes.append(ClassInfo(name="Mesh", clean_name="Mesh", category=Category.RESOURCE))
    group.structs.append(StructInfo(name="SubMesh", clean_name="SubMesh"))
    group.enums.append(EnumInfo(name="MeshTopology", script_name="MeshTopology"))
    context.type_map["Mesh"] = UserTypeInfo(script_name="Mesh", category=Category.RESOURCE)

    assert not group.is_empty()
    found = context.find_class("Mesh")
    assert found is not None
    assert found.category is Category.RESOURCE
    assert context.find_struct("SubMesh") is not None
    assert context.find_enum("MeshTopology") is not None
    assert context.find_class("Missing") is None
    assert context.category_of("Mesh") is Category.RESOURCE
    assert context.category_of("Missing") is None


def test_find_class_prefers_flavour() -> None:
    """With both flavours present, find_class picks the requested one."""
    context = BindingContext()
    context.group("Engine").classes.append(ClassInfo(name="Handle", clean_name="Handle"))
    context.group("Editor").classes.append(ClassInfo(name="Handle", clean_name="Handle", flags=ClassFlags.EDITOR))

    editor = context.find_class("Handle", in_editor=True)
    assert editor is not None
    assert editor.has(ClassFlags.EDITOR)
    engine = context.find_class("Handle", in_editor=False)
    assert engine is not None
    assert not engine.has(ClassFlags.EDITOR)
    first = context.find_class("Handle")
    assert first is not None
    assert not first.has(ClassFlags.EDITOR)


def test_comment_index_records_and_overloads() -> None:
    """Functions accumulate overloads; other names keep their first comment."""
    index = CommentIndex()
    index.add("Mesh", ["bs"], CommentEntry(brief=["First."]))
    index.add("Mesh", ["bs"], CommentEntry(brief=["Second."]))
    index.add("f", ["bs"], CommentEntry(brief=["Int."]), param_types=["int"])
    index.add("f", ["bs"], CommentEntry(brief=["Float."]), param_types=["float"])

    mesh = index.find("Mesh", ["bs"])
    assert mesh is not None
    assert mesh.full_name == "bs::Mesh"
    assert mesh.comment.brief == ["First."]

    function = index.find("f", ["bs"])
    assert function is not None
    assert function.is_function
    assert [overload.param_types for overload in function.overloads] == [["int"], ["float"]]
    assert index.find("Mesh", []) is None


def test_comment_entry_copydoc_target() -> None:
    """A leading @copydoc paragraph names its target."""
    assert CommentEntry(brief=["@copydoc Mesh::getSize"]).copydoc_target() == "Mesh::getSize"
    assert CommentEntry(brief=["Plain text."]).copydoc_target() is None
    assert CommentEntry().is_empty()


def test_diagnostics_format_and_counts() -> None:
    """Diagnostics keep report order and format with their severity."""
    diagnostics = Diagnostics()
    diagnostics.warning("Something odd.")
    diagnostics.error("Something broken.")

    assert len(diagnostics) == 2
    assert diagnostics.has_errors
    assert [item.format() for item in diagnostics] == ["Warning: Something odd.", "Error: Something broken."]
    assert diagnostics.messages() == ["Something odd.", "Something broken."]
    assert len(diagnostics.warnings) == 1
