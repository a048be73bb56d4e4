# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for export annotation decoding."""

from scriptbind.analysis.annotations import parse_export_annotation, split_annotation
from scriptbind.diagnostics import Diagnostics
from scriptbind.model.entities import ExportDirective, ExportFlags, Visibility

# ###############
# Test Helpers
# ###############


def _parse(text: str | None, name: str = "Thing") -> tuple[ExportDirective | None, Diagnostics]:
    diagnostics = Diagnostics()
    return parse_export_annotation(text, name, diagnostics), diagnostics


# ###############
# Marker
# ###############


class TestMarker:
    def test_missing_annotation(self) -> None:
        directive, _ = _parse(None)
        assert directive is None

    def test_other_marker_is_ignored(self) -> None:
        directive, diagnostics = _parse("sx,n:Other")
        assert directive is None
        assert len(diagnostics) == 0

    def test_bare_marker_uses_source_name(self) -> None:
        directive, _ = _parse("se", "Mesh")
        assert directive is not None
        assert directive.export_name == "Mesh"
        assert directive.file_group == "Mesh"
        assert directive.visibility is Visibility.PUBLIC
        assert directive.flags == ExportFlags.NONE


# ###############
# Keys
# ###############


class TestKeys:
    def test_name_file_and_visibility(self) -> None:
        directive, _ = _parse("se,n:Renderable,f:Rendering,v:internal")
        assert directive is not None
        assert directive.export_name == "Renderable"
        assert directive.file_group == "Rendering"
        assert directive.visibility is Visibility.INTERNAL

    def test_property_halves(self) -> None:
        getter, _ = _parse("se,pr:getter")
        setter, _ = _parse("se,pr:setter")
        assert getter is not None and getter.has(ExportFlags.PROPERTY_GETTER)
        assert setter is not None and setter.has(ExportFlags.PROPERTY_SETTER)

    def test_external_method(self) -> None:
        directive, _ = _parse("se,e:Mesh")
        assert directive is not None
        assert directive.has(ExportFlags.EXTERNAL)
        assert not directive.has(ExportFlags.EXTERNAL_CONSTRUCTOR)
        assert directive.external_class == "Mesh"

    def test_external_constructor(self) -> None:
        directive, _ = _parse("se,ec:Mesh")
        assert directive is not None
        assert directive.has(ExportFlags.EXTERNAL | ExportFlags.EXTERNAL_CONSTRUCTOR)
        assert directive.flags & ExportFlags.EXTERNAL_CONSTRUCTOR

    def test_boolean_flags(self) -> None:
        directive, _ = _parse("se,pl:true,ed:true,in:true,cb:true,ex:false")
        assert directive is not None
        assert directive.has(ExportFlags.PLAIN)
        assert directive.has(ExportFlags.EDITOR)
        assert directive.has(ExportFlags.INTEROP_ONLY)
        assert directive.has(ExportFlags.CALLBACK)
        assert not directive.has(ExportFlags.EXCLUDE)

    def test_module(self) -> None:
        directive, _ = _parse("se,m:Rendering")
        assert directive is not None
        assert directive.module == "Rendering"

    def test_whitespace_around_entries(self) -> None:
        directive, _ = _parse("se, n : Foo , f:Bar")
        assert directive is not None
        assert directive.export_name == "Foo"
        assert directive.file_group == "Bar"


# ###############
# Style Keys
# ###############


class TestStyle:
    def test_range_with_pipe(self) -> None:
        directive, _ = _parse("se,range:[0|100],slider:true")
        assert directive is not None
        assert directive.style.range_min == "0"
        assert directive.style.range_max == "100"
        assert directive.style.slider

    def test_range_with_comma_is_not_split(self) -> None:
        directive, diagnostics = _parse("se,range:[-1,1],step:0.1")
        assert directive is not None
        assert directive.style.range_min == "-1"
        assert directive.style.range_max == "1"
        assert directive.style.step == "0.1"
        assert len(diagnostics) == 0

    def test_order_and_category(self) -> None:
        directive, _ = _parse("se,order:3,category:Lighting,hdr:true,notNull:true")
        assert directive is not None
        assert directive.style.order == 3
        assert directive.style.category == "Lighting"
        assert directive.style.hdr
        assert directive.style.not_null

    def test_invalid_order_warns(self) -> None:
        directive, diagnostics = _parse("se,order:first")
        assert directive is not None
        assert directive.style.order is None
        assert any('"order"' in message for message in diagnostics.messages())


# ###############
# Diagnostics
# ###############


class TestDiagnostics:
    def test_unknown_key_warns_and_continues(self) -> None:
        directive, diagnostics = _parse("se,zz:1,n:Kept", "Mesh")
        assert directive is not None
        assert directive.export_name == "Kept"
        assert diagnostics.messages() == ['Unrecognized annotation attribute option: "zz" for type "Mesh".']
        assert not diagnostics.has_errors

    def test_unknown_visibility_warns(self) -> None:
        directive, diagnostics = _parse("se,v:protected")
        assert directive is not None
        assert directive.visibility is Visibility.PUBLIC
        assert len(diagnostics.warnings) == 1

    def test_invalid_boolean_warns(self) -> None:
        directive, diagnostics = _parse("se,pl:yes")
        assert directive is not None
        assert not directive.has(ExportFlags.PLAIN)
        assert len(diagnostics.warnings) == 1

    def test_entry_without_value_warns(self) -> None:
        _, diagnostics = _parse("se,lonely")
        assert len(diagnostics.warnings) == 1


class TestSplitAnnotation:
    def test_brackets_protect_commas(self) -> None:
        assert split_annotation("se,range:[0,1],n:X") == ["se", "range:[0,1]", "n:X"]
