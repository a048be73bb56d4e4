# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for declaration collection."""

from typing import Any

from scriptbind.analysis.collector import collect, evaluate_default, seed_type_map
from scriptbind.diagnostics import Diagnostics
from scriptbind.frontend.declarations import DeclarationDocument, SymbolTable
from scriptbind.model.context import BindingContext
from scriptbind.model.entities import ClassFlags, MethodFlags
from scriptbind.model.types import Category

# ###############
# Test Helpers
# ###############


def _symbols(*declarations: dict[str, Any], aliases: dict[str, str] | None = None) -> SymbolTable:
    document = DeclarationDocument.model_validate({"aliases": aliases or {}, "declarations": list(declarations)})
    return SymbolTable([document])


def _collect(*declarations: dict[str, Any]) -> tuple[BindingContext, Diagnostics]:
    context = BindingContext()
    diagnostics = Diagnostics()
    seed_type_map(context)
    collect(_symbols(*declarations), context, diagnostics)
    return context, diagnostics


# ###############
# Default values
# ###############


class TestEvaluateDefault:
    def test_float_literal(self) -> None:
        assert evaluate_default("10.0f", _symbols()) == ("10", None)

    def test_fractional_float(self) -> None:
        assert evaluate_default("0.25f", _symbols()) == ("0.25", None)

    def test_hex_integer(self) -> None:
        assert evaluate_default("0x10", _symbols()) == ("16", None)

    def test_negative_integer(self) -> None:
        assert evaluate_default("-3", _symbols()) == ("-3", None)

    def test_enum_constant(self) -> None:
        symbols = _symbols({"kind": "enum", "name": "E", "entries": [{"name": "A", "value": 5}, {"name": "B"}]})
        assert evaluate_default("E::B", symbols) == ("6", None)
        assert evaluate_default("B", symbols) == ("6", None)

    def test_builtin_cast(self) -> None:
        assert evaluate_default("UINT32(7)", _symbols()) == ("7", None)

    def test_enum_cast(self) -> None:
        symbols = _symbols({"kind": "enum", "name": "E", "entries": [{"name": "A"}]})
        assert evaluate_default("E(5)", symbols) == ("5", None)
        assert evaluate_default("E(A)", symbols) == ("0", None)

    def test_constructor_call(self) -> None:
        assert evaluate_default("Vector3(1.0f, 2, 3)", _symbols()) == ("1.0f, 2, 3", "Vector3")

    def test_parameter_reference_is_not_evaluable(self) -> None:
        assert evaluate_default("size", _symbols(), param_names=frozenset({"size"})) is None

    def test_unknown_name_is_not_evaluable(self) -> None:
        assert evaluate_default("kSomething", _symbols()) is None

    def test_null(self) -> None:
        assert evaluate_default("nullptr", _symbols()) == ("null", None)


# ###############
# Enums
# ###############


class TestEnums:
    def test_implicit_values_continue(self) -> None:
        context, diagnostics = _collect(
            {
                "kind": "enum",
                "name": "E",
                "annotation": "se,pl:true,f:F",
                "entries": [{"name": "A", "value": 5}, {"name": "B", "value": 8}, {"name": "C"}],
            }
        )
        assert len(diagnostics) == 0
        enum_info = context.file_groups["F"].enums[0]
        assert enum_info.name == "E"
        assert {value: entry.name for value, entry in enum_info.entries.items()} == {5: "A", 8: "B", 9: "C"}
        assert context.type_map["E"].category is Category.ENUM

    def test_excluded_entry_and_renamed_entry(self) -> None:
        context, _ = _collect(
            {
                "kind": "enum",
                "name": "E",
                "annotation": "se",
                "entries": [
                    {"name": "A", "annotation": "se,ex:true"},
                    {"name": "B", "annotation": "se,n:Bee"},
                ],
            }
        )
        entries = context.file_groups["E"].enums[0].entries
        assert list(entries) == [1]
        assert entries[1].script_name == "Bee"

    def test_entry_referencing_previous_entry(self) -> None:
        context, _ = _collect(
            {
                "kind": "enum",
                "name": "E",
                "annotation": "se",
                "entries": [{"name": "A", "value": 4}, {"name": "Alias", "value": "A"}],
            }
        )
        assert sorted(context.file_groups["E"].enums[0].entries) == [4]

    def test_unannotated_enum_is_skipped(self) -> None:
        context, _ = _collect({"kind": "enum", "name": "E"})
        assert context.file_groups == {}


# ###############
# Plain structs
# ###############


class TestStructs:
    def test_fields_and_in_class_defaults(self) -> None:
        context, diagnostics = _collect(
            {
                "kind": "record",
                "name": "S",
                "annotation": "se,pl:true,f:F",
                "is-struct": True,
                "fields": [
                    {"name": "a", "type": "int"},
                    {"name": "b", "type": "float"},
                    {"name": "c", "type": "float", "initializer": "10.0f"},
                ],
            }
        )
        assert len(diagnostics) == 0
        struct_info = context.file_groups["F"].structs[0]
        assert [field.name for field in struct_info.fields] == ["a", "b", "c"]
        assert struct_info.fields[2].default_value == "10"
        assert len(struct_info.ctors) == 1
        assert struct_info.ctors[0].params == []

    def test_in_class_initializer_wins_over_ctor_initializer(self) -> None:
        context, _ = _collect(
            {
                "kind": "record",
                "name": "S",
                "annotation": "se,pl:true",
                "fields": [{"name": "a", "type": "int", "initializer": "1"}, {"name": "b", "type": "int"}],
                "constructors": [{"initializers": [{"field": "a", "value": "2"}, {"field": "b", "value": "3"}]}],
            }
        )
        fields = context.file_groups["S"].structs[0].fields
        assert fields[0].default_value == "1"
        assert fields[1].default_value == "3"

    def test_ctor_field_assignments(self) -> None:
        context, diagnostics = _collect(
            {
                "kind": "record",
                "name": "S",
                "annotation": "se,pl:true",
                "fields": [{"name": "a", "type": "int"}, {"name": "b", "type": "int"}],
                "constructors": [
                    {
                        "params": [{"name": "x", "type": "int"}],
                        "initializers": [{"field": "a", "value": "x"}],
                        "assignments": [{"field": "b", "value": "x * 2"}],
                    },
                    {"is-copy": True, "params": [{"name": "other", "type": "const S&"}]},
                ],
            }
        )
        struct_info = context.file_groups["S"].structs[0]
        assert len(struct_info.ctors) == 1
        assert struct_info.ctors[0].field_assignments == {"a": "x"}
        assert any("non-trivial field assignment" in message for message in diagnostics.messages())

    def test_plain_base_struct(self) -> None:
        context, _ = _collect(
            {"kind": "record", "name": "Base", "annotation": "se,pl:true", "fields": [{"name": "a", "type": "int"}]},
            {
                "kind": "record",
                "name": "Derived",
                "annotation": "se,pl:true",
                "bases": ["Base"],
                "fields": [{"name": "b", "type": "int"}],
            },
        )
        derived = context.file_groups["Derived"].structs[0]
        assert derived.base_class == "Base"
        assert [field.name for field in derived.fields] == ["a", "b"]

    def test_duplicate_export_is_an_error(self) -> None:
        struct = {"kind": "record", "name": "S", "annotation": "se,pl:true"}
        _, diagnostics = _collect(struct, {**struct, "namespaces": ["other"]})
        assert diagnostics.has_errors


# ###############
# Classes
# ###############


class TestClasses:
    def test_methods_and_ctors(self) -> None:
        context, diagnostics = _collect(
            {
                "kind": "record",
                "name": "Widget",
                "annotation": "se",
                "constructors": [{"annotation": "se", "params": [{"name": "size", "type": "int", "default": "3"}]}],
                "methods": [
                    {"name": "resize", "annotation": "se", "params": [{"name": "size", "type": "int"}]},
                    {"name": "hidden", "params": []},
                    {"name": "count", "annotation": "se", "static": True, "return-type": "UINT32"},
                ],
            }
        )
        assert len(diagnostics) == 0
        class_info = context.file_groups["Widget"].classes[0]
        assert class_info.category is Category.CLASS
        assert [ctor.params[0].default_value for ctor in class_info.ctors] == ["3"]
        assert [method.source_name for method in class_info.methods] == ["resize", "count"]
        assert class_info.methods[1].has(MethodFlags.STATIC)

    def test_default_after_unevaluable_default_is_dropped(self) -> None:
        context, diagnostics = _collect(
            {
                "kind": "record",
                "name": "Widget",
                "annotation": "se",
                "methods": [
                    {
                        "name": "f",
                        "annotation": "se",
                        "params": [
                            {"name": "a", "type": "int", "default": "kUnknown"},
                            {"name": "b", "type": "int", "default": "2"},
                        ],
                    }
                ],
            }
        )
        params = context.file_groups["Widget"].classes[0].methods[0].params
        assert [param.default_value for param in params] == [None, None]
        assert len(diagnostics.warnings) == 1

    def test_unevaluable_default_clears_earlier_defaults(self) -> None:
        context, _ = _collect(
            {
                "kind": "record",
                "name": "Widget",
                "annotation": "se",
                "methods": [
                    {
                        "name": "f",
                        "annotation": "se",
                        "params": [
                            {"name": "a", "type": "Vector3", "default": "Vector3(1, 2, 3)"},
                            {"name": "b", "type": "int", "default": "kUnknown"},
                        ],
                    }
                ],
            }
        )
        params = context.file_groups["Widget"].classes[0].methods[0].params
        assert [(param.default_value, param.default_value_type) for param in params] == [(None, None), (None, None)]

    def test_module_class(self) -> None:
        context, _ = _collect(
            {
                "kind": "record",
                "name": "Time",
                "annotation": "se",
                "bases": ["Module<Time>"],
                "constructors": [{"annotation": "se"}],
            }
        )
        class_info = context.file_groups["Time"].classes[0]
        assert class_info.has(ClassFlags.IS_MODULE)
        assert class_info.ctors == []

    def test_field_becomes_accessor_pair(self) -> None:
        context, _ = _collect(
            {
                "kind": "record",
                "name": "Widget",
                "annotation": "se",
                "fields": [{"name": "width", "type": "float", "annotation": "se,n:Width"}],
            }
        )
        methods = context.file_groups["Widget"].classes[0].methods
        assert [method.flags & (MethodFlags.PROPERTY_GETTER | MethodFlags.PROPERTY_SETTER) for method in methods] == [
            MethodFlags.PROPERTY_GETTER,
            MethodFlags.PROPERTY_SETTER,
        ]
        assert all(method.has(MethodFlags.FIELD_WRAPPER) for method in methods)
        assert methods[1].params[0].name == "value"

    def test_event_field(self) -> None:
        context, _ = _collect(
            {
                "kind": "record",
                "name": "Widget",
                "annotation": "se",
                "fields": [
                    {"name": "onResized", "type": "Event<void(UINT32, float)>", "annotation": "se,n:OnResized"},
                    {"name": "onGlobal", "type": "Event<void()>", "annotation": "se", "static": True},
                ],
            }
        )
        events = context.file_groups["Widget"].classes[0].events
        assert [event.script_name for event in events] == ["OnResized", "onGlobal"]
        assert [param.name for param in events[0].params] == ["p0", "p1"]
        assert events[1].has(MethodFlags.STATIC)

    def test_event_must_return_void(self) -> None:
        _, diagnostics = _collect(
            {
                "kind": "record",
                "name": "Widget",
                "annotation": "se",
                "fields": [{"name": "onQuery", "type": "Event<int()>", "annotation": "se"}],
            }
        )
        assert any("must return void" in message for message in diagnostics.messages())

    def test_invalid_getter_is_skipped(self) -> None:
        context, diagnostics = _collect(
            {
                "kind": "record",
                "name": "Widget",
                "annotation": "se",
                "methods": [{"name": "getSize", "annotation": "se,pr:getter"}],
            }
        )
        assert context.file_groups["Widget"].classes[0].methods == []
        assert diagnostics.has_errors

    def test_non_public_method_warns(self) -> None:
        _, diagnostics = _collect(
            {
                "kind": "record",
                "name": "Widget",
                "annotation": "se",
                "methods": [{"name": "secret", "annotation": "se", "access": "private"}],
            }
        )
        assert any("is not public" in message for message in diagnostics.messages())

    def test_unclassifiable_method_is_skipped(self) -> None:
        context, diagnostics = _collect(
            {
                "kind": "record",
                "name": "Widget",
                "annotation": "se",
                "methods": [
                    {"name": "bad", "annotation": "se", "params": [{"name": "v", "type": "Vector<Vector<int>>"}]},
                    {"name": "good", "annotation": "se"},
                ],
            }
        )
        assert [method.source_name for method in context.file_groups["Widget"].classes[0].methods] == ["good"]
        assert len(diagnostics.errors) == 1

    def test_closest_exported_base(self) -> None:
        context, _ = _collect(
            {"kind": "record", "name": "Root", "annotation": "se"},
            {"kind": "record", "name": "Middle", "bases": ["Root"]},
            {"kind": "record", "name": "Leaf", "annotation": "se", "bases": ["Middle"]},
        )
        assert context.file_groups["Leaf"].classes[0].base_class == "Root"

    def test_resource_category_and_rtti(self) -> None:
        context, _ = _collect(
            {"kind": "record", "name": "Mesh", "annotation": "se", "bases": ["Resource"], "rtti-type-id": "TID_Mesh"}
        )
        assert context.file_groups["Mesh"].classes[0].category is Category.RESOURCE
        assert context.type_map["Mesh"].rtti_type_id == "TID_Mesh"


# ###############
# External methods
# ###############


class TestExternalMethods:
    def test_free_external_constructor_is_parked(self) -> None:
        context, _ = _collect(
            {"kind": "record", "name": "T", "annotation": "se"},
            {"kind": "function", "name": "createT", "annotation": "se,ec:T", "return-type": "SPtr<T>"},
        )
        pending = context.external_methods["T"]
        assert len(pending) == 1
        assert pending[0].has(MethodFlags.CONSTRUCTOR | MethodFlags.EXTERNAL)
        assert pending[0].external_class is None

    def test_container_record_routes_methods(self) -> None:
        context, _ = _collect(
            {"kind": "record", "name": "T", "annotation": "se"},
            {
                "kind": "record",
                "name": "TEx",
                "annotation": "se,e:T",
                "file": "BsTEx.h",
                "methods": [
                    {"name": "scale", "annotation": "se", "static": True, "params": [{"name": "t", "type": "T*"}]}
                ],
            },
        )
        pending = context.external_methods["T"]
        assert pending[0].external_class == "TEx"
        assert not pending[0].has(MethodFlags.STATIC)
        assert context.external_files["TEx"] == "BsTEx.h"

    def test_free_function_without_external_annotation_warns(self) -> None:
        context, diagnostics = _collect({"kind": "function", "name": "helper", "annotation": "se"})
        assert context.external_methods == {}
        assert len(diagnostics.warnings) == 1


# ###############
# Comment index
# ###############


class TestCommentIndex:
    def test_every_declaration_is_indexed(self) -> None:
        context, _ = _collect(
            {
                "kind": "record",
                "name": "Widget",
                "namespaces": ["bs"],
                "comment": "A widget.",
                "methods": [{"name": "draw", "comment": "Draws it.", "params": [{"name": "x", "type": "int"}]}],
            }
        )
        record = context.comments.find("Widget", ["bs"])
        assert record is not None
        assert record.comment.brief == ["A widget."]
        method = context.comments.find("Widget::draw", ["bs"])
        assert method is not None
        assert method.is_function
        assert method.overloads[0].param_types == ["int"]
