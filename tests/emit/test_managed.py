# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for managed C# wrapper emission."""

from typing import Any

from scriptbind.analysis.collector import collect, seed_type_map
from scriptbind.analysis.postprocess import postprocess
from scriptbind.diagnostics import Diagnostics
from scriptbind.emit.common import EmitOptions
from scriptbind.emit.managed import managed_default_expression, render_managed_file
from scriptbind.frontend.declarations import DeclarationDocument, SymbolTable
from scriptbind.model.context import BindingContext
from scriptbind.model.entities import ParamInfo
from scriptbind.model.types import Category, TypeRef

# ###############
# Test Helpers
# ###############


def _context(*declarations: dict[str, Any]) -> BindingContext:
    symbols = SymbolTable([DeclarationDocument.model_validate({"declarations": list(declarations)})])
    context = BindingContext()
    diagnostics = Diagnostics()
    seed_type_map(context)
    collect(symbols, context, diagnostics)
    postprocess(context, diagnostics)
    return context


def _render(context: BindingContext, group: str, options: EmitOptions | None = None) -> str:
    return render_managed_file(context.file_groups[group], context, options or EmitOptions())


def _widget(*methods: dict[str, Any], **extra: Any) -> dict[str, Any]:
    return {"kind": "record", "name": "Widget", "annotation": "se", "methods": list(methods), **extra}


# ###############
# File layout
# ###############


class TestFileLayout:
    def test_engine_namespace(self) -> None:
        text = _render(_context(_widget()), "Widget")
        assert text.startswith("using System;\nusing System.Runtime.CompilerServices;\n")
        assert "namespace BansheeEngine\n{" in text
        assert text.endswith("}\n")

    def test_editor_group_imports_engine_namespace(self) -> None:
        context = _context({"kind": "record", "name": "Tool", "annotation": "se,ed:true"})
        text = _render(context, "Tool")
        assert "using BansheeEngine;" in text
        assert "namespace BansheeEditor" in text

    def test_custom_namespace(self) -> None:
        text = _render(_context(_widget()), "Widget", EmitOptions(managed_namespace="Game"))
        assert "namespace Game" in text

    def test_module_block(self) -> None:
        text = _render(_context(_widget(annotation="se,m:Rendering")), "Widget")
        assert "\t/** @addtogroup Rendering\n\t *  @{\n\t */" in text
        assert "\t/** @} */" in text


# ###############
# Classes
# ###############


class TestClasses:
    def test_class_declaration_and_runtime_constructor(self) -> None:
        text = _render(_context(_widget()), "Widget")
        assert "\tpublic partial class Widget : ScriptObject" in text
        assert "\t\tprivate Widget(bool __dummy0) { }" in text

    def test_resource_base(self) -> None:
        text = _render(_context({"kind": "record", "name": "Mesh", "annotation": "se", "bases": ["Resource"]}), "Mesh")
        assert "public partial class Mesh : Resource" in text

    def test_exported_base_class(self) -> None:
        context = _context(
            {"kind": "record", "name": "Root", "annotation": "se"},
            {"kind": "record", "name": "Leaf", "annotation": "se", "bases": ["Root"]},
        )
        assert "public partial class Leaf : Root" in _render(context, "Leaf")

    def test_constructor_calls_hook(self) -> None:
        context = _context(
            _widget(constructors=[{"annotation": "se", "params": [{"name": "size", "type": "int"}]}]),
        )
        text = _render(context, "Widget")
        assert "\t\tpublic Widget(int size)\n\t\t{\n\t\t\tInternal_Widget(this, size);\n\t\t}" in text
        assert "\t\tprivate static extern void Internal_Widget(Widget managedInstance, int size);" in text

    def test_bool_constructor_shifts_runtime_arity(self) -> None:
        context = _context(_widget(constructors=[{"annotation": "se", "params": [{"name": "flag", "type": "bool"}]}]))
        assert "private Widget(bool __dummy0, bool __dummy1) { }" in _render(context, "Widget")

    def test_method_with_struct_parameter(self) -> None:
        context = _context(
            _widget(
                {
                    "name": "move",
                    "annotation": "se,n:Move",
                    "return-type": "float",
                    "params": [{"name": "offset", "type": "const Vector3&"}, {"name": "speed", "type": "float"}],
                }
            )
        )
        text = _render(context, "Widget")
        assert "\t\tpublic float Move(Vector3 offset, float speed)" in text
        assert "\t\t\treturn Internal_move(mCachedPtr, ref offset, speed);" in text
        assert "\t\tprivate static extern float Internal_move(IntPtr thisPtr, ref Vector3 offset, float speed);" in text

    def test_static_method(self) -> None:
        context = _context(_widget({"name": "count", "annotation": "se", "static": True, "return-type": "UINT32"}))
        text = _render(context, "Widget")
        assert "\t\tpublic static uint count()" in text
        assert "\t\t\treturn Internal_count();" in text
        assert "private static extern uint Internal_count();" in text

    def test_struct_return_uses_output_parameter(self) -> None:
        context = _context(_widget({"name": "getCenter", "annotation": "se", "return-type": "Vector3"}))
        text = _render(context, "Widget")
        assert "\t\t\tVector3 temp;\n\t\t\tInternal_getCenter(mCachedPtr, out temp);\n\t\t\treturn temp;" in text
        assert "private static extern void Internal_getCenter(IntPtr thisPtr, out Vector3 __output);" in text

    def test_float_default_gets_suffix(self) -> None:
        context = _context(
            _widget({"name": "fade", "annotation": "se", "params": [{"name": "t", "type": "float", "default": "0.5f"}]})
        )
        assert "public void fade(float t = 0.5f)" in _render(context, "Widget")

    def test_undocumented_members_have_no_doc_block(self) -> None:
        context = _context(_widget({"name": "count", "annotation": "se", "return-type": "int"}))
        assert "<summary>" not in _render(context, "Widget")

    def test_documented_method_has_summary(self) -> None:
        context = _context(_widget({"name": "count", "annotation": "se", "return-type": "int", "comment": "Counts."}))
        text = _render(context, "Widget")
        assert "\t\t/// <summary>\n\t\t/// Counts.\n\t\t/// </summary>\n\t\tpublic int count()" in text

    def test_interop_only_method_has_no_wrapper(self) -> None:
        context = _context(_widget({"name": "hidden", "annotation": "se,in:true"}))
        text = _render(context, "Widget")
        assert "public void hidden()" not in text
        assert "private static extern void Internal_hidden(IntPtr thisPtr);" in text


# ###############
# Properties
# ###############


class TestProperties:
    def test_struct_property(self) -> None:
        context = _context(
            _widget(
                {"name": "getPos", "annotation": "se,pr:getter,n:Pos", "return-type": "Vector3"},
                {
                    "name": "setPos",
                    "annotation": "se,pr:setter,n:Pos",
                    "params": [{"name": "value", "type": "const Vector3&"}],
                },
            )
        )
        text = _render(context, "Widget")
        assert "\t\tpublic Vector3 Pos\n\t\t{\n\t\t\tget\n\t\t\t{\n\t\t\t\tVector3 temp;" in text
        assert "\t\t\t\tInternal_getPos(mCachedPtr, out temp);" in text
        assert "\t\t\tset { Internal_setPos(mCachedPtr, ref value); }" in text
        assert "public Vector3 getPos()" not in text

    def test_builtin_property_with_style(self) -> None:
        context = _context(
            _widget({"name": "getCount", "annotation": "se,pr:getter,n:Count,order:2", "return-type": "int"})
        )
        text = _render(context, "Widget")
        assert "\t\t[Order(2)]\n\t\tpublic int Count" in text
        assert "\t\t\tget { return Internal_getCount(mCachedPtr); }" in text

    def test_module_property_is_static(self) -> None:
        context = _context(
            {
                "kind": "record",
                "name": "Time",
                "annotation": "se",
                "bases": ["Module<Time>"],
                "methods": [{"name": "getElapsed", "annotation": "se,pr:getter,n:Elapsed", "return-type": "float"}],
            }
        )
        text = _render(context, "Time")
        assert "\t\tpublic static float Elapsed" in text
        assert "\t\t\tget { return Internal_getElapsed(); }" in text


# ###############
# Events
# ###############


class TestEvents:
    def test_event_and_raiser(self) -> None:
        context = _context(
            _widget(fields=[{"name": "onResized", "type": "Event<void(UINT32)>", "annotation": "se,n:OnResized"}])
        )
        text = _render(context, "Widget")
        assert "\t\tpublic event Action<uint> OnResized;" in text
        assert "\t\tprivate void Internal_onResized(uint p0)\n\t\t{\n\t\t\tOnResized?.Invoke(p0);\n\t\t}" in text

    def test_callback_event(self) -> None:
        context = _context(_widget(fields=[{"name": "onTick", "type": "Event<void()>", "annotation": "se,cb:true"}]))
        text = _render(context, "Widget")
        assert "\t\tpartial void Callback_onTick();" in text
        assert "\t\t\tCallback_onTick();" in text
        assert "event Action" not in text


# ###############
# Default parameter overloads
# ###############


class TestDefaultOverloads:
    def test_forwarding_overloads(self) -> None:
        context = _context(
            _widget(
                {
                    "name": "f",
                    "annotation": "se",
                    "params": [
                        {"name": "a", "type": "int"},
                        {"name": "b", "type": "Vector3", "default": "Vector3(1, 2, 3)"},
                        {"name": "c", "type": "int", "default": "5"},
                        {"name": "d", "type": "Color", "default": "Color()"},
                    ],
                }
            )
        )
        text = _render(context, "Widget")
        assert "\t\tpublic void f(int a, Vector3 b, int c, Color d)" in text
        assert "\t\t\tInternal_f(mCachedPtr, a, ref b, c, ref d);" in text
        assert "\t\tpublic void f(int a)\n\t\t{\n\t\t\tf(a, new Vector3(1, 2, 3), 5, new Color());" in text
        assert "\t\tpublic void f(int a, Vector3 b, int c = 5)\n\t\t{\n\t\t\tf(a, b, c, new Color());" in text
        assert text.count("private static extern void Internal_f(") == 1

    def test_unevaluable_default_leaves_parameters_required(self) -> None:
        context = _context(
            _widget(
                {
                    "name": "g",
                    "annotation": "se",
                    "params": [
                        {"name": "a", "type": "int", "default": "1"},
                        {"name": "b", "type": "int", "default": "someFunc() + 2"},
                    ],
                }
            )
        )
        text = _render(context, "Widget")
        assert "\t\tpublic void g(int a, int b)" in text
        assert "int a = 1" not in text

    def test_enum_cast_default_uses_entry(self) -> None:
        context = _context(
            {"kind": "enum", "name": "E", "annotation": "se,f:Widget", "entries": [{"name": "A"}, {"name": "B"}]},
            _widget({"name": "set", "annotation": "se", "params": [{"name": "e", "type": "E", "default": "E(1)"}]}),
        )
        text = _render(context, "Widget")
        assert "\t\tpublic void set(E e = E.B)" in text
        assert "new E(" not in text


# ###############
# Structs and enums
# ###############


class TestStructs:
    def test_default_factory(self) -> None:
        context = _context(
            {
                "kind": "record",
                "name": "S",
                "annotation": "se,pl:true",
                "fields": [
                    {"name": "a", "type": "int"},
                    {"name": "b", "type": "float"},
                    {"name": "c", "type": "float", "initializer": "10.0f"},
                ],
            }
        )
        text = _render(context, "S")
        expected = (
            "\t[StructLayout(LayoutKind.Sequential)]\n"
            "\tpublic partial struct S\n"
            "\t{\n"
            "\t\t/// <summary>Initializes the struct with default values.</summary>\n"
            "\t\tpublic static S Default()\n"
            "\t\t{\n"
            "\t\t\tS value = new S();\n"
            "\t\t\tvalue.a = 0;\n"
            "\t\t\tvalue.b = 0;\n"
            "\t\t\tvalue.c = 10;\n"
            "\n"
            "\t\t\treturn value;\n"
            "\t\t}\n"
            "\n"
            "\t\tpublic int a;\n"
            "\t\tpublic float b;\n"
            "\t\tpublic float c;\n"
            "\t}\n"
        )
        assert expected in text

    def test_constructor_assigns_parameters_and_defaults(self) -> None:
        context = _context(
            {
                "kind": "record",
                "name": "S",
                "annotation": "se,pl:true",
                "fields": [{"name": "a", "type": "int"}, {"name": "b", "type": "int", "initializer": "4"}],
                "constructors": [
                    {"params": [{"name": "x", "type": "int"}], "initializers": [{"field": "a", "value": "x"}]}
                ],
            }
        )
        text = _render(context, "S")
        assert "\t\tpublic S(int x)\n\t\t{\n\t\t\tthis.a = x;\n\t\t\tthis.b = 4;\n\t\t}" in text
        assert "Default()" not in text

    def test_base_struct_accessors(self) -> None:
        context = _context(
            {"kind": "record", "name": "Base", "annotation": "se,pl:true", "fields": [{"name": "a", "type": "int"}]},
            {
                "kind": "record",
                "name": "Derived",
                "annotation": "se,pl:true",
                "bases": ["Base"],
                "fields": [{"name": "b", "type": "int"}],
            },
        )
        text = _render(context, "Derived")
        assert "\t\tpublic Base GetBase()" in text
        assert "\t\t\tvalue.a = a;" in text
        assert "\t\tpublic void SetBase(Base value)" in text
        assert "\t\t\ta = value.a;" in text


class TestEnums:
    def test_enum_with_backing_type(self) -> None:
        context = _context(
            {
                "kind": "enum",
                "name": "LightType",
                "annotation": "se",
                "underlying-type": "UINT8",
                "entries": [{"name": "Directional", "comment": "Sun-like."}, {"name": "Radial"}, {"name": "Spot"}],
            }
        )
        text = _render(context, "LightType")
        assert "\tpublic enum LightType : byte\n\t{\n\t\t/// <summary>\n\t\t/// Sun-like.\n\t\t/// </summary>\n" in text
        assert "\t\tDirectional = 0,\n\t\tRadial = 1,\n\t\tSpot = 2\n\t}" in text

    def test_int_backed_enum_has_no_base(self) -> None:
        context = _context({"kind": "enum", "name": "E", "annotation": "se", "entries": [{"name": "A"}]})
        assert "\tpublic enum E\n" in _render(context, "E")


# ###############
# Default expressions
# ###############


class TestManagedDefaultExpression:
    def test_constant(self) -> None:
        param = ParamInfo(name="x", type=TypeRef(name="float", category=Category.BUILTIN), default_value="1.5")
        assert managed_default_expression(param, BindingContext()) == "1.5f"

    def test_constructor_call(self) -> None:
        param = ParamInfo(
            name="v",
            type=TypeRef(name="Vector3", category=Category.STRUCT),
            default_value="1, 2, 3",
            default_value_type="Vector3",
        )
        assert managed_default_expression(param, BindingContext()) == "new Vector3(1, 2, 3)"

    def test_exported_struct_uses_default_factory(self) -> None:
        context = _context({"kind": "record", "name": "S", "annotation": "se,pl:true"})
        param = ParamInfo(
            name="s", type=TypeRef(name="S", category=Category.STRUCT), default_value="", default_value_type="S"
        )
        assert managed_default_expression(param, context) == "S.Default()"

    def test_no_default(self) -> None:
        param = ParamInfo(name="x", type=TypeRef(name="INT32", category=Category.BUILTIN))
        assert managed_default_expression(param, BindingContext()) is None
